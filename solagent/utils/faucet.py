import logging

from solana.rpc.commitment import Confirmed

from solagent.config import SolAgentConfig
from solagent.errors import FaucetError
from solagent.utils.token import NATIVE_DECIMALS, human_to_smallest_units
from solagent.utils.transaction import confirm_signature
from solagent.utils.wallet import SolanaWalletClient

logger = logging.getLogger(__name__)


async def request_faucet_funds(wallet: SolanaWalletClient, config: SolAgentConfig) -> str:
    """Airdrop ``config.faucet_amount_sol`` SOL to the wallet (devnet/testnet only)."""
    lamports = human_to_smallest_units(config.faucet_amount_sol, NATIVE_DECIMALS)
    try:
        resp = await wallet.client.request_airdrop(
            wallet.pubkey, lamports, commitment=Confirmed
        )
    except Exception as e:
        raise FaucetError(
            f"Airdrop request failed: {e} (airdrops only work on devnet/testnet)",
            cause=e,
        ) from e

    logger.info(f"Airdrop requested: {config.faucet_amount_sol} SOL, signature {resp.value}")
    await confirm_signature(wallet, resp.value, config)
    return str(resp.value)
