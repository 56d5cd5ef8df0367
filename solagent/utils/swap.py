import logging
from typing import Any, Dict, Optional

from solders.transaction import VersionedTransaction

from solagent.config import SolAgentConfig
from solagent.errors import BuildError, QuoteError
from solagent.utils.jupiter import JupiterClient
from solagent.utils.token import (
    NATIVE_DECIMALS,
    NATIVE_MINT,
    get_mint_decimals,
    human_to_smallest_units,
    is_native_mint,
)
from solagent.utils.transaction import sign_and_send
from solagent.utils.wallet import SolanaWalletClient, parse_pubkey

logger = logging.getLogger(__name__)


class TradeManager:
    @staticmethod
    async def quote(
        wallet: SolanaWalletClient,
        jupiter: JupiterClient,
        output_mint: str,
        input_amount: float,
        input_mint: Optional[str] = None,
        slippage_bps: int = 300,
    ) -> Dict[str, Any]:
        """
        Fetch a Jupiter quote for swapping ``input_amount`` human units.

        Native SOL always scales with 9 decimals; any other input mint has its
        decimals read from the chain first.
        """
        output_pubkey = parse_pubkey(output_mint, "output mint")
        input_pubkey = parse_pubkey(input_mint or NATIVE_MINT, "input mint")

        if is_native_mint(input_pubkey):
            decimals = NATIVE_DECIMALS
        else:
            decimals = await get_mint_decimals(wallet.client, input_pubkey, wallet.keypair)

        try:
            amount = human_to_smallest_units(input_amount, decimals)
        except ValueError as e:
            raise QuoteError(str(e), cause=e) from e

        logger.info(
            f"Quoting {input_amount} ({amount} base units) {input_pubkey} -> {output_pubkey}"
        )
        return await jupiter.get_quote(
            str(input_pubkey), str(output_pubkey), amount, slippage_bps
        )

    @staticmethod
    async def build(
        wallet: SolanaWalletClient,
        jupiter: JupiterClient,
        output_mint: str,
        input_amount: float,
        input_mint: Optional[str] = None,
        slippage_bps: int = 300,
    ) -> VersionedTransaction:
        quote = await TradeManager.quote(
            wallet, jupiter, output_mint, input_amount, input_mint, slippage_bps
        )
        return await jupiter.get_swap_transaction(quote, wallet.address)

    @staticmethod
    async def trade(
        wallet: SolanaWalletClient,
        jupiter: JupiterClient,
        config: SolAgentConfig,
        output_mint: str,
        input_amount: float,
        input_mint: Optional[str] = None,
        slippage_bps: Optional[int] = None,
    ) -> str:
        """
        Swap tokens using Jupiter Exchange and return the confirmed signature.

        The swap transaction keeps the blockhash Jupiter embedded unless
        ``config.refresh_swap_blockhash`` is set.
        """
        if slippage_bps is None:
            slippage_bps = config.default_slippage_bps
        transaction = await TradeManager.build(
            wallet, jupiter, output_mint, input_amount, input_mint, slippage_bps
        )
        return await sign_and_send(
            wallet,
            transaction,
            config,
            refresh_blockhash=config.refresh_swap_blockhash,
        )

    @staticmethod
    async def stake(
        wallet: SolanaWalletClient,
        jupiter: JupiterClient,
        config: SolAgentConfig,
        amount: float,
    ) -> str:
        """Stake ``amount`` SOL into jupSOL; the blockhash is always refreshed."""
        try:
            amount_lamports = human_to_smallest_units(amount, NATIVE_DECIMALS)
        except ValueError as e:
            raise BuildError(str(e), cause=e) from e
        logger.info(f"Staking {amount} SOL ({amount_lamports} lamports)")
        transaction = await jupiter.get_stake_transaction(amount_lamports, wallet.address)
        return await sign_and_send(wallet, transaction, config, refresh_blockhash=True)
