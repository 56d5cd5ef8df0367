"""
Agent facade.

``SolAgent`` owns the wallet handle and API clients for one keypair and
exposes every operation as an async method. It holds no logic of its own;
each method forwards to the matching helper in ``solagent.utils``.
"""

import logging
from typing import Any, Dict, Optional, Union

from solagent.config import SolAgentConfig
from solagent.utils import balance, deploy, faucet, network, pumpfun
from solagent.utils.jupiter import JupiterClient
from solagent.utils.price import PriceClient
from solagent.utils.pumpfun import PumpfunClient, PumpfunTokenOptions, PumpfunTokenResponse
from solagent.utils.swap import TradeManager
from solagent.utils.transfer import TokenTransferManager
from solagent.utils.wallet import SolanaWalletClient, parse_pubkey

logger = logging.getLogger(__name__)


class SolAgent:
    """
    One wallet, one RPC endpoint, every supported operation.

    Usage:
        async with SolAgent(SolAgentConfig(rpc_url=..., private_key=...)) as agent:
            signature = await agent.jupiter_swap(None, 0.01, USDC_MINT)
    """

    def __init__(self, config: Union[SolAgentConfig, Dict[str, Any]]):
        if not isinstance(config, SolAgentConfig):
            config = SolAgentConfig.from_dict(config)
        config.validate()
        self.config = config
        self.wallet = SolanaWalletClient.from_private_key(
            config.rpc_url, config.private_key, timeout=config.rpc_timeout
        )
        self.jupiter = JupiterClient(
            config.jupiter_url, config.stake_url, timeout=config.http_timeout
        )
        self.prices = PriceClient(
            config.price_url, config.pyth_url, timeout=config.http_timeout
        )
        self.pumpfun = PumpfunClient(
            config.pumpfun_ipfs_url, config.pumpportal_url, timeout=config.http_timeout
        )
        logger.info(f"SolAgent initialized for wallet: {self.wallet.address}")

    @property
    def wallet_address(self) -> str:
        return self.wallet.address

    async def __aenter__(self) -> "SolAgent":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.wallet.close()

    async def jupiter_swap(
        self,
        from_token: Optional[str],
        amount: float,
        to_token: str,
        slippage_bps: Optional[int] = None,
    ) -> str:
        return await TradeManager.trade(
            self.wallet,
            self.jupiter,
            self.config,
            to_token,
            amount,
            from_token,
            slippage_bps,
        )

    async def jupiter_stake_sol(self, amount: float) -> str:
        return await TradeManager.stake(self.wallet, self.jupiter, self.config, amount)

    async def get_balance(self, token_address: Optional[str] = None) -> float:
        return await balance.get_balance(self.wallet.client, self.wallet.pubkey, token_address)

    async def get_balance_other(
        self, wallet_address: str, token_address: Optional[str] = None
    ) -> float:
        owner = parse_pubkey(wallet_address, "wallet address")
        return await balance.get_balance(self.wallet.client, owner, token_address)

    async def transfer(
        self, to: str, amount: float, mint: Optional[str] = None, memo: str = ""
    ) -> str:
        return await TokenTransferManager.transfer(
            self.wallet, self.config, to, amount, mint, memo
        )

    async def deploy_token(
        self,
        name: str,
        uri: str,
        symbol: str,
        decimals: int = 9,
        initial_supply: Optional[float] = None,
    ) -> str:
        return await deploy.deploy_token(
            self.wallet, self.config, name, uri, symbol, decimals, initial_supply
        )

    async def launch_token_pumpfun(
        self,
        token_name: str,
        token_ticker: str,
        description: str,
        image_url: str,
        options: Optional[PumpfunTokenOptions] = None,
    ) -> PumpfunTokenResponse:
        return await pumpfun.launch_token(
            self.wallet,
            self.pumpfun,
            self.config,
            token_name,
            token_ticker,
            description,
            image_url,
            options,
        )

    async def request_faucet_funds(self) -> str:
        return await faucet.request_faucet_funds(self.wallet, self.config)

    async def fetch_price(self, token_id: str) -> str:
        return await self.prices.fetch_price(token_id)

    async def fetch_pyth_price_feed_id(self, token_symbol: str) -> str:
        return await self.prices.fetch_pyth_price_feed_id(token_symbol)

    async def fetch_price_by_pyth(self, price_feed_id: str) -> float:
        return await self.prices.fetch_price_by_pyth(price_feed_id)

    async def get_tps(self) -> float:
        return await network.get_tps(self.wallet.client)
