"""
Runtime configuration for the agent facade and tools.

Configuration arrives as the plain dict the solana-agent framework hands to
tools (``config["tools"][<tool name>]``) and is mapped onto
``SolAgentConfig``. Every network timeout and polling knob is explicit here
instead of being inherited from library defaults.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from solagent.errors import ConfigurationError

JUPITER_API = "https://quote-api.jup.ag/v6"
JUPITER_STAKE_API = "https://worker.jup.ag/blinks/swap"
JUPITER_PRICE_API = "https://api.jup.ag/price/v2"
PYTH_HERMES_API = "https://hermes.pyth.network"
PUMPFUN_IPFS_API = "https://pump.fun/api/ipfs"
PUMPPORTAL_TRADE_API = "https://pumpportal.fun/api/trade-local"


@dataclass
class SolAgentConfig:
    """
    Settings shared by every operation of one agent.

    Usage:
        config = SolAgentConfig(rpc_url="https://api.devnet.solana.com", private_key="...")

        # Or from a tool config section
        config = SolAgentConfig.from_dict(config["tools"]["solana_swap"])
    """

    rpc_url: Optional[str] = None
    private_key: Optional[str] = None
    jupiter_url: str = JUPITER_API
    stake_url: str = JUPITER_STAKE_API
    price_url: str = JUPITER_PRICE_API
    pyth_url: str = PYTH_HERMES_API
    pumpfun_ipfs_url: str = PUMPFUN_IPFS_API
    pumpportal_url: str = PUMPPORTAL_TRADE_API
    # Seconds allowed for a single RPC request
    rpc_timeout: float = 10.0
    # Seconds allowed for a single aggregator / price API request
    http_timeout: float = 30.0
    confirm_poll_interval: float = 0.5
    confirm_max_attempts: int = 60
    skip_preflight: bool = False
    # Rebroadcast count handed to the RPC node, not a local retry
    send_max_retries: Optional[int] = 3
    default_slippage_bps: int = 300
    refresh_swap_blockhash: bool = False
    faucet_amount_sol: float = 5.0

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> "SolAgentConfig":
        """Build a config from a dict, ignoring keys it does not know."""
        config = config or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config.items() if k in known and v is not None})

    def validate(self, require_private_key: bool = True) -> None:
        if not self.rpc_url:
            raise ConfigurationError("RPC URL not configured.")
        if require_private_key and not self.private_key:
            raise ConfigurationError("Private key not configured.")
        if self.confirm_max_attempts < 1:
            raise ConfigurationError("confirm_max_attempts must be at least 1.")
        if self.confirm_poll_interval < 0:
            raise ConfigurationError("confirm_poll_interval must not be negative.")
