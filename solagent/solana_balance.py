import logging
from typing import Dict, Any, List, Optional
from solana_agent import AutoTool, ToolRegistry
from solagent.config import SolAgentConfig
from solagent.utils.balance import get_balance
from solagent.utils.tooling import error_response, tool_config
from solagent.utils.wallet import SolanaWalletClient

logger = logging.getLogger(__name__)


class SolanaBalanceTool(AutoTool):
    def __init__(self, registry: Optional[ToolRegistry] = None):
        super().__init__(
            name="solana_balance",
            description="Check the SOL or SPL token balance of a wallet.",
            registry=registry,
        )
        self._settings = SolAgentConfig()

    def get_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "wallet_address": {
                    "type": "string",
                    "description": "The wallet public key (base58 address) to check.",
                },
                "token_address": {
                    "type": "string",
                    "description": "The SPL token mint address. Use an empty string for SOL.",
                },
            },
            "required": ["wallet_address", "token_address"],
            "additionalProperties": False,
        }

    def configure(self, config: Dict[str, Any]) -> None:
        super().configure(config)
        self._settings = tool_config(config, "solana_balance")

    async def execute(
        self, wallet_address: str, token_address: Optional[str] = None
    ) -> Dict[str, Any]:
        try:
            self._settings.validate(require_private_key=False)
            wallet = SolanaWalletClient(
                self._settings.rpc_url,
                pubkey=wallet_address,
                timeout=self._settings.rpc_timeout,
            )
            try:
                amount = await get_balance(wallet.client, wallet.pubkey, token_address or None)
            finally:
                await wallet.close()
            return {
                "status": "success",
                "result": {
                    "wallet": wallet_address,
                    "token": token_address or "SOL",
                    "balance": amount,
                },
            }
        except Exception as e:
            logger.exception(f"Balance check error: {e}")
            return error_response(e)


class SolanaBalancePlugin:
    def __init__(self):
        self.name = "solana_balance"
        self.config = None
        self.tool_registry = None
        self._tool = None

    @property
    def description(self):
        return "Plugin for checking SOL and SPL token balances for a wallet."

    def initialize(self, tool_registry: ToolRegistry) -> None:
        self.tool_registry = tool_registry
        self._tool = SolanaBalanceTool(registry=tool_registry)

    def configure(self, config: Dict[str, Any]) -> None:
        self.config = config
        if self._tool:
            self._tool.configure(self.config)

    def get_tools(self) -> List[AutoTool]:
        return [self._tool] if self._tool else []


def get_plugin():
    return SolanaBalancePlugin()
