import logging
from typing import Dict, Any, List, Optional
from solana_agent import AutoTool, ToolRegistry
from solagent.agent import SolAgent
from solagent.config import SolAgentConfig
from solagent.utils.tooling import error_response, tool_config

logger = logging.getLogger(__name__)


class SolanaTransferTool(AutoTool):
    def __init__(self, registry: Optional[ToolRegistry] = None):
        super().__init__(
            name="solana_transfer",
            description="Transfer SOL or SPL tokens using Solana.",
            registry=registry,
        )
        self._settings = SolAgentConfig()

    def get_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "to_address": {
                    "type": "string",
                    "description": "recipient wallet address",
                },
                "amount": {
                    "type": "number",
                    "description": "amount to transfer (in SOL or token units)",
                },
                "mint": {
                    "type": "string",
                    "description": "token mint address, empty string for SOL",
                },
                "memo": {
                    "type": "string",
                    "description": "memo attached to the transfer, empty string for none",
                },
            },
            "required": ["to_address", "amount", "mint", "memo"],
            "additionalProperties": False,
        }

    def configure(self, config: Dict[str, Any]) -> None:
        super().configure(config)
        self._settings = tool_config(config, "solana_transfer")

    async def execute(
        self,
        to_address: str,
        amount: float,
        mint: Optional[str] = None,
        memo: Optional[str] = None,
    ) -> Dict[str, Any]:
        try:
            async with SolAgent(self._settings) as agent:
                signature = await agent.transfer(
                    to_address, amount, mint or None, memo or ""
                )
            return {"status": "success", "result": signature}
        except Exception as e:
            logger.exception(f"Transfer failed: {str(e)}")
            return error_response(e)


class SolanaTransferPlugin:
    def __init__(self):
        self.name = "solana_transfer"
        self.config = None
        self.tool_registry = None
        self._tool = None

    @property
    def description(self):
        return "Plugin for transferring SOL or SPL tokens."

    def initialize(self, tool_registry: ToolRegistry) -> None:
        self.tool_registry = tool_registry
        self._tool = SolanaTransferTool(registry=tool_registry)

    def configure(self, config: Dict[str, Any]) -> None:
        self.config = config
        if self._tool:
            self._tool.configure(self.config)

    def get_tools(self) -> List[AutoTool]:
        return [self._tool] if self._tool else []


def get_plugin():
    return SolanaTransferPlugin()
