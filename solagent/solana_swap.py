import logging
from typing import Dict, Any, List, Optional
from solana_agent import AutoTool, ToolRegistry
from solagent.agent import SolAgent
from solagent.config import SolAgentConfig
from solagent.utils.tooling import error_response, tool_config

logger = logging.getLogger(__name__)


class SolanaTradeTool(AutoTool):
    def __init__(self, registry: Optional[ToolRegistry] = None):
        super().__init__(
            name="solana_swap",
            description="Swap tokens using Jupiter Exchange on Solana.",
            registry=registry,
        )
        self._settings = SolAgentConfig()

    def get_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "output_mint": {
                    "type": "string",
                    "description": "The mint address of the token to receive.",
                },
                "input_amount": {
                    "type": "number",
                    "description": "The amount of the input token to swap, in token units (e.g. 0.5 SOL).",
                },
                "input_mint": {
                    "type": "string",
                    "description": "The mint address of the token to swap from. Use So11111111111111111111111111111111111111112 for SOL.",
                },
                "slippage_bps": {
                    "type": "integer",
                    "description": "Maximum slippage in basis points (300 = 3%).",
                },
            },
            "required": ["output_mint", "input_amount", "input_mint", "slippage_bps"],
            "additionalProperties": False,
        }

    def configure(self, config: Dict[str, Any]) -> None:
        super().configure(config)
        self._settings = tool_config(config, "solana_swap")

    async def execute(
        self,
        output_mint: str,
        input_amount: float,
        input_mint: Optional[str] = None,
        slippage_bps: Optional[int] = None,
    ) -> Dict[str, Any]:
        try:
            async with SolAgent(self._settings) as agent:
                signature = await agent.jupiter_swap(
                    input_mint or None, input_amount, output_mint, slippage_bps
                )
            return {"status": "success", "signature": signature}
        except Exception as e:
            logger.exception(f"Swap failed: {str(e)}")
            return error_response(e)


class SolanaTradePlugin:
    def __init__(self):
        self.name = "solana_swap"
        self.config = None
        self.tool_registry = None
        self._tool = None

    @property
    def description(self):
        return "Plugin for swapping tokens using Jupiter Exchange."

    def initialize(self, tool_registry: ToolRegistry) -> None:
        self.tool_registry = tool_registry
        self._tool = SolanaTradeTool(registry=tool_registry)

    def configure(self, config: Dict[str, Any]) -> None:
        self.config = config
        if self._tool:
            self._tool.configure(self.config)

    def get_tools(self) -> List[AutoTool]:
        return [self._tool] if self._tool else []


def get_plugin():
    return SolanaTradePlugin()
