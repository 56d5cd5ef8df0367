import logging
from typing import Dict, Any, List, Optional
from solana_agent import AutoTool, ToolRegistry
from solagent.agent import SolAgent
from solagent.config import SolAgentConfig
from solagent.utils.tooling import error_response, tool_config

logger = logging.getLogger(__name__)


class SolanaStakeTool(AutoTool):
    def __init__(self, registry: Optional[ToolRegistry] = None):
        super().__init__(
            name="solana_stake",
            description="Stake SOL into jupSOL using the Jupiter staking blink.",
            registry=registry,
        )
        self._settings = SolAgentConfig()

    def get_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "amount": {
                    "type": "number",
                    "description": "The amount of SOL to stake.",
                },
            },
            "required": ["amount"],
            "additionalProperties": False,
        }

    def configure(self, config: Dict[str, Any]) -> None:
        super().configure(config)
        self._settings = tool_config(config, "solana_stake")

    async def execute(self, amount: float) -> Dict[str, Any]:
        try:
            async with SolAgent(self._settings) as agent:
                signature = await agent.jupiter_stake_sol(amount)
            return {"status": "success", "signature": signature}
        except Exception as e:
            logger.exception(f"Stake failed: {str(e)}")
            return error_response(e)


class SolanaStakePlugin:
    def __init__(self):
        self.name = "solana_stake"
        self.config = None
        self.tool_registry = None
        self._tool = None

    @property
    def description(self):
        return "Plugin for staking SOL into jupSOL."

    def initialize(self, tool_registry: ToolRegistry) -> None:
        self.tool_registry = tool_registry
        self._tool = SolanaStakeTool(registry=tool_registry)

    def configure(self, config: Dict[str, Any]) -> None:
        self.config = config
        if self._tool:
            self._tool.configure(self.config)

    def get_tools(self) -> List[AutoTool]:
        return [self._tool] if self._tool else []


def get_plugin():
    return SolanaStakePlugin()
