import logging
from typing import Dict, Any, List, Optional
from solana_agent import AutoTool, ToolRegistry
from solagent.agent import SolAgent
from solagent.config import SolAgentConfig
from solagent.utils.tooling import error_response, tool_config

logger = logging.getLogger(__name__)


class SolanaFaucetTool(AutoTool):
    def __init__(self, registry: Optional[ToolRegistry] = None):
        super().__init__(
            name="request_faucet_funds",
            description="Request SOL from Solana faucet (devnet/testnet only).",
            registry=registry,
        )
        self._settings = SolAgentConfig()

    def get_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {},
            "required": [],
            "additionalProperties": False,
        }

    def configure(self, config: Dict[str, Any]) -> None:
        super().configure(config)
        self._settings = tool_config(config, "request_faucet_funds")

    async def execute(self) -> Dict[str, Any]:
        try:
            async with SolAgent(self._settings) as agent:
                signature = await agent.request_faucet_funds()
            return {"status": "success", "tx": signature}
        except Exception as e:
            logger.exception(f"Faucet request failed: {str(e)}")
            return error_response(e)


class SolanaFaucetPlugin:
    def __init__(self):
        self.name = "request_faucet_funds"
        self.config = None
        self.tool_registry = None
        self._tool = None

    @property
    def description(self):
        return "Plugin for requesting devnet/testnet SOL from the faucet."

    def initialize(self, tool_registry: ToolRegistry) -> None:
        self.tool_registry = tool_registry
        self._tool = SolanaFaucetTool(registry=tool_registry)

    def configure(self, config: Dict[str, Any]) -> None:
        self.config = config
        if self._tool:
            self._tool.configure(self.config)

    def get_tools(self) -> List[AutoTool]:
        return [self._tool] if self._tool else []


def get_plugin():
    return SolanaFaucetPlugin()
