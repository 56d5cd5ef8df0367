import logging
from typing import Dict, Any, List, Optional
from solana_agent import AutoTool, ToolRegistry
from solagent.agent import SolAgent
from solagent.config import SolAgentConfig
from solagent.utils.tooling import error_response, tool_config

logger = logging.getLogger(__name__)


class SolanaDeployTokenTool(AutoTool):
    def __init__(self, registry: Optional[ToolRegistry] = None):
        super().__init__(
            name="solana_deploy_token",
            description="Deploy a new SPL token mint owned by the agent wallet.",
            registry=registry,
        )
        self._settings = SolAgentConfig()

    def get_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Token name (at most 32 bytes).",
                },
                "uri": {
                    "type": "string",
                    "description": "URI of the token metadata JSON (at most 200 bytes).",
                },
                "symbol": {
                    "type": "string",
                    "description": "Token symbol (at most 10 bytes).",
                },
                "decimals": {
                    "type": "integer",
                    "description": "Number of decimals for the token (default 9).",
                },
                "initial_supply": {
                    "type": "number",
                    "description": "Tokens to mint to the agent wallet, in token units. Use 0 for none.",
                },
            },
            "required": ["name", "uri", "symbol", "decimals", "initial_supply"],
            "additionalProperties": False,
        }

    def configure(self, config: Dict[str, Any]) -> None:
        super().configure(config)
        self._settings = tool_config(config, "solana_deploy_token")

    async def execute(
        self,
        name: str,
        uri: str,
        symbol: str,
        decimals: int = 9,
        initial_supply: Optional[float] = None,
    ) -> Dict[str, Any]:
        try:
            async with SolAgent(self._settings) as agent:
                mint = await agent.deploy_token(
                    name, uri, symbol, decimals, initial_supply or None
                )
            return {"status": "success", "mint": mint}
        except Exception as e:
            logger.exception(f"Token deployment failed: {str(e)}")
            return error_response(e)


class SolanaDeployTokenPlugin:
    def __init__(self):
        self.name = "solana_deploy_token"
        self.config = None
        self.tool_registry = None
        self._tool = None

    @property
    def description(self):
        return "Plugin for deploying SPL token mints."

    def initialize(self, tool_registry: ToolRegistry) -> None:
        self.tool_registry = tool_registry
        self._tool = SolanaDeployTokenTool(registry=tool_registry)

    def configure(self, config: Dict[str, Any]) -> None:
        self.config = config
        if self._tool:
            self._tool.configure(self.config)

    def get_tools(self) -> List[AutoTool]:
        return [self._tool] if self._tool else []


def get_plugin():
    return SolanaDeployTokenPlugin()
