import logging
from typing import Dict, Any, List, Optional
from solana_agent import AutoTool, ToolRegistry
from solana.rpc.async_api import AsyncClient
from solagent.config import SolAgentConfig
from solagent.utils.network import get_tps
from solagent.utils.tooling import error_response, tool_config

logger = logging.getLogger(__name__)


class SolanaTpsTool(AutoTool):
    def __init__(self, registry: Optional[ToolRegistry] = None):
        super().__init__(
            name="solana_tps",
            description="Get the current transactions per second on the Solana network.",
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
        self._settings = tool_config(config, "solana_tps")

    async def execute(self) -> Dict[str, Any]:
        try:
            self._settings.validate(require_private_key=False)
            client = AsyncClient(self._settings.rpc_url, timeout=self._settings.rpc_timeout)
            try:
                tps = await get_tps(client)
            finally:
                await client.close()
            return {"status": "success", "result": tps}
        except Exception as e:
            logger.exception(f"TPS check error: {e}")
            return error_response(e)


class SolanaTpsPlugin:
    def __init__(self):
        self.name = "solana_tps"
        self.config = None
        self.tool_registry = None
        self._tool = None

    @property
    def description(self):
        return "Plugin for checking Solana network throughput."

    def initialize(self, tool_registry: ToolRegistry) -> None:
        self.tool_registry = tool_registry
        self._tool = SolanaTpsTool(registry=tool_registry)

    def configure(self, config: Dict[str, Any]) -> None:
        self.config = config
        if self._tool:
            self._tool.configure(self.config)

    def get_tools(self) -> List[AutoTool]:
        return [self._tool] if self._tool else []


def get_plugin():
    return SolanaTpsPlugin()
