import logging
from typing import Dict, Any, List, Optional
from solana_agent import AutoTool, ToolRegistry
from solagent.config import SolAgentConfig
from solagent.utils.price import PriceClient
from solagent.utils.tooling import error_response, tool_config

logger = logging.getLogger(__name__)


class SolanaPriceTool(AutoTool):
    def __init__(self, registry: Optional[ToolRegistry] = None):
        super().__init__(
            name="solana_price",
            description="Get the current USD price of a Solana token from Jupiter or Pyth.",
            registry=registry,
        )
        self._settings = SolAgentConfig()

    def get_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "token": {
                    "type": "string",
                    "description": "Token mint address for Jupiter, or ticker symbol (e.g. SOL) for Pyth.",
                },
                "source": {
                    "type": "string",
                    "enum": ["jupiter", "pyth"],
                    "description": "Price source to query.",
                },
            },
            "required": ["token", "source"],
            "additionalProperties": False,
        }

    def configure(self, config: Dict[str, Any]) -> None:
        super().configure(config)
        self._settings = tool_config(config, "solana_price")

    async def execute(self, token: str, source: str = "jupiter") -> Dict[str, Any]:
        prices = PriceClient(
            self._settings.price_url,
            self._settings.pyth_url,
            timeout=self._settings.http_timeout,
        )
        try:
            if source == "pyth":
                feed_id = await prices.fetch_pyth_price_feed_id(token)
                price = await prices.fetch_price_by_pyth(feed_id)
                return {
                    "status": "success",
                    "result": {"token": token, "price": str(price), "feed_id": feed_id},
                }
            price = await prices.fetch_price(token)
            return {"status": "success", "result": {"token": token, "price": price}}
        except Exception as e:
            logger.exception(f"Price check error: {e}")
            return error_response(e)


class SolanaPricePlugin:
    def __init__(self):
        self.name = "solana_price"
        self.config = None
        self.tool_registry = None
        self._tool = None

    @property
    def description(self):
        return "Plugin for checking Solana token prices using Jupiter or Pyth."

    def initialize(self, tool_registry: ToolRegistry) -> None:
        self.tool_registry = tool_registry
        self._tool = SolanaPriceTool(registry=tool_registry)

    def configure(self, config: Dict[str, Any]) -> None:
        self.config = config
        if self._tool:
            self._tool.configure(self.config)

    def get_tools(self) -> List[AutoTool]:
        return [self._tool] if self._tool else []


def get_plugin():
    return SolanaPricePlugin()
