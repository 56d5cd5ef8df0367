import logging
from typing import Dict, Any, List, Optional
from solana_agent import AutoTool, ToolRegistry
from solagent.agent import SolAgent
from solagent.config import SolAgentConfig
from solagent.utils.pumpfun import PumpfunTokenOptions
from solagent.utils.tooling import error_response, tool_config

logger = logging.getLogger(__name__)


class SolanaLaunchPumpfunTool(AutoTool):
    def __init__(self, registry: Optional[ToolRegistry] = None):
        super().__init__(
            name="solana_launch_pumpfun",
            description="Launch a new token on pump.fun from the agent wallet.",
            registry=registry,
        )
        self._settings = SolAgentConfig()

    def get_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "token_name": {
                    "type": "string",
                    "description": "Name of the token.",
                },
                "token_ticker": {
                    "type": "string",
                    "description": "Ticker symbol of the token.",
                },
                "description": {
                    "type": "string",
                    "description": "Description of the token.",
                },
                "image_url": {
                    "type": "string",
                    "description": "URL of the token image.",
                },
                "initial_liquidity_sol": {
                    "type": "number",
                    "description": "SOL to spend on the initial buy. Use 0 for the default (0.0001).",
                },
                "twitter": {
                    "type": "string",
                    "description": "Twitter handle or URL, empty string for none.",
                },
                "telegram": {
                    "type": "string",
                    "description": "Telegram handle or URL, empty string for none.",
                },
                "website": {
                    "type": "string",
                    "description": "Website URL, empty string for none.",
                },
            },
            "required": [
                "token_name",
                "token_ticker",
                "description",
                "image_url",
                "initial_liquidity_sol",
                "twitter",
                "telegram",
                "website",
            ],
            "additionalProperties": False,
        }

    def configure(self, config: Dict[str, Any]) -> None:
        super().configure(config)
        self._settings = tool_config(config, "solana_launch_pumpfun")

    async def execute(
        self,
        token_name: str,
        token_ticker: str,
        description: str,
        image_url: str,
        initial_liquidity_sol: Optional[float] = None,
        twitter: Optional[str] = None,
        telegram: Optional[str] = None,
        website: Optional[str] = None,
    ) -> Dict[str, Any]:
        options = PumpfunTokenOptions(
            twitter=twitter or None,
            telegram=telegram or None,
            website=website or None,
        )
        if initial_liquidity_sol:
            options.initial_liquidity_sol = initial_liquidity_sol
        try:
            async with SolAgent(self._settings) as agent:
                launched = await agent.launch_token_pumpfun(
                    token_name, token_ticker, description, image_url, options
                )
            return {
                "status": "success",
                "result": {
                    "signature": launched.signature,
                    "mint": launched.mint,
                    "metadata_uri": launched.metadata_uri,
                },
            }
        except Exception as e:
            logger.exception(f"pump.fun launch failed: {str(e)}")
            return error_response(e)


class SolanaLaunchPumpfunPlugin:
    def __init__(self):
        self.name = "solana_launch_pumpfun"
        self.config = None
        self.tool_registry = None
        self._tool = None

    @property
    def description(self):
        return "Plugin for launching tokens on pump.fun."

    def initialize(self, tool_registry: ToolRegistry) -> None:
        self.tool_registry = tool_registry
        self._tool = SolanaLaunchPumpfunTool(registry=tool_registry)

    def configure(self, config: Dict[str, Any]) -> None:
        self.config = config
        if self._tool:
            self._tool.configure(self.config)

    def get_tools(self) -> List[AutoTool]:
        return [self._tool] if self._tool else []


def get_plugin():
    return SolanaLaunchPumpfunPlugin()
