"""Shared plumbing for the agent tools."""

from typing import Any, Dict

from solagent.config import SolAgentConfig


def tool_config(config: Dict[str, Any], name: str) -> SolAgentConfig:
    """Read ``config["tools"][name]`` into a SolAgentConfig."""
    return SolAgentConfig.from_dict(config.get("tools", {}).get(name, {}))


def error_response(e: Exception) -> Dict[str, Any]:
    return {"status": "error", "message": str(e), "error_type": type(e).__name__}
