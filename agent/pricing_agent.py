# =============================================================================
# agent/pricing_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the software-pricing advisor agent: an ADK Agent whose LLM
#   (via LiteLlm / OpenRouter) calls the Vendr pricing tools served by
#   tools/mcp_server.py.
#
#   ┌──────────────────────────┐        ┌──────────────────────────┐
#   │  Google ADK Agent        │  MCP   │  FastMCP server          │
#   │  prompt + LiteLlm model  │ ─────▶ │  tools/mcp_server.py     │
#   └──────────────────────────┘ stdio  └────────────┬─────────────┘
#                                                    │ httpx
#                                                    ▼
#                                         Vendr public API (catalog,
#                                         scopes, pricing)
#
# MCP CONNECTION:
#   ADK starts the tool server as a subprocess (`uv run python -m
#   tools.mcp_server`) from the project root and talks to it over
#   stdin/stdout.  The server loads VENDR_* settings from the environment
#   and .env, so the agent passes its own environment through.
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_pricing_advisor_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def tool_server_parameters() -> StdioServerParameters:
    """How ADK should launch the pricing tool server."""
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return StdioServerParameters(
        command="uv",
        args=["run", "python", "-m", "tools.mcp_server"],
        cwd=project_root,
        env=dict(os.environ),
    )


def create_agent(model: str | None = None) -> Agent:
    """Create the pricing advisor agent.

    Args:
        model: LiteLlm model string.  Defaults to PRICING_AGENT_MODEL from
            the environment, then to GPT-4o via OpenRouter.
    """
    mcp_tools = MCPToolset(connection_params=tool_server_parameters())

    return Agent(
        name="software_pricing_advisor",
        model=LiteLlm(model=model or os.getenv("PRICING_AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_pricing_advisor_prompt(),
        tools=[mcp_tools],
    )
