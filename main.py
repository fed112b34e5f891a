# =============================================================================
# main.py  —  Entry Point for the Software Pricing Advisor Agent
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                          (interactive)
#   uv run python main.py "What should 50 seats of Slack Pro cost?"
#
# WHAT HAPPENS:
#   1. Loads .env (OPENROUTER_API_KEY, VENDR_API_KEY, VENDR_USER_EMAIL, ...)
#   2. Creates the Google ADK agent (agent/pricing_agent.py), which starts
#      the Vendr pricing tool server as an MCP subprocess
#   3. Sends each question through the ADK Runner and prints the answer,
#      with a line for every tool call and tool result along the way
#
# To run only the tool server (e.g. for another MCP client):
#   uv run python -m tools.mcp_server
# =============================================================================

import asyncio
import sys

from dotenv import load_dotenv

# LiteLlm reads OPENROUTER_API_KEY when the agent is created, and the tool
# server subprocess inherits VENDR_* from this process.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.pricing_agent import create_agent

APP_NAME = "software_pricing_advisor"
USER_ID = "demo_user"
RULE = "-" * 70
QUIT_WORDS = {"quit", "exit", "q"}


async def ask(runner: Runner, session_id: str, question: str) -> str:
    """Send one question to the agent and return its last text reply."""
    message = types.Content(role="user", parts=[types.Part(text=question)])
    reply = ""

    async for event in runner.run_async(
        user_id=USER_ID, session_id=session_id, new_message=message
    ):
        if not (event.content and event.content.parts):
            continue
        for part in event.content.parts:
            if part.function_call:
                print(f"  🔧 {part.function_call.name}({dict(part.function_call.args or {})})")
            elif part.function_response:
                print(f"  📦 {part.function_response.name} returned")
            elif part.text:
                reply = part.text

    return reply


def show_reply(reply: str) -> None:
    print(RULE)
    if reply:
        print(f"\n🤖 Advisor:\n\n{reply}")
    else:
        print("\n⚠️  The advisor returned no answer. Check the [MCP] log lines above.")


async def run_agent(question: str | None = None):
    """Answer `question` once, or chat until the user quits."""
    print("=" * 70)
    print("  SOFTWARE PRICING ADVISOR  (Google ADK + FastMCP + Vendr)")
    print("=" * 70)

    session_service = InMemorySessionService()
    runner = Runner(agent=create_agent(), app_name=APP_NAME, session_service=session_service)
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    if question:
        show_reply(await ask(runner, session.id, question))
        return

    print("\n💬 Ask what a piece of software should cost you ('quit' to exit).")
    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            user_input = "quit"

        if user_input.lower() in QUIT_WORDS:
            print("\n👋 Goodbye!")
            return
        if user_input:
            print(RULE)
            show_reply(await ask(runner, session.id, user_input))


if __name__ == "__main__":
    asyncio.run(run_agent(" ".join(sys.argv[1:]) or None))
