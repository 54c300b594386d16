"""
Interactive chat client

Two modes:
    fliplet-chat            -> talks to the HTTP service (must be running)
    fliplet-chat --direct   -> runs the agent in-process, no server needed

The conversation lives in a local variable and is threaded through each
turn; nothing is kept in module state.
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional, Tuple

import httpx
from loguru import logger

from fliplet_agent.agents.assistant import AssistantAgent, create_agent
from fliplet_agent.config.settings import settings
from fliplet_agent.utils.errors import ConfigurationError
from fliplet_agent.utils.logger import setup_logger

EXIT_COMMANDS = {"exit", "quit", "q"}

Conversation = List[Dict[str, Any]]


def render_event(event: Dict[str, Any], round_text: str = "") -> None:
    """
    Print one agent event to the terminal.

    ``round_text`` is the text streamed since the last tool call; the done
    event only prints its reply when none was streamed (e.g. the tool-call
    limit reply).
    """
    event_type = event.get("type")
    if event_type == "text_delta":
        print(event["text"], end="", flush=True)
    elif event_type == "tool_start":
        print(f"\n  -> {event['name']}", flush=True)
    elif event_type == "done" and not round_text:
        print(event["reply"], end="", flush=True)
    elif event_type == "error":
        print(f"\nError: {event['message']}", flush=True)


def _track_round_text(event: Dict[str, Any], round_text: str) -> str:
    if event.get("type") == "text_delta":
        return round_text + event["text"]
    if event.get("type") == "tool_start":
        return ""
    return round_text


def parse_sse_data(line: str) -> Optional[Dict[str, Any]]:
    """Decode the JSON payload of an SSE ``data:`` line (None for other lines)."""
    if not line.startswith("data: "):
        return None
    return json.loads(line[len("data: "):])


async def chat_via_server(
    client: httpx.AsyncClient, message: str, history: Conversation
) -> Tuple[str, Conversation]:
    """Run one turn against the streaming endpoint; returns (reply, history)."""
    reply, new_history, round_text = "", history, ""
    async with client.stream(
        "POST", "/api/chat/stream", json={"message": message, "history": history}
    ) as response:
        if response.status_code != 200:
            body = await response.aread()
            raise RuntimeError(f"Server {response.status_code}: {body.decode(errors='replace')}")
        async for line in response.aiter_lines():
            event = parse_sse_data(line)
            if event is None:
                continue
            render_event(event, round_text)
            round_text = _track_round_text(event, round_text)
            if event.get("type") == "done":
                reply, new_history = event["reply"], event["history"]
    return reply, new_history


async def chat_direct(agent: AssistantAgent, message: str, history: Conversation) -> Tuple[str, Conversation]:
    """Run one turn in-process; returns (reply, history)."""
    reply, new_history, round_text = "", history, ""
    async for event in agent.stream_turn(message, history):
        payload = event.model_dump()
        render_event(payload, round_text)
        round_text = _track_round_text(payload, round_text)
        if event.type == "done":
            reply, new_history = event.reply, event.history
    return reply, new_history


async def run(direct: bool, server_url: str) -> int:
    mode = "direct" if direct else "server"
    print(f"\n  Fliplet AI Chatbot  [{mode} mode]")
    print('  Ask about data sources, files, app config. Type "exit" to quit.\n')

    agent: Optional[AssistantAgent] = None
    client: Optional[httpx.AsyncClient] = None

    if direct:
        try:
            agent = create_agent(settings)
        except ConfigurationError as e:
            print(str(e), file=sys.stderr)
            return 1
        print(f"  App {settings.fliplet_app_id} - direct model connection\n")
    else:
        client = httpx.AsyncClient(base_url=server_url, timeout=None)
        try:
            health = (await client.get("/health")).json()
        except (httpx.HTTPError, ValueError):
            await client.aclose()
            print(f"  Cannot reach server at {server_url}", file=sys.stderr)
            print("  Start it with: python scripts/run-dev.py", file=sys.stderr)
            print("  Or use direct mode: fliplet-chat --direct\n", file=sys.stderr)
            return 1
        print(f"  Connected to {server_url} - App {health.get('appId')}\n")

    history: Conversation = []
    try:
        while True:
            try:
                question = (await asyncio.to_thread(input, "You: ")).strip()
            except (EOFError, KeyboardInterrupt):
                break
            if not question:
                continue
            if question.lower() in EXIT_COMMANDS:
                break

            print("\nAssistant: ", end="", flush=True)
            try:
                if agent is not None:
                    _, history = await chat_direct(agent, question, history)
                else:
                    _, history = await chat_via_server(client, question, history)
            except (httpx.HTTPError, RuntimeError) as e:
                print(f"\nError: {e}\n")
                continue
            print("\n")
    finally:
        if client is not None:
            await client.aclose()
        if agent is not None:
            await agent.dispatcher.api.aclose()

    print("\nBye!\n")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="fliplet-chat", description="Chat with a Fliplet app's data")
    parser.add_argument("--direct", action="store_true", help="run the agent in-process instead of using the server")
    parser.add_argument("--server", default=settings.server_url, help="HTTP service URL (server mode)")
    args = parser.parse_args(argv)

    setup_logger("WARNING", settings.log_dir)
    logger.debug(f"CLI starting in {'direct' if args.direct else 'server'} mode")
    return asyncio.run(run(args.direct, args.server))


if __name__ == "__main__":
    sys.exit(main())
