"""
Assistant Agent - bounded tool-calling loop

Each turn alternates model calls and tool dispatch rounds:

    requesting --end_turn--> done
        |
     tool_use
        v
    executing tools --> requesting (next round)

After ``max_rounds`` rounds without an end_turn the turn stops with a
fixed advisory reply. Blocking and streaming turns share one event
producer (``iter_turn``); they differ only in whether intermediate
events reach the caller.
"""

import json
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from loguru import logger

from fliplet_agent.agents.assistant.events import (
    AgentEvent,
    DoneEvent,
    ErrorEvent,
    TextDeltaEvent,
    ToolStartEvent,
)
from fliplet_agent.agents.assistant.history import trim_history
from fliplet_agent.agents.assistant.prompts import build_system_prompt
from fliplet_agent.config.constants import TOOL_LIMIT_REPLY
from fliplet_agent.config.settings import Settings, settings as default_settings
from fliplet_agent.infra.fliplet_api import FlipletAPI
from fliplet_agent.llm.client import ChatModel, create_chat_model
from fliplet_agent.llm.response_utils import (
    ModelResponse,
    TextDelta,
    extract_text,
    tool_use_blocks,
)
from fliplet_agent.tools.catalog import build_tool_catalog, tool_schemas
from fliplet_agent.tools.dispatcher import ToolDispatcher
from fliplet_agent.utils.errors import AgentError, ValidationError


def tool_result_block(tool_use_id: str, payload: Any, is_error: bool) -> Dict[str, Any]:
    """Tool result content block answering one invocation"""
    return {
        "type": "tool_result",
        "tool_use_id": tool_use_id,
        "content": json.dumps(payload, default=str),
        "is_error": is_error,
    }


class AssistantAgent:
    """
    Answers questions about a Fliplet app.

    Holds no per-turn state: the conversation is passed in and returned on
    every call, so concurrent turns never share anything mutable.
    """

    def __init__(
        self,
        model: ChatModel,
        dispatcher: ToolDispatcher,
        tools: List[Dict[str, Any]],
        system_prompt: str,
        max_rounds: int = 10,
        max_history_messages: int = 40,
    ):
        self.model = model
        self.dispatcher = dispatcher
        self.tools = tools
        self.system_prompt = system_prompt
        self.max_rounds = max_rounds
        self.max_history_messages = max_history_messages

    async def run_turn(self, message: str, history: Sequence[Dict[str, Any]] = ()) -> DoneEvent:
        """
        Blocking turn: drain the event stream and keep only the terminal event.

        Raises:
            ValidationError: empty message
            Exception: any model failure, unchanged
        """
        done: Optional[DoneEvent] = None
        async for event in self.iter_turn(message, history, stream=False):
            if isinstance(event, DoneEvent):
                done = event
        if done is None:
            raise AgentError("Turn ended without a result")
        return done

    async def stream_turn(
        self, message: str, history: Sequence[Dict[str, Any]] = ()
    ) -> AsyncIterator[AgentEvent]:
        """
        Streaming turn: text_delta / tool_start events, then done or error.

        Failures end the stream with an ErrorEvent instead of raising.
        """
        try:
            async for event in self.iter_turn(message, history, stream=True):
                yield event
        except Exception as e:
            logger.exception("Streaming turn failed")
            yield ErrorEvent(message=str(e) or type(e).__name__)

    async def iter_turn(
        self,
        message: str,
        history: Sequence[Dict[str, Any]] = (),
        stream: bool = True,
    ) -> AsyncIterator[AgentEvent]:
        """
        Run one turn and yield its events.

        Args:
            message: The user's message
            history: Prior conversation (not modified)
            stream: Use the streaming model call and emit text deltas

        Yields:
            TextDeltaEvent / ToolStartEvent in emission order, then one DoneEvent
        """
        if not message or not message.strip():
            raise ValidationError("message is required")

        conversation: List[Dict[str, Any]] = [*history, {"role": "user", "content": message}]
        # Trimmed once per turn; messages produced during the turn are appended to both
        window = trim_history(conversation, self.max_history_messages)

        logger.info(
            f"Turn started - history={len(history)} window={len(window)} message={message[:80]!r}"
        )

        for round_index in range(self.max_rounds):
            response: Optional[ModelResponse] = None
            if stream:
                async for item in self.model.stream(window, self.system_prompt, self.tools):
                    if isinstance(item, TextDelta):
                        yield TextDeltaEvent(text=item.text)
                    else:
                        response = item
                if response is None:
                    raise AgentError("Model stream ended without a final message")
            else:
                response = await self.model.invoke(window, self.system_prompt, self.tools)

            logger.debug(f"Round {round_index}: stop_reason={response.stop_reason}")

            assistant_message = {"role": "assistant", "content": response.content}
            conversation.append(assistant_message)
            window.append(assistant_message)

            calls = tool_use_blocks(response.content)
            if response.stop_reason != "tool_use" or not calls:
                if response.stop_reason not in ("end_turn", "tool_use"):
                    logger.warning(f"Ending turn on stop_reason={response.stop_reason}")
                yield DoneEvent(reply=extract_text(response.content), history=conversation)
                return

            results = []
            for call in calls:
                yield ToolStartEvent(name=call["name"], input=call.get("input") or {})
                results.append(await self._execute_tool(call))

            results_message = {"role": "user", "content": results}
            conversation.append(results_message)
            window.append(results_message)

        logger.warning(f"Tool-call limit reached after {self.max_rounds} rounds")
        yield DoneEvent(reply=TOOL_LIMIT_REPLY, history=conversation)

    async def _execute_tool(self, call: Dict[str, Any]) -> Dict[str, Any]:
        """Dispatch one invocation; any failure becomes an error result for the model."""
        name = call["name"]
        tool_input = call.get("input") or {}
        logger.info(f"  -> {name}({json.dumps(tool_input, default=str)})")
        try:
            result = await self.dispatcher.dispatch(name, tool_input)
        except Exception as e:
            logger.warning(f"Tool {name} failed: {e}")
            return tool_result_block(call["id"], {"error": str(e) or type(e).__name__}, is_error=True)
        return tool_result_block(call["id"], result, is_error=False)


def create_agent(settings: Optional[Settings] = None) -> AssistantAgent:
    """
    Build the production agent from settings.

    Raises:
        ConfigurationError: a required setting is missing
    """
    settings = settings or default_settings
    settings.require()

    api = FlipletAPI(
        token=settings.fliplet_api_token,
        base_url=settings.fliplet_api_base_url,
        max_retries=settings.backend_max_retries,
        retry_base_delay=settings.backend_retry_base_delay,
        max_entries=settings.max_entries,
        timeout=settings.backend_timeout,
    )
    catalog = build_tool_catalog(settings.fliplet_app_id)

    agent = AssistantAgent(
        model=create_chat_model(settings),
        dispatcher=ToolDispatcher(api, settings.fliplet_app_id, catalog),
        tools=tool_schemas(catalog),
        system_prompt=build_system_prompt(settings.fliplet_app_id),
        max_rounds=settings.max_tool_rounds,
        max_history_messages=settings.max_history_messages,
    )
    logger.info(
        f"Initialized AssistantAgent (app={settings.fliplet_app_id}, tools={len(catalog)}, "
        f"max_rounds={settings.max_tool_rounds})"
    )
    return agent
