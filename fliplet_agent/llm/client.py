"""
LLM client

Thin async wrapper over the Anthropic Messages API exposing the two
capabilities the agent loop needs: a blocking call and a streaming call.
"""

from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Union

from anthropic import AsyncAnthropic
from loguru import logger

from fliplet_agent.config.settings import Settings, settings as default_settings
from fliplet_agent.llm.response_utils import ModelResponse, TextDelta, to_model_response


class ChatModel(Protocol):
    """What the agent loop needs from a model provider."""

    async def invoke(
        self,
        messages: List[Dict[str, Any]],
        system: str,
        tools: List[Dict[str, Any]],
    ) -> ModelResponse:
        ...

    def stream(
        self,
        messages: List[Dict[str, Any]],
        system: str,
        tools: List[Dict[str, Any]],
    ) -> AsyncIterator[Union[TextDelta, ModelResponse]]:
        ...


class AnthropicChatModel:
    """Anthropic Messages API model"""

    def __init__(self, client: AsyncAnthropic, model: str, max_tokens: int = 4096):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def invoke(
        self,
        messages: List[Dict[str, Any]],
        system: str,
        tools: List[Dict[str, Any]],
    ) -> ModelResponse:
        message = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            tools=tools,
            messages=messages,
        )
        return to_model_response(message)

    async def stream(
        self,
        messages: List[Dict[str, Any]],
        system: str,
        tools: List[Dict[str, Any]],
    ) -> AsyncIterator[Union[TextDelta, ModelResponse]]:
        """
        Stream one model call.

        Yields a TextDelta per text fragment as it arrives, then the
        assembled ModelResponse once the stream is drained.
        """
        async with self.client.messages.stream(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            tools=tools,
            messages=messages,
        ) as stream:
            async for text in stream.text_stream:
                yield TextDelta(text=text)
            message = await stream.get_final_message()

        yield to_model_response(message)


def create_chat_model(settings: Optional[Settings] = None) -> AnthropicChatModel:
    """
    Factory for the configured chat model.

    Args:
        settings: Settings to read the key and model from (defaults to the global settings)
    """
    settings = settings or default_settings
    if settings.anthropic_api_key:
        key = settings.anthropic_api_key
        masked_key = key[:8] + "..." + key[-4:] if len(key) > 12 else "***"
        logger.info(f"LLM: Anthropic | Model: {settings.anthropic_model} | API key loaded: {masked_key}")
    else:
        logger.warning("ANTHROPIC_API_KEY not set - model calls will fail")

    return AnthropicChatModel(
        client=AsyncAnthropic(api_key=settings.anthropic_api_key or None),
        model=settings.anthropic_model,
        max_tokens=settings.max_output_tokens,
    )
