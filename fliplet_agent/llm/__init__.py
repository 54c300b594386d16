"""
LLM layer - Anthropic client and response utilities
"""

from fliplet_agent.llm.client import AnthropicChatModel, ChatModel, create_chat_model
from fliplet_agent.llm.response_utils import (
    ModelResponse,
    TextDelta,
    extract_text,
    tool_use_blocks,
)

__all__ = [
    "AnthropicChatModel",
    "ChatModel",
    "create_chat_model",
    "ModelResponse",
    "TextDelta",
    "extract_text",
    "tool_use_blocks",
]
