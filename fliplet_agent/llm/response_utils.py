"""
Model response utilities.

Normalizes Messages API content blocks into plain dicts so conversations
can be returned to callers as JSON.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TextDelta:
    """Incremental fragment of assistant text"""
    text: str


@dataclass
class ModelResponse:
    """Assembled model output for one round"""
    content: List[Dict[str, Any]] = field(default_factory=list)
    stop_reason: Optional[str] = None


def block_to_dict(block: Any) -> Dict[str, Any]:
    """
    Convert an SDK content block (or an already-plain dict) to a dict.

    Text and tool_use blocks keep only the fields the API accepts back on
    the next request; anything else is dumped as-is without null fields.
    """
    if isinstance(block, dict):
        return block

    block_type = getattr(block, "type", None)
    if block_type == "text":
        return {"type": "text", "text": block.text}
    if block_type == "tool_use":
        return {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
    return block.model_dump(exclude_none=True)


def to_model_response(message: Any) -> ModelResponse:
    """Build a ModelResponse from an SDK Message"""
    return ModelResponse(
        content=[block_to_dict(block) for block in message.content],
        stop_reason=message.stop_reason,
    )


def extract_text(content: List[Dict[str, Any]]) -> str:
    """Join the text blocks of a message, in order, with newlines."""
    return "\n".join(block["text"] for block in content if block.get("type") == "text")


def tool_use_blocks(content: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Tool invocation blocks of a message, in emission order"""
    return [block for block in content if block.get("type") == "tool_use"]
