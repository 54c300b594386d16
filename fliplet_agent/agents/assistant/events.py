"""
Events produced by the assistant during a turn

A turn yields zero or more text_delta / tool_start events, in emission
order, followed by exactly one terminal event (done or error).
"""

from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field


class TextDeltaEvent(BaseModel):
    """Incremental chunk of assistant text"""
    type: Literal["text_delta"] = "text_delta"
    text: str


class ToolStartEvent(BaseModel):
    """A tool invocation is about to be dispatched"""
    type: Literal["tool_start"] = "tool_start"
    name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class DoneEvent(BaseModel):
    """Turn finished with a reply and the updated conversation"""
    type: Literal["done"] = "done"
    reply: str
    history: List[Dict[str, Any]]


class ErrorEvent(BaseModel):
    """Turn aborted by an unexpected failure"""
    type: Literal["error"] = "error"
    message: str


AgentEvent = Union[TextDeltaEvent, ToolStartEvent, DoneEvent, ErrorEvent]
