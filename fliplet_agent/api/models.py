"""
Pydantic models for the chat API contract
"""

from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field, field_validator


class ChatMessage(BaseModel):
    """One conversation message: plain text or a list of content blocks"""
    role: Literal["user", "assistant"]
    content: Union[str, List[Dict[str, Any]]]


class ChatRequest(BaseModel):
    """
    Chat turn request

    The caller owns the conversation: it sends the prior history with every
    turn and stores the history returned in the response.
    """
    message: str = Field(..., min_length=1, description="The user's question")
    history: List[ChatMessage] = Field(default_factory=list, description="Prior conversation")

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message is required")
        return value

    def history_dicts(self) -> List[Dict[str, Any]]:
        return [message.model_dump() for message in self.history]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "message": "What data sources does this app have?",
                    "history": []
                }
            ]
        }
    }


class ChatResponse(BaseModel):
    """Chat turn result"""
    reply: str
    history: List[Dict[str, Any]]


class HealthResponse(BaseModel):
    """
    Health check response

    Attributes:
        ok: Service is up
        appId: Fliplet app the assistant is scoped to
    """
    ok: bool = Field(..., description="Health status")
    appId: str = Field(..., description="Configured Fliplet app ID")
