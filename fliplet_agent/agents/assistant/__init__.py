"""
Assistant Agent - Answers questions about a Fliplet app by calling read-only tools
"""

from fliplet_agent.agents.assistant.agent import AssistantAgent, create_agent
from fliplet_agent.agents.assistant.events import (
    AgentEvent,
    DoneEvent,
    ErrorEvent,
    TextDeltaEvent,
    ToolStartEvent,
)
from fliplet_agent.agents.assistant.history import trim_history

__all__ = [
    "AssistantAgent",
    "create_agent",
    "AgentEvent",
    "DoneEvent",
    "ErrorEvent",
    "TextDeltaEvent",
    "ToolStartEvent",
    "trim_history",
]
