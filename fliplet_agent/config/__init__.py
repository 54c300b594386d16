"""
Configuration layer - Settings and constants
"""

from fliplet_agent.config.settings import settings, Settings, PROJECT_ROOT
from fliplet_agent.config.constants import TOOL_LIMIT_REPLY, TRUNCATION_NOTE

__all__ = [
    "settings",
    "Settings",
    "PROJECT_ROOT",
    "TOOL_LIMIT_REPLY",
    "TRUNCATION_NOTE",
]
