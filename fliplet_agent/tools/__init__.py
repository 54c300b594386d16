"""
Tool layer - Catalog of callable Fliplet operations and their dispatcher
"""

from fliplet_agent.tools.catalog import (
    ToolName,
    ToolParameter,
    ToolDefinition,
    build_tool_catalog,
    tool_schemas,
)
from fliplet_agent.tools.dispatcher import ToolDispatcher

__all__ = [
    "ToolName",
    "ToolParameter",
    "ToolDefinition",
    "build_tool_catalog",
    "tool_schemas",
    "ToolDispatcher",
]
