"""
Tool catalog

Declares the operations the model may call. The catalog is built once
per default app id and is immutable afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple


class ToolName(str, Enum):
    """Every tool the agent exposes. Adding a member requires a catalog entry and a route."""

    GET_APP_INFO = "get_app_info"
    LIST_DATA_SOURCES = "list_data_sources"
    GET_DATA_SOURCE = "get_data_source"
    GET_DATA_SOURCE_ENTRIES = "get_data_source_entries"
    LIST_MEDIA_FOLDERS = "list_media_folders"
    GET_FOLDER_FILES = "get_folder_files"
    GET_FILE_INFO = "get_file_info"


@dataclass(frozen=True)
class ToolParameter:
    """A single input parameter of a tool"""
    type: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class ToolDefinition:
    """Static description of a tool handed to the model"""
    name: ToolName
    description: str
    parameters: Dict[str, ToolParameter] = field(default_factory=dict)

    @property
    def required(self) -> List[str]:
        return [key for key, param in self.parameters.items() if param.required]

    def to_schema(self) -> Dict[str, Any]:
        """Render in the Messages API tool format."""
        return {
            "name": self.name.value,
            "description": self.description,
            "input_schema": {
                "type": "object",
                "properties": {
                    key: {"type": param.type, "description": param.description}
                    for key, param in self.parameters.items()
                },
                "required": self.required,
            },
        }


def _number(description: str, required: bool = False) -> ToolParameter:
    return ToolParameter(type="number", description=description, required=required)


def build_tool_catalog(default_app_id: str) -> Tuple[ToolDefinition, ...]:
    """
    Build the tool catalog for an application context.

    App ids are optional everywhere (they fall back to ``default_app_id``);
    data source, folder and file ids are required.

    Args:
        default_app_id: Fliplet app the assistant is scoped to

    Returns:
        Ordered, immutable tuple of tool definitions
    """
    app_id = _number(f"App ID. Defaults to {default_app_id}.")

    return (
        ToolDefinition(
            ToolName.GET_APP_INFO,
            f"Fetch app metadata (name, settings, pages, icon, etc.) for app {default_app_id}.",
            {"app_id": app_id},
        ),
        ToolDefinition(
            ToolName.LIST_DATA_SOURCES,
            f"List every data source attached to app {default_app_id}: names, IDs, row counts.",
            {"app_id": app_id},
        ),
        ToolDefinition(
            ToolName.GET_DATA_SOURCE,
            "Get full details of one data source: columns, hooks, access rules.",
            {"data_source_id": _number("Data source ID.", required=True)},
        ),
        ToolDefinition(
            ToolName.GET_DATA_SOURCE_ENTRIES,
            "Fetch rows from a data source. Large results are auto-truncated to 50 rows.",
            {"data_source_id": _number("Data source ID.", required=True)},
        ),
        ToolDefinition(
            ToolName.LIST_MEDIA_FOLDERS,
            f"List media/file folders for app {default_app_id}.",
            {"app_id": app_id},
        ),
        ToolDefinition(
            ToolName.GET_FOLDER_FILES,
            "List every file inside a media folder.",
            {"folder_id": _number("Folder ID.", required=True)},
        ),
        ToolDefinition(
            ToolName.GET_FILE_INFO,
            "Get metadata for a single file: URL, size, type, created date.",
            {"file_id": _number("File ID.", required=True)},
        ),
    )


def tool_schemas(catalog: Sequence[ToolDefinition]) -> List[Dict[str, Any]]:
    """Tool list in the shape the model expects"""
    return [definition.to_schema() for definition in catalog]
