"""
Tool dispatcher

Routes a model-issued tool invocation to the matching FlipletAPI accessor.
"""

from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence

from loguru import logger

from fliplet_agent.infra.fliplet_api import FlipletAPI
from fliplet_agent.tools.catalog import ToolDefinition, ToolName, build_tool_catalog
from fliplet_agent.utils.errors import ToolInputError, UnknownToolError

Handler = Callable[[FlipletAPI, Mapping[str, Any], Any], Awaitable[Any]]


_ROUTES: Dict[ToolName, Handler] = {
    ToolName.GET_APP_INFO: lambda api, args, app_id: api.get_app(app_id),
    ToolName.LIST_DATA_SOURCES: lambda api, args, app_id: api.list_data_sources(app_id),
    ToolName.GET_DATA_SOURCE: lambda api, args, app_id: api.get_data_source(args["data_source_id"]),
    ToolName.GET_DATA_SOURCE_ENTRIES: lambda api, args, app_id: api.get_data_source_entries(args["data_source_id"]),
    ToolName.LIST_MEDIA_FOLDERS: lambda api, args, app_id: api.list_media_folders(app_id),
    ToolName.GET_FOLDER_FILES: lambda api, args, app_id: api.get_folder_files(args["folder_id"]),
    ToolName.GET_FILE_INFO: lambda api, args, app_id: api.get_file(args["file_id"]),
}

_unrouted = set(ToolName) - set(_ROUTES)
if _unrouted:
    raise RuntimeError(f"Tools without a route: {sorted(t.value for t in _unrouted)}")


class ToolDispatcher:
    """Resolves tool invocations against the Fliplet API."""

    def __init__(
        self,
        api: FlipletAPI,
        default_app_id: str,
        catalog: Optional[Sequence[ToolDefinition]] = None,
    ):
        self.api = api
        self.default_app_id = default_app_id
        self.catalog = tuple(catalog) if catalog is not None else build_tool_catalog(default_app_id)
        self._definitions: Dict[ToolName, ToolDefinition] = {
            definition.name: definition for definition in self.catalog
        }

    async def dispatch(self, name: str, tool_input: Mapping[str, Any]) -> Any:
        """
        Execute one tool invocation.

        Args:
            name: Tool name issued by the model
            tool_input: Input parameters issued by the model

        Returns:
            JSON-serializable API response

        Raises:
            UnknownToolError: ``name`` is not in the catalog
            ToolInputError: a required parameter is missing
        """
        try:
            tool = ToolName(name)
        except ValueError:
            raise UnknownToolError(f"Unknown tool: {name}") from None

        definition = self._definitions.get(tool)
        if definition is None:
            raise UnknownToolError(f"Unknown tool: {name}")

        tool_input = tool_input or {}
        missing = [key for key in definition.required if tool_input.get(key) is None]
        if missing:
            raise ToolInputError(f"{name} requires: {', '.join(missing)}")

        app_id = tool_input.get("app_id") or self.default_app_id
        logger.debug(f"Dispatching {tool.value} (app_id={app_id})")
        return await _ROUTES[tool](self.api, tool_input, app_id)
