"""
Shared fakes for the test suite: a scripted model and a recording Fliplet API stub.
"""

import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fliplet_agent.agents.assistant import AssistantAgent
from fliplet_agent.llm.response_utils import ModelResponse, TextDelta
from fliplet_agent.tools.catalog import build_tool_catalog, tool_schemas
from fliplet_agent.tools.dispatcher import ToolDispatcher
from fliplet_agent.utils.errors import BackendStatusError

APP_ID = "123"


def text_response(*texts: str) -> ModelResponse:
    return ModelResponse(
        content=[{"type": "text", "text": text} for text in texts],
        stop_reason="end_turn",
    )


def tool_response(*calls: Dict[str, Any], text: Optional[str] = None) -> ModelResponse:
    """calls: dicts with id, name and (optional) input"""
    content: List[Dict[str, Any]] = []
    if text:
        content.append({"type": "text", "text": text})
    for call in calls:
        content.append({
            "type": "tool_use",
            "id": call["id"],
            "name": call["name"],
            "input": call.get("input", {}),
        })
    return ModelResponse(content=content, stop_reason="tool_use")


class ScriptedModel:
    """
    Fake ChatModel replaying canned responses.

    ``script`` is either a list consumed one response per round or a
    callable receiving the round index.
    """

    def __init__(self, script: Union[List[ModelResponse], Callable[[int], ModelResponse]]):
        self.script = script
        self.calls: List[List[Dict[str, Any]]] = []
        self.systems: List[str] = []

    def _next(self) -> ModelResponse:
        index = len(self.calls) - 1
        if callable(self.script):
            return self.script(index)
        return self.script[index]

    async def invoke(self, messages, system, tools):
        self.calls.append(list(messages))
        self.systems.append(system)
        return self._next()

    async def stream(self, messages, system, tools):
        self.calls.append(list(messages))
        self.systems.append(system)
        response = self._next()
        for block in response.content:
            if block["type"] == "text":
                # Two fragments per block to exercise incremental delivery
                middle = len(block["text"]) // 2
                for fragment in (block["text"][:middle], block["text"][middle:]):
                    if fragment:
                        yield TextDelta(text=fragment)
        yield response


class FailingModel:
    """Model whose every call raises"""

    def __init__(self, message: str = "model down"):
        self.message = message

    async def invoke(self, messages, system, tools):
        raise RuntimeError(self.message)

    async def stream(self, messages, system, tools):
        raise RuntimeError(self.message)
        yield  # pragma: no cover


class StubFlipletAPI:
    """Records accessor calls and returns canned payloads"""

    def __init__(self, fail: Optional[Dict[str, Exception]] = None):
        self.calls: List[tuple] = []
        self.fail = fail or {}
        self.closed = False

    async def _record(self, method: str, arg: Any) -> Any:
        self.calls.append((method, arg))
        if method in self.fail:
            raise self.fail[method]
        return {"method": method, "id": arg}

    async def get_app(self, app_id):
        return await self._record("get_app", app_id)

    async def list_data_sources(self, app_id):
        self.calls.append(("list_data_sources", app_id))
        if "list_data_sources" in self.fail:
            raise self.fail["list_data_sources"]
        return [{"id": 1, "name": "Users"}, {"id": 2, "name": "Orders"}]

    async def get_data_source(self, data_source_id):
        return await self._record("get_data_source", data_source_id)

    async def get_data_source_entries(self, data_source_id):
        return await self._record("get_data_source_entries", data_source_id)

    async def list_media_folders(self, app_id):
        return await self._record("list_media_folders", app_id)

    async def get_folder_files(self, folder_id):
        return await self._record("get_folder_files", folder_id)

    async def get_file(self, file_id):
        return await self._record("get_file", file_id)

    async def aclose(self):
        self.closed = True


def make_agent(model, api=None, max_rounds: int = 10, max_history_messages: int = 40) -> AssistantAgent:
    api = api or StubFlipletAPI()
    catalog = build_tool_catalog(APP_ID)
    return AssistantAgent(
        model=model,
        dispatcher=ToolDispatcher(api, APP_ID, catalog),
        tools=tool_schemas(catalog),
        system_prompt="system",
        max_rounds=max_rounds,
        max_history_messages=max_history_messages,
    )


@pytest.fixture
def stub_api() -> StubFlipletAPI:
    return StubFlipletAPI()


@pytest.fixture
def status_error() -> BackendStatusError:
    return BackendStatusError(404, "Not Found", '{"message":"Data source not found"}')
