"""
Chat endpoints

POST /api/chat          - blocking turn, returns {reply, history}
POST /api/chat/stream   - Server-Sent Events, one frame per agent event
"""

from typing import AsyncGenerator, List, Dict, Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse
from loguru import logger

from fliplet_agent.agents.assistant import AssistantAgent
from fliplet_agent.api.models import ChatRequest, ChatResponse


router = APIRouter(prefix="/api/chat", tags=["chat"])


def get_agent(request: Request) -> AssistantAgent:
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        raise HTTPException(status_code=503, detail="Agent not initialized")
    return agent


async def stream_agent_events(
    agent: AssistantAgent,
    message: str,
    history: List[Dict[str, Any]],
) -> AsyncGenerator[str, None]:
    """
    Format agent events as SSE frames.

    Yields:
        ``event: <type>\\ndata: <json>\\n\\n`` per event, ending with done or error
    """
    async for event in agent.stream_turn(message, history):
        yield f"event: {event.type}\ndata: {event.model_dump_json()}\n\n"


@router.post("", response_model=ChatResponse)
async def chat(body: ChatRequest, request: Request):
    """
    Blocking chat turn

    Runs the full tool-calling loop and returns the final reply together
    with the updated conversation.
    """
    agent = get_agent(request)
    try:
        result = await agent.run_turn(body.message, body.history_dicts())
    except Exception as exc:
        logger.exception("Chat turn failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return ChatResponse(reply=result.reply, history=result.history)


@router.post("/stream")
async def chat_stream(body: ChatRequest, request: Request):
    """
    Streaming chat turn

    **Event Types:**

    1. **text_delta** - `{"type": "text_delta", "text": "There are"}`
    2. **tool_start** - `{"type": "tool_start", "name": "list_data_sources", "input": {}}`
    3. **done** - `{"type": "done", "reply": "...", "history": [...]}`
    4. **error** - `{"type": "error", "message": "..."}`
    """
    agent = get_agent(request)
    logger.info(f"Stream request - history={len(body.history)}")

    return StreamingResponse(
        stream_agent_events(agent, body.message, body.history_dicts()),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        }
    )
