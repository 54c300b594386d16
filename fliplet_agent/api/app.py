"""
Main FastAPI application for the Fliplet data assistant

This module creates and configures the FastAPI application with:
- CORS middleware
- Chat routes (blocking and SSE streaming)
- Health check endpoint
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from fliplet_agent import __version__
from fliplet_agent.agents.assistant import AssistantAgent, create_agent
from fliplet_agent.api.models import HealthResponse
from fliplet_agent.api.routes import chat
from fliplet_agent.config.settings import settings
from fliplet_agent.utils.logger import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events

    - Startup: configure logging, validate configuration, build the agent.
      A missing credential raises here, so the server never starts serving.
    - Shutdown: close the Fliplet API connection pool.
    """
    setup_logger(settings.log_level, settings.log_dir)

    owns_agent = app.state.agent is None
    if owns_agent:
        app.state.agent = create_agent(settings)

    logger.info(f"Fliplet assistant starting - app {settings.fliplet_app_id} - {settings.anthropic_model}")

    yield

    logger.info("Fliplet assistant shutting down...")
    if owns_agent:
        await app.state.agent.dispatcher.api.aclose()
        app.state.agent = None


def create_app(agent: Optional[AssistantAgent] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        agent: Pre-built agent; when omitted one is built from settings at startup
    """
    app = FastAPI(
        title="Fliplet Data Assistant API",
        description="Ask natural-language questions about a Fliplet app's data.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.agent = agent

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat.router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check():
        """Health check - used by the CLI pre-flight and uptime monitors."""
        return HealthResponse(ok=True, appId=settings.fliplet_app_id)

    return app


app = create_app()
