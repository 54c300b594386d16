"""
FastAPI Development Server

Run the Fliplet data assistant API in development mode.

Usage:
    python scripts/run-dev.py
"""

import sys
import os
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
os.chdir(project_root)

import uvicorn
from loguru import logger

from fliplet_agent.config.settings import settings


def main():
    """Start the FastAPI development server"""
    logger.info("=" * 80)
    logger.info("Fliplet Data Assistant - API Server")
    logger.info("=" * 80)
    logger.info(f"Server will be available at: http://localhost:{settings.port}")
    logger.info(f"Health Check: http://localhost:{settings.port}/health")
    logger.info(f"Chat: POST http://localhost:{settings.port}/api/chat")
    logger.info(f"Chat Streaming: POST http://localhost:{settings.port}/api/chat/stream")
    logger.info("Press CTRL+C to stop the server")
    logger.info("=" * 80)

    uvicorn.run(
        "fliplet_agent.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level="info",
        access_log=True,
        reload_dirs=[str(project_root / "fliplet_agent")]
    )


if __name__ == "__main__":
    main()
