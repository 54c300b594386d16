"""
FastAPI Production Server

Run the Fliplet data assistant API in production mode.

Usage:
    python scripts/run-prod.py
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
    """Start the FastAPI production server"""
    logger.info(f"Fliplet Data Assistant - API Server (Production) on {settings.host}:{settings.port}")

    uvicorn.run(
        "fliplet_agent.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
        access_log=True
    )


if __name__ == "__main__":
    main()
