"""
Configuration management for the application.
Loads settings from environment variables and the project .env file.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings

from fliplet_agent.utils.errors import ConfigurationError

# This file is at fliplet_agent/config/settings.py, so project root is 3 levels up
_project_root = Path(__file__).resolve().parent.parent.parent

PROJECT_ROOT = _project_root

_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(dotenv_path=_env_file)
    logger.debug(f"Loaded .env from: {_env_file}")
else:
    load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Anthropic
    anthropic_api_key: str = Field(default="")
    anthropic_model: str = Field(default="claude-sonnet-4-20250514")
    max_output_tokens: int = Field(default=4096)

    # Fliplet backend
    fliplet_api_token: str = Field(default="")
    fliplet_app_id: str = Field(default="")
    fliplet_api_base_url: str = Field(default="https://api.fliplet.com")
    backend_max_retries: int = Field(default=3)
    backend_retry_base_delay: float = Field(default=0.5)  # seconds, doubled per attempt
    backend_timeout: float = Field(default=30.0)
    max_entries: int = Field(default=50)  # rows kept from a data source listing

    # Agent loop limits
    max_tool_rounds: int = Field(default=10)
    max_history_messages: int = Field(default=40)

    # HTTP service
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Logging
    log_level: str = Field(default="INFO")
    log_dir: Optional[str] = Field(default=None)

    # CLI server mode
    server_url: str = Field(default="http://localhost:3000")

    class Config:
        env_file = str(_project_root / ".env")
        env_file_encoding = "utf-8"
        extra = "ignore"

    def require(self) -> None:
        """
        Fail fast when a value the service cannot run without is missing.

        Raises:
            ConfigurationError: naming every missing environment variable
        """
        required = {
            "ANTHROPIC_API_KEY": self.anthropic_api_key,
            "FLIPLET_API_TOKEN": self.fliplet_api_token,
            "FLIPLET_APP_ID": self.fliplet_app_id,
        }
        missing = [name for name, value in required.items() if not value.strip()]
        if missing:
            raise ConfigurationError(f"Missing env vars: {', '.join(missing)}. See .env.example")


settings = Settings()
