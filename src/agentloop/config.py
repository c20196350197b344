from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentLoopConfig(BaseSettings):
    """Configuration for agentloop.

    Settings can be provided via environment variables with AGENTLOOP_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENTLOOP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Maximum Model Gateway calls per request, including the final tool-less call
    max_iterations: int = Field(default=10, ge=1)

    # Default comma-separated tool tag selector (a request's tags override it)
    tags: str | None = None

    # OpenAI gateway configuration
    openai_model: str = "gpt-4o-mini"
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    request_timeout: float | None = Field(default=60.0, gt=0)

    # Session memory backend
    memory_backend: Literal["none", "memory", "kuzu"] = "none"
    memory_window: int | None = Field(default=None, ge=1)

    # Home directory for storage
    # Default: ~/.agentloop
    home: Path | None = None

    def get_home(self) -> Path:
        """Get the home directory for storage."""
        return self.home or Path.home() / ".agentloop"

    def get_memory_path(self) -> Path:
        """Get the Kùzu memory DB path (only used when memory_backend='kuzu')."""
        return self.get_home() / "memory"
