"""
Configuration management for Review Radar.
Handles environment variables and application settings.
"""
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console

    # Request settings
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "15"))
    LLM_TIMEOUT: int = int(os.getenv("LLM_TIMEOUT", "45"))

    # Max platform probes in flight at once
    PROBE_CONCURRENCY: int = int(os.getenv("PROBE_CONCURRENCY", "3"))

    # Rating suggestion collaborator (optional)
    # Loaded from environment variables, NEVER hardcoded
    CLAUDE_API_KEY: Optional[str] = os.getenv("CLAUDE_API_KEY")
    CLAUDE_MODEL: str = os.getenv("CLAUDE_MODEL", "claude-3-5-haiku-20241022")

    @classmethod
    def is_llm_configured(cls) -> bool:
        """Check if the rating suggestion collaborator has credentials."""
        return bool(cls.CLAUDE_API_KEY)


config = Config()
