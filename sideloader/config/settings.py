import os
from typing import Optional
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Sideloading settings from environment variables"""

    # Resolution policy
    RAISE_ON_MISSING_SIDELOAD: bool = _env_flag("SIDELOAD_RAISE_ON_MISSING", True)
    SIDELOAD_CONCURRENCY: bool = _env_flag("SIDELOAD_CONCURRENCY", False)
    SIDELOAD_MAX_WORKERS: int = int(os.getenv("SIDELOAD_MAX_WORKERS", "4"))

    # Root scope pagination (never applied to sideloads)
    DEFAULT_PAGE_SIZE: int = int(os.getenv("SIDELOAD_DEFAULT_PAGE_SIZE", "20"))

    # Langfuse (optional - auto-enabled if keys present)
    LANGFUSE_PUBLIC_KEY: Optional[str] = os.getenv("LANGFUSE_PUBLIC_KEY")
    LANGFUSE_SECRET_KEY: Optional[str] = os.getenv("LANGFUSE_SECRET_KEY")
    LANGFUSE_HOST: Optional[str] = os.getenv("LANGFUSE_HOST")

    @property
    def enable_langfuse(self) -> bool:
        """Check if Langfuse tracing should be enabled"""
        return bool(self.LANGFUSE_PUBLIC_KEY and self.LANGFUSE_SECRET_KEY)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(**overrides) -> Settings:
    """
        Override process-wide settings.

        Call this at configuration time, before any resolution traffic.
    """
    settings = get_settings()
    for key, value in overrides.items():
        if key not in Settings.model_fields:
            raise ValueError(f"Unknown setting: {key}")
        setattr(settings, key, value)
    return settings


def reset_settings() -> Settings:
    """Drop overrides and reload defaults from the environment"""
    global _settings
    _settings = Settings()
    return _settings
