import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from creative_audit.utils import extract_origin


PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOCAL_ENV_FILE = PROJECT_ROOT / ".env.local"

if LOCAL_ENV_FILE.exists():
    load_dotenv(LOCAL_ENV_FILE, override=True)


DEFAULT_BACKOFF_SCHEDULE_MS = [2000, 5000, 15000, 35000]


class Settings(BaseSettings):
    class Config:
        env_file = ".env"
        extra = "ignore"
    environment: str = "development"
    gemini_api_key: str | None = Field(default=None)
    gemini_model: str = Field(default="gemini-2.0-flash")
    max_retries: int = Field(default=4, ge=1)
    backoff_schedule_ms: List[int] = Field(default_factory=lambda: list(DEFAULT_BACKOFF_SCHEDULE_MS))
    request_timeout_seconds: float = Field(default=60.0, gt=0)
    retry_malformed_responses: bool = Field(default=False)
    frontend_base_url: str = Field(default="http://localhost:3000")
    additional_cors_origins: str | None = Field(default=None)

    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    def get_additional_cors_origins(self) -> list[str]:
        value = self.additional_cors_origins
        if not value:
            return []

        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return []
            if stripped.startswith("[") and stripped.endswith("]"):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [
                            str(origin).strip()
                            for origin in parsed
                            if str(origin).strip()
                        ]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in stripped.split(",") if item.strip()]

        return []


@dataclass(frozen=True)
class AuditConfig:
    """Injected configuration for one orchestrated audit call."""
    api_key: Optional[str]
    model_name: str = "gemini-2.0-flash"
    max_retries: int = 4
    backoff_schedule_ms: Tuple[int, ...] = tuple(DEFAULT_BACKOFF_SCHEDULE_MS)
    request_timeout_seconds: float = 60.0
    retry_malformed_responses: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuditConfig":
        return cls(
            api_key=(settings.gemini_api_key or "").strip() or None,
            model_name=settings.gemini_model,
            max_retries=settings.max_retries,
            backoff_schedule_ms=tuple(settings.backoff_schedule_ms) or tuple(DEFAULT_BACKOFF_SCHEDULE_MS),
            request_timeout_seconds=settings.request_timeout_seconds,
            retry_malformed_responses=settings.retry_malformed_responses,
        )


def get_cors_origins(settings: Settings) -> list[str]:
    """Frontend origin plus any additional origins, deduplicated, invalid entries dropped."""
    origins: list[str] = []
    for candidate in [settings.frontend_base_url, *settings.get_additional_cors_origins()]:
        origin = extract_origin(candidate)
        if origin and origin not in origins:
            origins.append(origin)
    return origins


@lru_cache()
def get_settings():
    return Settings()
