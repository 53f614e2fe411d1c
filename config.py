"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field
from typing import Literal


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _parse_prompt_thresholds() -> tuple[int, ...]:
    """Parse PROMPT_THRESHOLDS, e.g. "4,5" or "3"."""
    raw = os.getenv("PROMPT_THRESHOLDS", "4,5")
    thresholds = tuple(int(t) for t in raw.split(",") if t.strip())
    if not thresholds or any(t < 1 for t in thresholds):
        raise ValueError(f"PROMPT_THRESHOLDS must list positive hand counts, got {raw!r}")
    return thresholds


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""

    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class StorageConfig:
    """Where sessions, history and onboarding progress are kept."""

    backend: Literal["memory", "file", "redis"] = field(
        default_factory=lambda: os.getenv("STORAGE_BACKEND", "memory").lower()  # type: ignore[return-value]
    )
    directory: str = field(default_factory=lambda: os.getenv("STORAGE_DIR", ".trainer-data"))
    redis_prefix: str = field(default_factory=lambda: os.getenv("STORAGE_REDIS_PREFIX", "bjt:"))

    def __post_init__(self) -> None:
        if self.backend not in ("memory", "file", "redis"):
            raise ValueError(f"Unknown STORAGE_BACKEND: {self.backend!r}")


@dataclass(frozen=True)
class TrainingConfig:
    """Default training session configuration."""

    num_decks: int = field(default_factory=lambda: int(os.getenv("DEFAULT_DECKS", "6")))
    penetration: float = field(
        default_factory=lambda: float(os.getenv("DEFAULT_PENETRATION", "0.75"))
    )
    prompt_thresholds: tuple[int, ...] = field(default_factory=_parse_prompt_thresholds)
    complete_on_shoe_end: bool = field(
        default_factory=lambda: os.getenv("COMPLETE_ON_SHOE_END", "false").lower() == "true"
    )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    session_ttl: int = 3600  # Session timeout in seconds

    redis: RedisConfig = field(default_factory=RedisConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    training: TrainingConfig = field(default_factory=TrainingConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()
