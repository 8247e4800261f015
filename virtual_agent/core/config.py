"""Application settings and configuration helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly-typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = Field(default="Product Virtual Agent", description="Human-readable service name.")
    environment: str = Field(default="local", description="Deployment environment identifier.")
    log_level: str = Field(default="INFO", description="Application log level.")

    catalog_api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the product catalog REST API.",
    )
    specifications_path: str = Field(
        default="product-specifications",
        description="Collection path for product specifications.",
    )
    offerings_path: str = Field(
        default="product-offerings",
        description="Collection path for product offerings.",
    )
    gateway_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Catalog request timeout. Unset means requests never time out.",
    )

    default_mode: Literal["structured", "assistant"] = Field(
        default="structured",
        description="Chat mode used for sessions started implicitly through /chat.",
    )

    max_sessions: int | None = Field(
        default=1000,
        ge=1,
        description="Upper bound on live chat sessions; least recently used idle sessions are evicted first.",
    )
    session_idle_ttl_seconds: float | None = Field(
        default=3600.0,
        gt=0,
        description="Idle time after which a chat session is discarded. Unset keeps sessions until deleted.",
    )

    gemini_api_key: str | None = Field(default=None, description="Optional Google AI API key.")
    gemini_model: str = Field(default="gemini-2.0-flash", description="Generative model identifier.")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language API base URL.",
    )
    gemini_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        description="Timeout for generative assistant calls.",
    )

    frontend_origin: AnyHttpUrl | None = Field(
        default=None,
        description="Allowed frontend origin (CORS). If omitted, defaults to localhost dev server.",
    )
    additional_origins: List[AnyHttpUrl] = Field(
        default_factory=list,
        description="Additional allowed CORS origins for multi-client deployments.",
    )

    @property
    def cors_origins(self) -> list[str]:
        """Return the allowed CORS origins, defaulting to the local widget dev server."""

        primary = str(self.frontend_origin) if self.frontend_origin else "http://localhost:5173"
        origins = [primary, *(str(origin) for origin in self.additional_origins)]
        return list(dict.fromkeys(origin.rstrip("/") for origin in origins))

    @property
    def assistant_enabled(self) -> bool:
        return bool(self.gemini_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()
