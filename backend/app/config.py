from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = ".gmn-news"
_BOOLEAN_COERCION_FIELDS: tuple[str, ...] = ("telemetry_enabled",)
_REQUIRED_TEXT_FIELDS: tuple[str, ...] = (
    "gamespot_api_base_url",
    "site_display_name",
    "listing_user_agent",
    "reader_user_agent",
)


def _resolve_path(value: str | Path) -> Path:
    return Path(value).expanduser().resolve()


def _parse_bool_with_default(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value == 1:
            return True
        if value == 0:
            return False
        return default
    if not isinstance(value, str):
        return default

    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _normalize_optional_text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if normalized:
        return normalized
    return None


class AppSettings(BaseSettings):
    """
    Canonical runtime configuration.

    Options come from `GMN_NEWS_*` environment variables (or `.env`). The two
    settings the original deployment read directly, `GAMESPOT_API_KEY` and
    `PORT`, are still honoured as fallbacks.
    """

    model_config = SettingsConfigDict(
        env_prefix="GMN_NEWS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Upstream content API.
    gamespot_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GMN_NEWS_GAMESPOT_API_KEY", "GAMESPOT_API_KEY"),
        description="GameSpot API credential sent as `api_key` on listing requests.",
    )
    gamespot_api_base_url: str = Field(
        default="https://www.gamespot.com/api/articles/",
        description="GameSpot article-listing endpoint.",
    )
    trusted_domain: str = Field(
        default="gamespot.com",
        description="Only article URLs on this domain (or its subdomains) are read.",
    )
    site_display_name: str = Field(
        default="GameSpot",
        description="Site name used when extraction does not find one.",
    )
    listing_user_agent: str = Field(
        default="GMN-News/1.0 (+local-dev)",
        description="User-Agent sent to the listing API.",
    )
    reader_user_agent: str = Field(
        default="GMN-Reader/1.0 (+local-dev)",
        description="User-Agent sent when fetching article pages for reading mode.",
    )
    default_page_size: int = Field(
        default=20,
        ge=0,
        description="Listing page size used when the caller does not pass `limit`.",
    )
    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Outbound HTTP timeout. Unset leaves it to the socket default.",
    )

    # Server.
    host: str = Field(default="0.0.0.0", description="Bind address for the API server.")
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("GMN_NEWS_PORT", "PORT"),
        description="Listen port for the API server.",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by CORS. `*` reflects any origin.",
    )

    # Logging.
    log_dir: Path = Field(
        default=Path(DEFAULT_DATA_DIR) / "logs",
        description="Directory for backend log files.",
    )
    log_level: str = Field(
        default="INFO",
        description="Console log level (stdout).",
    )

    # Telemetry.
    telemetry_enabled: bool = Field(
        default=True,
        description="Enable lightweight internal telemetry events.",
    )
    telemetry_sink: Literal["none", "log"] = Field(
        default="log",
        description=(
            "Telemetry sink backend. `log` emits structured telemetry locally; "
            "`none` disables sink output."
        ),
    )

    @field_validator("telemetry_sink", mode="before")
    @classmethod
    def _normalize_telemetry_sink(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("GMN_NEWS_TELEMETRY_SINK must be a string.")
        normalized = value.strip().lower()
        if normalized in {"none", "log"}:
            return normalized
        raise ValueError("GMN_NEWS_TELEMETRY_SINK must be set to: none, log.")

    @field_validator("trusted_domain", mode="before")
    @classmethod
    def _normalize_trusted_domain(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("GMN_NEWS_TRUSTED_DOMAIN must be a string.")
        normalized = value.strip().lower().lstrip(".")
        if not normalized:
            raise ValueError("GMN_NEWS_TRUSTED_DOMAIN must not be empty.")
        return normalized

    @field_validator(*_REQUIRED_TEXT_FIELDS, mode="before")
    @classmethod
    def _normalize_required_text(cls, value: Any, info: ValidationInfo) -> str:
        field_name = info.field_name
        assert field_name is not None
        env_name = f"GMN_NEWS_{field_name.upper()}"
        if not isinstance(value, str):
            raise ValueError(f"{env_name} must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError(f"{env_name} must not be empty.")
        return normalized

    @field_validator("log_dir", mode="before")
    @classmethod
    def _normalize_log_dir(cls, value: Any) -> Any:
        if value is None:
            return None
        return _resolve_path(value)

    @field_validator(*_BOOLEAN_COERCION_FIELDS, mode="before")
    @classmethod
    def _normalize_booleans(cls, value: Any, info: ValidationInfo) -> bool:
        field_name = info.field_name
        assert field_name is not None
        default_value = cls.model_fields[field_name].default
        assert isinstance(default_value, bool)
        return _parse_bool_with_default(value, default=default_value)

    @field_validator("gamespot_api_key", mode="before")
    @classmethod
    def _normalize_optional_strings(cls, value: Any) -> str | None:
        return _normalize_optional_text(value)

    @field_validator("http_timeout_seconds", mode="before")
    @classmethod
    def _normalize_timeout(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def load_settings() -> AppSettings:
    settings = AppSettings()
    return settings.model_copy(update={"log_dir": _resolve_path(settings.log_dir)})
