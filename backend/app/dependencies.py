from __future__ import annotations

from functools import lru_cache

from backend.app.config import AppSettings, load_settings
from backend.app.services.listing_service import ArticleListingService
from backend.app.services.reader_service import ArticleReaderService
from backend.app.telemetry import TelemetryClient, build_telemetry_client


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()


@lru_cache(maxsize=1)
def get_listing_service() -> ArticleListingService:
    settings = get_settings()
    return ArticleListingService(
        api_base_url=settings.gamespot_api_base_url,
        api_key=settings.gamespot_api_key,
        user_agent=settings.listing_user_agent,
        default_limit=settings.default_page_size,
        http_timeout_seconds=settings.http_timeout_seconds,
        telemetry=get_telemetry(),
    )


@lru_cache(maxsize=1)
def get_reader_service() -> ArticleReaderService:
    settings = get_settings()
    return ArticleReaderService(
        trusted_domain=settings.trusted_domain,
        site_display_name=settings.site_display_name,
        user_agent=settings.reader_user_agent,
        http_timeout_seconds=settings.http_timeout_seconds,
        telemetry=get_telemetry(),
    )


@lru_cache(maxsize=1)
def get_telemetry() -> TelemetryClient:
    settings = get_settings()
    return build_telemetry_client(
        enabled=settings.telemetry_enabled,
        sink=settings.telemetry_sink,
    )


def reset_cached_dependencies() -> None:
    get_listing_service.cache_clear()
    get_reader_service.cache_clear()
    get_telemetry.cache_clear()
    get_settings.cache_clear()
