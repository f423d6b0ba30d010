from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from structlog.contextvars import bind_contextvars, reset_contextvars

from backend.app.dependencies import get_listing_service, get_reader_service
from backend.app.models.article_contracts import (
    ArticleListResponse,
    ErrorResponse,
    ReaderDocument,
)
from backend.app.services.listing_service import ArticleListingService
from backend.app.services.reader_service import ArticleReaderService

router = APIRouter(prefix="/api")

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid or disallowed input."},
    500: {"model": ErrorResponse, "description": "Parsing or unexpected failure."},
    502: {"model": ErrorResponse, "description": "Upstream returned a non-success status."},
}


@router.get(
    "/articles",
    response_model=ArticleListResponse,
    responses=_ERROR_RESPONSES,
    tags=["articles"],
    operation_id="list_articles",
)
def list_articles(
    service: Annotated[ArticleListingService, Depends(get_listing_service)],
    limit: Annotated[int | None, Query(ge=0)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> ArticleListResponse:
    context_tokens = bind_contextvars(listing_limit=limit, listing_offset=offset)
    try:
        return service.list_articles(limit=limit, offset=offset)
    finally:
        reset_contextvars(**context_tokens)


@router.get(
    "/article",
    response_model=ReaderDocument,
    responses=_ERROR_RESPONSES,
    tags=["reader"],
    operation_id="read_article",
)
def read_article(
    service: Annotated[ArticleReaderService, Depends(get_reader_service)],
    url: Annotated[str | None, Query(max_length=2048)] = None,
) -> ReaderDocument:
    context_tokens = bind_contextvars(reader_url=url)
    try:
        return service.read_article(url)
    finally:
        reset_contextvars(**context_tokens)
