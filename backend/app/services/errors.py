from __future__ import annotations


class NewsProxyError(Exception):
    """Base for failures that end a request with a JSON `{"error": ...}` body.

    `public_message` is what the caller sees; `str(exc)` may carry more detail
    and only goes to the logs.
    """

    status_code = 500

    def __init__(self, public_message: str, *, detail: str | None = None) -> None:
        super().__init__(detail or public_message)
        self.public_message = public_message


class InputValidationError(NewsProxyError):
    status_code = 400


class UpstreamError(NewsProxyError):
    status_code = 502

    def __init__(self, upstream_status: int, *, url: str | None = None) -> None:
        super().__init__(
            f"Upstream {upstream_status}",
            detail=f"upstream returned status={upstream_status} url={url}",
        )
        self.upstream_status = upstream_status


class ExtractionError(NewsProxyError):
    status_code = 500


class InternalError(NewsProxyError):
    status_code = 500
