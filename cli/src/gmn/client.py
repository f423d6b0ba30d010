"""Thin HTTP client for the GMN News API."""

import json
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

USER_AGENT = "gmn-cli/1.0"


class ApiError(Exception):
    """A failed API call, remembering which URL was attempted."""

    def __init__(self, message: str, request_url: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.request_url = request_url
        self.status = status


class NewsApiClient:
    def __init__(self, articles_endpoint: str, reader_endpoint: str, timeout: float = 30.0):
        self.articles_endpoint = articles_endpoint
        self.reader_endpoint = reader_endpoint
        self.timeout = timeout
        self.last_request_url: str | None = None

    def list_articles(self, limit: int, offset: int) -> dict:
        return self._get_json(self.articles_endpoint, {"limit": limit, "offset": offset})

    def read_article(self, url: str) -> dict:
        return self._get_json(self.reader_endpoint, {"url": url})

    def _get_json(self, endpoint: str, params: dict) -> dict:
        request_url = f"{endpoint}?{urlencode(params)}"
        self.last_request_url = request_url
        request = Request(request_url, headers={"Accept": "application/json", "User-Agent": USER_AGENT})
        try:
            with urlopen(request, timeout=self.timeout) as response:
                raw = response.read().decode("utf-8", errors="replace")
        except HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace") if exc.fp else ""
            raise ApiError(_error_message(body) or f"HTTP {exc.code}", request_url, exc.code) from exc
        except URLError as exc:
            raise ApiError(f"Connection failed: {exc.reason}", request_url) from exc

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ApiError("Response was not JSON", request_url) from exc
        if not isinstance(payload, dict):
            raise ApiError("Unexpected response shape", request_url)
        return payload


def _error_message(body: str) -> str | None:
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return None
