from __future__ import annotations

import socket
from dataclasses import dataclass
from http.client import HTTPException
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: bytes
    charset: str | None

    def text(self) -> str:
        try:
            return self.body.decode(self.charset or "utf-8", errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


class HttpStatusError(Exception):
    def __init__(self, status: int, url: str) -> None:
        super().__init__(f"http_{status} url={url}")
        self.status = status
        self.url = url


class HttpTransportError(Exception):
    pass


def http_get(
    url: str,
    *,
    headers: dict[str, str],
    timeout_seconds: float | None = None,
) -> HttpResponse:
    """Single-shot GET. Non-2xx raises HttpStatusError, everything else HttpTransportError.

    http.client rejects some URLs (spaces, non-ASCII paths) and truncated or
    malformed responses with HTTPException or ValueError rather than OSError.
    """
    timeout = socket.getdefaulttimeout() if timeout_seconds is None else timeout_seconds
    try:
        request = Request(url, headers=headers, method="GET")
        with urlopen(request, timeout=timeout) as response:
            status = int(getattr(response, "status", 200))
            charset = response.headers.get_content_charset()
            body = response.read()
    except HTTPError as exc:
        raise HttpStatusError(int(exc.code), url) from exc
    except (URLError, TimeoutError, OSError) as exc:
        reason = getattr(exc, "reason", None) or exc
        raise HttpTransportError(f"network_error:{type(exc).__name__} {reason}") from exc
    except (HTTPException, ValueError) as exc:
        raise HttpTransportError(f"protocol_error:{type(exc).__name__} {exc}") from exc

    if not 200 <= status < 300:
        raise HttpStatusError(status, url)
    return HttpResponse(status=status, body=body, charset=charset)
