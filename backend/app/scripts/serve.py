from __future__ import annotations

import argparse

import uvicorn

from backend.app.config import load_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the GMN News API server.")
    parser.add_argument("--host", default=None, help="Bind address (default: GMN_NEWS_HOST).")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listen port (default: GMN_NEWS_PORT, then PORT, then 3000).",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (local development only).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = load_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    print(f"API listening -> http://localhost:{port}")
    uvicorn.run(
        "backend.app.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
