from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.app.dependencies import reset_cached_dependencies
from backend.app.main import create_app

ARTICLE_URL = "https://www.gamespot.com/articles/elden-ring-dlc-review/1100-6524000/"

ARTICLE_PAGE_HTML = """
<!DOCTYPE html>
<html>
  <head>
    <title>Elden Ring DLC Review - GameSpot</title>
    <meta property="og:title" content="Elden Ring DLC Review">
    <meta property="og:site_name" content="GameSpot">
    <meta property="og:image" content="https://www.gamespot.com/a/uploads/original/elden.jpg">
    <meta name="twitter:image" content="https://www.gamespot.com/a/uploads/twitter/elden.jpg">
    <meta name="author" content="Jane Reviewer">
    <meta name="description" content="Shadow of the Erdtree is a triumphant expansion.">
    <script>window.tracking = true;</script>
  </head>
  <body>
    <nav><a href="/news/">News</a> | <a href="/reviews/">Reviews</a></nav>
    <article class="article-body">
      <h1>Elden Ring DLC Review</h1>
      <p>Shadow of the Erdtree drops you into the Land of Shadow, a sprawling region that
      rewards curiosity at every turn, with hidden catacombs, ruined churches, and bosses that
      demand patience, precision, and a willingness to die over and over again.</p>
      <p>The expansion keeps the open structure of the base game while tightening its
      encounter design, and the new weapon classes, including thrusting shields and martial
      arts, give returning players plenty of reasons to rethink their builds.
      <a href="/reviews/elden-ring-review/1900-6417000/">Read our original review</a>.</p>
      <p>Performance is solid on current consoles, although the frame rate dips in the
      busiest open areas, and a handful of late fights lean too heavily on visual noise,
      making them feel more chaotic than challenging for even veteran players.</p>
      <figure>
        <img src="/a/uploads/screen_kubrick/elden-1.jpg" alt="Land of Shadow" onerror="alert(1)">
        <figcaption>The Land of Shadow, seen from the Gravesite Plain.</figcaption>
      </figure>
    </article>
    <footer>Copyright GameSpot</footer>
  </body>
</html>
""".strip()


@pytest.fixture
def settings_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_dir = tmp_path / "runtime-data"
    data_dir.mkdir(parents=True, exist_ok=True)
    for name in ("GAMESPOT_API_KEY", "PORT", "GMN_NEWS_PORT", "GMN_NEWS_GAMESPOT_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GMN_NEWS_LOG_DIR", str(data_dir / "logs"))
    monkeypatch.setenv("GMN_NEWS_GAMESPOT_API_KEY", "test-gamespot-key")
    monkeypatch.setenv("GMN_NEWS_TELEMETRY_SINK", "none")
    reset_cached_dependencies()
    return data_dir


@pytest.fixture
def client(settings_env: Path) -> Iterator[TestClient]:
    _ = settings_env
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client

    reset_cached_dependencies()
