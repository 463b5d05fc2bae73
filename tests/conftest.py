import sys
from pathlib import Path

import anyio
import httpx
import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from app.core.config import AppSettings, DatabaseSettings, ServerSettings, Settings
from app.core.db import ConnectionPool
from app.main import create_app

INDEX_HTML = """<!doctype html>
<html>
<body>
<div id="appHeader"></div>
<section id="hero">Hero</section>
<div id="appFooter"></div>
</body>
</html>
"""


@pytest.fixture()
def public_dir(tmp_path):
    root = tmp_path / "public"
    (root / "partials").mkdir(parents=True)
    (root / "images").mkdir()
    (root / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (root / "partials" / "header.html").write_text("<header>Site header</header>", encoding="utf-8")
    (root / "partials" / "footer.html").write_text("<footer>Site footer</footer>", encoding="utf-8")
    return root


def make_settings(tmp_path, public_dir, **app_overrides) -> Settings:
    app_values = {"public_dir": public_dir, "rate_limit_requests": 1000}
    app_values.update(app_overrides)
    return Settings(
        server=ServerSettings(session_secret="test-secret"),
        db=DatabaseSettings(
            host="localhost",
            user="test",
            database="test",
            url="sqlite:///" + str(tmp_path / "test.db"),
        ),
        app=AppSettings(**app_values),
    )


@pytest.fixture()
def settings(tmp_path, public_dir):
    return make_settings(tmp_path, public_dir)


@pytest.fixture()
def pool(settings):
    pool = ConnectionPool(settings.database_url, connection_limit=5)
    pool.create_all()
    yield pool
    pool.dispose()


class SyncASGIClient:
    def __init__(self, asgi_app):
        self.app = asgi_app
        self._client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=asgi_app),
            base_url="http://testserver",
        )

    def request(self, method: str, url: str, **kwargs):
        async def _do_request():
            return await self._client.request(method, url, **kwargs)

        return anyio.run(_do_request)

    def get(self, url: str, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs):
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs):
        return self.request("PUT", url, **kwargs)

    def delete(self, url: str, **kwargs):
        return self.request("DELETE", url, **kwargs)

    def close(self):
        async def _do_close():
            await self._client.aclose()

        anyio.run(_do_close)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


@pytest.fixture()
def make_client():
    clients: list[SyncASGIClient] = []

    def _make(settings: Settings, pool: ConnectionPool) -> SyncASGIClient:
        test_client = SyncASGIClient(create_app(settings, pool))
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        test_client.close()


@pytest.fixture()
def client(make_client, settings, pool):
    return make_client(settings, pool)


@pytest.fixture()
def settings_factory(tmp_path, public_dir):
    def _make(**app_overrides) -> Settings:
        return make_settings(tmp_path, public_dir, **app_overrides)

    return _make
