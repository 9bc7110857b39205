import logging

from fastapi.testclient import TestClient
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from src.fastapi_app.main import create_app
from src.fastapi_app.middleware import UploadSizeLimitMiddleware


def test_index_page(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert "/upload.html" in r.text


def test_static_pages(client):
    for page in ("/upload.html", "/mail.html", "/maileroo.html"):
        r = client.get(page)
        assert r.status_code == 200, page


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_startup_warns_about_missing_keys(settings, caplog):
    unset = settings.model_copy(update={"PIC_API_KEY": None, "MAILEROO_API_KEY": None})
    with caplog.at_level(logging.WARNING):
        with TestClient(create_app(unset)) as c:
            assert c.get("/health").status_code == 200
    assert "PIC_API_KEY not set" in caplog.text
    assert "MAILEROO_API_KEY not set" in caplog.text


def test_no_warning_when_keys_present(settings, caplog):
    with caplog.at_level(logging.WARNING):
        with TestClient(create_app(settings)):
            pass
    assert "not set" not in caplog.text


def test_size_limit_middleware_stops_before_endpoint():
    reached = []

    async def endpoint(request):
        reached.append(True)
        await request.body()
        return PlainTextResponse("ok")

    app = Starlette(routes=[Route("/upload", endpoint, methods=["POST"])])
    app.add_middleware(UploadSizeLimitMiddleware, max_upload_bytes=10, paths={"/upload"})

    with TestClient(app) as c:
        r = c.post("/upload", content=b"x" * (100 * 1024))
        small = c.post("/upload", content=b"x" * 5)

    assert r.status_code == 413
    assert r.json() == {"error": "file_too_large", "limit": 10}
    assert small.status_code == 200
    assert reached == [True]


def test_create_app_sets_up_logging(settings, monkeypatch):
    levels = []
    monkeypatch.setattr("src.fastapi_app.main.setup_logging", levels.append)

    create_app(settings.model_copy(update={"LOG_LEVEL": "DEBUG"}))

    assert levels == ["DEBUG"]


def test_size_limit_middleware_counts_chunked_bodies():
    reached = []

    async def endpoint(request):
        reached.append(True)
        await request.body()
        return PlainTextResponse("ok")

    app = Starlette(routes=[Route("/upload", endpoint, methods=["POST"])])
    app.add_middleware(UploadSizeLimitMiddleware, max_upload_bytes=10, paths={"/upload"})

    def chunks():
        for _ in range(20):
            yield b"x" * 8192

    with TestClient(app) as c:
        r = c.post("/upload", content=chunks())

    assert r.status_code == 413
    assert r.json() == {"error": "file_too_large", "limit": 10}
