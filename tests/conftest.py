import httpx
import pytest
from fastapi.testclient import TestClient

from src.common.settings import Settings
from src.fastapi_app.main import create_app
from src.utils.httpx_manager.httpx_manager import HTTPXManager
from src.utils.schemas import UpstreamResponse


class StubUploadBackend:
    def __init__(self, response=None, error=None):
        self.response = response or UpstreamResponse(
            status_code=200,
            content=b'{"status_code": 200, "image": {"url": "https://img.in.th/x.png"}}',
            content_type="application/json",
        )
        self.error = error
        self.calls = []

    async def upload(self, file):
        self.calls.append(file)
        if self.error:
            raise self.error
        return self.response


class StubMailBackend:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def send(self, mail):
        self.calls.append(mail)
        if self.error:
            raise self.error


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        PIC_API_KEY="pic-test-key",
        MAILEROO_API_KEY="maileroo-test-key",
        MAIL_FROM_ADDRESS="no-reply@example.maileroo.org",
        MAIL_FROM_NAME="My-Web",
        MAIL_USER="me@gmail.com",
        MAIL_PASS="app-password",
        MAX_UPLOAD_BYTES=1024,
    )


@pytest.fixture
def upload_backend():
    return StubUploadBackend()


@pytest.fixture
def maileroo_backend():
    return StubMailBackend()


@pytest.fixture
def smtp_backend():
    return StubMailBackend()


@pytest.fixture
def client(settings, upload_backend, maileroo_backend, smtp_backend):
    app = create_app(
        settings,
        upload_backend=upload_backend,
        maileroo_backend=maileroo_backend,
        smtp_backend=smtp_backend,
    )
    with TestClient(app) as c:
        yield c


class RecordingTransport:
    """httpx.MockTransport handler that keeps every request it sees"""

    def __init__(self, response=None, error=None):
        self.response = response or httpx.Response(200, json={"ok": True})
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.response

    def manager(self) -> HTTPXManager:
        return HTTPXManager(transport=httpx.MockTransport(self))
