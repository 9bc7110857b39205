import asyncio

import httpx
import pytest

from src.common.errors import TransportError
from src.picinth.facade import PicInThFacade
from src.utils.schemas import FileData

from conftest import RecordingTransport

API_URL = "https://pic.in.th/api/1/upload"


def _file(**overrides):
    data = dict(filename="photo.jpg", content_type="image/jpeg", content=b"jpeg-bytes", size=10)
    data.update(overrides)
    return FileData(**data)


def test_form_includes_key_when_configured():
    transport = RecordingTransport(response=httpx.Response(200, json={"status_code": 200}))
    facade = PicInThFacade(transport.manager(), API_URL, api_key="secret")

    result = asyncio.run(facade.upload(_file()))

    assert result.status_code == 200
    assert result.json_body() == {"status_code": 200}
    request = transport.requests[0]
    assert request.method == "POST"
    assert str(request.url) == API_URL
    assert request.headers["content-type"].startswith("multipart/form-data")
    body = request.content
    assert b'name="source"; filename="photo.jpg"' in body
    assert b"Content-Type: image/jpeg" in body
    assert b"jpeg-bytes" in body
    assert b'name="format"\r\n\r\njson' in body
    assert b'name="key"\r\n\r\nsecret' in body


def test_form_omits_key_when_missing():
    facade = PicInThFacade(RecordingTransport().manager(), API_URL, api_key=None)
    files, data = facade.build_form(_file())
    assert data == {"format": "json"}
    assert files["source"] == ("photo.jpg", b"jpeg-bytes", "image/jpeg")


def test_error_status_is_returned_not_raised():
    transport = RecordingTransport(
        response=httpx.Response(429, text="slow down", headers={"content-type": "text/plain"})
    )
    facade = PicInThFacade(transport.manager(), API_URL)

    result = asyncio.run(facade.upload(_file()))

    assert result.status_code == 429
    assert result.text == "slow down"
    assert result.json_body() is None
    assert len(transport.requests) == 1


def test_network_failure_raises_transport_error():
    transport = RecordingTransport(error=httpx.ConnectError("connection refused"))
    facade = PicInThFacade(transport.manager(), API_URL)

    with pytest.raises(TransportError, match="connection refused"):
        asyncio.run(facade.upload(_file()))
    assert len(transport.requests) == 1
