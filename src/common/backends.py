from typing import Protocol

from src.fastapi_app.schemas import MailRequest
from src.utils.schemas import FileData, UpstreamResponse


class UploadBackend(Protocol):
    async def upload(self, file: FileData) -> UpstreamResponse:
        """Forward one file. Any upstream status is returned, not raised."""
        ...


class MailBackend(Protocol):
    async def send(self, mail: MailRequest) -> None:
        """Deliver one message or raise a RelayError subclass."""
        ...
