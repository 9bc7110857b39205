import json
from typing import Any, Optional

from pydantic import BaseModel


class FileData(BaseModel):
    filename: str
    content_type: str
    content: bytes
    size: int


class UpstreamResponse(BaseModel):
    status_code: int
    content: bytes = b""
    content_type: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json_body(self) -> Optional[Any]:
        """Decoded JSON body, or None when the body is not JSON"""
        if not self.content:
            return None
        try:
            return json.loads(self.content)
        except ValueError:
            return None
