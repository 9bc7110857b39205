import logging
from http import HTTPMethod
from typing import Optional

import httpx

from src.common.errors import TransportError
from src.utils.httpx_manager.httpx_manager import HTTPXManager
from src.utils.schemas import FileData, UpstreamResponse

logger = logging.getLogger(__name__)


class PicInThFacade:
    """Uploads images to pic.in.th and hands the reply back untouched."""

    def __init__(
        self, http: HTTPXManager, api_url: str, api_key: Optional[str] = None
    ) -> None:
        self.http = http
        self.api_url = api_url
        self.api_key = api_key

    def build_form(self, file: FileData) -> tuple[dict, dict]:
        # pic.in.th takes the binary as "source"
        files = {"source": (file.filename, file.content, file.content_type)}
        data = {"format": "json"}
        if self.api_key:
            # Form field rather than header, so browsers skip the CORS preflight
            data["key"] = self.api_key
        return files, data

    async def upload(self, file: FileData) -> UpstreamResponse:
        files, data = self.build_form(file)
        try:
            response = await self.http.async_request(
                url=self.api_url,
                method=HTTPMethod.POST,
                files=files,
                data=data,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

        logger.info(
            "pic.in.th answered %s for %s (%d bytes)",
            response.status_code,
            file.filename,
            file.size,
        )
        return UpstreamResponse(
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("content-type"),
        )
