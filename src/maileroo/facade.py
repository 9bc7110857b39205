import json
import logging
from http import HTTPMethod

import httpx

from src.common.errors import ConfigurationError, TransportError, UpstreamError
from src.common.settings import Settings
from src.fastapi_app.schemas import MailRequest
from src.maileroo.schemas import MailerooAddress, MailerooPayload
from src.utils.httpx_manager.httpx_manager import HTTPXManager
from src.utils.utils import text_to_html

logger = logging.getLogger(__name__)


def ensure_configured(settings: Settings) -> None:
    """Raise ConfigurationError unless the API key and sender are both set"""
    if not settings.MAILEROO_API_KEY:
        raise ConfigurationError(
            "MAILEROO_API_KEY", "Add MAILEROO_API_KEY to the .env file."
        )
    if not settings.MAIL_FROM_ADDRESS:
        raise ConfigurationError(
            "MAIL_FROM_ADDRESS",
            "Add MAIL_FROM_ADDRESS to the .env file, e.g. no-reply@example.maileroo.org",
        )


def format_body(body: str) -> str:
    """Pretty-print JSON error bodies, leave anything else as it came"""
    try:
        return json.dumps(json.loads(body), indent=2, ensure_ascii=False)
    except ValueError:
        return body


class MailerooFacade:
    def __init__(self, http: HTTPXManager, settings: Settings) -> None:
        self.http = http
        self.settings = settings

    def build_payload(self, mail: MailRequest) -> MailerooPayload:
        return MailerooPayload(
            from_=MailerooAddress(
                address=self.settings.MAIL_FROM_ADDRESS,
                display_name=self.settings.MAIL_FROM_NAME,
            ),
            to=[MailerooAddress(address=mail.to)],
            subject=mail.subject,
            html=text_to_html(mail.message),
            plain=mail.message,
            tracking=self.settings.MAILEROO_TRACKING,
        )

    async def send(self, mail: MailRequest) -> None:
        ensure_configured(self.settings)
        payload = self.build_payload(mail)
        try:
            response = await self.http.async_request(
                url=self.settings.MAILEROO_API_URL,
                method=HTTPMethod.POST,
                headers={"Authorization": f"Bearer {self.settings.MAILEROO_API_KEY}"},
                json=payload.model_dump(by_alias=True, exclude_none=True),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

        if not response.is_success:
            raise UpstreamError(response.status_code, format_body(response.text))
        logger.info("Maileroo accepted mail to %s (%s)", mail.to, response.status_code)
