import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from starlette.concurrency import run_in_threadpool

from src.common.errors import ConfigurationError, InvalidRequest, TransportError
from src.common.settings import Settings
from src.fastapi_app.schemas import MailRequest

logger = logging.getLogger(__name__)


def ensure_configured(settings: Settings) -> None:
    """Raise ConfigurationError unless the SMTP account and password are set"""
    if not settings.MAIL_USER:
        raise ConfigurationError("MAIL_USER", "Add MAIL_USER to the .env file.")
    if not settings.MAIL_PASS:
        raise ConfigurationError("MAIL_PASS", "Add MAIL_PASS to the .env file.")


class SMTPMailFacade:
    """Plain-text mail over a fresh SMTP-over-TLS session per message."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build_message(self, mail: MailRequest) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((self.settings.SMTP_DISPLAY_NAME, self.settings.MAIL_USER))
        msg["To"] = mail.to
        msg["Subject"] = mail.subject
        msg.set_content(mail.message)
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        with smtplib.SMTP_SSL(
            self.settings.SMTP_HOST,
            self.settings.SMTP_PORT,
            timeout=self.settings.SMTP_TIMEOUT,
        ) as server:
            server.login(self.settings.MAIL_USER, self.settings.MAIL_PASS)
            server.send_message(msg)

    async def send(self, mail: MailRequest) -> None:
        ensure_configured(self.settings)
        try:
            msg = self.build_message(mail)
        except ValueError as e:
            # Header values with line breaks are refused by EmailMessage
            raise InvalidRequest(str(e)) from e
        try:
            await run_in_threadpool(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(str(e) or e.__class__.__name__) from e
        logger.info("Sent mail to %s via %s", mail.to, self.settings.SMTP_HOST)
