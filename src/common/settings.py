from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


STATIC_DIR = Path(__file__).resolve().parent.parent / "fastapi_app" / "public"


class Settings(BaseSettings):
    PIC_API_URL: str = Field(
        default="https://pic.in.th/api/1/upload",
        description="pic.in.th upload endpoint",
    )
    PIC_API_KEY: Optional[str] = Field(
        default=None,
        description="pic.in.th API key, sent as the 'key' form field",
    )
    MAILEROO_API_URL: str = Field(
        default="https://smtp.maileroo.com/api/v2/emails",
        description="Maileroo send endpoint",
    )
    MAILEROO_API_KEY: Optional[str] = Field(
        default=None,
        description="Maileroo API key (bearer token)",
    )
    MAILEROO_TRACKING: bool = Field(
        default=True,
        description="Ask Maileroo to track opens and clicks",
    )
    MAIL_FROM_ADDRESS: Optional[str] = Field(
        default=None,
        description="Sender address for Maileroo mail",
    )
    MAIL_FROM_NAME: str = Field(
        default="My-Web",
        description="Sender display name for Maileroo mail",
    )
    MAIL_USER: Optional[str] = Field(
        default=None,
        description="SMTP account, also used as the sender address",
    )
    MAIL_PASS: Optional[str] = Field(
        default=None,
        description="SMTP password (Gmail app password)",
    )
    SMTP_HOST: str = Field(default="smtp.gmail.com")
    SMTP_PORT: int = Field(default=465)
    SMTP_DISPLAY_NAME: str = Field(default="My-Web")
    SMTP_TIMEOUT: float = Field(
        default=30,
        description="SMTP socket timeout in seconds",
    )
    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted upload",
    )
    ENABLE_LEGACY_ROUTES: bool = Field(
        default=True,
        description="Also serve /upload, /send-mail and /api/send-mail",
    )
    STATIC_DIR: Path = Field(default=STATIC_DIR)
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    LOG_LEVEL: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        frozen = True
