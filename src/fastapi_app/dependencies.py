from fastapi import Request

from src.common.backends import MailBackend, UploadBackend
from src.common.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upload_backend(request: Request) -> UploadBackend:
    return request.app.state.upload_backend


def get_maileroo_backend(request: Request) -> MailBackend:
    return request.app.state.maileroo_backend


def get_smtp_backend(request: Request) -> MailBackend:
    return request.app.state.smtp_backend
