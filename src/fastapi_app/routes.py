import logging
from pathlib import Path
from typing import Callable, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from src.common.backends import MailBackend, UploadBackend
from src.common.errors import (
    ConfigurationError,
    InvalidRequest,
    TransportError,
    UpstreamError,
)
from src.common.settings import Settings
from src.fastapi_app.dependencies import (
    get_maileroo_backend,
    get_settings,
    get_smtp_backend,
    get_upload_backend,
)
from src.fastapi_app.services import read_mail_request, upstream_to_response
from src.maileroo.facade import ensure_configured as ensure_maileroo_configured
from src.smtp_mail.facade import ensure_configured as ensure_smtp_configured
from src.utils.utils import read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
# Older form targets, registered only when ENABLE_LEGACY_ROUTES is on
legacy_router = APIRouter()

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")


@legacy_router.post("/upload")
@router.post("/upload")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
    backend: UploadBackend = Depends(get_upload_backend),
) -> Response:
    """Forward one image to pic.in.th and mirror its answer"""
    # Browsers send an empty, nameless part when no file was picked
    if file is None or (not file.filename and not file.size):
        return JSONResponse(content={"error": "no_file"}, status_code=400)

    # Checked on the spooled part so an oversized file is never read into memory
    if file.size is not None and file.size > settings.MAX_UPLOAD_BYTES:
        return JSONResponse(
            content={"error": "file_too_large", "limit": settings.MAX_UPLOAD_BYTES},
            status_code=413,
        )

    file_data = await read_upload(file)

    try:
        upstream = await backend.upload(file_data)
    except TransportError as e:
        logger.exception("Upload proxy error")
        return JSONResponse(
            content={"error": "proxy_error", "detail": str(e)}, status_code=500
        )
    return upstream_to_response(upstream)


def render_mail_error(
    request: Request,
    title: str,
    status_code: int,
    detail: Optional[str] = None,
    hint: Optional[str] = None,
    show_status: bool = False,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "mail_error.html",
        {
            "title": title,
            "status_code": status_code if show_status else None,
            "detail": detail,
            "hint": hint,
        },
        status_code=status_code,
    )


async def relay_mail(
    request: Request,
    backend: MailBackend,
    provider: str,
    precheck: Optional[Callable[[], None]] = None,
) -> HTMLResponse:
    try:
        if precheck:
            precheck()
        mail = await read_mail_request(request)
        await backend.send(mail)
    except ConfigurationError as e:
        logger.warning("%s relay is not configured: %s", provider, e)
        return render_mail_error(request, f"{e.setting} is not set", 500, hint=e.hint)
    except InvalidRequest as e:
        return render_mail_error(request, "Invalid mail request", 400, detail=str(e))
    except UpstreamError as e:
        logger.error("%s API error: %s %s", provider, e.status_code, e.body)
        return render_mail_error(
            request,
            f"{provider} API responded with an error",
            e.status_code,
            detail=e.body,
            show_status=True,
        )
    except TransportError as e:
        logger.exception("%s request failed", provider)
        return render_mail_error(
            request, f"Could not send mail via {provider}", 500, detail=str(e)
        )

    return templates.TemplateResponse(
        request, "mail_sent.html", {"provider": provider, "to": mail.to}
    )


@router.post("/send-mail-maileroo", response_class=HTMLResponse)
async def send_mail_maileroo(
    request: Request,
    settings: Settings = Depends(get_settings),
    backend: MailBackend = Depends(get_maileroo_backend),
) -> HTMLResponse:
    return await relay_mail(
        request, backend, "Maileroo", precheck=lambda: ensure_maileroo_configured(settings),
    )


@legacy_router.post("/send-mail", response_class=HTMLResponse)
@legacy_router.post("/api/send-mail", response_class=HTMLResponse)
async def send_mail_smtp(
    request: Request,
    settings: Settings = Depends(get_settings),
    backend: MailBackend = Depends(get_smtp_backend),
) -> HTMLResponse:
    return await relay_mail(
        request, backend, "Gmail SMTP", precheck=lambda: ensure_smtp_configured(settings)
    )
