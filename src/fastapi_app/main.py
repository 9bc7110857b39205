import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from src.common.backends import MailBackend, UploadBackend
from src.common.logging_config import setup_logging
from src.common.settings import Settings
from src.fastapi_app.middleware import UploadSizeLimitMiddleware
from src.fastapi_app.routes import legacy_router, router as main_router
from src.maileroo.facade import MailerooFacade
from src.picinth.facade import PicInThFacade
from src.smtp_mail.facade import SMTPMailFacade
from src.utils.httpx_manager.httpx_manager import HTTPXManager

logger = logging.getLogger(__name__)

UPLOAD_PATHS = {"/api/upload", "/upload"}


def warn_missing_keys(settings: Settings) -> None:
    if not settings.PIC_API_KEY:
        logger.warning("PIC_API_KEY not set. Set it in .env before running server.")
    if not settings.MAILEROO_API_KEY:
        logger.warning(
            "MAILEROO_API_KEY not set. Set it in .env before running server."
        )


def create_app(
    settings: Optional[Settings] = None,
    upload_backend: Optional[UploadBackend] = None,
    maileroo_backend: Optional[MailBackend] = None,
    smtp_backend: Optional[MailBackend] = None,
    http: Optional[HTTPXManager] = None,
) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL)
    http = http or HTTPXManager()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        warn_missing_keys(settings)
        logger.info("Server listening on http://localhost:%s", settings.PORT)
        yield
        logger.info("Server is shutting down...")
        await http.aclose()

    app = FastAPI(
        title="Form Relay",
        description="Relays browser form posts to pic.in.th, Maileroo and SMTP",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.upload_backend = upload_backend or PicInThFacade(
        http, settings.PIC_API_URL, settings.PIC_API_KEY
    )
    app.state.maileroo_backend = maileroo_backend or MailerooFacade(http, settings)
    app.state.smtp_backend = smtp_backend or SMTPMailFacade(settings)

    app.add_middleware(
        UploadSizeLimitMiddleware,
        max_upload_bytes=settings.MAX_UPLOAD_BYTES,
        paths=UPLOAD_PATHS,
    )

    app.include_router(main_router)
    if settings.ENABLE_LEGACY_ROUTES:
        app.include_router(legacy_router)

    @app.get("/", include_in_schema=False)
    async def home():
        """Serve the menu page"""
        return FileResponse(settings.STATIC_DIR / "index.html")

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy"}

    # Last, so the API routes above take precedence
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")

    return app


def run() -> None:
    load_dotenv()
    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
