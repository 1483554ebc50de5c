from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from pdfqa.api.ask import router as ask_router
from pdfqa.api.errors import http_exception_handler, validation_exception_handler
from pdfqa.api.index import router as index_router
from pdfqa.api.middleware import MAX_BODY_BYTES, BodySizeLimitMiddleware
from pdfqa.core.config import check_settings, get_settings
from pdfqa.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(level=settings.log_level)
    # Warns on missing keys; raises when STRICT_CONFIG is set.
    check_settings(settings)
    logger.info(
        "PDF QA service ready (index=%s, pdf=%s)",
        settings.pinecone_index_name or "<unset>",
        settings.pdf_path,
    )
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    public_dir = Path(settings.public_dir)

    app = FastAPI(title="PDF QA Service", lifespan=lifespan)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=MAX_BODY_BYTES)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(ask_router)
    app.include_router(index_router)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    if public_dir.is_dir():

        @app.get("/", include_in_schema=False)
        def frontend() -> FileResponse:
            return FileResponse(public_dir / "index.html")

        app.mount("/", StaticFiles(directory=public_dir), name="public")
    else:
        logger.warning("Static directory %s not found; frontend disabled", public_dir)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info("Server running on http://localhost:%d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
