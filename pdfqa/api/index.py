from fastapi import APIRouter

from pdfqa.api.errors import server_error
from pdfqa.core.config import get_settings
from pdfqa.core.logging import get_logger
from pdfqa.models.qa import ErrorResponse, IndexResponse
from pdfqa.services.ingest import ingest_pdf

logger = get_logger(__name__)

router = APIRouter(tags=["indexing"])


@router.post(
    "/index",
    response_model=IndexResponse,
    responses={500: {"model": ErrorResponse}},
)
async def index_pdf():
    """Index the configured PDF (PDF_PATH, default ./dsa.pdf) into Pinecone.

    Any request body is ignored.
    """
    try:
        count = await ingest_pdf(get_settings().pdf_path)
    except Exception as exc:
        logger.exception("/index failed")
        return server_error(exc)

    return IndexResponse(message="PDF indexed to Pinecone successfully", chunks=count)
