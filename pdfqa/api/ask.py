from fastapi import APIRouter, Body, status

from pdfqa.api.errors import QUESTION_REQUIRED, error_response, server_error
from pdfqa.core.logging import get_logger
from pdfqa.models.qa import AskRequest, AskResponse, ErrorResponse
from pdfqa.services.qa import answer_question

logger = get_logger(__name__)

router = APIRouter(tags=["qa"])


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def ask(payload: AskRequest | None = Body(default=None)):
    """Answer a question from the indexed PDF.

    Body: {"question": "...", "history": [...optional prior texts...]}
    """
    if payload is None or not payload.question or not payload.question.strip():
        return error_response(QUESTION_REQUIRED, status.HTTP_400_BAD_REQUEST)

    try:
        answer, context = await answer_question(
            payload.question, payload.history_texts()
        )
    except Exception as exc:
        logger.exception("/ask failed")
        return server_error(exc)

    return AskResponse(answer=answer, context=context)
