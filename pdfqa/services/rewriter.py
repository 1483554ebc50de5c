"""Rewrite follow-up questions into standalone search queries."""

from collections.abc import Sequence

from pdfqa.core.config import get_settings
from pdfqa.core.logging import get_logger
from pdfqa.core.prompts import REWRITE_PROMPT
from pdfqa.services.gemini import generate_text

logger = get_logger(__name__)


def build_rewrite_prompt(question: str, history: Sequence[str] = ()) -> str:
    return REWRITE_PROMPT.format(history="\n".join(history), question=question)


async def rewrite_query(question: str, history: Sequence[str] = ()) -> str:
    """Turn a question plus chat history into a context-independent question.

    The caller rejects blank questions before getting here. The model output
    is only whitespace-trimmed, never validated.
    """
    settings = get_settings()
    prompt = build_rewrite_prompt(question, history)
    rewritten = await generate_text(prompt, settings.rewrite_model)
    logger.info(
        "Rewrote question (%d chars, %d history entries) -> %d chars",
        len(question),
        len(history),
        len(rewritten),
    )
    return rewritten
