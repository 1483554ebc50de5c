"""Grounded answer generation from retrieved context."""

from collections.abc import Iterable

from pdfqa.core.config import get_settings
from pdfqa.core.logging import get_logger
from pdfqa.core.prompts import (
    ANSWER_PROMPT,
    CONTEXT_SEPARATOR,
    FALLBACK_ANSWER,
    NO_CONTEXT_PLACEHOLDER,
)
from pdfqa.services.gemini import generate_text
from pdfqa.services.vectordb import SearchMatch

logger = get_logger(__name__)


def build_context(matches: Iterable[SearchMatch]) -> str:
    """Join the non-empty chunk texts of the matches, keeping their rank order."""
    return CONTEXT_SEPARATOR.join(m.text for m in matches if m.text)


def build_answer_prompt(question: str, context: str) -> str:
    return ANSWER_PROMPT.format(
        fallback=FALLBACK_ANSWER,
        context=context or NO_CONTEXT_PLACEHOLDER,
        question=question,
    )


async def generate_answer(question: str, context: str) -> str:
    """Ask the answer model to respond from the context only.

    Grounding and the fallback sentence are left to the prompt; the reply is
    returned as-is apart from whitespace trimming.
    """
    settings = get_settings()
    prompt = build_answer_prompt(question, context)
    answer = await generate_text(prompt, settings.answer_model)
    logger.info(
        "Generated answer (%d chars) from %d chars of context",
        len(answer),
        len(context),
    )
    return answer
