"""Question answering: rewrite -> embed -> search -> prompt -> answer."""

from collections.abc import Sequence

from pdfqa.core.logging import get_logger
from pdfqa.services.embedder import embed_query
from pdfqa.services.generator import build_context, generate_answer
from pdfqa.services.rewriter import rewrite_query
from pdfqa.services.vectordb import search

logger = get_logger(__name__)


async def answer_question(question: str, history: Sequence[str] = ()) -> tuple[str, str]:
    """Answer a question from the indexed document.

    Returns:
        (answer, context) where context is the joined text of the retrieved
        chunks, empty when nothing matched.
    """
    rewritten = await rewrite_query(question, history)
    vector = await embed_query(rewritten)
    matches = await search(vector)
    context = build_context(matches)
    if not context:
        logger.warning("No context retrieved for question")
    answer = await generate_answer(question, context)
    return answer, context
