"""Gemini embedding calls with batching, bounded concurrency and retry."""

from functools import partial

from google.genai import types

from pdfqa.core.config import get_settings
from pdfqa.core.concurrency import run_bounded
from pdfqa.core.logging import get_logger
from pdfqa.core.retry import retrying
from pdfqa.services.gemini import get_client

logger = get_logger(__name__)

# Gemini accepts at most 100 contents per embed request
EMBEDDING_BATCH_SIZE = 100

QUERY_TASK = "RETRIEVAL_QUERY"
DOCUMENT_TASK = "RETRIEVAL_DOCUMENT"


async def embed_texts(texts: list[str], *, task_type: str = DOCUMENT_TASK) -> list[list[float]]:
    """Embed one batch of texts in a single request.

    Args:
        texts: Up to EMBEDDING_BATCH_SIZE non-empty texts
        task_type: Gemini task type hint (RETRIEVAL_QUERY or RETRIEVAL_DOCUMENT)

    Returns:
        List of embedding vectors in input order

    Raises:
        google.genai.errors.APIError: If the request fails after retries
        ValueError: If texts are invalid or the response is malformed
    """
    if not texts:
        return []
    if any(not isinstance(text, str) or not text.strip() for text in texts):
        raise ValueError("All texts must be non-empty strings for embedding.")
    if len(texts) > EMBEDDING_BATCH_SIZE:
        raise ValueError(
            f"At most {EMBEDDING_BATCH_SIZE} texts per embedding request, got {len(texts)}."
        )

    settings = get_settings()
    client = get_client()
    async for attempt in retrying():
        with attempt:
            resp = await client.aio.models.embed_content(
                model=settings.embedding_model,
                contents=texts,
                config=types.EmbedContentConfig(task_type=task_type),
            )

    embeddings = resp.embeddings or []
    if len(embeddings) != len(texts) or any(not e.values for e in embeddings):
        raise ValueError(
            "Embedding count mismatch: expected "
            f"{len(texts)} vectors, got {len(embeddings)}."
        )
    return [list(e.values) for e in embeddings]


async def embed_query(text: str) -> list[float]:
    """Embed a single search query."""
    vectors = await embed_texts([text], task_type=QUERY_TASK)
    logger.debug("Embedded query into %d dimensions", len(vectors[0]))
    return vectors[0]


async def embed_texts_batched(
    texts: list[str], *, max_concurrency: int | None = None
) -> list[list[float]]:
    """Embed document texts in batches, keeping at most max_concurrency requests in flight.

    Args:
        texts: Document texts to embed
        max_concurrency: In-flight request ceiling (defaults to MAX_CONCURRENCY)

    Returns:
        List of embedding vectors in same order as input
    """
    if not texts:
        return []

    limit = max_concurrency or get_settings().max_concurrency
    batches = [
        texts[i : i + EMBEDDING_BATCH_SIZE]
        for i in range(0, len(texts), EMBEDDING_BATCH_SIZE)
    ]

    async def _embed_batch(number: int, batch: list[str]) -> list[list[float]]:
        vectors = await embed_texts(batch, task_type=DOCUMENT_TASK)
        logger.debug("Embedded batch %d/%d (%d texts)", number, len(batches), len(batch))
        return vectors

    results = await run_bounded(
        [partial(_embed_batch, n, batch) for n, batch in enumerate(batches, start=1)],
        limit,
    )
    all_embeddings: list[list[float]] = []
    for vectors in results:
        all_embeddings.extend(vectors)
    logger.info("Embedded %d texts in %d batches", len(all_embeddings), len(batches))
    return all_embeddings
