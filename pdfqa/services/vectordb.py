"""Pinecone upsert/search logic."""

import asyncio
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from pinecone.grpc import PineconeGRPC as Pinecone

from pdfqa.core.config import get_settings
from pdfqa.core.concurrency import run_bounded
from pdfqa.core.logging import get_logger
from pdfqa.core.retry import retrying

logger = get_logger(__name__)

UPSERT_BATCH_SIZE = 100

_client: Pinecone | None = None


@dataclass(frozen=True)
class SearchMatch:
    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        value = self.metadata.get("text")
        return value if isinstance(value, str) else ""


def reset_client() -> None:
    """Reset the cached Pinecone client. Call this after changing API keys."""
    global _client
    _client = None


def _get_client() -> Pinecone:
    global _client
    if _client is None:
        _client = Pinecone(api_key=get_settings().pinecone_api_key)
    return _client


def get_index():
    """Index handle for PINECONE_INDEX_NAME, addressed by host when one is configured."""
    settings = get_settings()
    if not settings.pinecone_index_name:
        raise ValueError("Missing Pinecone index name. Set PINECONE_INDEX_NAME.")
    pc = _get_client()
    if settings.pinecone_host:
        return pc.Index(host=settings.pinecone_host)
    return pc.Index(name=settings.pinecone_index_name)


async def search(vector: list[float], top_k: int | None = None) -> list[SearchMatch]:
    """Return up to top_k nearest chunks with their metadata, in store ranking order."""
    settings = get_settings()
    top_k = top_k or settings.top_k
    # Index(name=...) resolves the host over HTTP
    index = await asyncio.to_thread(get_index)
    async for attempt in retrying():
        with attempt:
            response = await asyncio.to_thread(
                index.query,
                vector=vector,
                top_k=top_k,
                include_metadata=True,
                namespace=settings.pinecone_namespace,
            )

    matches = [
        SearchMatch(id=m.id, score=m.score or 0.0, metadata=dict(m.metadata or {}))
        for m in (response.matches or [])
    ]
    logger.info("Vector search returned %d/%d matches", len(matches), top_k)
    return matches


async def upsert_vectors(
    vectors: list[dict], *, max_concurrency: int | None = None
) -> int:
    """Upsert vectors to Pinecone in batches, at most max_concurrency batches in flight.

    Args:
        vectors: List of vector dicts with keys: id, values, metadata
        max_concurrency: In-flight batch ceiling (defaults to MAX_CONCURRENCY)

    Returns:
        Total count of upserted vectors

    Raises:
        PineconeException: If upsert fails after all retries
        ConnectionError: If connection fails after all retries
    """
    if not vectors:
        return 0

    settings = get_settings()
    limit = max_concurrency or settings.max_concurrency
    namespace = settings.pinecone_namespace
    logger.info(
        "Upserting %d vectors to index '%s' namespace '%s' (concurrency %d)",
        len(vectors),
        settings.pinecone_index_name,
        namespace,
        limit,
    )

    index = await asyncio.to_thread(get_index)
    num_batches = (len(vectors) + UPSERT_BATCH_SIZE - 1) // UPSERT_BATCH_SIZE

    async def _upsert_batch(start: int) -> int:
        batch = vectors[start : start + UPSERT_BATCH_SIZE]
        upsert_data = [
            {"id": v["id"], "values": v["values"], "metadata": v.get("metadata", {})}
            for v in batch
        ]
        async for attempt in retrying():
            with attempt:
                await asyncio.to_thread(
                    index.upsert, vectors=upsert_data, namespace=namespace
                )
        logger.debug(
            "Upserted batch %d/%d (%d vectors)",
            start // UPSERT_BATCH_SIZE + 1,
            num_batches,
            len(batch),
        )
        return len(batch)

    counts = await run_bounded(
        [partial(_upsert_batch, i) for i in range(0, len(vectors), UPSERT_BATCH_SIZE)],
        limit,
    )
    total_upserted = sum(counts)
    logger.info("Successfully upserted %d vectors", total_upserted)
    return total_upserted
