"""One-shot PDF indexing: load -> split -> embed -> upsert."""

import asyncio

from pdfqa.core.config import get_settings
from pdfqa.core.logging import get_logger
from pdfqa.services.embedder import embed_texts_batched
from pdfqa.services.parser import parse_pdf
from pdfqa.services.vectordb import upsert_vectors

logger = get_logger(__name__)


async def ingest_pdf(path: str | None = None) -> int:
    """Index a PDF into the vector store and return the number of chunks written.

    Each step needs the previous one to succeed. A failure aborts the run;
    batches already upserted stay in the index.
    """
    settings = get_settings()
    path = path or settings.pdf_path
    logger.info("Indexing %s into '%s'", path, settings.pinecone_index_name)

    # 1. Load + split (pypdf is synchronous)
    chunks = await asyncio.to_thread(
        parse_pdf,
        path,
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
    )
    logger.info("Parsed %d chunks from %s", len(chunks), path)

    # 2. Embed
    embeddings = await embed_texts_batched(
        [chunk.text for chunk in chunks],
        max_concurrency=settings.max_concurrency,
    )
    if len(embeddings) != len(chunks):
        raise ValueError(
            "Embedding count mismatch: expected "
            f"{len(chunks)} vectors, got {len(embeddings)}."
        )

    # 3. Upsert
    vectors = [
        {"id": chunk.id, "values": embedding, "metadata": chunk.metadata}
        for chunk, embedding in zip(chunks, embeddings)
    ]
    upserted = await upsert_vectors(vectors, max_concurrency=settings.max_concurrency)

    logger.info("Indexed %s: %d chunks", path, upserted)
    return upserted
