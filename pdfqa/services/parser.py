"""PDF text extraction and overlapping chunk splitting."""

import hashlib
import os
from dataclasses import dataclass
from typing import Any

from langchain_text_splitters import RecursiveCharacterTextSplitter
from pypdf import PdfReader

from pdfqa.core.logging import get_logger

logger = get_logger(__name__)

SEPARATORS = ["\n\n", "\n", " ", ""]


@dataclass(frozen=True)
class PageText:
    page_number: int
    text: str


@dataclass(frozen=True)
class DocumentChunk:
    id: str
    text: str
    metadata: dict[str, Any]


def load_pdf(path: str) -> list[PageText]:
    """Extract text from each page of a PDF; pages without text are skipped."""
    if not os.path.isfile(path):
        raise ValueError(f"File does not exist: {path}")
    if os.path.splitext(path)[1].lower() != ".pdf":
        raise ValueError(f"Unsupported file type '{os.path.splitext(path)[1]}'.")

    reader = PdfReader(path)
    pages = []
    for page_number, page in enumerate(reader.pages, start=1):
        text = page.extract_text() or ""
        if text.strip():
            pages.append(PageText(page_number=page_number, text=text))

    logger.info("Loaded %s: %d/%d pages with text", path, len(pages), len(reader.pages))
    return pages


def chunk_id(source: str, page_number: int, chunk_index: int, text: str) -> str:
    """Stable key so re-indexing the same document overwrites the same vectors."""
    key = f"{source}:{page_number}:{chunk_index}:{text}"
    return hashlib.md5(key.encode("utf-8")).hexdigest()


def split_pages(
    pages: list[PageText],
    *,
    source: str,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
) -> list[DocumentChunk]:
    """Split each page into chunks of at most chunk_size characters.

    Consecutive chunks of a page share up to chunk_overlap characters. Chunks
    never span pages.
    """
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=SEPARATORS,
    )

    chunks: list[DocumentChunk] = []
    for page in pages:
        for text in splitter.split_text(page.text):
            index = len(chunks)
            chunks.append(
                DocumentChunk(
                    id=chunk_id(source, page.page_number, index, text),
                    text=text,
                    metadata={
                        "text": text,
                        "source": source,
                        "page_number": page.page_number,
                        "chunk_index": index,
                    },
                )
            )

    logger.debug("Split %d pages into %d chunks", len(pages), len(chunks))
    return chunks


def parse_pdf(path: str, *, chunk_size: int = 1000, chunk_overlap: int = 200) -> list[DocumentChunk]:
    """Load a PDF and split it into chunks with metadata."""
    pages = load_pdf(path)
    if not pages:
        raise ValueError(f"No content extracted from {path}.")
    return split_pages(
        pages,
        source=os.path.basename(path),
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
    )
