"""Bounded retry for transient failures of the hosted APIs."""

from __future__ import annotations

from google.genai import errors as genai_errors
from pinecone.exceptions import PineconeException
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from pdfqa.core.config import get_settings
from pdfqa.core.logging import get_logger

logger = get_logger(__name__)


def is_transient(exc: BaseException) -> bool:
    """True for errors worth another attempt: 5xx/429 from Gemini, Pinecone or network."""
    if isinstance(exc, genai_errors.APIError):
        return exc.code == 429 or (exc.code or 0) >= 500
    return isinstance(exc, (PineconeException, ConnectionError))


def _log_retry(retry_state) -> None:
    logger.warning(
        "Transient error on attempt %d, retrying: %s",
        retry_state.attempt_number,
        retry_state.outcome.exception(),
    )


def retrying() -> AsyncRetrying:
    """Retry controller for one external call.

    Usage::

        async for attempt in retrying():
            with attempt:
                result = await call()

    Stops after ``MAX_ATTEMPTS`` and re-raises the last error unchanged.
    """
    return AsyncRetrying(
        retry=retry_if_exception(is_transient),
        stop=stop_after_attempt(get_settings().max_attempts),
        wait=wait_exponential_jitter(initial=1, max=30),
        before_sleep=_log_retry,
        reraise=True,
    )
