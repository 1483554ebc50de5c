"""Shared Gemini client and text generation."""

from google import genai

from pdfqa.core.config import get_settings
from pdfqa.core.logging import get_logger
from pdfqa.core.retry import retrying

logger = get_logger(__name__)

_client: genai.Client | None = None


def reset_client() -> None:
    """Reset the cached Gemini client. Call this after changing API keys."""
    global _client
    _client = None


def get_client() -> genai.Client:
    """Lazy initialization of the Gemini client."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


async def generate_text(prompt: str, model: str) -> str:
    """Send a single user-turn prompt and return the stripped response text.

    Raises:
        google.genai.errors.APIError: If the request fails after retries
        ValueError: If the response carries no text (e.g. blocked output)
    """
    client = get_client()
    async for attempt in retrying():
        with attempt:
            response = await client.aio.models.generate_content(
                model=model,
                contents=[{"role": "user", "parts": [{"text": prompt}]}],
            )
    text = response.text
    if text is None:
        raise ValueError(f"Model {model} returned no text.")
    logger.debug("Model %s returned %d chars", model, len(text))
    return text.strip()
