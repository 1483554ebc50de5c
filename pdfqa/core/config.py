"""Runtime configuration and environment loading."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pdfqa.core.logging import get_logger

logger = get_logger(__name__)

_SETTINGS: "Settings | None" = None

DEFAULT_PUBLIC_DIR = str(Path(__file__).resolve().parents[2] / "public")

REQUIRED_ENV = ("GEMINI_API_KEY", "PINECONE_API_KEY", "PINECONE_INDEX_NAME")


def reset_settings() -> None:
    """Reset cached settings. Call after changing environment variables."""
    global _SETTINGS
    _SETTINGS = None


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str
    pinecone_api_key: str
    pinecone_index_name: str
    pinecone_host: str | None = None
    pinecone_namespace: str = ""
    host: str = "0.0.0.0"
    port: int = 3000
    pdf_path: str = "./dsa.pdf"
    public_dir: str = DEFAULT_PUBLIC_DIR
    rewrite_model: str = "gemini-2.0-flash"
    answer_model: str = "gemini-2.5-flash"
    embedding_model: str = "text-embedding-004"
    top_k: int = 6
    chunk_size: int = 1000
    chunk_overlap: int = 200
    max_concurrency: int = 5
    max_attempts: int = 3
    strict_config: bool = False
    log_level: str = "INFO"


def load_env_file(path: str, *, override: bool = False) -> None:
    """Load key=value pairs from a .env-style file into os.environ.

    Keeps existing env values unless override=True.
    """
    env_path = Path(path)
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'").strip('"')
        if not override and key in os.environ:
            continue
        os.environ[key] = value


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip() or default


def _int_env(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{raw}'.") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}.")
    return value


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def get_settings() -> Settings:
    """Load settings from the env file and environment variables.

    Missing required keys are kept as empty strings; see ``check_settings``.
    """
    global _SETTINGS
    if _SETTINGS is not None:
        return _SETTINGS

    load_env_file(os.getenv("ENV_FILE", ".env"))

    chunk_size = _int_env("CHUNK_SIZE", 1000, minimum=1)
    chunk_overlap = _int_env("CHUNK_OVERLAP", 200)
    if chunk_overlap >= chunk_size:
        raise ValueError(
            f"CHUNK_OVERLAP ({chunk_overlap}) must be smaller than CHUNK_SIZE ({chunk_size})."
        )

    _SETTINGS = Settings(
        gemini_api_key=_env("GEMINI_API_KEY"),
        pinecone_api_key=_env("PINECONE_API_KEY"),
        pinecone_index_name=_env("PINECONE_INDEX_NAME"),
        pinecone_host=_env("PINECONE_HOST") or None,
        pinecone_namespace=_env("PINECONE_NAMESPACE"),
        host=_env("HOST", "0.0.0.0"),
        port=_int_env("PORT", 3000, minimum=1),
        pdf_path=_env("PDF_PATH", "./dsa.pdf"),
        public_dir=_env("PUBLIC_DIR", DEFAULT_PUBLIC_DIR),
        rewrite_model=_env("GEMINI_REWRITE_MODEL", "gemini-2.0-flash"),
        answer_model=_env("GEMINI_ANSWER_MODEL", "gemini-2.5-flash"),
        embedding_model=_env("GEMINI_EMBEDDING_MODEL", "text-embedding-004"),
        top_k=_int_env("RETRIEVAL_TOP_K", 6, minimum=1),
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        max_concurrency=_int_env("MAX_CONCURRENCY", 5, minimum=1),
        max_attempts=_int_env("MAX_ATTEMPTS", 3, minimum=1),
        strict_config=_bool_env("STRICT_CONFIG"),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
    return _SETTINGS


def missing_settings(settings: Settings) -> list[str]:
    """Names of required environment variables that are not set."""
    values = {
        "GEMINI_API_KEY": settings.gemini_api_key,
        "PINECONE_API_KEY": settings.pinecone_api_key,
        "PINECONE_INDEX_NAME": settings.pinecone_index_name,
    }
    return [name for name in REQUIRED_ENV if not values[name]]


def check_settings(settings: Settings) -> None:
    """Warn about missing required settings, or raise when strict_config is on."""
    missing = missing_settings(settings)
    if not missing:
        return
    if settings.strict_config:
        raise ValueError(
            "Missing required environment variable(s): " + ", ".join(missing)
        )
    for name in missing:
        logger.warning("Missing %s in environment; related calls will fail", name)
