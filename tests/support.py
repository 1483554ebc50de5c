import os
import unittest
from unittest.mock import patch

from pdfqa.core.config import reset_settings

TEST_ENV = {
    "ENV_FILE": os.path.join(os.path.dirname(__file__), "no-such.env"),
    "GEMINI_API_KEY": "test-gemini-key",
    "PINECONE_API_KEY": "test-pinecone-key",
    "PINECONE_INDEX_NAME": "test-index",
    "PINECONE_HOST": "",
    "PINECONE_NAMESPACE": "",
    "MAX_ATTEMPTS": "1",
}


def use_test_env(test: unittest.TestCase, **overrides: str) -> None:
    """Patch os.environ for one test and drop cached settings around it."""
    env = {**TEST_ENV, **overrides}
    patcher = patch.dict(os.environ, env)
    patcher.start()
    reset_settings()
    test.addCleanup(reset_settings)
    test.addCleanup(patcher.stop)
