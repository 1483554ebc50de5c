import os
import tempfile
import unittest
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from pdfqa.api.middleware import MAX_BODY_BYTES
from pdfqa.core.prompts import FALLBACK_ANSWER
from pdfqa.main import create_app
from pdfqa.services.vectordb import SearchMatch
from tests.support import use_test_env


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        use_test_env(self)
        self.client = TestClient(create_app())


class TestAskValidation(ApiTestCase):
    @patch("pdfqa.api.ask.answer_question", new_callable=AsyncMock)
    def test_rejects_missing_or_blank_question(self, mock_answer: AsyncMock) -> None:
        for body in ({}, {"question": ""}, {"question": "   \n\t"}, {"question": None}, {"question": 42}):
            with self.subTest(body=body):
                response = self.client.post("/ask", json=body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "question is required"})
        mock_answer.assert_not_awaited()

    @patch("pdfqa.api.ask.answer_question", new_callable=AsyncMock)
    def test_rejects_empty_body(self, mock_answer: AsyncMock) -> None:
        response = self.client.post("/ask")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "question is required"})

    def test_rejects_malformed_json(self) -> None:
        response = self.client.post(
            "/ask", content=b"{not json", headers={"content-type": "application/json"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_rejects_oversized_body(self) -> None:
        response = self.client.post(
            "/ask",
            content=b" " * (MAX_BODY_BYTES + 1),
            headers={"content-type": "application/json"},
        )
        self.assertEqual(response.status_code, 413)
        self.assertEqual(response.json(), {"error": "request entity too large"})


class TestAskPipeline(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.mocks = {
            "rewrite": AsyncMock(return_value="What is a stack?"),
            "embed": AsyncMock(return_value=[0.1, 0.2]),
            "search": AsyncMock(
                return_value=[SearchMatch(id="a", score=0.9, metadata={"text": "A stack is LIFO."})]
            ),
            "generate": AsyncMock(return_value="A stack is last-in, first-out."),
        }
        for target, key in (
            ("pdfqa.services.qa.rewrite_query", "rewrite"),
            ("pdfqa.services.qa.embed_query", "embed"),
            ("pdfqa.services.qa.search", "search"),
            ("pdfqa.services.generator.generate_text", "generate"),
        ):
            patcher = patch(target, self.mocks[key])
            patcher.start()
            self.addCleanup(patcher.stop)

    def test_success(self) -> None:
        response = self.client.post("/ask", json={"question": " What is a stack? "})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"answer": "A stack is last-in, first-out.", "context": "A stack is LIFO."},
        )

    def test_history_is_forwarded(self) -> None:
        self.client.post(
            "/ask",
            json={
                "question": "And a queue?",
                "history": ["What is a stack?", {"text": "A stack is LIFO."}],
            },
        )
        self.mocks["rewrite"].assert_awaited_once_with(
            "And a queue?", ["What is a stack?", "A stack is LIFO."]
        )

    def test_empty_index_returns_empty_context(self) -> None:
        self.mocks["search"].return_value = []
        self.mocks["generate"].return_value = FALLBACK_ANSWER

        response = self.client.post("/ask", json={"question": "What is a stack?"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"answer": FALLBACK_ANSWER, "context": ""})

    def test_any_step_failure_returns_500(self) -> None:
        for key in ("rewrite", "embed", "search", "generate"):
            with self.subTest(step=key):
                self.mocks[key].side_effect = RuntimeError(f"{key} failed")
                with self.assertLogs("pdfqa.api.ask", level="ERROR"):
                    response = self.client.post("/ask", json={"question": "What is a stack?"})
                self.mocks[key].side_effect = None

                self.assertEqual(response.status_code, 500)
                self.assertEqual(response.json(), {"error": f"{key} failed"})
                self.assertNotIn("answer", response.json())

    def test_error_without_message_uses_class_name(self) -> None:
        self.mocks["embed"].side_effect = TimeoutError()
        with self.assertLogs("pdfqa.api.ask", level="ERROR"):
            response = self.client.post("/ask", json={"question": "q"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "TimeoutError"})


class TestIndexEndpoint(ApiTestCase):
    @patch("pdfqa.api.index.ingest_pdf", new_callable=AsyncMock)
    def test_success_and_reindex(self, mock_ingest: AsyncMock) -> None:
        mock_ingest.return_value = 42

        for _ in range(2):
            response = self.client.post("/index")
            self.assertEqual(response.status_code, 200)
            self.assertEqual(
                response.json(),
                {"status": "ok", "message": "PDF indexed to Pinecone successfully", "chunks": 42},
            )
        mock_ingest.assert_awaited_with("./dsa.pdf")
        self.assertEqual(mock_ingest.await_count, 2)

    @patch("pdfqa.api.index.ingest_pdf", new_callable=AsyncMock)
    def test_body_is_ignored(self, mock_ingest: AsyncMock) -> None:
        mock_ingest.return_value = 1
        response = self.client.post("/index", json={"anything": True})
        self.assertEqual(response.status_code, 200)

    @patch("pdfqa.api.index.ingest_pdf", new_callable=AsyncMock)
    def test_failure_returns_500(self, mock_ingest: AsyncMock) -> None:
        mock_ingest.side_effect = ValueError("File does not exist: ./dsa.pdf")

        with self.assertLogs("pdfqa.api.index", level="ERROR"):
            response = self.client.post("/index")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "File does not exist: ./dsa.pdf"})


class TestStartup(unittest.TestCase):
    def test_startup_warns_about_missing_keys(self) -> None:
        use_test_env(self, GEMINI_API_KEY="", PINECONE_INDEX_NAME="")

        with self.assertLogs("pdfqa.core.config", level="WARNING") as logs:
            with TestClient(create_app()) as client:
                self.assertEqual(client.get("/health").status_code, 200)

        output = "\n".join(logs.output)
        self.assertIn("GEMINI_API_KEY", output)
        self.assertIn("PINECONE_INDEX_NAME", output)

    def test_strict_config_refuses_to_start(self) -> None:
        use_test_env(self, PINECONE_API_KEY="", STRICT_CONFIG="true")

        with self.assertRaises(ValueError) as ctx:
            with TestClient(create_app()):
                pass
        self.assertIn("PINECONE_API_KEY", str(ctx.exception))

    def test_missing_public_dir_disables_frontend(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            use_test_env(self, PUBLIC_DIR=os.path.join(temp_dir, "absent"))
            client = TestClient(create_app())

            response = client.get("/")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Not Found"})


class TestStaticAndHealth(ApiTestCase):
    def test_root_serves_frontend(self) -> None:
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("text/html", response.headers["content-type"])
        self.assertIn("<form id=\"ask-form\">", response.text)

    def test_static_assets(self) -> None:
        response = self.client.get("/app.js")
        self.assertEqual(response.status_code, 200)
        self.assertIn("/ask", response.text)

    def test_unknown_asset_is_json_404(self) -> None:
        response = self.client.get("/missing.css")
        self.assertEqual(response.status_code, 404)
        self.assertIn("error", response.json())

    def test_health(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
