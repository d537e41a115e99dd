#!/usr/bin/env python3
"""
AI engine tests with provider SDKs mocked out:
1. Provider selection and key validation
2. Request part translation per provider (Gemini blobs, OpenAI data URLs, Cohere text)
3. Failure reporting (API errors, empty answers, unsupported inputs)
"""

import base64
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

sys.path.insert(0, str(Path(__file__).parent))

from forgequote import config
from forgequote import ai_engine
from forgequote.ai_engine import AIEngine

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x01" * 16
TEXT_PARTS = [{"text": "PROMPT"}, {"text": "\n\n[FILE DATA START]\n파일명: q.csv\n#1,600\n[FILE DATA END]"}]
IMAGE_PARTS = [{"text": "PROMPT"}, {"mime_type": "image/png", "data": PNG_BYTES, "filename": "d.png"}]
PDF_PARTS = [{"text": "PROMPT"}, {"mime_type": "application/pdf", "data": b"%PDF-1.7", "filename": "quote.pdf"}]


class ApiError(Exception):
    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


class TestProviderSelection(unittest.TestCase):

    def test_unknown_provider_rejected(self):
        with self.assertRaises(ValueError):
            AIEngine(provider="llama-local")

    def test_missing_key_not_ready(self):
        with mock.patch.object(config, "GEMINI_API_KEY", None), \
             mock.patch.object(ai_engine, "genai") as genai:
            engine = AIEngine(provider="gemini")
            self.assertFalse(engine.is_ready())
            genai.configure.assert_not_called()

            result = engine.generate(TEXT_PARTS)
            self.assertEqual(result["status"], "failed")
            self.assertEqual(result["error"], "GEMINI_API_KEY is not configured")

    def test_blank_key_not_ready(self):
        with mock.patch.object(config, "OPENAI_API_KEY", "   "):
            engine = AIEngine(provider="openai")
            self.assertFalse(engine.is_ready())
            self.assertEqual(engine.api_key_name, "OPENAI_API_KEY")

    def test_provider_name_is_normalised(self):
        with mock.patch.object(config, "COHERE_API_KEY", None):
            engine = AIEngine(provider=" Cohere ")
            self.assertEqual(engine.provider, "cohere")
            self.assertEqual(engine.label, "Cohere")


class TestGemini(unittest.TestCase):

    def setUp(self):
        self.key_patch = mock.patch.object(config, "GEMINI_API_KEY", "gemini-test-key")
        self.genai_patch = mock.patch.object(ai_engine, "genai")
        self.key_patch.start()
        self.genai = self.genai_patch.start()
        self.model = self.genai.GenerativeModel.return_value

    def tearDown(self):
        self.genai_patch.stop()
        self.key_patch.stop()

    def test_configures_sdk(self):
        engine = AIEngine(provider="gemini")
        self.assertTrue(engine.is_ready())
        self.genai.configure.assert_called_once_with(api_key="gemini-test-key")

    def test_text_parts_sent_as_strings(self):
        self.model.generate_content.return_value = SimpleNamespace(text='{"items": []}')
        result = AIEngine(provider="gemini").generate(TEXT_PARTS)

        self.assertEqual(result, {"text": '{"items": []}', "status": "success", "provider": "Google Gemini", "error": None})
        self.genai.GenerativeModel.assert_called_once_with(config.GEMINI_MODEL)
        contents = self.model.generate_content.call_args[0][0]
        self.assertEqual(contents, ["PROMPT", TEXT_PARTS[1]["text"]])

    def test_binary_parts_sent_as_inline_blobs(self):
        self.model.generate_content.return_value = SimpleNamespace(text='{"items": []}')
        AIEngine(provider="gemini").generate(IMAGE_PARTS)

        contents = self.model.generate_content.call_args[0][0]
        self.assertEqual(contents[1], {"mime_type": "image/png", "data": PNG_BYTES})

    def test_falls_back_to_candidate_parts(self):
        class Response:
            candidates = [SimpleNamespace(content=SimpleNamespace(parts=[
                SimpleNamespace(text='{"items": '), SimpleNamespace(text="[]}"),
            ]))]

            @property
            def text(self):
                raise ValueError("multiple parts")

        self.model.generate_content.return_value = Response()
        result = AIEngine(provider="gemini").generate(TEXT_PARTS)
        self.assertEqual(result["status"], "success")
        self.assertEqual(result["text"], '{"items": []}')

    def test_api_error_reports_status_code(self):
        self.model.generate_content.side_effect = ApiError("quota exhausted", 429)
        result = AIEngine(provider="gemini").generate(TEXT_PARTS)
        self.assertEqual(result["status"], "failed")
        self.assertEqual(result["error"], "Google Gemini API Error: 429")

    def test_sdk_value_error_body_not_returned(self):
        self.model.generate_content.side_effect = ValueError("upstream body: {\"detail\": \"internal\"}")
        result = AIEngine(provider="gemini").generate(TEXT_PARTS)
        self.assertEqual(result["status"], "failed")
        self.assertEqual(result["error"], "Google Gemini API Error: ValueError")
        self.assertNotIn("upstream body", result["error"])

    def test_empty_answer_fails(self):
        self.model.generate_content.return_value = SimpleNamespace(text="  \n")
        result = AIEngine(provider="gemini").generate(TEXT_PARTS)
        self.assertEqual(result["status"], "failed")
        self.assertEqual(result["error"], "AI response is empty")

    def test_single_call_no_retry(self):
        self.model.generate_content.side_effect = ApiError("internal", 500)
        AIEngine(provider="gemini").generate(TEXT_PARTS)
        self.assertEqual(self.model.generate_content.call_count, 1)


class TestOpenAI(unittest.TestCase):

    def _completion(self, content):
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

    def test_hf_key_uses_router(self):
        with mock.patch.object(config, "OPENAI_API_KEY", "hf_test"), \
             mock.patch.object(ai_engine, "OpenAI") as openai_cls:
            AIEngine(provider="openai")
            self.assertEqual(openai_cls.call_args.kwargs["base_url"], config.HF_BASE_URL)

    def test_image_sent_as_data_url(self):
        with mock.patch.object(config, "OPENAI_API_KEY", "sk-test"), \
             mock.patch.object(ai_engine, "OpenAI") as openai_cls:
            client = openai_cls.return_value
            client.chat.completions.create.return_value = self._completion('{"items": []}')

            result = AIEngine(provider="openai").generate(IMAGE_PARTS)

            self.assertEqual(result["status"], "success")
            self.assertIsNone(openai_cls.call_args.kwargs["base_url"])
            messages = client.chat.completions.create.call_args.kwargs["messages"]
            content = messages[0]["content"]
            self.assertEqual(content[0], {"type": "text", "text": "PROMPT"})
            expected_url = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")
            self.assertEqual(content[1], {"type": "image_url", "image_url": {"url": expected_url}})

    def test_pdf_sent_as_file(self):
        content = AIEngine._openai_content(PDF_PARTS)
        self.assertEqual(content[1]["type"], "file")
        self.assertEqual(content[1]["file"]["filename"], "quote.pdf")
        self.assertTrue(content[1]["file"]["file_data"].startswith("data:application/pdf;base64,"))

    def test_none_content_is_empty_failure(self):
        with mock.patch.object(config, "OPENAI_API_KEY", "sk-test"), \
             mock.patch.object(ai_engine, "OpenAI") as openai_cls:
            openai_cls.return_value.chat.completions.create.return_value = self._completion(None)
            result = AIEngine(provider="openai").generate(TEXT_PARTS)
            self.assertEqual(result["error"], "AI response is empty")


class TestCohere(unittest.TestCase):

    def setUp(self):
        self.key_patch = mock.patch.object(config, "COHERE_API_KEY", "co-test")
        self.cohere_patch = mock.patch.object(ai_engine, "cohere")
        self.key_patch.start()
        self.cohere = self.cohere_patch.start()
        self.client = self.cohere.Client.return_value

    def tearDown(self):
        self.cohere_patch.stop()
        self.key_patch.stop()

    def test_text_upload_joined_into_message(self):
        self.client.chat.return_value = SimpleNamespace(text='{"items": []}')
        result = AIEngine(provider="cohere").generate(TEXT_PARTS)
        self.assertEqual(result["status"], "success")
        kwargs = self.client.chat.call_args.kwargs
        self.assertEqual(kwargs["message"], "PROMPT" + TEXT_PARTS[1]["text"])
        self.assertEqual(kwargs["model"], config.COHERE_MODEL)

    def test_binary_upload_rejected_without_call(self):
        result = AIEngine(provider="cohere").generate(IMAGE_PARTS)
        self.assertEqual(result["status"], "failed")
        self.assertIn("Cohere does not accept binary uploads", result["error"])
        self.client.chat.assert_not_called()


class TestSafeGenerate(unittest.TestCase):

    def test_unexpected_failure_still_returns_object(self):
        with mock.patch.object(config, "GEMINI_API_KEY", "k"), \
             mock.patch.object(ai_engine, "genai"):
            engine = AIEngine(provider="gemini")
            with mock.patch.object(engine, "generate", side_effect=RuntimeError("boom")):
                result = engine.safe_generate(TEXT_PARTS)
        self.assertEqual(result["status"], "failed")
        self.assertEqual(result["error"], "Google Gemini API Error: RuntimeError")
        self.assertNotIn("boom", result["error"])


if __name__ == "__main__":
    unittest.main()
