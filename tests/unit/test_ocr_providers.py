import base64
import unittest
from unittest.mock import MagicMock, patch

import requests
from google.genai import errors

from inkplanner.exceptions import FormatError, ProviderError
from inkplanner.ocr.anthropic_provider import ClaudeBackend
from inkplanner.ocr.gemini_provider import GeminiBackend
from inkplanner.ocr.google_vision_provider import GoogleVisionBackend
from inkplanner.ocr.openai_provider import OpenAIBackend
from inkplanner.ocr.payload import DocumentPayload

PNG_URL = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
)


def response(status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body if body is not None else {}
    resp.text = str(body)
    return resp


class TestOpenAIBackend(unittest.TestCase):

    def setUp(self):
        self.image = DocumentPayload.from_data_url(PNG_URL)
        self.pdf = DocumentPayload.from_bytes(b"%PDF-1.4 note")

    @patch("requests.post")
    def test_image_request_and_text(self, mock_post):
        mock_post.return_value = response(body={"choices": [{"message": {"content": "  Dentist at 3\nGym  "}}]})

        text = OpenAIBackend("sk-test", model_name="gpt-4o").recognize(self.image)

        self.assertEqual(text, "Dentist at 3\nGym")
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://api.openai.com/v1/chat/completions")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer sk-test")
        body = kwargs["json"]
        self.assertEqual(body["model"], "gpt-4o")
        self.assertEqual(body["max_tokens"], 1000)
        parts = body["messages"][0]["content"]
        self.assertEqual(parts[1], {"type": "image_url", "image_url": {"url": PNG_URL}})

    @patch("requests.post")
    def test_pdf_sent_as_file_part(self, mock_post):
        mock_post.return_value = response(body={"choices": [{"message": {"content": "x"}}]})

        OpenAIBackend("sk-test").recognize(self.pdf)

        parts = mock_post.call_args[1]["json"]["messages"][0]["content"]
        self.assertIn("PDF document", parts[0]["text"])
        self.assertEqual(parts[1]["type"], "file")
        self.assertTrue(parts[1]["file"]["file_data"].startswith("data:application/pdf;base64,"))

    @patch("requests.post")
    def test_vendor_error_message(self, mock_post):
        mock_post.return_value = response(401, {"error": {"message": "Incorrect API key provided"}})

        with self.assertRaises(ProviderError) as ctx:
            OpenAIBackend("bad").recognize(self.image)
        self.assertEqual(str(ctx.exception), "Incorrect API key provided")
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.provider, "openai")

    @patch("requests.post")
    def test_generic_error_message(self, mock_post):
        resp = response(502)
        resp.json.side_effect = ValueError("not json")
        mock_post.return_value = resp

        with self.assertRaises(ProviderError) as ctx:
            OpenAIBackend("sk").recognize(self.image)
        self.assertEqual(str(ctx.exception), "OpenAI API error: 502")

    @patch("requests.post")
    def test_missing_content_is_empty(self, mock_post):
        mock_post.return_value = response(body={"choices": [{"message": {"content": None}}]})
        self.assertEqual(OpenAIBackend("sk").recognize(self.image), "")

    @patch("requests.post")
    def test_transport_error(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("down")
        with self.assertRaises(ProviderError):
            OpenAIBackend("sk").recognize(self.image)


class TestClaudeBackend(unittest.TestCase):

    @patch("requests.post")
    def test_pdf_document_block(self, mock_post):
        mock_post.return_value = response(body={"content": [
            {"type": "tool_use", "id": "x"},
            {"type": "text", "text": " Lunch 12pm \n"},
        ]})

        text = ClaudeBackend("key", model_name="claude-sonnet-4-20250514").recognize(
            DocumentPayload.from_bytes(b"%PDF-1.4")
        )

        self.assertEqual(text, "Lunch 12pm")
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://api.anthropic.com/v1/messages")
        self.assertEqual(kwargs["headers"]["x-api-key"], "key")
        self.assertEqual(kwargs["headers"]["anthropic-version"], "2023-06-01")
        block = kwargs["json"]["messages"][0]["content"][0]
        self.assertEqual(block["type"], "document")
        self.assertEqual(block["source"]["media_type"], "application/pdf")

    @patch("requests.post")
    def test_image_block(self, mock_post):
        mock_post.return_value = response(body={"content": []})

        text = ClaudeBackend("key").recognize(DocumentPayload.from_data_url(PNG_URL))

        self.assertEqual(text, "")
        block = mock_post.call_args[1]["json"]["messages"][0]["content"][0]
        self.assertEqual(block["type"], "image")
        self.assertEqual(block["source"]["media_type"], "image/png")

    @patch("requests.post")
    def test_error(self, mock_post):
        mock_post.return_value = response(500, {})
        with self.assertRaises(ProviderError) as ctx:
            ClaudeBackend("key").recognize(DocumentPayload.from_data_url(PNG_URL))
        self.assertEqual(str(ctx.exception), "Claude API error: 500")


class TestGeminiBackend(unittest.TestCase):

    @patch("inkplanner.ocr.gemini_provider.genai.Client")
    def test_inline_document(self, mock_client_cls):
        client = mock_client_cls.return_value
        client.models.generate_content.return_value = MagicMock(text=" Call Mom\n")

        text = GeminiBackend("g-key", model_name="gemini-2.0-flash").recognize(DocumentPayload.from_bytes(b"%PDF-1.4"))

        self.assertEqual(text, "Call Mom")
        self.assertEqual(mock_client_cls.call_args[1]["api_key"], "g-key")
        kwargs = client.models.generate_content.call_args[1]
        self.assertEqual(kwargs["model"], "gemini-2.0-flash")
        self.assertEqual(len(kwargs["contents"]), 2)
        self.assertEqual(kwargs["config"].max_output_tokens, 1000)

    @patch("inkplanner.ocr.gemini_provider.genai.Client")
    def test_none_text_is_empty(self, mock_client_cls):
        mock_client_cls.return_value.models.generate_content.return_value = MagicMock(text=None)
        self.assertEqual(GeminiBackend("g").recognize(DocumentPayload.from_data_url(PNG_URL)), "")

    @patch("inkplanner.ocr.gemini_provider.genai.Client")
    def test_api_error(self, mock_client_cls):
        mock_client_cls.return_value.models.generate_content.side_effect = errors.ClientError(
            400, {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}}
        )
        with self.assertRaises(ProviderError) as ctx:
            GeminiBackend("bad").recognize(DocumentPayload.from_data_url(PNG_URL))
        self.assertIn("API key not valid", str(ctx.exception))
        self.assertEqual(ctx.exception.status_code, 400)


class TestGoogleVisionBackend(unittest.TestCase):

    @patch("requests.post")
    def test_image_request(self, mock_post):
        mock_post.return_value = response(body={"responses": [{"fullTextAnnotation": {"text": "Dinner 7pm\n"}}]})

        text = GoogleVisionBackend("v-key").recognize(DocumentPayload.from_data_url(PNG_URL))

        self.assertEqual(text, "Dinner 7pm")
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://vision.googleapis.com/v1/images:annotate")
        self.assertEqual(kwargs["params"], {"key": "v-key"})
        req = kwargs["json"]["requests"][0]
        self.assertEqual(req["features"], [{"type": "DOCUMENT_TEXT_DETECTION"}])

    @patch("inkplanner.ocr.google_vision_provider.render_pdf_pages")
    @patch("requests.post")
    def test_pdf_pages_batched(self, mock_post, mock_render):
        mock_render.return_value = [b"page-one", b"page-two"]
        mock_post.return_value = response(body={"responses": [
            {"fullTextAnnotation": {"text": "Line one"}},
            {},
        ]})

        text = GoogleVisionBackend("v-key").recognize(DocumentPayload.from_bytes(b"%PDF-1.4"))

        self.assertEqual(text, "Line one")
        requests_sent = mock_post.call_args[1]["json"]["requests"]
        self.assertEqual(len(requests_sent), 2)
        self.assertEqual(requests_sent[1]["image"]["content"], base64.b64encode(b"page-two").decode())

    @patch("requests.post")
    def test_per_image_error(self, mock_post):
        mock_post.return_value = response(body={"responses": [{"error": {"message": "Bad image data."}}]})
        with self.assertRaises(ProviderError) as ctx:
            GoogleVisionBackend("v").recognize(DocumentPayload.from_data_url(PNG_URL))
        self.assertEqual(str(ctx.exception), "Bad image data.")

    @patch("requests.post")
    def test_unrenderable_pdf(self, mock_post):
        with self.assertRaises(FormatError):
            GoogleVisionBackend("v").recognize(DocumentPayload.from_bytes(b"%PDF-garbage"))
        mock_post.assert_not_called()


if __name__ == "__main__":
    unittest.main()
