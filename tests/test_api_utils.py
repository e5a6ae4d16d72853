"""
Tests for the APIManager module.

Validates request construction, retries and rate limiting around the
OpenAI client.
"""

import unittest
from unittest.mock import MagicMock, patch

from pantry_ai.LLM.utils.api_utils import APIManager, build_user_content


def make_response(content):
    """Build a chat-completion response mock with the given content."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


class TestAPIManager(unittest.TestCase):
    """Test suite for APIManager."""

    def setUp(self):
        """Set up test fixtures before each test."""
        self.openai_patcher = patch('pantry_ai.LLM.utils.api_utils.OpenAI')
        self.mock_openai = self.openai_patcher.start()
        self.mock_client = MagicMock()
        self.mock_openai.return_value = self.mock_client

        self.sleep_patcher = patch('pantry_ai.LLM.utils.api_utils.time.sleep')
        self.mock_sleep = self.sleep_patcher.start()

        self.manager = APIManager(
            api_key="mock-key",
            model="mock-model",
            base_url="https://example.test/v1",
            max_rpm=100,
            temperature=0.2
        )

    def tearDown(self):
        """Clean up after each test."""
        self.openai_patcher.stop()
        self.sleep_patcher.stop()

    def test_client_configuration(self):
        self.mock_openai.assert_called_once_with(api_key="mock-key", base_url="https://example.test/v1")

    def test_successful_call(self):
        self.mock_client.chat.completions.create.return_value = make_response('  {"a": 1}\n')

        result = self.manager.call_with_retry("system", "user")

        self.assertEqual(result, '{"a": 1}')
        kwargs = self.mock_client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "mock-model")
        self.assertEqual(kwargs["temperature"], 0.2)
        self.assertEqual(kwargs["messages"][0], {"role": "system", "content": "system"})
        self.assertEqual(kwargs["messages"][1], {"role": "user", "content": "user"})
        self.assertNotIn("response_format", kwargs)

    def test_response_format_and_overrides(self):
        self.mock_client.chat.completions.create.return_value = make_response("{}")

        self.manager.call_with_retry(
            "system", "user",
            temperature=0.7, max_tokens=42,
            response_format={"type": "json_object"}
        )

        kwargs = self.mock_client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["temperature"], 0.7)
        self.assertEqual(kwargs["max_tokens"], 42)
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})

    def test_retries_then_succeeds(self):
        self.mock_client.chat.completions.create.side_effect = [
            Exception("503 upstream"),
            make_response("ok")
        ]

        result = self.manager.call_with_retry("system", "user", max_retries=3)

        self.assertEqual(result, "ok")
        self.assertEqual(self.mock_client.chat.completions.create.call_count, 2)
        self.mock_sleep.assert_called_once()

    def test_all_retries_fail(self):
        self.mock_client.chat.completions.create.side_effect = Exception("boom")

        result = self.manager.call_with_retry("system", "user", max_retries=2)

        self.assertIsNone(result)
        self.assertEqual(self.mock_client.chat.completions.create.call_count, 2)

    def test_empty_content_is_none(self):
        self.mock_client.chat.completions.create.return_value = make_response(None)

        self.assertIsNone(self.manager.call_with_retry("system", "user"))

    def test_rate_limit_sleeps_when_full(self):
        self.manager.max_rpm = 1
        with patch('pantry_ai.LLM.utils.api_utils.time.time', return_value=1000.0):
            self.manager.request_times = [990.0]
            self.manager.enforce_rate_limit()

        self.mock_sleep.assert_called_once()
        self.assertGreaterEqual(self.mock_sleep.call_args.args[0], 50.0)


class TestBuildUserContent(unittest.TestCase):
    """Test suite for multimodal content construction."""

    def test_text_only(self):
        self.assertEqual(build_user_content("hello"), [{"type": "text", "text": "hello"}])

    def test_text_and_image(self):
        parts = build_user_content("look", "https://img.test/a.jpg")

        self.assertEqual(parts[1], {"type": "image_url", "image_url": {"url": "https://img.test/a.jpg"}})


if __name__ == '__main__':
    unittest.main()
