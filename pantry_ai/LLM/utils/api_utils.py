"""
API Utilities Module
Handles chat-completion calls, rate limiting, and retry mechanisms.
"""

import time
import random
import logging
from typing import Any, Dict, List, Optional, Union

from openai import OpenAI

# Configure logging
logger = logging.getLogger(__name__)

UserContent = Union[str, List[Dict[str, Any]]]


def build_user_content(text: str, image_url: Optional[str] = None) -> List[Dict[str, Any]]:
    """Build multimodal user content parts for a vision request.

    Args:
        text: Instruction text for the model
        image_url: Optional image to attach after the text

    Returns:
        List[Dict[str, Any]]: Content parts in chat-completion format
    """
    parts: List[Dict[str, Any]] = [{"type": "text", "text": text}]
    if image_url:
        parts.append({"type": "image_url", "image_url": {"url": image_url}})
    return parts


class APIManager:
    """Manages API interactions with rate limiting and retries."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str] = None,
        max_rpm: int = 100,
        temperature: float = 0.2
    ):
        """Initialize API manager.

        Args:
            api_key: API key for the OpenAI-compatible endpoint
            model: Model to use for completions
            base_url: Endpoint base URL; None uses the SDK default
            max_rpm: Maximum requests per minute
            temperature: Default sampling temperature
        """
        self.client = OpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.max_rpm = max_rpm
        self.temperature = temperature
        self.request_times = []

    def enforce_rate_limit(self) -> None:
        """Enforce API rate limits to prevent 429 errors."""
        current_time = time.time()

        # Remove requests older than 1 minute
        self.request_times = [t for t in self.request_times if current_time - t < 60]

        if len(self.request_times) >= self.max_rpm:
            sleep_time = 60 - (current_time - self.request_times[0]) + random.uniform(0.5, 1.5)
            logger.info(f"Rate limit reached, sleeping for {sleep_time:.2f} seconds")
            time.sleep(sleep_time)

        self.request_times.append(current_time)

    def call_with_retry(
        self,
        system_prompt: str,
        user_content: UserContent,
        max_retries: int = 3,
        temperature: Optional[float] = None,
        max_tokens: int = 1500,
        response_format: Optional[Dict[str, Any]] = None
    ) -> Optional[str]:
        """Call the chat-completion API with retry and backoff logic.

        Args:
            system_prompt: System prompt for the model
            user_content: Plain text or multimodal content parts
            max_retries: Maximum number of retry attempts
            temperature: Sampling temperature; None uses the manager default
            max_tokens: Maximum tokens in the response
            response_format: Optional structured-output request

        Returns:
            Optional[str]: Model response or None if all retries failed
        """
        request = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_tokens,
        }
        if response_format is not None:
            request["response_format"] = response_format

        for attempt in range(max_retries):
            try:
                self.enforce_rate_limit()

                response = self.client.chat.completions.create(**request)

                content = response.choices[0].message.content
                return content.strip() if content else None

            except Exception as e:
                logger.warning(f"API call attempt {attempt + 1} failed: {str(e)}")
                if attempt < max_retries - 1:
                    # Exponential backoff with jitter
                    sleep_time = (2 ** attempt) + random.uniform(0, 1)
                    time.sleep(sleep_time)
                else:
                    logger.error(f"All API attempts failed after {max_retries} retries")

        return None
