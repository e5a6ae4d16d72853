"""
Base Extractor Module
Provides the foundation for all model-backed extractors with common functionality.
"""

import os
import logging
from typing import Any, Optional

from dotenv import load_dotenv

from .models import (
    AnalysisResult,
    ExtractionErrorKind,
    ExtractionFailure,
    ExtractionResult,
    ShapeDescriptor,
)
from .utils.api_utils import APIManager, UserContent
from .utils.result_parser import ResultParser

load_dotenv()
logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.novita.ai/openai/v1"
DEFAULT_MODEL = "qwen/qwen3-vl-30b-a3b-instruct"

GENERIC_PARSE_MESSAGE = "The AI response could not be understood. Please try again."
PROVIDER_ERROR_MESSAGE = "The AI service is currently unavailable. Please try again later."

STRICT_JSON_INSTRUCTION = (
    "\n\nIMPORTANT: Respond with valid JSON only. "
    "No markdown fences, no explanations before or after the JSON."
)


class BaseExtractor:
    """Base class for all model-backed extractors.

    Handles configuration, the upstream call, and turning raw responses
    into shape-checked values through ResultParser.
    """

    # Shape used when a call does not pass one explicitly
    shape: Optional[ShapeDescriptor] = None

    def __init__(
        self,
        api_manager: Optional[APIManager] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None
    ):
        """Initialize the base extractor.

        Args:
            api_manager: Preconfigured API manager; built from the
                environment when omitted
            api_key: Overrides OPENAI_API_KEY / NOVITA_AI_API_KEY
            model: Overrides OPENAI_MODEL
            base_url: Overrides OPENAI_BASE_URL
        """
        if api_manager is None:
            api_manager = APIManager(
                api_key=api_key or os.getenv("OPENAI_API_KEY") or os.getenv("NOVITA_AI_API_KEY"),
                model=model or os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
                base_url=base_url or os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL),
                max_rpm=int(os.getenv("MAX_REQUESTS_PER_MINUTE", "100")),
            )
        self.api_manager = api_manager
        self.result_parser = ResultParser()

    def call_llm(self, system_prompt: str, user_content: UserContent, **kwargs) -> Optional[str]:
        """Call the model and return its raw text, or None on failure."""
        return self.api_manager.call_with_retry(
            system_prompt=system_prompt,
            user_content=user_content,
            **kwargs
        )

    def parse_response(self, response: Optional[str], shape: Optional[ShapeDescriptor] = None) -> ExtractionResult:
        """Run a raw response through ResultParser and log failures."""
        result = self.result_parser.extract(response, shape or self.shape)
        if not result.successful:
            logger.warning(
                f"{type(self).__name__} could not parse response "
                f"({result.reason.value}): {result.snippet!r}"
            )
        return result

    def extract_structured(
        self,
        system_prompt: str,
        user_content: UserContent,
        shape: Optional[ShapeDescriptor] = None,
        max_attempts: int = 2,
        **llm_kwargs: Any
    ) -> Optional[ExtractionResult]:
        """Call the model and recover a value of the expected shape.

        An unparseable response is retried with a stricter JSON-only
        instruction appended to the system prompt.

        Args:
            system_prompt: System prompt for the model
            user_content: Plain text or multimodal content parts
            shape: Expected shape; defaults to the class-level shape
            max_attempts: Total number of model calls allowed
            **llm_kwargs: Passed through to APIManager.call_with_retry

        Returns:
            Optional[ExtractionResult]: The last extraction outcome, or None
            when the model returned no content
        """
        shape = shape or self.shape
        if shape is None:
            raise ValueError(f"{type(self).__name__} has no shape to extract")

        result: ExtractionResult = ExtractionFailure(ExtractionErrorKind.NO_JSON_FOUND, "")
        prompt = system_prompt
        for attempt in range(max_attempts):
            response = self.call_llm(prompt, user_content, **llm_kwargs)
            if response is None:
                logger.error(f"{type(self).__name__}: model returned no content")
                return None

            result = self.parse_response(response, shape)
            if result.successful:
                return result

            if attempt < max_attempts - 1:
                logger.info(f"Retrying with strict JSON instruction (attempt {attempt + 2}/{max_attempts})")
                prompt = system_prompt + STRICT_JSON_INSTRUCTION

        return result

    @staticmethod
    def failure_result(error: str, reason: Optional[ExtractionErrorKind] = None,
                       message: Optional[str] = None) -> AnalysisResult:
        """Build an unsuccessful AnalysisResult for an end caller."""
        return AnalysisResult(
            successful=False,
            error=error,
            message=message or GENERIC_PARSE_MESSAGE,
            reason=reason.value if reason is not None else None
        )
