"""
Pantry Image Extractor Module

Lists the food items visible in a pantry or fridge photo.
"""

import logging

from ..base_extractor import BaseExtractor, PROVIDER_ERROR_MESSAGE
from ..models import AnalysisResult, ExtractionErrorKind, ShapeDescriptor
from ..shapes import PANTRY_ITEM_LIST
from ..utils.api_utils import build_user_content

logger = logging.getLogger(__name__)

PANTRY_CATEGORIES = ["Produce", "Dairy", "Meat", "Grains", "Snacks", "Beverage", "Other"]
CATEGORY_NAMES = ", ".join(PANTRY_CATEGORIES)

SYSTEM_PROMPT = f"""You catalog food items from photos of pantries and fridges.
For every distinct food item you can see, report:
"name", "quantity" (e.g. "12 pcs", "500 g"), "category" (one of {CATEGORY_NAMES})
and "expiry_date" (estimated, ISO date YYYY-MM-DD).
Respond with a JSON array of these objects. Respond with [] if no food is visible."""

USER_TEXT = "Analyze this image and list the food items."

# Structured output wraps the list under "items"
WRAPPED_ITEMS = ShapeDescriptor.object("items")


def pantry_response_format() -> dict:
    """Structured-output request for a wrapped pantry item list."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "pantry_items",
            "schema": {
                "type": "object",
                "properties": {"items": PANTRY_ITEM_LIST.to_json_schema()},
                "required": ["items"],
            },
        },
    }


class PantryImageExtractor(BaseExtractor):
    """Extracts pantry items from a photo."""

    shape = PANTRY_ITEM_LIST

    def analyze(self, image_url: str) -> AnalysisResult:
        """
        Detect food items in a pantry photo.

        An empty list is a successful result; deciding that it means
        "no food detected" is left to the caller.
        """
        if not image_url or not image_url.strip():
            raise ValueError("image_url is required")

        content = self.call_llm(
            SYSTEM_PROMPT,
            build_user_content(USER_TEXT, image_url),
            max_tokens=2000,
            temperature=0.1,
            response_format=pantry_response_format(),
        )
        if content is None:
            return self.failure_result("AI Provider Error", message=PROVIDER_ERROR_MESSAGE)

        # The structured form nests the list; plain replies give it bare
        wrapped = self.result_parser.extract(content, WRAPPED_ITEMS)
        if wrapped.successful and isinstance(wrapped.value["items"], list):
            items = wrapped.value["items"]
            problems = self.result_parser.missing_fields(items, self.shape)
            if problems:
                logger.warning(f"Pantry items failed validation: {problems}")
                return self.failure_result(
                    "Failed to parse pantry items",
                    reason=ExtractionErrorKind.MISSING_REQUIRED_FIELDS
                )
        else:
            result = self.parse_response(content)
            if not result.successful:
                return self.failure_result("Failed to parse pantry items", reason=result.reason)
            items = result.value

        logger.info(f"Detected {len(items)} pantry items")
        return AnalysisResult(successful=True, data=items)
