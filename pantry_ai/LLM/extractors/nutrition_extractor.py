"""
Nutrition Extractor Module

Estimates nutrition facts for a photographed meal.
"""

import logging

from ..base_extractor import BaseExtractor, PROVIDER_ERROR_MESSAGE
from ..models import AnalysisResult
from ..shapes import NUTRITION
from ..utils.api_utils import build_user_content

logger = logging.getLogger(__name__)

# Below this the image most likely does not show food
MIN_CONFIDENCE = 0.3

SYSTEM_PROMPT = """You are a nutrition analysis assistant.
Look at the food photo and estimate its nutrition per serving.
If the photo does not show food, set "confidence" close to 0.

Respond with a single JSON object with these keys:
"foodName" (string), "servingSize" (string), "calories" (number),
"protein", "carbs", "fat", "fiber", "sugar" (grams, numbers),
"sodium" (mg, number), "confidence" (0-1), "healthScore" (0-100),
"dietaryFlags" (list of strings), "warnings" (optional list of strings)."""

USER_TEXT = "Estimate the nutrition facts of this food and answer with JSON."


class NutritionExtractor(BaseExtractor):
    """Extracts nutrition facts from a food image."""

    shape = NUTRITION

    def analyze(self, image_url: str) -> AnalysisResult:
        """
        Analyze a food photo.

        Args:
            image_url: Publicly reachable URL of the photo

        Returns:
            AnalysisResult whose data is the nutrition object
        """
        if not image_url or not image_url.strip():
            raise ValueError("image_url is required")

        result = self.extract_structured(
            SYSTEM_PROMPT,
            build_user_content(USER_TEXT, image_url),
            max_tokens=1500,
            temperature=0.2,
        )
        if result is None:
            return self.failure_result("AI Provider Error", message=PROVIDER_ERROR_MESSAGE)
        if not result.successful:
            return self.failure_result("Failed to parse nutrition data", reason=result.reason)

        nutrition = result.value
        confidence = self._as_number(nutrition.get("confidence"))
        if confidence is not None and confidence < MIN_CONFIDENCE:
            logger.info(f"Rejecting low-confidence analysis ({confidence:.2f}) for {nutrition.get('foodName')}")
            return self.failure_result(
                "Low confidence detection",
                message="This image might not contain food. Please upload a clear photo of your meal."
            )

        logger.info(f"Analyzed: {nutrition.get('foodName')} - {nutrition.get('calories')} calories")
        return AnalysisResult(successful=True, data=nutrition)

    @staticmethod
    def _as_number(value):
        if isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
