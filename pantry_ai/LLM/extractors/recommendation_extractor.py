"""
Pantry Recommendation Extractor Module

Suggests recipes that make the most of what is already in the pantry.
"""

import json
import logging
import math
from typing import Any, Dict, List, Optional

from ..base_extractor import BaseExtractor, PROVIDER_ERROR_MESSAGE
from ..models import AnalysisResult
from ..shapes import PANTRY_RECOMMENDATIONS

logger = logging.getLogger(__name__)

# Placeholder photos handed out in rotation
DEFAULT_IMAGE_URLS = [
    "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?w=800",  # salad
    "https://images.unsplash.com/photo-1563379926898-05f4575a45d8?w=800",  # pasta
    "https://images.unsplash.com/photo-1603133872878-684f208fb84b?w=800",  # rice
    "https://images.unsplash.com/photo-1540189549336-e6e99c3679fe?w=800",  # general food
]

SYSTEM_PROMPT = """You are a home cooking assistant that reduces food waste.
Suggest 3 recipes that use as many of the user's pantry items as possible,
preferring items that expire soonest.

Respond with a JSON object {"recommendations": [...]} where each recipe has:
"title", "description", "time_minutes", "difficulty" ("Easy"|"Medium"|"Hard"),
"servings", "calories_per_serving", "ingredients" ([{"item", "quantity", "unit"}]),
"tools", "steps" ([{"step", "instruction"}]), "tips",
"matchScore" (0-1, share of ingredients taken from the pantry),
"usedPantryItems" ([string]),
"missingIngredients" ([{"item", "quantity", "unit", "isEssential"}]),
"alternativeSuggestions" ([string])."""


class PantryRecommendationExtractor(BaseExtractor):
    """Generates pantry-based recipe recommendations."""

    shape = PANTRY_RECOMMENDATIONS

    def recommend(
        self,
        pantry_items: List[Dict[str, Any]],
        preferences: Optional[Dict[str, Any]] = None
    ) -> AnalysisResult:
        """
        Recommend recipes for the given pantry.

        Args:
            pantry_items: Pantry rows (name, quantity, expiry_date, ...)
            preferences: Optional dietary preferences passed to the model

        Returns:
            AnalysisResult whose data is the list of recommendations
        """
        if not pantry_items:
            raise ValueError("pantry_items must not be empty")

        user_text = f"My pantry items:\n{json.dumps(pantry_items, ensure_ascii=False, indent=2)}"
        if preferences:
            user_text += f"\n\nMy preferences:\n{json.dumps(preferences, ensure_ascii=False)}"

        result = self.extract_structured(
            SYSTEM_PROMPT,
            user_text,
            max_tokens=3000,
            temperature=0.3,
        )
        if result is None:
            return self.failure_result("AI Provider Error", message=PROVIDER_ERROR_MESSAGE)
        if not result.successful:
            return self.failure_result("Failed to parse AI response", reason=result.reason)

        recommendations = result.value["recommendations"]
        if not isinstance(recommendations, list):
            logger.warning(f"'recommendations' is a {type(recommendations).__name__}, not a list")
            recommendations = []

        enhanced = [
            self.normalize(rec, index)
            for index, rec in enumerate(recommendations)
            if isinstance(rec, dict)
        ]
        logger.info(f"Generated {len(enhanced)} recommendations")
        return AnalysisResult(successful=True, data=enhanced)

    @staticmethod
    def normalize(rec: Dict[str, Any], index: int) -> Dict[str, Any]:
        """Clamp the match score, fill optional fields and attach a placeholder image."""
        try:
            score = float(rec.get("matchScore") or 0)
        except (TypeError, ValueError):
            score = 0.0
        if not math.isfinite(score):
            score = 0.0
        return {
            **rec,
            "id": f"pantry-rec-{index}",
            "imageUrl": DEFAULT_IMAGE_URLS[index % len(DEFAULT_IMAGE_URLS)],
            "matchScore": min(max(score, 0.0), 1.0),
            "alternativeSuggestions": rec.get("alternativeSuggestions") or [],
        }
