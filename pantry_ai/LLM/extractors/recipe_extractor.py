"""
Recipe Extractor Module

Generates a full recipe from a video's metadata and thumbnail, a list of
available ingredients, and/or a free-text request.
"""

import logging
from typing import Any, Dict, List, Optional

from ..base_extractor import BaseExtractor, PROVIDER_ERROR_MESSAGE
from ..models import AnalysisResult
from ..shapes import RECIPE

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a professional chef assistant.
Write one detailed cooking recipe from the material the user provides.
When a video thumbnail is attached, use it to identify the dish, its
ingredients and cooking style.

Respond with a single JSON object:
{
  "title": string,
  "description": string,
  "time_minutes": number,
  "difficulty": "Easy" | "Medium" | "Hard",
  "servings": number,
  "calories_per_serving": number,
  "ingredients": [string],
  "tools": [string],
  "steps": [{"step": number, "instruction": string}],
  "tips": string
}"""


class RecipeExtractor(BaseExtractor):
    """Generates recipes as structured JSON."""

    shape = RECIPE

    def build_user_content(
        self,
        ingredients: Optional[List[str]] = None,
        prompt: Optional[str] = None,
        video_context: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Assemble content parts from whichever inputs were supplied.

        ``video_context`` may carry ``url``, ``title``, ``description``,
        ``platform`` and ``thumbnail_url``.
        """
        parts: List[Dict[str, Any]] = [
            {"type": "text", "text": "Please create a recipe from the following."}
        ]

        if video_context:
            parts.append({
                "type": "text",
                "text": (
                    "\n[VIDEO METADATA]\n"
                    f"URL: {video_context.get('url', '')}\n"
                    f"Title: {video_context.get('title', '')}\n"
                    f"Context: {video_context.get('description', '')}\n"
                    f"Platform: {video_context.get('platform', '')}"
                )
            })
            thumbnail_url = video_context.get("thumbnail_url")
            if thumbnail_url:
                parts.append({"type": "image_url", "image_url": {"url": thumbnail_url}})
            else:
                parts.append({"type": "text", "text": "(No thumbnail available, use the title and description.)"})

        if ingredients:
            parts.append({"type": "text", "text": f"Ingredients I have: {', '.join(ingredients)}."})

        if prompt:
            parts.append({"type": "text", "text": f"Additional request: {prompt}"})

        return parts

    def generate(
        self,
        ingredients: Optional[List[str]] = None,
        prompt: Optional[str] = None,
        video_context: Optional[Dict[str, Any]] = None
    ) -> AnalysisResult:
        """
        Generate a recipe.

        Args:
            ingredients: Ingredients the user has on hand
            prompt: Free-text wishes from the user
            video_context: Metadata of a cooking video

        Returns:
            AnalysisResult whose data is the recipe object

        Raises:
            ValueError: If no input was supplied at all
        """
        if not ingredients and not prompt and not video_context:
            raise ValueError("Provide ingredients, a prompt or a video")

        result = self.extract_structured(
            SYSTEM_PROMPT,
            self.build_user_content(ingredients, prompt, video_context),
            max_tokens=1500,
            temperature=0.7,
            response_format={"type": "json_object"},
        )
        if result is None:
            return self.failure_result("AI Provider Error", message=PROVIDER_ERROR_MESSAGE)
        if not result.successful:
            return self.failure_result("AI did not return valid JSON", reason=result.reason)

        logger.info(f"Generated recipe: {result.value.get('title')}")
        return AnalysisResult(successful=True, data=result.value)
