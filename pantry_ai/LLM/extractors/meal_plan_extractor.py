"""
Meal Plan Extractor Module

Generates a seven-day breakfast/lunch/dinner plan and lays the returned
dishes out on calendar slots.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Union

from ..base_extractor import BaseExtractor, PROVIDER_ERROR_MESSAGE
from ..models import AnalysisResult, ExtractionResult, ExtractionSuccess
from ..shapes import MEAL_PLAN_ITEMS, WEEKLY_PLAN

logger = logging.getLogger(__name__)

MEAL_TYPES = ["breakfast", "lunch", "dinner"]
PLAN_DAYS = 7
PLAN_SIZE = PLAN_DAYS * len(MEAL_TYPES)

SYSTEM_PROMPT = "You are a meal planning API. Output strictly structured JSON. recipe_name must be clean."
FALLBACK_SYSTEM_PROMPT = "You MUST output strictly valid JSON only. No intro text."

PLAN_PROMPT = """Create a 7-day meal plan (breakfast, lunch, dinner) starting from {start_date}.

User profile:
{constraints}

Return a JSON object with a single key "plan" holding exactly 21 items,
ordered Day 1 breakfast, Day 1 lunch, Day 1 dinner, Day 2 breakfast, and so on.
Each item has "recipe_name" (the dish name only, no day, meal type or notes)
and "description" (dietary context, calories and explanations)."""


def plan_response_format() -> Dict[str, Any]:
    """Structured-output request for the weekly plan."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "weekly_meal_plan",
            "schema": {
                "type": "object",
                "properties": {"plan": MEAL_PLAN_ITEMS.to_json_schema()},
                "required": ["plan"],
            },
        },
    }


class MealPlanExtractor(BaseExtractor):
    """Generates weekly meal plans."""

    shape = MEAL_PLAN_ITEMS

    def generate(self, start_date: Union[str, date], profile_constraints: str = "") -> AnalysisResult:
        """
        Generate a weekly plan.

        The structured-output request is tried first; providers that reject
        it get a plain JSON-mode request instead.

        Args:
            start_date: First day of the plan (date or ISO string)
            profile_constraints: Dietary profile text for the prompt

        Returns:
            AnalysisResult whose data is a list of meal slots
        """
        if isinstance(start_date, str):
            start_date = date.fromisoformat(start_date)

        prompt = PLAN_PROMPT.format(
            start_date=start_date.isoformat(),
            constraints=profile_constraints or "No specific constraints."
        )

        logger.info("Attempt 1: structured output")
        content = self.call_llm(
            SYSTEM_PROMPT, prompt,
            temperature=0.3, max_tokens=3000,
            response_format=plan_response_format(),
            max_retries=1,
        )
        if content is None:
            logger.warning("Structured output rejected, trying plain JSON mode")
            content = self.call_llm(
                FALLBACK_SYSTEM_PROMPT, prompt + "\n\nRETURN JSON ONLY.",
                temperature=0.3, max_tokens=3000,
                response_format={"type": "json_object"},
            )
        if content is None:
            return self.failure_result("AI Provider Error", message=PROVIDER_ERROR_MESSAGE)

        result = self.parse_plan(content)
        if not result.successful:
            return self.failure_result("Failed to parse meal plan", reason=result.reason)

        items = result.value
        if len(items) < PLAN_SIZE:
            logger.warning(f"AI returned {len(items)} items instead of {PLAN_SIZE}")

        return AnalysisResult(successful=True, data=self.assign_slots(items, start_date))

    def parse_plan(self, content: str) -> ExtractionResult:
        """Accept either ``{"plan": [...]}`` or a bare array of meals."""
        wrapped = self.result_parser.extract(content, WEEKLY_PLAN)
        if wrapped.successful and isinstance(wrapped.value["plan"], list):
            items = wrapped.value["plan"]
            if not self.result_parser.missing_fields(items, self.shape):
                return ExtractionSuccess(items)
        return self.parse_response(content)

    @staticmethod
    def assign_slots(items: List[Dict[str, Any]], start_date: date) -> List[Dict[str, Any]]:
        """Map meals in order onto day and meal-type slots, dropping extras."""
        slots = []
        for index, item in enumerate(items[:PLAN_SIZE]):
            day_offset = index // len(MEAL_TYPES)
            slots.append({
                "date": (start_date + timedelta(days=day_offset)).isoformat(),
                "meal_type": MEAL_TYPES[index % len(MEAL_TYPES)],
                "recipe_name": item["recipe_name"],
                "description": item["description"],
            })
        return slots
