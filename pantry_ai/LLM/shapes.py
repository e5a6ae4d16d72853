"""
Shape Catalog
Expected response shapes for each kind of model request.
"""

from typing import Dict

from .models import ShapeDescriptor

PANTRY_ITEM = ShapeDescriptor.object("name", "quantity", "category", "expiry_date")
PANTRY_ITEM_LIST = ShapeDescriptor.array_of(PANTRY_ITEM)

RECIPE = ShapeDescriptor.object("title", "ingredients", "steps", "time_minutes")

NUTRITION = ShapeDescriptor.object("foodName", "calories")

MEAL_PLAN_ITEM = ShapeDescriptor.object("recipe_name", "description")
MEAL_PLAN_ITEMS = ShapeDescriptor.array_of(MEAL_PLAN_ITEM)
WEEKLY_PLAN = ShapeDescriptor.object("plan")

PANTRY_RECOMMENDATIONS = ShapeDescriptor.object("recommendations")

SHAPES: Dict[str, ShapeDescriptor] = {
    "pantry_item": PANTRY_ITEM,
    "pantry_item_list": PANTRY_ITEM_LIST,
    "recipe": RECIPE,
    "nutrition": NUTRITION,
    "meal_plan_item": MEAL_PLAN_ITEM,
    "meal_plan_items": MEAL_PLAN_ITEMS,
    "weekly_plan": WEEKLY_PLAN,
    "pantry_recommendations": PANTRY_RECOMMENDATIONS,
}


def get_shape(name: str) -> ShapeDescriptor:
    """Look up a catalog shape by name."""
    try:
        return SHAPES[name]
    except KeyError:
        raise KeyError(f"Unknown shape '{name}'. Known shapes: {', '.join(sorted(SHAPES))}")
