"""
Extractors Package
One extractor per assistant feature, each bound to its response shape.
"""

from .nutrition_extractor import NutritionExtractor
from .pantry_extractor import PantryImageExtractor
from .recipe_extractor import RecipeExtractor
from .meal_plan_extractor import MealPlanExtractor
from .recommendation_extractor import PantryRecommendationExtractor

__all__ = [
    'NutritionExtractor', 'PantryImageExtractor', 'RecipeExtractor',
    'MealPlanExtractor', 'PantryRecommendationExtractor'
]
