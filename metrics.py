"""Derived athlete figures: win rate, form status, BMI and meal plan merging."""
from typing import Any, Dict, List

from errors import ValidationError

GOOD_FORM_THRESHOLD = 70
AVERAGE_FORM_THRESHOLD = 40


def win_rate(wins: int, matches: int) -> float:
    """Wins as a percentage of `matches`, rounded to 2 decimals."""
    if not matches or matches <= 0:
        return 0.0
    return round(wins / matches * 100, 2)


def performance_status(rate: float) -> str:
    if rate >= GOOD_FORM_THRESHOLD:
        return "Good Form"
    if rate >= AVERAGE_FORM_THRESHOLD:
        return "Average Performance"
    return "Poor Form"


def bmi(height_cm: float, weight_kg: float) -> float:
    if not height_cm or height_cm <= 0:
        raise ValidationError("Height must be a positive number")
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 2)


def merge_meal_plan(existing: List[Dict[str, Any]], updates: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # dicts keep insertion order: replaced meals stay in place, new ones go last
    meals = {meal.get("meal"): meal for meal in existing or []}
    for meal in updates or []:
        meals[meal.get("meal")] = meal
    return list(meals.values())
