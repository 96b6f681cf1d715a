# tools/metric_extractor.py
"""
MealPlan Analytics — Metric Extractor Tool
===========================================
Heuristic extraction of calories, day counts, ingredients, meal types and
cultural tags from one canonical meal plan.

This is a pure text-processing tool (no AI required). Raw-text plans are
matched with fixed regular expressions and keyword lists; structured plans
are read field by field.
"""

import math
import re
from dataclasses import dataclass, field
from typing import List, Set, Union

from tools.plan_normalizer import (
    CanonicalPlan,
    PlanRecord,
    RawTextPlan,
    StructuredPlan,
    normalize_plan_data,
    parse_structured_days,
)


# =============================================================================
# PATTERNS
# =============================================================================

# "300 calories", "1 Calorie"
CALORIE_PATTERN = re.compile(r"([0-9]+)\s*calories?", re.IGNORECASE)

# "(300 calories)" also matches CALORIE_PATTERN, so it is counted twice
PARENTHESIZED_CALORIE_PATTERN = re.compile(r"\(([0-9]+)\s*calories?\)", re.IGNORECASE)

BULLET_LINE_PATTERN = re.compile(r"^\s*[*\-]\s*(.+)$", re.MULTILINE)

SHOPPING_LIST_PATTERN = re.compile(r"Grocery Shopping List:(.*?)(?=\*\*|\Z)", re.DOTALL)

MEAL_TYPE_PATTERN = re.compile(
    r"^(Breakfast|Lunch|Dinner|Snack):", re.IGNORECASE | re.MULTILINE
)

DAY_PATTERN = re.compile(r"^Day\s+[0-9]+", re.IGNORECASE | re.MULTILINE)


# =============================================================================
# KEYWORD LISTS
# =============================================================================
INGREDIENT_EXCLUSIONS = ["calories", "tip", "prep"]

NIGERIAN_KEYWORDS = [
    "jollof", "egusi", "ogbono", "akara", "moi moi", "suya", "plantain",
    "yam", "cassava", "palm oil", "coconut", "pepper soup", "banga soup",
]

INTERNATIONAL_KEYWORDS = ["quinoa", "avocado"]

MEALS_PER_DAY = 4
MIN_INGREDIENT_LENGTH = 3


# =============================================================================
# RESULT CONTAINER
# =============================================================================
@dataclass
class ExtractedMetrics:
    """Partial metrics found in one plan record."""
    calories_found: Union[int, float] = 0
    days_found: int = 0
    ingredient_mentions: Set[str] = field(default_factory=set)
    meal_type_mentions: Set[str] = field(default_factory=set)
    cultural_tags: Set[str] = field(default_factory=set)


# =============================================================================
# RAW-TEXT RULES
# =============================================================================
def extract_calorie_mentions(text: str) -> List[int]:
    """
    Find every calorie figure in plan text.

    Bare mentions ("300 calories") and parenthesized ones ("(300 calories)")
    are matched by separate rules, so a parenthesized figure shows up twice.

    Example:
        >>> extract_calorie_mentions("Breakfast (300 calories): oats")
        [300, 300]
    """
    bare = [int(m.group(1)) for m in CALORIE_PATTERN.finditer(text)]
    parenthesized = [int(m.group(1)) for m in PARENTHESIZED_CALORIE_PATTERN.finditer(text)]
    return bare + parenthesized


def _bullet_items(text: str) -> List[str]:
    return [m.group(1).strip() for m in BULLET_LINE_PATTERN.finditer(text)]


def extract_bullet_ingredients(text: str) -> Set[str]:
    """Bullet lines that look like ingredients, lowercased."""
    ingredients = set()
    for item in _bullet_items(text):
        lowered = item.lower()
        if not item or len(item) < MIN_INGREDIENT_LENGTH:
            continue
        if any(word in lowered for word in INGREDIENT_EXCLUSIONS):
            continue
        ingredients.add(lowered)
    return ingredients


def extract_shopping_list(text: str) -> Set[str]:
    """
    Bullet items under "Grocery Shopping List:" up to the next bold marker.

    Only the length check applies here; shopping items are never excluded
    for mentioning calories, tips or prep.
    """
    match = SHOPPING_LIST_PATTERN.search(text)
    if not match:
        return set()

    return {
        item.lower()
        for item in _bullet_items(match.group(1))
        if item and len(item) >= MIN_INGREDIENT_LENGTH
    }


def extract_meal_types(text: str) -> List[str]:
    """Meal labels at line start, as written (case kept)."""
    return [m.group(1).strip() for m in MEAL_TYPE_PATTERN.finditer(text)]


def count_plan_days(text: str, meal_count: int) -> int:
    """Count "Day N" lines, or estimate from meal lines at four meals per day."""
    day_count = len(DAY_PATTERN.findall(text))
    if day_count:
        return day_count
    return math.ceil(meal_count / MEALS_PER_DAY)


def detect_cultural_tags(text: str) -> Set[str]:
    """Coarse cuisine tags from keyword presence."""
    text_lower = text.lower()
    tags = set()

    if any(kw in text_lower for kw in NIGERIAN_KEYWORDS):
        tags.add("Nigerian")
    if any(kw in text_lower for kw in INTERNATIONAL_KEYWORDS):
        tags.add("International")

    return tags


def extract_raw_text_metrics(text: str) -> ExtractedMetrics:
    """Apply every raw-text rule to one plan's text."""
    metrics = ExtractedMetrics()

    metrics.calories_found = sum(extract_calorie_mentions(text))

    metrics.ingredient_mentions = extract_bullet_ingredients(text)
    metrics.ingredient_mentions |= extract_shopping_list(text)

    meal_types = extract_meal_types(text)
    metrics.meal_type_mentions = set(meal_types)
    metrics.days_found = count_plan_days(text, len(meal_types))

    metrics.cultural_tags = detect_cultural_tags(text)

    return metrics


# =============================================================================
# STRUCTURED RULES
# =============================================================================
def extract_structured_metrics(days) -> ExtractedMetrics:
    """
    Read calories, ingredients, meal names and cultural context from
    structured day data. Every day counts, with or without calories.
    """
    metrics = ExtractedMetrics()

    for day in parse_structured_days(days):
        if day.total_calories:
            metrics.calories_found += day.total_calories
        metrics.days_found += 1

        for meal in day.meals or []:
            if meal.calories:
                metrics.calories_found += meal.calories
            for ingredient in meal.ingredients or []:
                metrics.ingredient_mentions.add(ingredient.lower())
            if meal.name:
                metrics.meal_type_mentions.add(meal.name)
            if meal.cultural_context:
                metrics.cultural_tags.add(meal.cultural_context)

    return metrics


# =============================================================================
# MAIN TOOL: extract_plan_metrics
# =============================================================================
def extract_canonical_metrics(plan: CanonicalPlan) -> ExtractedMetrics:
    """Dispatch on the canonical plan variant."""
    if isinstance(plan, RawTextPlan):
        return extract_raw_text_metrics(plan.text)
    if isinstance(plan, StructuredPlan):
        return extract_structured_metrics(plan.days)
    raise TypeError(f"Unsupported plan type: {type(plan).__name__}")


def extract_plan_metrics(record: PlanRecord) -> ExtractedMetrics:
    """
    Extract metrics from one plan record.

    Normalizes the record's data, runs the structured or raw-text rules, then
    adds the record's own calorie and day metadata on top of what was found.

    Args:
        record: A validated PlanRecord.

    Returns:
        ExtractedMetrics for this record. Malformed structured data raises
        (pydantic ValidationError); callers isolate that per record.
    """
    metrics = extract_canonical_metrics(normalize_plan_data(record.data))

    if record.estimated_calories and record.estimated_calories > 0:
        metrics.calories_found += record.estimated_calories

    if record.total_days and record.total_days > 0:
        metrics.days_found += record.total_days

    return metrics


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    "ExtractedMetrics",
    "extract_plan_metrics",
    "extract_canonical_metrics",
    "extract_raw_text_metrics",
    "extract_structured_metrics",
    "extract_calorie_mentions",
    "extract_bullet_ingredients",
    "extract_shopping_list",
    "extract_meal_types",
    "count_plan_days",
    "detect_cultural_tags",
    "NIGERIAN_KEYWORDS",
    "INTERNATIONAL_KEYWORDS",
    "INGREDIENT_EXCLUSIONS",
    "MEALS_PER_DAY",
]
