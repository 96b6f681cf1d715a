# tools/plan_normalizer.py
"""
MealPlan Analytics — Plan Normalizer Tool
==========================================
Turns one stored meal plan record into a canonical plan: either structured
day/meal data or a single raw-text blob (usually generated markdown).

Decode failures are not errors here. Text that is not valid JSON is simply
treated as raw plan text.
"""

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter


# =============================================================================
# VALIDATION SCHEMAS
# =============================================================================
class PlanRecord(BaseModel):
    """One stored meal plan entry, as handed over by the plan store."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    data: Any = None
    estimated_calories: Optional[float] = Field(
        None,
        validation_alias=AliasChoices("estimated_calories", "estimatedCalories"),
    )
    total_days: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("total_days", "totalDays"),
    )


class StructuredMeal(BaseModel):
    """A single meal inside a structured plan day."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[str] = None
    calories: Optional[float] = Field(None, ge=0)
    ingredients: Optional[List[str]] = None
    cultural_context: Optional[str] = Field(None, alias="culturalContext")


class StructuredDay(BaseModel):
    """One day of a structured plan."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    total_calories: Optional[float] = Field(None, ge=0, alias="totalCalories")
    meals: Optional[List[StructuredMeal]] = None


_DAYS_ADAPTER = TypeAdapter(List[StructuredDay])


# =============================================================================
# CANONICAL PLAN VARIANTS
# =============================================================================
@dataclass(frozen=True)
class StructuredPlan:
    """Plan with day/meal structure. Days are validated on extraction."""
    days: Any = field(default_factory=list)


@dataclass(frozen=True)
class RawTextPlan:
    """Plan available only as free-form text."""
    text: str = ""


CanonicalPlan = Union[StructuredPlan, RawTextPlan]


# =============================================================================
# MAIN TOOL: normalize_plan_data
# =============================================================================
def normalize_plan_data(data: Any) -> CanonicalPlan:
    """
    Convert a plan record's ``data`` field into a canonical plan.

    Args:
        data: Plan text, JSON-encoded plan text, or an already decoded mapping.

    Returns:
        StructuredPlan when the payload carries ``days``, RawTextPlan when it
        is undecodable text or carries a ``raw`` string. Any other shape gives
        an empty StructuredPlan.

    Example:
        >>> normalize_plan_data("Day 1\\nBreakfast: oats")
        RawTextPlan(text='Day 1\\nBreakfast: oats')
        >>> normalize_plan_data('{"raw": "Lunch: rice"}')
        RawTextPlan(text='Lunch: rice')
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError:
            return RawTextPlan(text=data)

    if isinstance(data, dict):
        if data.get("days") is not None:
            return StructuredPlan(days=data["days"])

        raw = data.get("raw")
        if isinstance(raw, str):
            return RawTextPlan(text=raw)

    return StructuredPlan(days=[])


def parse_structured_days(days: Any) -> List[StructuredDay]:
    """Validate structured day data. Raises pydantic ValidationError on bad shapes."""
    return _DAYS_ADAPTER.validate_python(days)


def has_plan_data(data: Any) -> bool:
    """
    True when a record carries a usable plan payload.

    Empty text, zero, False and None carry nothing. Neither does text that
    decodes to JSON ``null``. Empty mappings still count as a payload.
    """
    if data is None or data is False or data == "" or data == 0:
        return False
    if isinstance(data, str):
        try:
            return json.loads(data) is not None
        except ValueError:
            return True
    return True


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    "PlanRecord",
    "StructuredMeal",
    "StructuredDay",
    "StructuredPlan",
    "RawTextPlan",
    "CanonicalPlan",
    "normalize_plan_data",
    "parse_structured_days",
    "has_plan_data",
]
