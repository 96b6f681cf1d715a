# tools/plan_aggregator.py
"""
MealPlan Analytics — Plan Aggregator Tool
==========================================
Folds per-plan metrics into batch statistics: total and average calories,
total days, and ingredient/meal/cultural diversity counted across every
plan in the batch.

Each call owns a fresh AnalyticsAccumulator; nothing is cached between calls.
A plan that fails extraction is reported and skipped, never fatal.
"""

import math
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from tools.metric_extractor import ExtractedMetrics, extract_plan_metrics
from tools.plan_normalizer import PlanRecord, has_plan_data

# =============================================================================
# CONFIGURATION
# =============================================================================
load_dotenv()

ANALYTICS_CONFIG = {
    "default_calories_per_day": 2000,
    "default_plan_days": 3,
    "verbose": os.environ.get("MEAL_ANALYTICS_VERBOSE", "false").lower() == "true",
}


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, halves upward (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


# =============================================================================
# RESULT MODELS
# =============================================================================
class AggregatedAnalytics(BaseModel):
    """Batch statistics over all meal plans."""
    avg_calories: int = Field(0, ge=0)
    ingredient_diversity: int = Field(0, ge=0)
    meal_diversity: int = Field(0, ge=0)
    cultural_diversity_score: int = Field(0, ge=0)
    total_plans: int = Field(0, ge=0)
    total_days: int = Field(0, ge=0)
    total_calories: float = Field(0, ge=0)


@dataclass
class PlanExtractionResult:
    """Outcome of extracting one plan record."""
    index: int
    status: str
    record: Optional[PlanRecord] = None
    metrics: Optional[ExtractedMetrics] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "status": self.status,
            "error_message": self.error_message,
        }


# =============================================================================
# ACCUMULATOR
# =============================================================================
class AnalyticsAccumulator:
    """Running totals and distinct-value sets for one aggregation call."""

    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or ANALYTICS_CONFIG
        self.total_calories = 0
        self.total_days = 0
        self.ingredients: Set[str] = set()
        self.meal_types: Set[str] = set()
        self.cultural_tags: Set[str] = set()

    def add(self, metrics: ExtractedMetrics, record: PlanRecord) -> None:
        """
        Fold one plan's metrics in.

        When the batch still has no calories after this plan, a default of
        2000 kcal per declared day (3 days if undeclared) is added for it.
        """
        self.total_calories += metrics.calories_found
        self.total_days += metrics.days_found
        self.ingredients |= metrics.ingredient_mentions
        self.meal_types |= metrics.meal_type_mentions
        self.cultural_tags |= metrics.cultural_tags

        if self.total_calories == 0 and has_plan_data(record.data):
            if record.total_days and record.total_days > 0:
                days = record.total_days
            else:
                days = self.config["default_plan_days"]
            self.total_calories += self.config["default_calories_per_day"] * days

    def snapshot(self, total_plans: int) -> AggregatedAnalytics:
        avg_calories = round_half_up(self.total_calories / self.total_days) if self.total_days > 0 else 0

        return AggregatedAnalytics(
            avg_calories=avg_calories,
            ingredient_diversity=len(self.ingredients),
            meal_diversity=len(self.meal_types),
            cultural_diversity_score=len(self.cultural_tags),
            total_plans=total_plans,
            total_days=self.total_days,
            total_calories=self.total_calories,
        )

    def print_summary(self, analytics: AggregatedAnalytics) -> None:
        print(f"📊 Analytics result: {analytics.model_dump()}")
        print(f"   Unique ingredients found: {sorted(self.ingredients)}")
        print(f"   Meal types found: {sorted(self.meal_types)}")
        print(f"   Cultural diversity found: {sorted(self.cultural_tags)}")


# =============================================================================
# PER-RECORD EXTRACTION
# =============================================================================
def extract_plan_record(record: Any, index: int = 0) -> PlanExtractionResult:
    """
    Validate and extract one plan record, isolating any failure.

    Args:
        record: Raw plan record (mapping or PlanRecord).
        index: Position of the record in the batch, used for reporting.

    Returns:
        PlanExtractionResult with status "success" and metrics, or status
        "error" and an error message.
    """
    try:
        plan_record = PlanRecord.model_validate(record)
        metrics = extract_plan_metrics(plan_record)
    except ValidationError as e:
        print(f"⚠️ Meal plan #{index} skipped: invalid plan data ({e.error_count()} errors)")
        return PlanExtractionResult(index=index, status="error", error_message=str(e))
    except Exception as e:
        print(f"⚠️ Meal plan #{index} skipped: {e}")
        return PlanExtractionResult(index=index, status="error", error_message=str(e))

    return PlanExtractionResult(
        index=index,
        status="success",
        record=plan_record,
        metrics=metrics,
    )


# =============================================================================
# MAIN TOOL: aggregate_meal_plans
# =============================================================================
def aggregate_meal_plans(
    plan_records: Optional[Iterable[Any]],
    config: Dict[str, Any] = None
) -> Tuple[Optional[AggregatedAnalytics], List[PlanExtractionResult]]:
    """
    Aggregate metrics across a batch of meal plan records.

    Diversity counts are sizes of sets built across the whole batch, not
    per-plan averages. ``total_plans`` is the number of input records,
    including any that failed extraction.

    Args:
        plan_records: Meal plan records from the plan store.
        config: Optional override of ANALYTICS_CONFIG.

    Returns:
        Tuple of (analytics, per_record_results). Analytics is None for an
        empty batch.

    Example:
        >>> analytics, results = aggregate_meal_plans([{"data": "Breakfast (300 calories): oats"}])
        >>> analytics.total_calories
        600.0
    """
    cfg = config or ANALYTICS_CONFIG
    records = list(plan_records or [])
    if not records:
        return None, []

    accumulator = AnalyticsAccumulator(cfg)
    results = []

    for index, record in enumerate(records):
        result = extract_plan_record(record, index)
        results.append(result)
        if result.succeeded:
            accumulator.add(result.metrics, result.record)

    analytics = accumulator.snapshot(total_plans=len(records))

    if cfg.get("verbose"):
        accumulator.print_summary(analytics)

    return analytics, results


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    "aggregate_meal_plans",
    "extract_plan_record",
    "round_half_up",
    "AnalyticsAccumulator",
    "AggregatedAnalytics",
    "PlanExtractionResult",
    "ANALYTICS_CONFIG",
]
