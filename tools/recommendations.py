# tools/recommendations.py
"""
MealPlan Analytics — Recommendation Tool
=========================================
Fixed-threshold guidance and diversity ratings derived from aggregated
meal plan analytics.
"""

from typing import Any, Dict, List, Optional

from tools.goal_scorer import GoalProgress
from tools.plan_aggregator import AggregatedAnalytics, round_half_up

# =============================================================================
# THRESHOLDS
# =============================================================================
RECOMMENDATION_THRESHOLDS = {
    "min_ingredient_diversity": 20,
    "min_meal_diversity": 15,
    "min_goal_progress": 80,
    "consistency_plan_count": 5,
}

# rating is "Excellent" strictly above excellent_above; progress is count / scale
DIVERSITY_SCALES = {
    "ingredient": {"field": "ingredient_diversity", "excellent_above": 20, "scale": 30},
    "meal": {"field": "meal_diversity", "excellent_above": 15, "scale": 20},
    "cultural": {"field": "cultural_diversity_score", "excellent_above": 3, "scale": 5},
}


# =============================================================================
# MAIN TOOL: generate_plan_recommendations
# =============================================================================
def generate_plan_recommendations(
    analytics: Optional[AggregatedAnalytics],
    goal_progress: Optional[GoalProgress] = None,
    thresholds: Dict[str, Any] = None
) -> List[str]:
    """
    Build every recommendation that applies to the analytics.

    The rules are independent; several can fire together.

    Args:
        analytics: Aggregated batch statistics (None gives no advice).
        goal_progress: Optional goal progress for calorie guidance.
        thresholds: Optional override of RECOMMENDATION_THRESHOLDS.

    Returns:
        List of recommendation strings, possibly empty.
    """
    if analytics is None:
        return []

    cfg = thresholds or RECOMMENDATION_THRESHOLDS
    recs: List[str] = []

    if analytics.ingredient_diversity < cfg["min_ingredient_diversity"]:
        recs.append(
            "🥕 Increase ingredient variety → Try adding more diverse ingredients "
            "to improve nutritional balance."
        )

    if analytics.meal_diversity < cfg["min_meal_diversity"]:
        recs.append(
            "🍽️ Explore new meal types → Consider trying different cuisines "
            "and cooking methods."
        )

    if goal_progress is not None and goal_progress.progress_percent < cfg["min_goal_progress"]:
        recs.append(
            f"🎯 Adjust calorie intake → Your current intake is "
            f"{round_half_up(goal_progress.progress_percent)}% of your {goal_progress.goal} goal."
        )

    if analytics.total_plans >= cfg["consistency_plan_count"]:
        recs.append(
            f"📅 Great consistency! You've created {analytics.total_plans} meal plans. "
            "Keep up the great work!"
        )

    return recs


# =============================================================================
# ADDITIONAL TOOL: Diversity Ratings
# =============================================================================
def rate_diversity(count: int, excellent_above: int, scale: int) -> Dict[str, Any]:
    """Rating and display progress for one diversity count."""
    return {
        "count": count,
        "rating": "Excellent" if count > excellent_above else "Good",
        "progress": min(100.0, count * 100 / scale),
    }


def calculate_diversity_scores(
    analytics: Optional[AggregatedAnalytics]
) -> Optional[Dict[str, Dict[str, Any]]]:
    """
    Rate ingredient, meal and cultural diversity.

    Example:
        >>> scores = calculate_diversity_scores(analytics)
        >>> scores["ingredient"]
        {'count': 24, 'rating': 'Excellent', 'progress': 80.0}
    """
    if analytics is None:
        return None

    return {
        name: rate_diversity(
            getattr(analytics, scale["field"]),
            scale["excellent_above"],
            scale["scale"],
        )
        for name, scale in DIVERSITY_SCALES.items()
    }


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    "generate_plan_recommendations",
    "calculate_diversity_scores",
    "rate_diversity",
    "RECOMMENDATION_THRESHOLDS",
    "DIVERSITY_SCALES",
]
