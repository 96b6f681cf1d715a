# unit_tests/test_tool_recommendations.py
"""
Unit Tests for Recommendation Tool
==================================
Run with: python -m pytest unit_tests/test_tool_recommendations.py -v
"""

from tools.goal_scorer import calculate_goal_progress
from tools.plan_aggregator import AggregatedAnalytics
from tools.recommendations import (
    generate_plan_recommendations,
    calculate_diversity_scores,
    rate_diversity,
)


def make_analytics(**overrides):
    values = {
        "avg_calories": 1800,
        "ingredient_diversity": 25,
        "meal_diversity": 16,
        "cultural_diversity_score": 1,
        "total_plans": 1,
        "total_days": 3,
        "total_calories": 5400,
    }
    values.update(overrides)
    return AggregatedAnalytics(**values)


def test_all_recommendations_fire_together():
    analytics = make_analytics(ingredient_diversity=5, meal_diversity=3, total_plans=5)
    progress = calculate_goal_progress("weight_loss", 900)

    recs = generate_plan_recommendations(analytics, progress)

    assert len(recs) == 4
    assert "ingredient variety" in recs[0]
    assert "meal types" in recs[1]
    assert "50%" in recs[2] and "weight_loss" in recs[2]
    assert "5 meal plans" in recs[3]


def test_no_recommendations_when_healthy():
    analytics = make_analytics()
    progress = calculate_goal_progress("weight_loss", 1800)

    assert generate_plan_recommendations(analytics, progress) == []


def test_thresholds_are_strict():
    analytics = make_analytics(ingredient_diversity=20, meal_diversity=15, total_plans=4)
    progress = calculate_goal_progress("maintenance", 1600)  # exactly 80%

    assert generate_plan_recommendations(analytics, progress) == []


def test_calorie_guidance_needs_goal():
    analytics = make_analytics()
    recs = generate_plan_recommendations(analytics, None)

    assert not any("calorie intake" in r for r in recs)


def test_no_analytics_no_recommendations():
    assert generate_plan_recommendations(None) == []


def test_diversity_scores():
    analytics = make_analytics(ingredient_diversity=24, meal_diversity=15, cultural_diversity_score=2)
    scores = calculate_diversity_scores(analytics)

    assert scores["ingredient"] == {"count": 24, "rating": "Excellent", "progress": 80.0}
    assert scores["meal"] == {"count": 15, "rating": "Good", "progress": 75.0}
    assert scores["cultural"] == {"count": 2, "rating": "Good", "progress": 40.0}


def test_diversity_progress_capped():
    assert rate_diversity(45, excellent_above=20, scale=30)["progress"] == 100.0
    assert rate_diversity(4, excellent_above=3, scale=5)["rating"] == "Excellent"


def test_diversity_scores_without_analytics():
    assert calculate_diversity_scores(None) is None
