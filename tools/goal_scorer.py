# tools/goal_scorer.py
"""
MealPlan Analytics — Goal Scorer Tool
======================================
Compares average planned calories with the calorie target for the user's
fitness goal and reports a bounded progress percentage.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from tools.plan_aggregator import round_half_up

# =============================================================================
# GOAL TARGETS
# =============================================================================
GOAL_TARGET_CALORIES = {
    "weight_loss": 1800,
    "muscle_gain": 2500,
    "maintenance": 2000,
}

# Shown instead of 0% when some calories were planned
MIN_VISIBLE_PROGRESS = 1.0


class GoalProgress(BaseModel):
    """Progress of average calories towards a goal target."""
    goal: str
    target_calories: int = Field(..., gt=0)
    progress_percent: float = Field(..., ge=0, le=100)
    goal_label: str
    status_text: str


# =============================================================================
# HELPERS
# =============================================================================
def get_fitness_goal(user_profile: Any) -> Optional[str]:
    """Read fitness_goal from a profile mapping or object."""
    if user_profile is None:
        return None
    if isinstance(user_profile, dict):
        return user_profile.get("fitness_goal") or user_profile.get("fitnessGoal")
    return getattr(user_profile, "fitness_goal", None)


def format_goal_label(goal: str) -> str:
    """'weight_loss' -> 'WEIGHT LOSS'"""
    return goal.replace("_", " ").upper()


def format_progress_status(progress_percent: float) -> str:
    if progress_percent >= 100:
        return "Target exceeded!"
    return f"{round_half_up(progress_percent)}% of target"


# =============================================================================
# MAIN TOOL: calculate_goal_progress
# =============================================================================
def calculate_goal_progress(
    fitness_goal: Optional[str],
    avg_calories: float
) -> Optional[GoalProgress]:
    """
    Score average calories against the target for a fitness goal.

    Args:
        fitness_goal: "weight_loss", "muscle_gain" or "maintenance".
        avg_calories: Average calories per planned day.

    Returns:
        GoalProgress, or None when the goal is missing or unknown.

    Example:
        >>> calculate_goal_progress("weight_loss", 900).progress_percent
        50.0
    """
    if not isinstance(fitness_goal, str):
        return None

    target = GOAL_TARGET_CALORIES.get(fitness_goal)
    if target is None:
        return None

    avg_calories = avg_calories or 0
    progress = max(0.0, min(100.0, avg_calories * 100 / target))

    if avg_calories > 0 and round_half_up(progress) == 0:
        progress = MIN_VISIBLE_PROGRESS

    return GoalProgress(
        goal=fitness_goal,
        target_calories=target,
        progress_percent=progress,
        goal_label=format_goal_label(fitness_goal),
        status_text=format_progress_status(progress),
    )


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    "calculate_goal_progress",
    "get_fitness_goal",
    "format_goal_label",
    "GoalProgress",
    "GOAL_TARGET_CALORIES",
]
