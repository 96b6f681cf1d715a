"""
MealPlan Analytics — Meal Plan Analytics Agent
===============================================
ADK-Integrated analytics over a user's saved meal plans: calorie averages,
diversity scoring, goal progress and recommendations.
"""

import os
from datetime import datetime
from typing import Dict, Any, List, Optional

from dotenv import load_dotenv

# =============================================================================
# ADK IMPORTS — Graceful Fallback
# =============================================================================
ADK_AVAILABLE = False
try:
    from google.adk.agents import LlmAgent
    from google.adk.tools.tool_context import ToolContext
    from google.adk.tools import FunctionTool
    from google.adk.models.google_llm import Gemini
    ADK_AVAILABLE = True
    print("✅ Analytics Agent: ADK components ready")
except ImportError as e:
    print(f"⚠️ Analytics Agent: ADK not available: {e}")
    ToolContext = Any  # Fallback type

from tools.plan_aggregator import aggregate_meal_plans
from tools.goal_scorer import calculate_goal_progress, get_fitness_goal, GOAL_TARGET_CALORIES
from tools.recommendations import generate_plan_recommendations, calculate_diversity_scores

# =============================================================================
# CONFIGURATION
# =============================================================================
load_dotenv()

AGENT_MODEL = os.environ.get("MEAL_ANALYTICS_AGENT_MODEL", "gemini-2.5-flash-lite")

STATE_KEYS = {
    "meal_plans": "user:meal_plans",
    "fitness_goal": "user:fitness_goal",
    "latest_analysis": "app:latest_meal_analytics",
    "analysis_timestamp": "app:meal_analytics_timestamp",
}

NO_DATA_MESSAGE = "Generate your first meal plan to see analytics and insights"


# =============================================================================
# PIPELINE
# =============================================================================
def run_meal_plan_analytics(
    plan_records: Optional[List[Any]],
    user_profile: Any = None
) -> Dict[str, Any]:
    """
    Run the full analytics pipeline over a batch of meal plans.

    Args:
        plan_records: Meal plan records (``data`` plus optional
                      ``estimated_calories`` / ``total_days``).
        user_profile: Mapping or object carrying ``fitness_goal``.

    Returns:
        Dictionary with:
        - status: "success" or "no_data"
        - analytics: aggregated statistics (None when no plans)
        - goal_progress: progress towards the goal target (None when no goal)
        - recommendations: list of guidance strings
        - diversity: ingredient/meal/cultural ratings
        - plan_results: per-plan extraction status
        - failed_plans: number of plans skipped as unreadable
        - analyzed_at: ISO timestamp
    """
    analytics, plan_results = aggregate_meal_plans(plan_records)

    if analytics is None:
        return {
            "status": "no_data",
            "message": NO_DATA_MESSAGE,
            "analytics": None,
            "goal_progress": None,
            "recommendations": [],
            "diversity": None,
            "plan_results": [],
            "failed_plans": 0,
            "analyzed_at": datetime.now().isoformat()
        }

    goal_progress = calculate_goal_progress(get_fitness_goal(user_profile), analytics.avg_calories)

    return {
        "status": "success",
        "analytics": analytics.model_dump(),
        "goal_progress": goal_progress.model_dump() if goal_progress else None,
        "recommendations": generate_plan_recommendations(analytics, goal_progress),
        "diversity": calculate_diversity_scores(analytics),
        "plan_results": [r.to_dict() for r in plan_results],
        "failed_plans": sum(1 for r in plan_results if not r.succeeded),
        "analyzed_at": datetime.now().isoformat()
    }


def _get_cached_analysis(tool_context: Any) -> Optional[Dict[str, Any]]:
    if hasattr(tool_context, 'state'):
        return tool_context.state.get(STATE_KEYS["latest_analysis"])
    return None


# =============================================================================
# MAIN ANALYTICS TOOL FUNCTIONS
# =============================================================================
def analyze_meal_plans(tool_context: Any) -> Dict[str, Any]:
    """
    Analyze all of the user's saved meal plans.

    Call when user asks about their meal plan stats, variety, calories,
    or "How are my meal plans looking?"

    Args:
        tool_context: Context with session state

    Returns:
        Complete analysis with averages, diversity, goal progress and
        recommendations.
    """
    plans = []
    profile = None

    if hasattr(tool_context, 'state'):
        plans = tool_context.state.get(STATE_KEYS["meal_plans"], []) or []
        profile = {"fitness_goal": tool_context.state.get(STATE_KEYS["fitness_goal"])}

    result = run_meal_plan_analytics(plans, profile)

    if hasattr(tool_context, 'state'):
        tool_context.state[STATE_KEYS["latest_analysis"]] = result
        tool_context.state[STATE_KEYS["analysis_timestamp"]] = result["analyzed_at"]

    return result


def get_goal_progress(tool_context: Any) -> Dict[str, Any]:
    """
    Report calorie progress towards the user's fitness goal.

    Call for "Am I on track for my goal?" questions.
    """
    analysis = _get_cached_analysis(tool_context) or analyze_meal_plans(tool_context)

    if analysis.get("status") == "no_data":
        return {
            "status": "no_data",
            "message": NO_DATA_MESSAGE
        }

    goal_progress = analysis.get("goal_progress")
    if not goal_progress:
        return {
            "status": "no_goal",
            "message": "Set a fitness goal to track progress.",
            "supported_goals": list(GOAL_TARGET_CALORIES.keys())
        }

    return {
        "status": "success",
        "avg_calories": analysis["analytics"]["avg_calories"],
        "goal_progress": goal_progress
    }


def get_plan_recommendations(tool_context: Any) -> Dict[str, Any]:
    """
    Get meal plan recommendations and diversity ratings.

    Uses the latest analysis when available, otherwise runs a fresh one.
    """
    analysis = _get_cached_analysis(tool_context) or analyze_meal_plans(tool_context)

    if analysis.get("status") == "no_data":
        return {
            "status": "no_data",
            "message": NO_DATA_MESSAGE,
            "recommendations": []
        }

    return {
        "status": "success",
        "recommendations": analysis.get("recommendations", []),
        "diversity": analysis.get("diversity")
    }


def save_meal_plan(
    tool_context: Any,
    plan_data: Any,
    estimated_calories: Optional[int] = None,
    total_days: Optional[int] = None
) -> Dict[str, Any]:
    """
    Save a generated meal plan for analytics.

    Call after a meal plan has been generated for the user.

    Args:
        tool_context: Session context
        plan_data: Plan markdown, JSON text, or structured plan dict
        estimated_calories: Optional calorie estimate for the plan
        total_days: Optional number of days the plan covers
    """
    if plan_data is None or plan_data == "":
        return {
            "status": "error",
            "error_message": "No meal plan data provided"
        }

    plan = {
        "data": plan_data,
        "estimated_calories": estimated_calories,
        "total_days": total_days,
        "created_at": datetime.now().isoformat()
    }

    if not hasattr(tool_context, 'state'):
        return {
            "status": "error",
            "error_message": "No state available"
        }

    plans = tool_context.state.get(STATE_KEYS["meal_plans"], []) or []
    plans.append(plan)
    tool_context.state[STATE_KEYS["meal_plans"]] = plans

    # Invalidate cache
    tool_context.state[STATE_KEYS["latest_analysis"]] = None

    return {
        "status": "success",
        "message": f"✅ Meal plan saved ({len(plans)} total).",
        "total_plans": len(plans)
    }


# =============================================================================
# ADK AGENT FACTORY
# =============================================================================
def create_analytics_agent() -> Optional[Any]:
    """Create an ADK LlmAgent for meal plan analytics."""
    if not ADK_AVAILABLE:
        print("⚠️ ADK not available. Cannot create agent.")
        return None

    tools = [
        FunctionTool(func=analyze_meal_plans),
        FunctionTool(func=get_goal_progress),
        FunctionTool(func=get_plan_recommendations),
        FunctionTool(func=save_meal_plan),
    ]

    agent = LlmAgent(
        name="MealPlanAnalyst",
        model=Gemini(model=AGENT_MODEL),
        description="Meal plan analytics and diversity coach.",
        instruction="""You are a nutrition analytics coach.

YOUR ROLE:
1. Summarize calories and variety across the user's meal plans
2. Report progress towards their fitness goal
3. Suggest ways to diversify ingredients, meals and cuisines

TOOLS:
- analyze_meal_plans: Full analysis of all saved plans
- get_goal_progress: Calorie progress towards the fitness goal
- get_plan_recommendations: Variety and calorie guidance
- save_meal_plan: Store a newly generated plan

Only report numbers returned by the tools.""",
        tools=tools,
        output_key="analytics_response"
    )

    print(f"✅ Analytics Agent created with {len(tools)} tools")
    return agent


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    # Main tool functions
    "analyze_meal_plans",
    "get_goal_progress",
    "get_plan_recommendations",
    "save_meal_plan",

    # Pipeline
    "run_meal_plan_analytics",

    # Agent factory
    "create_analytics_agent",

    # Configuration
    "STATE_KEYS",
    "AGENT_MODEL",

    # Flags
    "ADK_AVAILABLE",
]
