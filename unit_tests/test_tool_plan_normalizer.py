# unit_tests/test_tool_plan_normalizer.py
"""
Unit Tests for Plan Normalizer Tool
===================================
Run with: python -m pytest unit_tests/test_tool_plan_normalizer.py -v
Or simply: python unit_tests/test_tool_plan_normalizer.py
"""

import json
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from pydantic import ValidationError

from tools.plan_normalizer import (
    PlanRecord,
    RawTextPlan,
    StructuredPlan,
    normalize_plan_data,
    parse_structured_days,
    has_plan_data,
)


def test_plain_text_is_raw():
    """Undecodable text falls back to raw text."""
    print("\n" + "="*60)
    print("TEST 1: Plain Text")
    print("="*60)

    text = "Day 1\nBreakfast: oats"
    plan = normalize_plan_data(text)
    print(f"Output: {plan}")

    assert isinstance(plan, RawTextPlan)
    assert plan.text == text
    print("✅ Plain text treated as raw")


def test_json_text_with_days():
    """JSON text carrying days becomes a structured plan."""
    print("\n" + "="*60)
    print("TEST 2: JSON Days")
    print("="*60)

    days = [{"totalCalories": 1800, "meals": []}]
    plan = normalize_plan_data(json.dumps({"days": days}))

    assert isinstance(plan, StructuredPlan)
    assert plan.days == days
    print("✅ JSON days normalized")


def test_json_text_with_raw():
    """JSON text carrying a raw string becomes raw text."""
    plan = normalize_plan_data('{"raw": "Lunch: rice"}')

    assert isinstance(plan, RawTextPlan)
    assert plan.text == "Lunch: rice"


def test_mapping_without_decode():
    """Already decoded mappings use the same dispatch."""
    assert isinstance(normalize_plan_data({"raw": "Snack: nuts"}), RawTextPlan)
    assert isinstance(normalize_plan_data({"days": []}), StructuredPlan)


def test_days_take_precedence_over_raw():
    plan = normalize_plan_data({"days": [{}], "raw": "Dinner: fish"})

    assert isinstance(plan, StructuredPlan)
    assert plan.days == [{}]


def test_other_shapes_are_empty_structured():
    """JSON scalars, lists and unrelated objects give an empty structured plan."""
    print("\n" + "="*60)
    print("TEST 3: Other Shapes")
    print("="*60)

    for data in ["42", "null", "[1, 2]", {"title": "My plan"}, {"raw": 5}, None]:
        plan = normalize_plan_data(data)
        print(f"   {data!r} -> {plan}")
        assert plan == StructuredPlan(days=[])

    print("✅ Other shapes handled without errors")


def test_plan_record_aliases():
    """Both camelCase and snake_case metadata keys are accepted."""
    camel = PlanRecord.model_validate({"data": "x", "estimatedCalories": 1500, "totalDays": 3})
    snake = PlanRecord.model_validate({"data": "x", "estimated_calories": 1500, "total_days": 3})

    assert camel.estimated_calories == snake.estimated_calories == 1500
    assert camel.total_days == snake.total_days == 3


def test_plan_record_ignores_extra_keys():
    record = PlanRecord.model_validate({"id": "abc", "title": "Week 1", "data": "Lunch: rice"})

    assert record.data == "Lunch: rice"
    assert record.estimated_calories is None
    assert record.total_days is None


def test_plan_record_rejects_non_mapping():
    with pytest.raises(ValidationError):
        PlanRecord.model_validate("just text")


def test_parse_structured_days():
    """Structured days accept the camelCase plan keys."""
    days = parse_structured_days([
        {
            "totalCalories": 2000,
            "meals": [{"name": "Breakfast", "calories": 400, "ingredients": ["Oats"],
                       "culturalContext": "Nigerian"}]
        }
    ])

    assert days[0].total_calories == 2000
    assert days[0].meals[0].cultural_context == "Nigerian"
    assert days[0].meals[0].ingredients == ["Oats"]


def test_parse_structured_days_rejects_bad_shapes():
    with pytest.raises(ValidationError):
        parse_structured_days("not a list")
    with pytest.raises(ValidationError):
        parse_structured_days([{"meals": [{"ingredients": [1, 2]}]}])
    with pytest.raises(ValidationError):
        parse_structured_days([{"totalCalories": -100}])


def test_has_plan_data():
    assert has_plan_data("Lunch: rice")
    assert has_plan_data({})
    assert not has_plan_data("")
    assert not has_plan_data(None)


def test_has_plan_data_falsy_and_null_payloads():
    """Falsy payloads and JSON null text carry no plan."""
    for data in [0, 0.0, False, "null", " null\n"]:
        assert not has_plan_data(data), data

    for data in ["0", "[]", {"days": []}, "Breakfast: null"]:
        assert has_plan_data(data), data


# =============================================================================
# MAIN TEST RUNNER
# =============================================================================
def run_all_tests():
    """Run all tests and report results."""
    print("\n" + "🧾"*30)
    print("PLAN NORMALIZER TESTS")
    print("🧾"*30)

    tests = [
        ("Plain Text", test_plain_text_is_raw),
        ("JSON Days", test_json_text_with_days),
        ("JSON Raw", test_json_text_with_raw),
        ("Mapping", test_mapping_without_decode),
        ("Days Precedence", test_days_take_precedence_over_raw),
        ("Other Shapes", test_other_shapes_are_empty_structured),
        ("Record Aliases", test_plan_record_aliases),
        ("Record Extra Keys", test_plan_record_ignores_extra_keys),
        ("Record Non Mapping", test_plan_record_rejects_non_mapping),
        ("Structured Days", test_parse_structured_days),
        ("Structured Bad Shapes", test_parse_structured_days_rejects_bad_shapes),
        ("Has Data", test_has_plan_data),
        ("Falsy Payloads", test_has_plan_data_falsy_and_null_payloads),
    ]

    results = []
    for name, test_func in tests:
        try:
            test_func()
            results.append((name, True))
        except Exception as e:
            print(f"\n❌ TEST FAILED: {name}")
            print(f"   Error: {e}")
            results.append((name, False))

    passed = sum(1 for _, p in results if p)
    print(f"\nTotal: {passed}/{len(results)} tests passed")
    return passed == len(results)


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
