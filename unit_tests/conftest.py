import pytest
import sys
from pathlib import Path

# Add root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class MockSession:
    def __init__(self):
        self.user_id = "test_user"
        self.session_id = "test_session"


class MockToolContext:
    """Mimics the behavior of the JSON-based context"""
    def __init__(self):
        self.session = MockSession()
        self.state = {
            "user:name": "Test Runner",
            "user:fitness_goal": "weight_loss",
            "user:meal_plans": []
        }
        self.memory_service = None


@pytest.fixture
def tool_context():
    return MockToolContext()
