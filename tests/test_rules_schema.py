import pytest
from pydantic import ValidationError

from bots.difficulty import DIFFICULTY_PROFILES
from cribbage.rules_schema import DifficultyProfile


def test_builtin_profiles():
    normal = DIFFICULTY_PROFILES["normal"]
    assert (normal.discard_strategy, normal.pegging_strategy) == ("heuristic", "heuristic")
    assert (normal.counting_error_rate, normal.counting_error_range) == (0.10, 2)

    expert = DIFFICULTY_PROFILES["expert"]
    assert (expert.discard_strategy, expert.pegging_strategy) == ("expected-value", "expert")
    assert (expert.overcount_rate, expert.overcount_range) == (0.15, 2)


def test_profile_accepts_camel_case_keys():
    profile = DifficultyProfile.model_validate(
        {
            "name": "Casual",
            "discardStrategy": "expected-value",
            "peggingStrategy": "heuristic",
            "countingErrorRate": 0.25,
            "countingErrorRange": 3,
        }
    )
    assert profile.discard_strategy == "expected-value"
    assert profile.counting_error_range == 3


@pytest.mark.parametrize(
    "fields",
    [
        {"name": " "},
        {"name": "Bad", "discard_strategy": "random"},
        {"name": "Bad", "counting_error_rate": 1.5},
        {"name": "Bad", "overcount_range": -1},
        {"name": "Bad", "counting_error_rate": 0.2, "counting_error_range": 0},
    ],
)
def test_invalid_profiles(fields):
    with pytest.raises(ValidationError):
        DifficultyProfile(**fields)


def test_profiles_are_frozen():
    with pytest.raises(ValidationError):
        DIFFICULTY_PROFILES["normal"].counting_error_rate = 0.5
