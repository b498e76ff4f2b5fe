"""
Tests for core/rewards.py — Transaction Rush Reward

Kullanim:
    pytest edge_defender/core/test_rewards.py
"""

import pytest

from edge_defender.apps.players.service import SessionRegistry
from edge_defender.core.config import Settings
from edge_defender.core.errors import SessionNotFound
from edge_defender.core.rewards import award_rush_reward, compute_rush_reward


@pytest.mark.parametrize(
    "score,target,expected",
    [
        (10, 5, (150, True)),   # target met → 50% bonus
        (3, 5, (30, False)),
        (5, 0, (50, False)),    # target 0 never grants the bonus
        (5, 5, (75, True)),
        (0, 0, (0, False)),
        (7, 6, (105, True)),
    ],
)
def test_compute_rush_reward(score, target, expected):
    assert compute_rush_reward(score, target) == expected


def test_compute_rush_reward_floors_after_bonus():
    # 3 * 10 * 1.25 = 37.5
    assert compute_rush_reward(3, 1, bonus_multiplier=1.25) == (37, True)


def test_award_credits_and_builds_update():
    registry = SessionRegistry()
    registry.register("p1")

    update = award_rush_reward(registry, "p1", 10, 5, Settings())

    assert update == {
        "type": "update_resources",
        "newTotal": 1150,
        "changeAmount": 150,
        "reason": "Transaction Rush Reward +Bonus!",
    }
    assert registry.get("p1").resources == 1150


def test_award_without_bonus_reason():
    registry = SessionRegistry()
    registry.register("p1")

    update = award_rush_reward(registry, "p1", 3, 5, Settings())
    assert update["reason"] == "Transaction Rush Reward"
    assert update["changeAmount"] == 30


def test_award_uses_configured_rates():
    registry = SessionRegistry()
    registry.register("p1")
    settings = Settings(REWARD_PER_VERIFICATION=3, COMPLETION_BONUS_MULTIPLIER=2.0)

    update = award_rush_reward(registry, "p1", 4, 4, settings)
    assert update["changeAmount"] == 24


def test_award_missing_session():
    registry = SessionRegistry()
    with pytest.raises(SessionNotFound):
        award_rush_reward(registry, "ghost", 10, 5, Settings())
    assert len(registry) == 0
