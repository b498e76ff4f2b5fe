"""
Tests for core/surge.py — SurgeScheduler

Kullanim:
    pytest edge_defender/core/test_surge.py
"""

import asyncio

from edge_defender.core.config import Settings
from edge_defender.core.surge import SurgeScheduler


def _scheduler(gateway, **overrides) -> SurgeScheduler:
    values = {"SURGE_AUTO_SCHEDULE": False, "SURGE_DURATION_MS": 10_000}
    values.update(overrides)
    return SurgeScheduler(gateway, Settings(**values))


def test_start_broadcasts_and_arms_deadline(gateway):
    async def scenario():
        surge = _scheduler(gateway)
        assert await surge.start() is True

        assert surge.active is True
        assert surge.deadline_handle is not None
        assert surge.duration_ms == 10_000
        assert surge.target_count == 50

        message, _ = gateway.broadcasts[0]
        assert message["type"] == "transaction_surge_start"
        assert message["duration"] == 10_000
        assert message["target"] == 50
        assert "timestamp" in message
        await surge.shutdown()

    asyncio.run(scenario())


def test_second_start_is_noop(gateway):
    async def scenario():
        surge = _scheduler(gateway)
        await surge.start()
        handle = surge.deadline_handle

        assert await surge.start() is False

        assert surge.deadline_handle is handle
        assert (surge.duration_ms, surge.target_count) == (10_000, 50)
        assert gateway.broadcast_types() == ["transaction_surge_start"]
        await surge.shutdown()

    asyncio.run(scenario())


def test_end_cancels_deadline(gateway):
    async def scenario():
        surge = _scheduler(gateway)
        await surge.start()
        handle = surge.deadline_handle

        assert await surge.end() is True
        await asyncio.gather(handle, return_exceptions=True)

        assert handle.cancelled()
        assert surge.active is False
        assert surge.deadline_handle is None
        assert gateway.broadcast_types() == ["transaction_surge_start", "transaction_surge_end"]

    asyncio.run(scenario())


def test_end_while_idle_is_noop(gateway):
    async def scenario():
        surge = _scheduler(gateway)
        assert await surge.end() is False
        assert gateway.broadcasts == []
        assert surge.next_pending is False

    asyncio.run(scenario())


def test_auto_end_after_duration(gateway):
    async def scenario():
        surge = _scheduler(gateway, SURGE_DURATION_MS=20)
        await surge.start()
        await asyncio.sleep(0.2)

        assert surge.active is False
        assert surge.deadline_handle is None
        assert gateway.broadcast_types() == ["transaction_surge_start", "transaction_surge_end"]

    asyncio.run(scenario())


def test_end_schedules_next_surge(gateway):
    async def scenario():
        surge = _scheduler(
            gateway,
            SURGE_AUTO_SCHEDULE=True,
            SURGE_INTERVAL_MIN_MS=10,
            SURGE_INTERVAL_MAX_MS=20,
        )
        await surge.start()
        await surge.end()
        assert surge.next_pending is True
        # only one pending re-trigger at a time
        assert surge.schedule_next() is False

        await asyncio.sleep(0.2)
        assert surge.active is True
        assert gateway.broadcast_types() == [
            "transaction_surge_start",
            "transaction_surge_end",
            "transaction_surge_start",
        ]
        await surge.shutdown()

    asyncio.run(scenario())


def test_kick_off_only_once(gateway):
    async def scenario():
        surge = _scheduler(gateway, SURGE_AUTO_SCHEDULE=True, SURGE_FIRST_DELAY_MS=5_000)
        assert surge.kick_off() is True
        assert surge.kick_off() is False
        await surge.shutdown()
        assert surge.next_pending is False

    asyncio.run(scenario())


def test_kick_off_disabled(gateway):
    async def scenario():
        surge = _scheduler(gateway)
        assert surge.kick_off() is False

    asyncio.run(scenario())


def test_randomized_target_in_range(gateway):
    async def scenario():
        surge = _scheduler(gateway, SURGE_RANDOMIZE_TARGET=True)
        targets = set()
        for _ in range(20):
            await surge.start()
            targets.add(surge.target_count)
            await surge.end()

        assert all(30 <= t <= 70 for t in targets)

    asyncio.run(scenario())


def test_status(gateway):
    async def scenario():
        surge = _scheduler(gateway)
        assert surge.status() == {
            "active": False,
            "durationMs": 10_000,
            "targetCount": 50,
            "nextSurgePending": False,
        }

    asyncio.run(scenario())
