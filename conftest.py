"""
Shared pytest fixtures: a recording fake for the transport gateway and a
pinned random source for virality draws.
"""

import random

import pytest

from edge_defender.core.config import Settings
from edge_defender.core.dependencies import build_game_context


class RecordingGateway:
    """In-memory stand-in for ConnectionManager; records every outbound message."""

    def __init__(self):
        self.sent: list[tuple[str, dict]] = []
        self.broadcasts: list[tuple[dict, list[str]]] = []
        self.connected: list[str] = []

    async def send_to(self, player_id: str, message: dict):
        self.sent.append((player_id, message))

    async def broadcast(self, message: dict, exclude=None):
        self.broadcasts.append((message, list(exclude or [])))

    def disconnect(self, player_id: str):
        if player_id in self.connected:
            self.connected.remove(player_id)

    def get_active_players(self) -> list[str]:
        return list(self.connected)

    def is_connected(self, player_id: str) -> bool:
        return player_id in self.connected

    def get_connection_count(self) -> int:
        return len(self.connected)

    # ── helpers ──────────────────────────────────────

    def messages_to(self, player_id: str) -> list[dict]:
        return [m for pid, m in self.sent if pid == player_id]

    def broadcast_types(self) -> list[str]:
        return [m["type"] for m, _ in self.broadcasts]


class FixedRandom(random.Random):
    """random() always returns `value`; randint etc. stay seeded."""

    def __init__(self, value: float, seed: int = 7):
        super().__init__(seed)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SURGE_AUTO_SCHEDULE=False,
        SURGE_DURATION_MS=10_000,
        VIRAL_CHECK_INTERVAL_MS=600_000,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def game(settings, gateway):
    return build_game_context(settings, gateway=gateway, rng=FixedRandom(0.5))
