"""
surge.py — Transaction Surge Scheduler
=======================================
Global, tek bir "transaction rush" event'inin state machine'i.

STATE'LER:
----------
    Idle ──start()──▶ Active ──end() / duration doldu──▶ Idle

- Ayni anda sistem genelinde en fazla bir surge aktif olabilir.
- Active iken deadline task'i beklemede; end() onu iptal eder, boylece
  ikinci bir `transaction_surge_end` broadcast'i olusmaz.
- Surge bittikten sonra bir sonraki surge rastgele bir gecikmeyle
  (varsayilan 60–180 sn) planlanir, zaten planlanmis bir tane yoksa.

Tum bekleme asyncio task + sleep ile yapilir; event loop bloklanmaz.
"""

import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Optional

from edge_defender.core.config import Settings

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SurgeScheduler:
    def __init__(self, gateway, settings: Settings, rng: Optional[random.Random] = None):
        self.gateway = gateway
        self.settings = settings
        self.rng = rng or random.Random()

        self.active: bool = False
        self.duration_ms: int = settings.SURGE_DURATION_MS
        self.target_count: int = settings.SURGE_TARGET

        self._deadline_task: Optional[asyncio.Task] = None
        self._next_task: Optional[asyncio.Task] = None

    # ═══════════════════════════════════════════════════
    # STATE
    # ═══════════════════════════════════════════════════

    @property
    def deadline_handle(self) -> Optional[asyncio.Task]:
        """Auto-end task; not None exactly while a surge is active."""
        return self._deadline_task

    @property
    def next_pending(self) -> bool:
        return self._next_task is not None and not self._next_task.done()

    def status(self) -> dict:
        return {
            "active": self.active,
            "durationMs": self.duration_ms,
            "targetCount": self.target_count,
            "nextSurgePending": self.next_pending,
        }

    def _pick_target(self) -> int:
        if self.settings.SURGE_RANDOMIZE_TARGET:
            return self.rng.randint(self.settings.SURGE_TARGET_MIN, self.settings.SURGE_TARGET_MAX)
        return self.settings.SURGE_TARGET

    # ═══════════════════════════════════════════════════
    # TRANSITIONS
    # ═══════════════════════════════════════════════════

    async def start(self) -> bool:
        """
        Idle → Active.

        Returns:
            bool: False ise surge zaten aktifti ve hicbir sey degismedi.
        """
        if self.active:
            logger.warning("Surge is already active. Ignoring request to start a new surge.")
            return False

        # State is settled before the first await so nothing can interleave.
        self.active = True
        self.duration_ms = self.settings.SURGE_DURATION_MS
        self.target_count = self._pick_target()
        self._deadline_task = asyncio.create_task(self._auto_end(self.duration_ms))

        logger.info(
            f"⚡ Transaction surge started! Duration: {self.duration_ms / 1000:.0f}s, "
            f"Target: {self.target_count} verifications."
        )
        await self.gateway.broadcast({
            "type": "transaction_surge_start",
            "duration": self.duration_ms,
            "target": self.target_count,
            "timestamp": _now(),
        })
        return True

    async def end(self) -> bool:
        """
        Active → Idle. Idle iken no-op (broadcast yok, iptal yok).
        """
        if not self.active:
            logger.warning("No surge is active to end.")
            return False

        self.active = False
        task, self._deadline_task = self._deadline_task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

        logger.info("Transaction surge ended.")
        await self.gateway.broadcast({
            "type": "transaction_surge_end",
            "timestamp": _now(),
        })

        if self.settings.SURGE_AUTO_SCHEDULE:
            self.schedule_next()
        return True

    async def _auto_end(self, duration_ms: int):
        await asyncio.sleep(duration_ms / 1000)
        await self.end()

    # ═══════════════════════════════════════════════════
    # RE-TRIGGER
    # ═══════════════════════════════════════════════════

    def schedule_next(self, delay_ms: Optional[int] = None) -> bool:
        """
        Bir sonraki surge'u planla.

        Args:
            delay_ms: None ise [SURGE_INTERVAL_MIN_MS, SURGE_INTERVAL_MAX_MS] araligindan secilir

        Returns:
            bool: False ise zaten planlanmis bir surge vardi
        """
        if self.next_pending:
            return False

        if delay_ms is None:
            delay_ms = self.rng.randint(self.settings.SURGE_INTERVAL_MIN_MS, self.settings.SURGE_INTERVAL_MAX_MS)

        self._next_task = asyncio.create_task(self._delayed_start(delay_ms))
        logger.info(f"Next transaction surge in: {delay_ms / 1000:.0f}s")
        return True

    def kick_off(self) -> bool:
        """First-connection trigger: plan a surge unless one is running or already planned."""
        if not self.settings.SURGE_AUTO_SCHEDULE or self.active or self.next_pending:
            return False
        return self.schedule_next(self.settings.SURGE_FIRST_DELAY_MS)

    async def _delayed_start(self, delay_ms: int):
        await asyncio.sleep(delay_ms / 1000)
        self._next_task = None
        # another path may have started one meanwhile
        if not self.active:
            await self.start()

    async def shutdown(self):
        """Cancel pending timers without broadcasting. App shutdown only."""
        for task in (self._deadline_task, self._next_task):
            if task is not None and not task.done():
                task.cancel()
        self._deadline_task = None
        self._next_task = None
        self.active = False
