"""
viral_spread.py — Viral Spread Engine
======================================
Her VIRAL_CHECK_INTERVAL_MS'de bir (varsayilan 2 dk) meme market'i puanlar.

ALGORITMA:
----------
1. currentHypeInvestment < MIN_HYPE_TO_GO_VIRAL olan meme'ler elenir
2. virality = currentHypeInvestment * rng.random()   (rng inject edilir)
3. En yuksek skor kazanir; esitlikte katalogda once gelen kalir
4. Kazanan skoru >= MIN_VIRALITY_SCORE_THRESHOLD ise viral olur:
   o cycle'daki her yatirimciya sabit VIRAL_REWARD_AMOUNT
   (yatirim miktarindan bagimsiz)
5. Sonuc ne olursa olsun market sifirlanir ve snapshot broadcast edilir

Butun state degisiklikleri ilk await'ten once yapilir; broadcast'ler
sirasinda gelen bir yatirim zaten yeni cycle'a duser.
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from edge_defender.apps.memes.models import Meme
from edge_defender.apps.memes.service import MemeMarket
from edge_defender.apps.players.service import SessionRegistry
from edge_defender.apps.ws.schema import UpdateResources
from edge_defender.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class ViralOutcome:
    winner_id: Optional[str] = None
    winner_name: Optional[str] = None
    score: float = 0.0
    went_viral: bool = False
    beneficiaries: list[str] = field(default_factory=list)


class ViralSpreadEngine:
    def __init__(
        self,
        market: MemeMarket,
        registry: SessionRegistry,
        gateway,
        settings: Settings,
        rng: Optional[random.Random] = None,
    ):
        self.market = market
        self.registry = registry
        self.gateway = gateway
        self.settings = settings
        self.rng = rng or random.Random()
        self._task: Optional[asyncio.Task] = None

    def pick_winner(self) -> tuple[Optional[Meme], float]:
        winner: Optional[Meme] = None
        best = 0.0

        for meme in self.market.memes():
            if meme.current_hype_investment < self.settings.MIN_HYPE_TO_GO_VIRAL:
                logger.debug(
                    f"Meme {meme.name} has only {meme.current_hype_investment} hype, "
                    f"needs {self.settings.MIN_HYPE_TO_GO_VIRAL} to be eligible"
                )
                continue

            score = meme.current_hype_investment * self.rng.random()
            logger.info(f"Meme {meme.name}: investment={meme.current_hype_investment}, virality={score:.2f}")

            if winner is None or score > best:
                winner, best = meme, score

        return winner, best

    async def run_cycle(self) -> ViralOutcome:
        """Tek bir viral cycle: puanla, ode, sifirla, broadcast et."""
        winner, score = self.pick_winner()
        outcome = ViralOutcome(score=score)
        payouts: list[tuple[str, int]] = []

        if winner is not None and score >= self.settings.MIN_VIRALITY_SCORE_THRESHOLD:
            outcome.went_viral = True
            outcome.winner_id = winner.id
            outcome.winner_name = winner.name
            reason = f"Viral Meme '{winner.name}' Payout"

            for player_id in list(winner.investors_this_cycle):
                if player_id not in self.registry:
                    logger.warning(f"⚠️  Investor {player_id} disconnected before payout, skipped")
                    continue
                new_total = self.registry.credit(player_id, self.settings.VIRAL_REWARD_AMOUNT, reason)
                outcome.beneficiaries.append(player_id)
                payouts.append((player_id, new_total))

            logger.info(f"🔥 Meme '{winner.name}' went viral with score {score:.2f}! Paid {len(payouts)} investors")
        else:
            logger.info("No meme reached viral status this cycle.")

        self.market.reset_cycle()
        snapshot = self.market.snapshot_all()

        # ═══ BROADCASTS ═══
        if outcome.went_viral:
            reward = self.settings.VIRAL_REWARD_AMOUNT
            await self.gateway.broadcast({
                "type": "meme_viral_event",
                "memeId": outcome.winner_id,
                "memeName": outcome.winner_name,
                "investorPlayerIds": outcome.beneficiaries,
                "rewardAmount": reward,
                "message": f"{outcome.winner_name} went VIRAL! Investors shared the spoils!",
            })
            for player_id, new_total in payouts:
                await self.gateway.send_to(player_id, UpdateResources(
                    newTotal=new_total,
                    changeAmount=reward,
                    reason=f"Viral Meme '{outcome.winner_name}' Payout",
                ).model_dump())
        else:
            await self.gateway.broadcast({
                "type": "notification",
                "message": "No meme went viral this cycle.",
                "level": "info",
            })

        await self.gateway.broadcast({"type": "all_memes_status_update", "memes": snapshot})
        return outcome

    # ═══════════════════════════════════════════════════
    # PERIODIC JOB
    # ═══════════════════════════════════════════════════

    async def run_forever(self):
        interval = self.settings.VIRAL_CHECK_INTERVAL_MS / 1000
        logger.info(f"Viral spread calculation scheduled every {interval:.0f} seconds")
        while True:
            await asyncio.sleep(interval)
            try:
                await self.run_cycle()
            except Exception as e:
                logger.exception(f"❌ Viral spread cycle failed: {e}")

    def start(self) -> asyncio.Task:
        if self._task is not None and not self._task.done():
            return self._task
        self._task = asyncio.create_task(self.run_forever())
        return self._task

    async def stop(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
