"""
rewards.py — Transaction Rush Reward
=====================================
Client'in rush sonunda bildirdigi skoru resources'a cevirir.

Surge scheduler'dan bagimsizdir: her client kendi geri sayimini yurutur,
skor surge'un sunucu tarafinda bitmesinden sonra da gelebilir ve yine
odullendirilir.
"""

import logging
import math

from edge_defender.apps.players.service import SessionRegistry
from edge_defender.apps.ws.schema import UpdateResources
from edge_defender.core.config import Settings

logger = logging.getLogger(__name__)

REWARD_REASON = "Transaction Rush Reward"


def compute_rush_reward(
    score: int,
    target: int,
    per_verification: int = 10,
    bonus_multiplier: float = 1.5,
) -> tuple[int, bool]:
    """
    Returns:
        (earned, bonus_applied)

    Example:
        compute_rush_reward(10, 5)  # (150, True)
        compute_rush_reward(3, 5)   # (30, False)
        compute_rush_reward(5, 0)   # (50, False) — target 0 never earns the bonus
    """
    earned = score * per_verification
    bonus = target > 0 and score >= target
    if bonus:
        earned *= bonus_multiplier
    return math.floor(earned), bonus


def award_rush_reward(
    registry: SessionRegistry,
    player_id: str,
    score: int,
    target: int,
    settings: Settings,
) -> dict:
    """
    Skoru hesapla ve oyuncuya kredi et.

    Returns:
        dict: `update_resources` mesaji

    Raises:
        SessionNotFound: oyuncu yok, hicbir state degismez
    """
    registry.require(player_id)

    earned, bonus = compute_rush_reward(
        score,
        target,
        per_verification=settings.REWARD_PER_VERIFICATION,
        bonus_multiplier=settings.COMPLETION_BONUS_MULTIPLIER,
    )
    reason = f"{REWARD_REASON} +Bonus!" if bonus else REWARD_REASON
    new_total = registry.credit(player_id, earned, reason)

    if bonus:
        logger.info(f"🎯 Bonus applied for {player_id} meeting target {target}")

    return UpdateResources(newTotal=new_total, changeAmount=earned, reason=reason).model_dump()
