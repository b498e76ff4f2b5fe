"""
dependencies.py — Game State Container
=======================================
Paylasilan mutable state'in tek sahibi. Module-level global yok:
create_app() bir GameContext kurar ve app.state.game'e koyar; router'lar
oradan okur, testler kendi sahte gateway'leriyle ayrisini kurar.
"""

import random
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from edge_defender.apps.memes.service import MemeMarket
from edge_defender.apps.players.service import SessionRegistry
from edge_defender.apps.ws.service import ConnectionManager
from edge_defender.core.config import Settings, get_settings
from edge_defender.core.surge import SurgeScheduler
from edge_defender.core.viral_spread import ViralSpreadEngine


@dataclass
class GameContext:
    settings: Settings
    gateway: ConnectionManager
    registry: SessionRegistry
    market: MemeMarket
    surge: SurgeScheduler
    viral: ViralSpreadEngine


def build_game_context(
    settings: Optional[Settings] = None,
    gateway=None,
    rng: Optional[random.Random] = None,
) -> GameContext:
    settings = settings or get_settings()
    gateway = gateway if gateway is not None else ConnectionManager()
    rng = rng or random.Random()

    registry = SessionRegistry(
        starting_resources=settings.STARTING_RESOURCES,
        starting_hype=settings.STARTING_HYPE,
    )
    market = MemeMarket(registry)
    return GameContext(
        settings=settings,
        gateway=gateway,
        registry=registry,
        market=market,
        surge=SurgeScheduler(gateway, settings, rng=rng),
        viral=ViralSpreadEngine(market, registry, gateway, settings, rng=rng),
    )


def get_game(request: Request) -> GameContext:
    """
    FastAPI dependency:

    @router.get("/memes")
    def memes(game: GameContext = Depends(get_game)):
        return game.market.snapshot_all()
    """
    return request.app.state.game
