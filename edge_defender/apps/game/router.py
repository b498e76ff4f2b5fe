"""
router.py — Game REST API Endpoints
====================================
Read-only durum sorgulari ve (DEBUG'da) surge admin tetikleyicileri.

ENDPOINT'LER:
-------------
GET    /api/game/memes               → Meme market snapshot
GET    /api/game/surge               → Surge durumu
GET    /api/game/players/{id}        → Oyuncu hesabi
POST   /api/game/surge/start         → Surge baslat (DEBUG)
POST   /api/game/surge/end           → Surge bitir (DEBUG)
"""

from fastapi import APIRouter, Depends

from edge_defender.apps.game.schema import MemesResponse, PlayerResponse, SurgeStatusResponse
from edge_defender.core.dependencies import GameContext, get_game


# ═══════════════════════════════════════════════════
# ROUTER SETUP
# ═══════════════════════════════════════════════════

router = APIRouter(
    prefix="/api/game",
    tags=["game"],
    responses={404: {"description": "Player session or meme not found"}},
)

admin_router = APIRouter(prefix="/api/game", tags=["admin"])


# ═══════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════

@router.get("/memes", response_model=MemesResponse, summary="Meme market snapshot")
async def list_memes(game: GameContext = Depends(get_game)):
    return MemesResponse(memes=game.market.snapshot_all())


@router.get("/surge", response_model=SurgeStatusResponse, summary="Transaction surge durumu")
async def surge_status(game: GameContext = Depends(get_game)):
    return SurgeStatusResponse(**game.surge.status())


@router.get("/players/{player_id}", response_model=PlayerResponse, summary="Oyuncu hesabi")
async def get_player(player_id: str, game: GameContext = Depends(get_game)):
    """
    Raises:
        SessionNotFound → 404 (register_error_handlers)
    """
    account = game.registry.require(player_id)
    return PlayerResponse(
        playerId=account.id,
        currentResources=account.resources,
        currentHype=account.hype,
        connected=game.gateway.is_connected(account.id),
    )


@admin_router.post("/surge/start", response_model=SurgeStatusResponse, summary="Surge baslat")
async def start_surge(game: GameContext = Depends(get_game)):
    """Zaten aktifse no-op; yanit mevcut surge'u gosterir."""
    await game.surge.start()
    return SurgeStatusResponse(**game.surge.status())


@admin_router.post("/surge/end", response_model=SurgeStatusResponse, summary="Surge bitir")
async def end_surge(game: GameContext = Depends(get_game)):
    await game.surge.end()
    return SurgeStatusResponse(**game.surge.status())
