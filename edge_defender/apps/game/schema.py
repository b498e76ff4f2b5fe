"""
schema.py — Pydantic Response Models
=====================================
/api/game endpoint'lerinin veri modelleri.
"""

from pydantic import BaseModel, Field

from edge_defender.apps.ws.schema import MemeStatus


class MemesResponse(BaseModel):
    """
    Example:
        {"memes": [{"id": "meme1", "name": "Classic Doge", "currentHypeInvestment": 0, "iconKey": "icon_doge"}]}
    """
    memes: list[MemeStatus]


class SurgeStatusResponse(BaseModel):
    active: bool
    durationMs: int = Field(description="Aktif (veya son) surge suresi, ms")
    targetCount: int = Field(description="Aktif (veya son) surge hedefi")
    nextSurgePending: bool


class PlayerResponse(BaseModel):
    playerId: str
    currentResources: int
    currentHype: int
    connected: bool
