"""
schema.py — WebSocket Message Schemas
======================================
WebSocket uzerinden gelen/giden mesaj tipleri.

MESAJ FORMATI:
--------------
Duz JSON obje, `type` alani discriminator:

    {"type": "invest_hype", "memeId": "meme1", "amount": 25}
    {"type": "update_player_hype", "newHypeAmount": 75}
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════
# CLIENT → SERVER
# ═══════════════════════════════════════════════════

class ClientMessage(BaseModel):
    """Genel envelope; bilinmeyen tipler oldugu gibi relay edilir."""
    model_config = ConfigDict(extra="allow")

    type: str = Field(min_length=1, description="Mesaj tipi")


class ChatMessage(BaseModel):
    type: str = "chat_message"
    payload: Any = Field(description="Sohbet icerigi, oldugu gibi yayinlanir")


class InvestHypeMessage(BaseModel):
    """
    Alanlar burada dogrulanmaz; MemeMarket.invest UnknownMeme /
    InvalidAmount hatalarini kendisi uretir.
    """
    type: str = "invest_hype"
    memeId: Any = None
    amount: Any = None


class TransactionScoreMessage(BaseModel):
    type: str = "transaction_score"
    score: int = Field(ge=0, description="Rush sirasinda yapilan dogrulama sayisi")
    target: int = Field(ge=0, description="Rush basinda bildirilen hedef")


class RushVerificationAttemptMessage(BaseModel):
    type: str = "rush_verification_attempt"
    count: int = Field(default=0, ge=0)


# ═══════════════════════════════════════════════════
# SERVER → CLIENT
# ═══════════════════════════════════════════════════

class MemeStatus(BaseModel):
    id: str
    name: str
    currentHypeInvestment: int
    iconKey: str


class ConnectionAck(BaseModel):
    type: str = "connection_ack"
    message: str
    playerId: str
    currentResources: int
    currentHype: int
    serverMemes: list[MemeStatus]


class UpdateResources(BaseModel):
    type: str = "update_resources"
    newTotal: int
    changeAmount: int
    reason: str


class UpdatePlayerHype(BaseModel):
    type: str = "update_player_hype"
    newHypeAmount: int


class AllMemesStatusUpdate(BaseModel):
    type: str = "all_memes_status_update"
    memes: list[MemeStatus]


class ChatBroadcast(BaseModel):
    type: str = "chat_message"
    payload: Any
    timestamp: str


class RelayBroadcast(BaseModel):
    type: str = "broadcast"
    data: dict
    sender: str


class ErrorMessage(BaseModel):
    type: str = "error"
    code: Optional[str] = None
    message: str
