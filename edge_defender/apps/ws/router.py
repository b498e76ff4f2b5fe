"""
router.py — WebSocket Router
=============================
Oyuncu baglantilarini yoneten endpoint ve mesaj dispatcher'i.

ENDPOINT:
---------
WS /ws

FLOW:
-----
1. Client baglanir → sunucu player id atar, hesap acar, connection_ack yollar
2. Ilk baglantida (aktif/planli surge yoksa) ilk surge planlanir
3. Mesaj loop'u: her mesaj `type`'ina gore dispatch edilir
4. Disconnect → socket ve hesap silinir

Hatalar (GameError) sadece mesaji gonderen baglantiya `error` olarak
doner; baglanti acik kalir.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from edge_defender.apps.players.models import PlayerAccount
from edge_defender.apps.ws.schema import (
    AllMemesStatusUpdate,
    ChatBroadcast,
    ChatMessage,
    ClientMessage,
    ConnectionAck,
    ErrorMessage,
    InvestHypeMessage,
    RelayBroadcast,
    RushVerificationAttemptMessage,
    TransactionScoreMessage,
    UpdatePlayerHype,
)
from edge_defender.core.dependencies import GameContext
from edge_defender.core.errors import GameError, MalformedMessage
from edge_defender.core.rewards import award_rush_reward

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to LayerEdge Network Defender!"

# These need a live account; everything else is stateless relay.
SESSION_BOUND = {"join", "invest_hype", "transaction_score", "rush_verification_attempt"}

# ═══════════════════════════════════════════════════
# ROUTER SETUP
# ═══════════════════════════════════════════════════

router = APIRouter(tags=["websocket"])


# ═══════════════════════════════════════════════════
# WEBSOCKET ENDPOINT
# ═══════════════════════════════════════════════════

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    URL Format:
        ws://localhost:3000/ws

    Client Mesaj Formati:
        {"type": "invest_hype", "memeId": "meme1", "amount": 25}

    Server Mesaj Formati:
        {"type": "update_player_hype", "newHypeAmount": 75}
    """
    game: GameContext = websocket.app.state.game
    player_id = uuid.uuid4().hex

    # ═══ 1. BAGLANTI KABUL ET ═══
    try:
        await game.gateway.connect(player_id, websocket)
        account = game.registry.register(player_id)
        await game.gateway.send_to(player_id, connection_ack(game, account))
    except Exception as e:
        logger.error(f"❌ Connection failed for {player_id}: {e}")
        game.gateway.disconnect(player_id)
        game.registry.remove(player_id)
        return

    game.surge.kick_off()

    # ═══ 2. MESAJ LOOP ═══
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            raw = message.get("text")
            if raw is None and message.get("bytes") is not None:
                raw = message["bytes"].decode("utf-8", errors="replace")

            logger.debug(f"📥 Received from {player_id}: {raw}")
            await handle_raw_message(game, player_id, raw)

    except WebSocketDisconnect:
        logger.info(f"🔌 Client {player_id} disconnected")

    except Exception as e:
        logger.error(f"❌ WebSocket error for client {player_id}: {e}")

    finally:
        game.gateway.disconnect(player_id)
        if game.registry.remove(player_id):
            logger.info(f"Client {player_id} disconnected and data removed.")


# ═══════════════════════════════════════════════════
# MESSAGE HANDLING
# ═══════════════════════════════════════════════════

def connection_ack(game: GameContext, account: PlayerAccount) -> dict:
    return ConnectionAck(
        message=WELCOME_MESSAGE,
        playerId=account.id,
        currentResources=account.resources,
        currentHype=account.hype,
        serverMemes=game.market.snapshot_all(),
    ).model_dump()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse(model: type[BaseModel], data: Any):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        kind = data.get("type") if isinstance(data, dict) else None
        logger.warning(f"⚠️  Invalid {kind or 'message'}: {e.errors()}")
        raise MalformedMessage(f"Invalid {kind} message." if kind else "Invalid message format.")


async def handle_raw_message(game: GameContext, player_id: str, raw: str | None):
    """Text frame → JSON → handle_client_event. Parse hatasi MalformedMessage olur."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"⚠️  Unparseable message from {player_id}")
        await game.gateway.send_to(player_id, MalformedMessage().to_message())
        return

    await handle_client_event(game, player_id, data)


async def handle_client_event(game: GameContext, player_id: str, data: Any):
    """
    Tek bir client mesajini isle. Asla exception firlatmaz.

    Args:
        game: GameContext
        player_id: Mesaji gonderen oyuncu
        data: JSON-decoded mesaj

    Message Types:
        - join: connection_ack tekrar gonderilir
        - chat_message: timestamp eklenip herkese yayinlanir
        - invest_hype: MemeMarket.invest
        - transaction_score: rush odulu
        - rush_verification_attempt: sadece log
        - diger: diger oyunculara `broadcast` olarak relay
    """
    try:
        envelope = _parse(ClientMessage, data)
        await _dispatch(game, player_id, envelope.type, data)

    except GameError as e:
        logger.warning(f"⚠️  {e.code} for {player_id}: {e.message}")
        await game.gateway.send_to(player_id, e.to_message())

    except Exception as e:
        logger.exception(f"❌ Failed to handle message from {player_id}: {e}")
        await game.gateway.send_to(
            player_id,
            ErrorMessage(code="INTERNAL_ERROR", message="Failed to handle message.").model_dump(),
        )


async def _dispatch(game: GameContext, player_id: str, message_type: str, data: dict):
    if message_type in SESSION_BOUND:
        account = game.registry.require(player_id)

    # ═══ JOIN ═══
    if message_type == "join":
        await game.gateway.send_to(player_id, connection_ack(game, account))

    # ═══ CHAT ═══
    elif message_type == "chat_message":
        chat = _parse(ChatMessage, data)
        await game.gateway.broadcast(ChatBroadcast(payload=chat.payload, timestamp=_now()).model_dump())

    # ═══ INVEST HYPE (Meme Market) ═══
    elif message_type == "invest_hype":
        request = _parse(InvestHypeMessage, data)
        result = game.market.invest(player_id, request.memeId, request.amount)

        await game.gateway.send_to(player_id, UpdatePlayerHype(newHypeAmount=result["newHype"]).model_dump())
        await game.gateway.broadcast(AllMemesStatusUpdate(memes=game.market.snapshot_all()).model_dump())

    # ═══ TRANSACTION SCORE (Rush odulu) ═══
    elif message_type == "transaction_score":
        report = _parse(TransactionScoreMessage, data)
        logger.info(f"Received transaction_score from {player_id}: {report.score} / {report.target}")

        update = award_rush_reward(game.registry, player_id, report.score, report.target, game.settings)
        await game.gateway.send_to(player_id, update)

    # ═══ RUSH VERIFICATION ATTEMPT ═══
    elif message_type == "rush_verification_attempt":
        attempt = _parse(RushVerificationAttemptMessage, data)
        # TODO: compare against surge.target_count once per-player rush tracking exists (anti-cheat)
        logger.info(f"Player {account.id} verification attempt: {attempt.count}")

    # ═══ RELAY ═══
    else:
        # connections that are not (or no longer) registered don't get relays
        exclude = [player_id] + [
            pid for pid in game.gateway.get_active_players() if pid not in game.registry
        ]
        await game.gateway.broadcast(
            RelayBroadcast(data=data, sender=player_id).model_dump(),
            exclude=exclude,
        )
