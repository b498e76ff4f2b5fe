"""
service.py — WebSocket Connection Manager
==========================================
Transport gateway: core bileşenler oyunculara sadece bu sinif uzerinden
mesaj gonderir.

SORUMLULUKLAR:
--------------
✅ Baglantilari kaydet/sil
✅ Broadcast (tum oyunculara mesaj)
✅ Unicast (tek oyuncuya mesaj)

KULLANIM:
---------
    manager = ConnectionManager()

    await manager.connect("3f2a...", websocket)
    await manager.broadcast({"type": "transaction_surge_end"})
    await manager.send_to("3f2a...", {"type": "update_player_hype", "newHypeAmount": 75})

Broadcast best-effort'tur: yayin sirasinda kopan bir baglanti mesaji
alabilir de almayabilir de.
"""

import logging
from typing import Dict, Optional
from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Veri yapisi:
    {
        "3f2a...": WebSocket,
        "9c41...": WebSocket,
    }
    """

    def __init__(self):
        # player_id → WebSocket
        self.active_connections: Dict[str, WebSocket] = {}
        logger.info("ConnectionManager initialized")

    async def connect(self, player_id: str, websocket: WebSocket):
        """
        WebSocket'i kabul et ve kaydet.

        Args:
            player_id: Sunucunun atadigi oyuncu ID'si
            websocket: FastAPI WebSocket instance
        """
        await websocket.accept()
        self.active_connections[player_id] = websocket
        logger.info(f"✅ Client {player_id} connected ({len(self.active_connections)} active)")

    def disconnect(self, player_id: str):
        if player_id in self.active_connections:
            del self.active_connections[player_id]
            logger.info(f"❌ Client {player_id} disconnected")

    async def send_to(self, player_id: str, message: dict):
        """
        Tek bir oyuncuya mesaj gonder (unicast).

        Use Cases:
            - connection_ack
            - error yanitlari
            - update_resources / update_player_hype
        """
        websocket = self.active_connections.get(player_id)

        if websocket:
            try:
                await websocket.send_json(message)
                logger.debug(f"📤 Sent to {player_id}: {message['type']}")
            except Exception as e:
                logger.error(f"❌ Failed to send to {player_id}: {e}")
                self.disconnect(player_id)
        else:
            logger.warning(f"⚠️  Client {player_id} not connected, dropping {message.get('type')}")

    async def broadcast(self, message: dict, exclude: Optional[list[str]] = None):
        """
        Bagli tum oyunculara mesaj gonder.

        Args:
            message: JSON mesaj
            exclude: Gonderilmeyecek oyuncu ID'leri (optional)

        Use Cases:
            - transaction_surge_start / transaction_surge_end
            - all_memes_status_update
            - meme_viral_event
            - chat_message
        """
        exclude = exclude or []
        disconnected_players = []

        # snapshot: a send may await while another task connects/disconnects
        for player_id, websocket in list(self.active_connections.items()):
            if player_id in exclude:
                continue

            try:
                await websocket.send_json(message)
                logger.debug(f"📢 Broadcast to {player_id}: {message['type']}")
            except Exception as e:
                logger.error(f"❌ Failed to broadcast to {player_id}: {e}")
                disconnected_players.append(player_id)

        for player_id in disconnected_players:
            self.disconnect(player_id)

    def get_active_players(self) -> list[str]:
        return list(self.active_connections.keys())

    def is_connected(self, player_id: str) -> bool:
        return player_id in self.active_connections

    def get_connection_count(self) -> int:
        return len(self.active_connections)
