"""
WebSocket Smoke Client
======================
Calisan bir sunucuya baglanip temel akisi elle denemek icin.

Usage:
    python -m edge_defender.main          # baska bir terminalde
    python ws_smoke_client.py [ws://localhost:3000/ws]
"""

import asyncio
import json
import sys

import websockets


async def smoke(uri: str):
    print(f"🔌 Connecting to {uri}...")

    async with websockets.connect(uri) as websocket:
        ack = json.loads(await websocket.recv())
        print(f"✅ Connected as {ack['playerId']} — resources={ack['currentResources']} hype={ack['currentHype']}")

        print("\n📈 Investing 25 hype in meme1...")
        await websocket.send(json.dumps({"type": "invest_hype", "memeId": "meme1", "amount": 25}))
        print(f"📥 {await websocket.recv()}")
        print(f"📥 {await websocket.recv()}")

        print("\n🎯 Reporting a rush score of 10/5...")
        await websocket.send(json.dumps({"type": "transaction_score", "score": 10, "target": 5}))
        print(f"📥 {await websocket.recv()}")

        print("\n💬 Sending chat...")
        await websocket.send(json.dumps({"type": "chat_message", "payload": "gm defenders"}))
        print(f"📥 {await websocket.recv()}")

        print("\n👂 Listening for server events (Ctrl+C to stop)...")
        while True:
            print(f"📥 {await websocket.recv()}")


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else "ws://localhost:3000/ws"
    try:
        asyncio.run(smoke(target))
    except KeyboardInterrupt:
        print("\n👋 Bye")
