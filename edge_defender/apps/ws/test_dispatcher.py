"""
Tests for ws/router.py — message dispatch without a real socket

handle_client_event / handle_raw_message dogrudan cagrilir,
RecordingGateway giden mesajlari toplar.

Kullanim:
    pytest edge_defender/apps/ws
"""

import asyncio
import json

import pytest

from edge_defender.apps.ws.router import handle_client_event, handle_raw_message


@pytest.fixture
def player(game, gateway):
    game.registry.register("p1")
    gateway.connected.append("p1")
    return "p1"


def _send(game, player_id, message):
    asyncio.run(handle_client_event(game, player_id, message))


def _error_codes(gateway, player_id):
    return [m["code"] for m in gateway.messages_to(player_id) if m["type"] == "error"]


def test_invest_hype_updates_investor_and_broadcasts_memes(game, gateway, player):
    _send(game, player, {"type": "invest_hype", "memeId": "meme2", "amount": 25})

    assert gateway.messages_to(player) == [{"type": "update_player_hype", "newHypeAmount": 75}]
    message, _ = gateway.broadcasts[0]
    assert message["type"] == "all_memes_status_update"
    assert message["memes"][1]["currentHypeInvestment"] == 25


@pytest.mark.parametrize(
    "payload,code",
    [
        ({"memeId": "nope", "amount": 5}, "UNKNOWN_MEME"),
        ({"memeId": "meme1", "amount": 0}, "INVALID_AMOUNT"),
        ({"memeId": "meme1", "amount": "5"}, "INVALID_AMOUNT"),
        ({"memeId": "meme1", "amount": 500}, "INSUFFICIENT_FUNDS"),
    ],
)
def test_invest_hype_errors(game, gateway, player, payload, code):
    _send(game, player, {"type": "invest_hype", **payload})

    assert _error_codes(gateway, player) == [code]
    assert gateway.broadcasts == []
    assert game.registry.get(player).hype == 100
    assert all(m["currentHypeInvestment"] == 0 for m in game.market.snapshot_all())


def test_transaction_score_reward(game, gateway, player):
    _send(game, player, {"type": "transaction_score", "score": 10, "target": 5})

    assert gateway.messages_to(player) == [{
        "type": "update_resources",
        "newTotal": 1150,
        "changeAmount": 150,
        "reason": "Transaction Rush Reward +Bonus!",
    }]


def test_transaction_score_rewarded_without_active_surge(game, gateway, player):
    assert game.surge.active is False
    _send(game, player, {"type": "transaction_score", "score": 3, "target": 5})
    assert game.registry.get(player).resources == 1030


def test_messages_after_disconnect_get_session_not_found(game, gateway, player):
    game.registry.remove(player)

    _send(game, player, {"type": "transaction_score", "score": 10, "target": 5})
    _send(game, player, {"type": "invest_hype", "memeId": "meme1", "amount": 10})

    assert _error_codes(gateway, player) == ["SESSION_NOT_FOUND", "SESSION_NOT_FOUND"]
    assert game.market.get("meme1").current_hype_investment == 0


@pytest.mark.parametrize(
    "message",
    [
        {},
        {"type": ""},
        {"type": 5},
        ["invest_hype"],
        {"type": "transaction_score", "score": "lots", "target": 5},
        {"type": "transaction_score", "score": -1, "target": 5},
        {"type": "chat_message"},
    ],
)
def test_malformed_messages(game, gateway, player, message):
    _send(game, player, message)
    assert _error_codes(gateway, player) == ["MALFORMED_MESSAGE"]
    assert game.registry.get(player).resources == 1000


def test_unparseable_text(game, gateway, player):
    asyncio.run(handle_raw_message(game, player, "{not json"))
    assert gateway.messages_to(player) == [{
        "type": "error",
        "code": "MALFORMED_MESSAGE",
        "message": "Invalid message format.",
    }]


def test_raw_message_is_decoded(game, gateway, player):
    asyncio.run(handle_raw_message(game, player, json.dumps({"type": "join"})))
    assert gateway.messages_to(player)[0]["type"] == "connection_ack"


def test_chat_is_broadcast_with_timestamp(game, gateway, player):
    _send(game, player, {"type": "chat_message", "payload": {"text": "gm"}})

    message, exclude = gateway.broadcasts[0]
    assert message["type"] == "chat_message"
    assert message["payload"] == {"text": "gm"}
    assert message["timestamp"]
    assert exclude == []


def test_join_resends_ack_without_reset(game, gateway, player):
    game.registry.credit(player, 40, "test")

    _send(game, player, {"type": "join"})

    ack = gateway.messages_to(player)[0]
    assert ack["type"] == "connection_ack"
    assert ack["playerId"] == player
    assert ack["currentResources"] == 1040
    assert ack["currentHype"] == 100
    assert [m["id"] for m in ack["serverMemes"]] == ["meme1", "meme2"]


def test_rush_verification_attempt_has_no_effect(game, gateway, player):
    _send(game, player, {"type": "rush_verification_attempt", "count": 12})

    assert gateway.sent == []
    assert gateway.broadcasts == []
    assert game.registry.get(player).resources == 1000


def test_unknown_type_is_relayed_to_other_sessions(game, gateway, player):
    game.registry.register("p2")
    gateway.connected.extend(["p2", "pending"])  # "pending" has no account

    _send(game, player, {"type": "node_ping", "nodeId": 7})

    message, exclude = gateway.broadcasts[0]
    assert message == {
        "type": "broadcast",
        "data": {"type": "node_ping", "nodeId": 7},
        "sender": player,
    }
    assert set(exclude) == {player, "pending"}
