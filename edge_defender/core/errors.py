"""
errors.py — Game Error Taxonomy
================================
Every error here is a recoverable, per-request failure: the dispatcher
answers the originating connection with one `error` message and shared
state stays untouched.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class GameError(Exception):
    status = 400

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_message(self) -> dict:
        """Outbound `error` envelope for the WebSocket transport."""
        return {"type": "error", "code": self.code, "message": self.message}


class SessionNotFound(GameError):
    status = 404

    def __init__(self, player_id: str | None = None):
        super().__init__(
            "SESSION_NOT_FOUND",
            "Player session not found. Please reconnect.",
            {"player_id": player_id} if player_id else None,
        )


class DuplicateSession(GameError):
    status = 409

    def __init__(self, player_id: str):
        super().__init__("DUPLICATE_SESSION", f"Session {player_id} is already registered", {"player_id": player_id})


class UnknownMeme(GameError):
    status = 404

    def __init__(self, meme_id):
        super().__init__("UNKNOWN_MEME", f"Meme {meme_id} not found. Investment failed.", {"meme_id": meme_id})


class InvalidAmount(GameError):
    status = 422

    def __init__(self, amount):
        super().__init__("INVALID_AMOUNT", "Amount must be a positive whole number.", {"amount": amount})


class InsufficientFunds(GameError):
    status = 422

    def __init__(self, requested, available: int):
        super().__init__(
            "INSUFFICIENT_FUNDS",
            f"Not enough hype: requested {requested}, available {available}.",
            {"requested": requested, "available": available},
        )


class MalformedMessage(GameError):
    status = 422

    def __init__(self, message: str = "Invalid message format."):
        super().__init__("MALFORMED_MESSAGE", message)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError):
        return JSONResponse(
            status_code=exc.status,
            content={
                "error": {
                    "code": exc.code,
                    "message": exc.message,
                    "details": exc.details,
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if app.debug else "Internal server error",
                    "details": {},
                }
            },
        )
