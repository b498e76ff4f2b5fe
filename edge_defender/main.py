"""
main.py — FastAPI Application Factory
======================================
LayerEdge Network Defender: game server

Server-authoritative oyuncu hesaplari, transaction surge'leri ve meme
market. Factory pattern sayesinde testler kendi Settings'leriyle app kurar.

Kullanim:
    # Development mode (hot-reload ile)
    uvicorn edge_defender.main:app --reload --port 3000

    # Veya direkt python ile
    python -m edge_defender.main
"""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from edge_defender.core.config import Settings, get_settings
from edge_defender.core.dependencies import GameContext, build_game_context
from edge_defender.core.errors import register_error_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.
    Background timer'lari (viral spread) baslatir, kapanista iptal eder.
    """
    # ═══════════════════════════════════════════════════
    # STARTUP
    # ═══════════════════════════════════════════════════
    game: GameContext = app.state.game
    settings = game.settings
    print(f"🚀 Starting {settings.APP_NAME} v{settings.VERSION}")
    print(f"📍 Environment: {settings.ENV}")
    print(f"⚡ Surge: {settings.SURGE_DURATION_MS / 1000:.0f}s, "
          f"target {'random' if settings.SURGE_RANDOMIZE_TARGET else settings.SURGE_TARGET}")

    game.viral.start()
    print(f"✅ Viral spread job every {settings.VIRAL_CHECK_INTERVAL_MS / 1000:.0f}s")

    yield

    # ═══════════════════════════════════════════════════
    # SHUTDOWN
    # ═══════════════════════════════════════════════════
    await game.viral.stop()
    await game.surge.shutdown()
    print("👋 Shutting down gracefully...")


def create_app(settings: Optional[Settings] = None, game: Optional[GameContext] = None) -> FastAPI:
    """
    FastAPI application factory.

    Args:
        settings: None ise get_settings()
        game: Hazir GameContext (testler icin); None ise kurulur

    Returns:
        FastAPI: Yapilandirilmis FastAPI instance
    """
    settings = settings or (game.settings if game else get_settings())
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ═══════════════════════════════════════════════════
    # FastAPI App Olustur
    # ═══════════════════════════════════════════════════
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Idle defender game server — player resources, transaction surges, meme market",
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )
    app.state.game = game or build_game_context(settings)

    # ═══════════════════════════════════════════════════
    # CORS Middleware
    # ═══════════════════════════════════════════════════
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )

    # ═══════════════════════════════════════════════════
    # Request Timing Middleware
    # ═══════════════════════════════════════════════════
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Her request'in suresini header'a ekler."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}s"
        return response

    register_error_handlers(app)

    # ═══════════════════════════════════════════════════
    # System Endpoints
    # ═══════════════════════════════════════════════════
    @app.get("/health", tags=["system"])
    def health_check():
        return {
            "status": "ok",
            "app": settings.APP_NAME,
            "version": settings.VERSION,
            "environment": settings.ENV,
        }

    @app.get("/api", tags=["system"])
    def root():
        """API bilgisi; "/" statik client'a ayrilabilir."""
        return {
            "message": settings.APP_NAME,
            "version": settings.VERSION,
            "players_online": app.state.game.gateway.get_connection_count(),
            "docs": "/docs" if settings.DEBUG else "disabled",
        }

    # ═══════════════════════════════════════════════════
    # Router'lari Dahil Et
    # ═══════════════════════════════════════════════════
    from edge_defender.apps.game.router import admin_router, router as game_router
    from edge_defender.apps.ws.router import router as ws_router

    app.include_router(game_router)
    app.include_router(ws_router)
    if settings.DEBUG:
        app.include_router(admin_router)

    # Static client goes last so it never shadows API routes.
    if settings.PUBLIC_DIR:
        public_dir = Path(settings.PUBLIC_DIR)
        if public_dir.is_dir():
            app.mount("/", StaticFiles(directory=public_dir, html=True), name="public")
        else:
            logger.warning(f"⚠️  PUBLIC_DIR {public_dir} does not exist, static client not served")

    return app


# ═══════════════════════════════════════════════════
# Application Instance (uvicorn icin)
# ═══════════════════════════════════════════════════
app = create_app()


# ═══════════════════════════════════════════════════
# CLI Entry Point (python -m edge_defender.main)
# ═══════════════════════════════════════════════════
if __name__ == "__main__":
    import uvicorn
    settings = get_settings()

    print("=" * 60)
    print(f"🎮 {settings.APP_NAME}")
    print("=" * 60)
    print(f"📡 Starting server at http://{settings.HOST}:{settings.PORT}")
    print(f"🔌 WebSocket: ws://{settings.HOST}:{settings.PORT}/ws")
    print("=" * 60)

    uvicorn.run(
        "edge_defender.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info" if settings.DEBUG else "warning",
    )
