from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ═══════════════════════════════════════════════════
    # FastAPI Application Settings
    # ═══════════════════════════════════════════════════
    APP_NAME: str = "LayerEdge Network Defender"
    VERSION: str = "0.1.0"
    ENV: str = "development"  # "development" | "production"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ═══════════════════════════════════════════════════
    # Server Configuration
    # ═══════════════════════════════════════════════════
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    PUBLIC_DIR: str = ""  # browser client build, served at "/" when set

    # ═══════════════════════════════════════════════════
    # Player Accounts
    # ═══════════════════════════════════════════════════
    STARTING_RESOURCES: int = 1000
    STARTING_HYPE: int = 100

    # ═══════════════════════════════════════════════════
    # Transaction Rush (Surge)
    # ═══════════════════════════════════════════════════
    SURGE_DURATION_MS: int = 30000
    SURGE_TARGET: int = 50
    SURGE_RANDOMIZE_TARGET: bool = False  # True → target drawn from [MIN, MAX] per surge
    SURGE_TARGET_MIN: int = 30
    SURGE_TARGET_MAX: int = 70
    SURGE_AUTO_SCHEDULE: bool = True
    SURGE_FIRST_DELAY_MS: int = 5000
    SURGE_INTERVAL_MIN_MS: int = 60000
    SURGE_INTERVAL_MAX_MS: int = 180000

    REWARD_PER_VERIFICATION: int = 10
    COMPLETION_BONUS_MULTIPLIER: float = 1.5

    # ═══════════════════════════════════════════════════
    # Meme Market & Viral Spread
    # ═══════════════════════════════════════════════════
    VIRAL_CHECK_INTERVAL_MS: int = 120000
    MIN_HYPE_TO_GO_VIRAL: int = 50
    MIN_VIRALITY_SCORE_THRESHOLD: float = 30
    VIRAL_REWARD_AMOUNT: int = 500

    # ═══════════════════════════════════════════════════
    # CORS Configuration
    # ═══════════════════════════════════════════════════
    CORS_ORIGINS: list[str] = ["*"]
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: list[str] = ["*"]
    CORS_HEADERS: list[str] = ["*"]

    class Config:
        env_file = ".env"
        env_prefix = "DEFENDER_"
        extra = "ignore"


_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Singleton Settings instance.

    create_app() falls back to this when no explicit Settings is passed:

    app = create_app()                             # env / .env
    app = create_app(Settings(SURGE_TARGET=10))    # tests
    """
    global _settings
    if not _settings:
        _settings = Settings()
    return _settings
