"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Storage ───────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./fleet_management.db"
    STORAGE_BACKEND: str = "sql"     # sql | memory

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "0.0.0.0"
    BACKEND_PORT: int = 5000
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on REST endpoints

    # ── Audit ─────────────────────────────────────────────────────────────
    AUDIT_WINDOW: int = 20           # Entries pushed with snapshots and after each edit
    AUDIT_DEFAULT_LIMIT: int = 50    # auditRequest / GET /audit without a limit
    AUDIT_MEMORY_LIMIT: int = 1000   # Retention cap of the in-memory ledger

    # ── Sync behaviour ────────────────────────────────────────────────────
    SEED_DEFAULT_FLEET: bool = True      # Load the default fleet when the store is empty
    REQUIRE_JOIN_FOR_EDITS: bool = True  # Reject update/create from unjoined sockets
    SEND_TIMEOUT_SECONDS: float = 5.0    # A peer slower than this on one frame is dropped

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"              # Console
    LOG_FILE_LEVEL: str = "DEBUG"        # logs/fleetsync.log
    LOG_DIR: Optional[str] = None        # Defaults to <repo>/logs

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
