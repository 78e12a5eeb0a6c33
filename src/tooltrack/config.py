"""Runtime configuration for ToolTrack."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class AppConfig:
    """Configuration for the ToolTrack application."""

    # Storage
    data_dir: Path = Path.home() / ".tooltrack" / "data"
    storage: str = "file"  # "file" or "memory"

    # Autocomplete
    debounce_ms: int = 300
    search_limit: int = 10

    # Admin credential seeded on first run
    admin_username: str = "admin"
    admin_password: str = "admin123"

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    @property
    def debounce_delay(self) -> float:
        """Debounce delay in seconds."""
        return self.debounce_ms / 1000

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()

    @property
    def in_memory(self) -> bool:
        return self.storage == "memory"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_config() -> AppConfig:
    """Load configuration from environment variables (and a .env file if present)."""
    load_dotenv()

    defaults = AppConfig()
    data_dir = os.getenv("TOOLTRACK_DATA_DIR", "").strip()
    storage = os.getenv("TOOLTRACK_STORAGE", defaults.storage).strip().lower()
    if storage not in ("file", "memory"):
        raise ValueError(f"TOOLTRACK_STORAGE must be 'file' or 'memory', got {storage!r}")

    return AppConfig(
        data_dir=Path(data_dir).expanduser() if data_dir else defaults.data_dir,
        storage=storage,
        debounce_ms=max(_env_int("TOOLTRACK_DEBOUNCE_MS", defaults.debounce_ms), 0),
        search_limit=max(_env_int("TOOLTRACK_SEARCH_LIMIT", defaults.search_limit), 1),
        admin_username=os.getenv("TOOLTRACK_ADMIN_USERNAME", defaults.admin_username),
        admin_password=os.getenv("TOOLTRACK_ADMIN_PASSWORD", defaults.admin_password),
        log_level=os.getenv("TOOLTRACK_LOG_LEVEL", defaults.log_level),
        debug=os.getenv("DEBUG", "false").lower() == "true",
    )
