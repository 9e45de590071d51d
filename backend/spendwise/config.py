import json
import logging
import os
from pathlib import Path
from pydantic import BaseModel, Field, ValidationError

from .months import MAX_LOOKBACK_MONTHS
from .policy import GUEST_LIMITS

logger = logging.getLogger(__name__)

# Data directory: SPENDWISE_DATA_DIR env var if set (e.g. /data in Docker),
# otherwise fall back to ~/.config/spendwise for local dev
_data_dir = os.environ.get("SPENDWISE_DATA_DIR")
CONFIG_DIR = Path(_data_dir) if _data_dir else Path.home() / ".config" / "spendwise"
CONFIG_FILE = CONFIG_DIR / "config.json"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AppConfig(BaseModel):
    """Server configuration, stored as JSON in the data directory."""
    database_path: str | None = None
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:8081", "http://127.0.0.1:8081"]
    default_currency: str = "USD"
    max_lookback_months: int = MAX_LOOKBACK_MONTHS
    guest_limits: dict[str, int] = Field(default_factory=lambda: dict(GUEST_LIMITS))
    # code -> units per USD, applied over the built-in table
    currency_rates: dict[str, float] = {}

    def resolved_database_path(self) -> Path:
        if self.database_path:
            return Path(self.database_path).expanduser()
        return CONFIG_DIR / "spendwise.db"


_config: AppConfig | None = None


def load_config(path: Path = CONFIG_FILE) -> AppConfig:
    """Load configuration, falling back to defaults if the file is missing or bad."""
    if not path.exists():
        return AppConfig()

    try:
        with open(path, "r") as f:
            return AppConfig(**json.load(f))
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        logger.warning("Ignoring invalid config file %s: %s", path, e)
        return AppConfig()


def save_config(config: AppConfig, path: Path = CONFIG_FILE) -> None:
    """Write configuration as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(config.model_dump(mode="json"), f, indent=2)


def get_config() -> AppConfig:
    """Return the cached configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: AppConfig | None) -> None:
    """Replace the cached configuration (None forces a reload on next use)."""
    global _config
    _config = config


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_config().log_level).upper(),
        format=LOG_FORMAT,
    )
