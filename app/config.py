"""Settings loaded from the environment (and an optional ``.env`` file)."""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv
from rich.logging import RichHandler


def _truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    environment: str
    log_level: str
    host: str
    port: int
    api_base_url: str
    seed_on_startup: bool

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    # Helper for tests to override values at runtime
    def override(self, **kwargs: Any) -> None:
        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise AttributeError(f"Settings has no attribute '{key}'")
            setattr(self, key, value)


def _load_settings() -> Settings:
    load_dotenv()
    return Settings(
        environment=os.getenv("APP_ENV", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8085")),
        api_base_url=os.getenv("INVENTORY_API_URL", "http://127.0.0.1:8085"),
        seed_on_startup=_truthy(os.getenv("SEED_ON_STARTUP")),
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = _load_settings()
    return _settings


def configure_logging(level: str = "INFO") -> None:
    level_value = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level_value,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
