"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, model_validator

load_dotenv()

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config(BaseModel):
    """Centralised app configuration backed by env vars."""

    # Generation
    currency_symbol: str = "R$"
    stable_offer_ids: bool = False
    ean_seed: int | None = None

    # Flask
    flask_host: str = "127.0.0.1"
    flask_port: int = 5000
    flask_debug: bool = True
    flask_secret_key: str = "change-me-in-production"  # noqa: S105
    cors_origins: list[str] = ["http://localhost:3000"]

    log_level: str = "INFO"

    @model_validator(mode="after")
    def _warn_unusual_generation(self) -> Config:
        """Log warnings when generation settings change the default behaviour."""
        if self.stable_offer_ids:
            logger.warning(
                "STABLE_OFFER_IDS is enabled: offer ids are derived from the variation path"
            )
        if self.ean_seed is not None:
            logger.warning("EAN_SEED is set: generated EANs repeat across runs")
        return self

    @classmethod
    def from_env(cls) -> Config:
        """Build config from environment variables."""
        cors_raw = os.getenv("CORS_ORIGINS", "http://localhost:3000")
        cors_origins = [o.strip() for o in cors_raw.split(",") if o.strip()]
        seed_raw = os.getenv("EAN_SEED", "").strip()

        return cls(
            currency_symbol=os.getenv("CURRENCY_SYMBOL", "R$"),
            stable_offer_ids=_env_flag("STABLE_OFFER_IDS", "false"),
            ean_seed=int(seed_raw) if seed_raw else None,
            flask_host=os.getenv("FLASK_HOST", "127.0.0.1"),
            flask_port=int(os.getenv("FLASK_PORT", "5000")),
            flask_debug=_env_flag("FLASK_DEBUG", "true"),
            flask_secret_key=os.getenv("FLASK_SECRET_KEY", "change-me-in-production"),
            cors_origins=cors_origins,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


settings = Config.from_env()
