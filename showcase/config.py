"""Configuration settings for Showcase."""
from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration class."""

    SECRET_KEY = os.environ.get("SHOWCASE_SECRET_KEY", "showcase-dev-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "SHOWCASE_DATABASE_URI", f"sqlite:///{BASE_DIR / 'showcase.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ENVIRONMENT = os.environ.get("SHOWCASE_ENV", "development")
    LOG_RETENTION = int(os.environ.get("SHOWCASE_LOG_RETENTION", 200))
    # 0 runs engagement writes inline instead of on the worker pool
    ENGAGEMENT_WORKERS = int(os.environ.get("SHOWCASE_ENGAGEMENT_WORKERS", 2))
    FAVORITES_KEY = os.environ.get("SHOWCASE_FAVORITES_KEY", "showcase_favorites")
    SEED_DEMO_CATALOG = _env_flag("SHOWCASE_SEED_DEMO_CATALOG")
