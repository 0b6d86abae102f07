from __future__ import annotations

from pathlib import Path
import sys

import pytest
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from showcase import create_app
from showcase.catalog.engagement import tracker
from showcase.catalog.services import create_catalog
from showcase.config import Config
from showcase.extensions import db


class TestingConfig(Config):
    """Configuration tuned for isolated unit tests."""

    TESTING = True
    SECRET_KEY = "showcase-test-key"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }
    ENGAGEMENT_WORKERS = 0
    SEED_DEMO_CATALOG = False


@pytest.fixture()
def app():
    """Create a Flask app instance backed by an in-memory database."""

    application = create_app(TestingConfig)
    yield application
    tracker.use_sink(None)
    with application.app_context():
        db.drop_all()
        db.session.remove()


@pytest.fixture()
def client(app):
    """Provide a Flask test client for request assertions."""

    return app.test_client()


@pytest.fixture()
def cafe_id(app):
    """Persist the Joe's Cafe catalog and return its id."""

    with app.app_context():
        record = create_catalog(
            owner_id="owner-1",
            slug="joes-cafe",
            business_name="Joe's Cafe",
            description="Coffee and pastries.",
            phone_number="+15551234567",
            whatsapp_number="15551234567",
            address="12 Market St, Springfield",
            theme={"template": "MINIMALIST", "primaryColor": "#B45309"},
            items=[
                {
                    "name": "Latte",
                    "description": "Espresso with steamed milk.",
                    "price": "4.50",
                    "category": "Drinks",
                },
                {
                    "name": "Croissant",
                    "description": "Butter pastry.",
                    "price": "3",
                    "category": "Bakery",
                    "image_url": "https://img.example/croissant.jpg",
                },
            ],
        )
        return record.id
