"""Application factory for Showcase."""
from __future__ import annotations

from flask import Flask

from .config import Config
from .extensions import db
from .logging_service import log_manager


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    log_manager.init_app(app)

    from .catalog import bp as catalog_bp
    from .catalog.engagement import tracker
    from .catalog.services import seed_demo_catalog
    from .logs import bp as logs_bp

    tracker.init_app(app)

    with app.app_context():
        db.create_all()
        if app.config.get("SEED_DEMO_CATALOG"):
            seed_demo_catalog()

    app.register_blueprint(catalog_bp)
    app.register_blueprint(logs_bp, url_prefix="/logs")

    for component in ("Storefront", "Engagement", "Favorites", "Logging"):
        log_manager.register_component(component)

    @app.context_processor
    def inject_globals() -> dict[str, object]:
        """Inject shared template variables."""
        return {"environment": app.config.get("ENVIRONMENT", "development")}

    return app
