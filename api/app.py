"""Flask application factory."""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from api.routes import STORE_KEY, api_bp
from config import Config, settings
from services.product_service import GenerationOptions, ProductStore


def create_app(config: Config | None = None, store: ProductStore | None = None) -> Flask:
    """Create and configure the Flask application."""
    config = config or settings

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.flask_secret_key

    CORS(app, origins=config.cors_origins)

    app.extensions[STORE_KEY] = store or ProductStore(GenerationOptions.from_config(config))

    app.register_blueprint(api_bp)

    # Health check
    @app.route("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # --- Error handlers ---

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "Not found"}), 404
        return jsonify({"error": "Not found", "details": "The API lives under /api/"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    return app
