"""Calendar export service application entrypoint."""
from __future__ import annotations

import logging

from flask import Flask

from ical_service.config import get_config
from ical_service.routes import register_blueprints
from ical_service.routes.utils import error_response

app = Flask(__name__)
_APP_CONFIGURED = False


def create_app() -> Flask:
    global _APP_CONFIGURED

    if not _APP_CONFIGURED:
        logging.basicConfig(level=get_config().log_level)
        app.logger.setLevel(get_config().log_level)
        register_blueprints(app)
        register_error_handlers(app)
        _APP_CONFIGURED = True
    return app


@app.get("/health")
def health():
    return {"status": "ok", "service": "ical-service"}


def register_error_handlers(flask_app: Flask) -> None:
    @flask_app.errorhandler(404)
    def handle_404(e):
        return error_response(404, "Ressource introuvable.")

    @flask_app.errorhandler(405)
    def handle_405(e):
        return error_response(405, "Méthode non autorisée pour cette ressource.")

    @flask_app.errorhandler(500)
    def handle_500(e):
        return error_response(500, "Erreur interne. On respire, on relance.")


if __name__ == "__main__":  # pragma: no cover - manual run helper
    create_app().run(host="0.0.0.0", port=5000)
