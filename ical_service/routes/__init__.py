"""Blueprint registration helpers."""
from __future__ import annotations

from flask import Flask

from .events import events_bp

__all__ = ["register_blueprints"]


def register_blueprints(app: Flask) -> None:
    app.register_blueprint(events_bp)
