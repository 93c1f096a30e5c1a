"""Shared route utilities."""
from __future__ import annotations

from typing import Any, Optional, Tuple

from flask import jsonify, request


def error_response(status: int, message: str, details: Optional[Any] = None):
    payload = {"error": {"code": status, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return jsonify(payload), status


def read_json_object() -> Tuple[Optional[dict], Optional[Any]]:
    """Return the request's JSON object, or an error response to send instead."""

    if not request.is_json:
        return None, error_response(415, "Content-Type 'application/json' requis.")

    data = request.get_json(silent=True)
    if data is None:
        return None, error_response(400, "JSON invalide ou non parsable.")
    if not isinstance(data, dict):
        return None, error_response(
            400,
            "Payload JSON invalide: un objet JSON (type dict) est requis.",
        )
    return data, None
