from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.exceptions import ValidationError


def api_response(data: Any, message: str, status: int = 200):
    return jsonify({"success": True, "data": data, "message": message}), status


def login_required(view):
    """Authentication is done upstream; here we only need the caller id for audit fields."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "kind": "Unauthorized", "message": "Unauthorized - user not authenticated"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> Optional[int]:
    value = session.get("user_id")
    return int(value) if value is not None else None


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
