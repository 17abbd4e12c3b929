from __future__ import annotations

from functools import wraps

from flask import jsonify, session


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "admin_id" not in session:
            return jsonify({"error": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_admin_id() -> str | None:
    return session.get("admin_id")
