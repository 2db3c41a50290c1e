from __future__ import annotations

from functools import wraps
from typing import Callable, Any

from flask import jsonify
from flask_login import current_user, login_required


def verified_required(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    @login_required
    def wrapper(*args, **kwargs):
        if not getattr(current_user, "is_verified", False):
            return jsonify({"error": "forbidden", "message": "verified email required"}), 403
        return fn(*args, **kwargs)

    return wrapper
