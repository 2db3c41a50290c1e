from __future__ import annotations

from flask import request


def wants_json() -> bool:
    """True when the caller is a JSON client rather than the HTML page."""
    if request.is_json or request.args.get("format") == "json":
        return True
    # text/html listed first so a bare */* resolves to HTML
    return request.accept_mimetypes.best_match(["text/html", "application/json"]) == "application/json"
