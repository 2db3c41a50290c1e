"""JSON response shapes shared by the blog routes."""
from __future__ import annotations

from typing import Any

from flask import get_flashed_messages, jsonify
from flask_wtf.csrf import generate_csrf

from blogdesk.listing.filters import FilterState
from blogdesk.listing.pagination import PageResult


def consume_flash() -> list[dict[str, str]]:
    # Reading flashes removes them from the session, so each is seen once
    return [
        {"category": category, "message": message}
        for category, message in get_flashed_messages(with_categories=True)
    ]


def listing_payload(result: PageResult, filters: FilterState) -> dict[str, Any]:
    return {
        "blogs": result.to_dict(),
        "filters": filters.echo(),
        "page_numbers": result.page_numbers() if result.has_pages else [],
        "flash": consume_flash(),
        "csrf_token": generate_csrf(),
    }


def validation_error_response(errors: dict[str, str]):
    return jsonify({"error": "validation_failed", "message": "The given data was invalid.", "errors": errors}), 422


def not_found_response(blog_id: int):
    return jsonify({"error": "not_found", "message": f"blog {blog_id} not found"}), 404


def write_response(message: str, blog: Any = None, status: int = 200):
    body: dict[str, Any] = {"success": True, "message": message}
    if blog is not None:
        body["blog"] = blog.to_dict()
    return jsonify(body), status
