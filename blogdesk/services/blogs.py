from __future__ import annotations

from typing import Any, Mapping

import structlog
from pydantic import ValidationError

from blogdesk.listing.filters import FilterState
from blogdesk.listing.pagination import PageResult
from blogdesk.listing.resolver import resolve_page
from blogdesk.models.blog import Blog
from blogdesk.repositories import blog as blog_repo
from blogdesk.schemas.blogs import BlogPayload, field_errors

log = structlog.get_logger(__name__)


class BlogValidationError(ValueError):
    """Raised with per-field messages when a write payload is rejected."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("invalid_blog")
        self.errors = errors


class BlogNotFound(LookupError):
    def __init__(self, blog_id: int):
        super().__init__(f"blog {blog_id} not found")
        self.blog_id = blog_id


def list_blogs(filters: FilterState) -> PageResult:
    return resolve_page(filters)


def validate_blog_payload(data: Mapping[str, Any]) -> BlogPayload:
    try:
        return BlogPayload.model_validate({"title": data.get("title"), "content": data.get("content")})
    except ValidationError as e:
        errors = field_errors(e)
        log.info("blog_write_rejected", fields=sorted(errors))
        raise BlogValidationError(errors) from e


def get_blog_or_raise(blog_id: int) -> Blog:
    blog = blog_repo.get_blog_by_id(blog_id)
    if blog is None:
        raise BlogNotFound(blog_id)
    return blog


def create_blog(data: Mapping[str, Any]) -> Blog:
    payload = validate_blog_payload(data)
    blog = blog_repo.create_blog(title=payload.title, content=payload.content)
    log.info("blog_created", blog_id=blog.id)
    return blog


def update_blog(blog_id: int, data: Mapping[str, Any]) -> Blog:
    blog = get_blog_or_raise(blog_id)
    payload = validate_blog_payload(data)
    blog = blog_repo.update_blog(blog, title=payload.title, content=payload.content)
    log.info("blog_updated", blog_id=blog.id)
    return blog


def delete_blog(blog_id: int) -> None:
    blog = get_blog_or_raise(blog_id)
    blog_repo.delete_blog(blog)
    log.info("blog_deleted", blog_id=blog_id)
