from __future__ import annotations

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from blogdesk.extensions import db
from blogdesk.models.blog import Blog


def get_blog_by_id(blog_id: int) -> Optional[Blog]:
    return db.session.get(Blog, blog_id)


def count_matching(stmt) -> int:
    """Row count of a listing statement, ignoring its ordering."""
    return db.session.execute(db.select(db.func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()


def blogs_statement(*, search: str | None, sort_column: str, direction: str):
    """Build the filtered, ordered SELECT for the blog listing.

    ``sort_column`` must already be checked against the listing allow-list.
    The search text goes into LIKE unescaped, so ``%`` and ``_`` act as
    wildcards.
    """
    stmt = db.select(Blog)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Blog.title.like(pattern), Blog.content.like(pattern)))

    column = getattr(Blog, sort_column)
    if direction == "asc":
        stmt = stmt.order_by(column.asc(), Blog.id.asc())
    else:
        stmt = stmt.order_by(column.desc(), Blog.id.desc())
    return stmt


def paginate_blogs(stmt, *, page: int, per_page: int):
    # Total comes from count_matching; error_out=False keeps a short page from 404ing
    return db.paginate(stmt, page=page, per_page=per_page, error_out=False, count=False)


def create_blog(*, title: str, content: str) -> Blog:
    blog = Blog(title=title, content=content)
    db.session.add(blog)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return blog


def update_blog(blog: Blog, *, title: str, content: str) -> Blog:
    blog.title = title
    blog.content = content
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return blog


def delete_blog(blog: Blog) -> None:
    db.session.delete(blog)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
