from __future__ import annotations

from typing import Any, Mapping

from flask import Blueprint, abort, current_app, flash, g, jsonify, redirect, render_template, request, url_for

from blogdesk.blueprints.api import (
    listing_payload,
    not_found_response,
    validation_error_response,
    write_response,
)
from blogdesk.decorators import verified_required
from blogdesk.extensions import limiter
from blogdesk.forms.blogs import BlogForm, DeleteBlogForm
from blogdesk.listing.controller import Dialog, ListViewController, per_page_choices
from blogdesk.listing.filters import FilterState
from blogdesk.repositories.blog import get_blog_by_id
from blogdesk.services import blogs as blog_svc
from blogdesk.services.blogs import BlogNotFound, BlogValidationError
from blogdesk.utils.negotiation import wants_json

bp = Blueprint("blogs", __name__)

CREATED = "Blog created successfully."
UPDATED = "Blog updated successfully."
DELETED = "Blog deleted successfully."
NOT_FOUND = "Blog not found."


def current_filters(source: Mapping[str, Any]) -> FilterState:
    return FilterState.from_args(
        source,
        default_per_page=current_app.config.get("BLOGS_DEFAULT_PER_PAGE", 10),
        max_per_page=current_app.config.get("BLOGS_MAX_PER_PAGE", 100),
    )


def list_url(filters: FilterState) -> str:
    return url_for("blogs.index", **filters.to_query())


def effective_method() -> str:
    """HTML forms can only POST; they name the real verb in ``_method``."""
    if request.method == "POST":
        return (request.form.get("_method") or "POST").upper()
    return request.method


def render_index(filters: FilterState, controller: ListViewController, *, form: BlogForm | None = None, status: int = 200):
    result = blog_svc.list_blogs(filters)

    target = None
    if controller.dialog in (Dialog.EDIT, Dialog.CONFIRM_DELETE):
        target = get_blog_by_id(controller.target_id)
        if target is None:
            flash(NOT_FOUND, "error")
            controller.close_dialog()

    if form is None and controller.dialog is Dialog.CREATE:
        form = BlogForm(formdata=None)
    elif form is None and controller.dialog is Dialog.EDIT:
        form = BlogForm(formdata=None, obj=target)

    g.page_scripts = ["js/blogs_index.js"]
    return render_template(
        "blogs/index.html",
        blogs=result,
        filters=filters,
        controller=controller,
        pagination=controller.pagination_links(result),
        per_page_options=per_page_choices(current_app.config.get("BLOGS_PER_PAGE_OPTIONS", (5, 10, 25, 50)), filters.per_page),
        form=form,
        delete_form=DeleteBlogForm() if controller.dialog is Dialog.CONFIRM_DELETE else None,
        target=target,
    ), status


def _reject_form(form: BlogForm, filters: FilterState, dialog: Dialog, blog_id: int | None = None):
    controller = ListViewController(filters, base_url=url_for("blogs.index"))
    if dialog is Dialog.EDIT:
        controller.open_edit(blog_id)
    else:
        controller.open_create()
    return render_index(filters, controller, form=form, status=422)


def _apply_errors(form: BlogForm, errors: dict[str, str]) -> None:
    for name, message in errors.items():
        field = getattr(form, name, None)
        if field is not None:
            field.errors = [*field.errors, message]


@bp.get("/")
def home():
    return redirect(url_for("blogs.index"))


@bp.get("/blogs")
@verified_required
@limiter.limit("120 per minute")
def index():
    filters = current_filters(request.args)
    if wants_json():
        return jsonify(listing_payload(blog_svc.list_blogs(filters), filters))

    controller = ListViewController.from_request_args(filters, request.args, base_url=url_for("blogs.index"))
    return render_index(filters, controller)


@bp.post("/blogs")
@verified_required
@limiter.limit("30 per minute")
def store():
    if request.is_json:
        try:
            blog = blog_svc.create_blog(request.get_json(silent=True) or {})
        except BlogValidationError as e:
            return validation_error_response(e.errors)
        return write_response(CREATED, blog, 201)

    filters = current_filters(request.form)
    form = BlogForm()
    if not form.validate_on_submit():
        return _reject_form(form, filters, Dialog.CREATE)
    try:
        blog_svc.create_blog({"title": form.title.data, "content": form.content.data})
    except BlogValidationError as e:
        _apply_errors(form, e.errors)
        return _reject_form(form, filters, Dialog.CREATE)

    flash(CREATED, "success")
    return redirect(list_url(filters))


@bp.route("/blogs/<int:blog_id>", methods=["PUT", "DELETE", "POST"])
@verified_required
@limiter.limit("30 per minute")
def record(blog_id: int):
    method = effective_method()
    if method == "PUT":
        return _update(blog_id)
    if method == "DELETE":
        return _destroy(blog_id)
    abort(405)


def _update(blog_id: int):
    if request.is_json:
        try:
            blog = blog_svc.update_blog(blog_id, request.get_json(silent=True) or {})
        except BlogNotFound:
            return not_found_response(blog_id)
        except BlogValidationError as e:
            return validation_error_response(e.errors)
        return write_response(UPDATED, blog)

    filters = current_filters(request.form)
    form = BlogForm()
    if not form.validate_on_submit():
        return _reject_form(form, filters, Dialog.EDIT, blog_id)
    try:
        blog_svc.update_blog(blog_id, {"title": form.title.data, "content": form.content.data})
    except BlogNotFound:
        flash(NOT_FOUND, "error")
        return redirect(list_url(filters))
    except BlogValidationError as e:
        _apply_errors(form, e.errors)
        return _reject_form(form, filters, Dialog.EDIT, blog_id)

    flash(UPDATED, "success")
    return redirect(list_url(filters))


def _destroy(blog_id: int):
    if request.method == "DELETE":
        try:
            blog_svc.delete_blog(blog_id)
        except BlogNotFound:
            return not_found_response(blog_id)
        return write_response(DELETED)

    filters = current_filters(request.form)
    form = DeleteBlogForm()
    if not form.validate_on_submit():
        abort(400)
    try:
        blog_svc.delete_blog(blog_id)
    except BlogNotFound:
        flash(NOT_FOUND, "error")
        return redirect(list_url(filters))

    flash(DELETED, "success")
    return redirect(list_url(filters))
