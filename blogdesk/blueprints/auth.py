from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urlsplit

from flask import Blueprint, render_template, redirect, url_for, flash, request, session
from flask_login import login_user, logout_user, current_user

from blogdesk.extensions import limiter
from blogdesk.forms.auth import LoginForm
from blogdesk.services import auth as auth_svc

bp = Blueprint("auth", __name__)


def _safe_next(target: str | None) -> str | None:
    # Only same-site relative paths
    if not target:
        return None
    parts = urlsplit(target)
    if parts.scheme or parts.netloc or not target.startswith("/"):
        return None
    return target


@bp.route("/login", methods=["GET", "POST"])
@limiter.limit("5 per minute; 20 per hour", methods=["POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("blogs.index"))

    form = LoginForm()
    if form.validate_on_submit():
        user, error_message = auth_svc.authenticate(form.username.data, form.password.data)
        if not user:
            flash(error_message or 'Invalid credentials', 'error')
            return render_template("auth/login.html", form=form)

        session.clear()
        login_user(user, remember=False)
        session["_login_time"] = int(datetime.now(timezone.utc).timestamp())
        return redirect(_safe_next(request.args.get("next")) or url_for("blogs.index"))

    return render_template("auth/login.html", form=form)


@bp.route("/logout")
def logout():
    logout_user()
    session.pop("_login_time", None)
    flash('You have been logged out.', 'info')
    return redirect(url_for('auth.login'))
