from __future__ import annotations

import os
from datetime import timedelta, datetime, timezone
from typing import Any, Dict

import click
from flask import Flask, current_app, jsonify, g, redirect, request, session, url_for
from flask_login import current_user

from blogdesk.config import Config
from blogdesk.extensions import (
    db,
    migrate,
    login_manager,
    csrf,
    limiter,
)
from blogdesk.logging_config import configure_logging
from blogdesk.security import apply_security_headers
from blogdesk.models.user import User  # ensure models imported for migrations
from blogdesk.models.blog import Blog  # noqa: F401
from blogdesk.utils.negotiation import wants_json


def create_app(config_overrides: Dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=False)

    # Load config
    app.config.from_object(Config())
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    app.permanent_session_lifetime = timedelta(minutes=int(app.config.get("SESSION_LIFETIME_MINUTES", 120)))

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    login_manager.login_view = "auth.login"
    login_manager.login_message_category = "info"

    @login_manager.user_loader
    def load_user(user_id: str) -> User | None:
        from blogdesk.utils.db_retry import safe_db_operation
        try:
            return safe_db_operation(db.session.get, User, int(user_id))
        except ValueError:
            current_app.logger.error(f"Malformed user id in session: {user_id!r}")
            return None

    @login_manager.unauthorized_handler
    def unauthorized_handler():
        if wants_json():
            return jsonify({"error": "unauthorized", "message": "login required"}), 401
        return redirect(url_for("auth.login", next=request.full_path))

    # Template context: script nonce and per-page scripts
    @app.context_processor
    def template_context() -> dict:
        return {
            "page_scripts": getattr(g, "page_scripts", []),
            "script_nonce": getattr(g, "script_nonce", ""),
        }

    # Request context enrichment for logging and absolute session timeout enforcement
    @app.before_request
    def add_request_context() -> None:
        g.request_id = request.headers.get("X-Request-ID") or os.urandom(8).hex()
        g.script_nonce = os.urandom(16).hex()
        abs_max = app.config.get("ABSOLUTE_SESSION_MAX_AGE_SECONDS")
        if abs_max:
            now = int(datetime.now(timezone.utc).timestamp())
            start = session.get("_login_time")
            if start is None and current_user.is_authenticated:
                session["_login_time"] = now
            elif isinstance(start, int) and now - start > int(abs_max):
                session.clear()

    @app.after_request
    def set_headers(resp):
        return apply_security_headers(resp)

    # Blueprints
    from blogdesk.blueprints.auth import bp as auth_bp
    from blogdesk.blueprints.blogs import bp as blogs_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(blogs_bp)

    @app.get("/health")
    def health():
        try:
            db.session.execute(db.text("SELECT 1"))
            db_ok = "connected"
        except Exception as e:
            current_app.logger.error(f"Health check database error: {e}")
            db_ok = "error"
        return jsonify({"status": "ok", "db": db_ok}), 200

    # Error handlers (JSON)
    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": "bad_request", "message": getattr(e, "description", str(e))}), 400

    @app.errorhandler(401)
    def unauthorized(e):
        return jsonify({"error": "unauthorized", "message": str(e)}), 401

    @app.errorhandler(403)
    def forbidden(e):
        return jsonify({"error": "forbidden", "message": str(e)}), 403

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "not_found", "message": "resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "method_not_allowed", "message": "method not allowed"}), 405

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({"error": "rate_limited", "message": "too many requests"}), 429

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({"error": "server_error", "message": "internal server error"}), 500

    _register_cli(app)

    return app


def _register_cli(app: Flask) -> None:
    from blogdesk.repositories.user import create_user, get_user_by_username, mark_user_verified
    from blogdesk.utils.crypto import hash_password

    @app.cli.command("create-user")
    @click.option("--username", prompt=True)
    @click.option("--email", prompt=True)
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    @click.option("--verified/--unverified", default=True, help="Mark the email address as verified.")
    def create_user_command(username: str, email: str, password: str, verified: bool) -> None:
        if get_user_by_username(username):
            click.echo("User already exists")
            return
        try:
            create_user(username=username, email=email, password_hash=hash_password(password), verified=verified)
        except ValueError:
            raise click.ClickException("A user with this username or email already exists")
        click.echo("User created")

    @app.cli.command("verify-user")
    @click.argument("username")
    def verify_user_command(username: str) -> None:
        user = get_user_by_username(username)
        if not user:
            raise click.ClickException(f"No user named {username}")
        mark_user_verified(user)
        click.echo(f"{username} verified")
