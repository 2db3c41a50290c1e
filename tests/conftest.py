"""Test configuration and fixtures for blogdesk."""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy.pool import StaticPool

from blogdesk import create_app
from blogdesk.extensions import db
from blogdesk.models import Blog, User
from blogdesk.utils.crypto import hash_password

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def app() -> Generator[Flask, None, None]:
    """Create and configure a test Flask application."""
    test_config = {
        'TESTING': True,
        'WTF_CSRF_ENABLED': False,  # Disable CSRF for testing
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_ENGINE_OPTIONS': {
            'poolclass': StaticPool,
            'connect_args': {'check_same_thread': False}
        },
        'SECRET_KEY': 'test-secret-key',
        'RATELIMIT_ENABLED': False,  # Disable rate limiting for tests
        'SESSION_COOKIE_SECURE': False,
        'SERVER_NAME': 'localhost',
    }

    app = create_app(test_config)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def runner(app: Flask):
    """Create a test CLI runner."""
    return app.test_cli_runner()


@pytest.fixture
def verified_user(app: Flask) -> User:
    """A user who may use the blog screen."""
    user = User(
        username='writer',
        email='writer@example.com',
        password_hash=hash_password('writerpassword'),
        email_verified_at=BASE_TIME,
    )
    db.session.add(user)
    db.session.commit()
    db.session.refresh(user)
    return user


@pytest.fixture
def unverified_user(app: Flask) -> User:
    """A user who has not confirmed their email address."""
    user = User(
        username='newcomer',
        email='newcomer@example.com',
        password_hash=hash_password('newcomerpassword'),
    )
    db.session.add(user)
    db.session.commit()
    db.session.refresh(user)
    return user


def _login_session(client: FlaskClient, user: User) -> FlaskClient:
    with client.session_transaction() as sess:
        sess['_user_id'] = str(user.id)
        sess['_fresh'] = True
    return client


@pytest.fixture
def auth_client(client: FlaskClient, verified_user: User) -> FlaskClient:
    """Client logged in as a verified user."""
    return _login_session(client, verified_user)


@pytest.fixture
def unverified_client(client: FlaskClient, unverified_user: User) -> FlaskClient:
    """Client logged in as an unverified user."""
    return _login_session(client, unverified_user)


@pytest.fixture
def make_blog(app: Flask):
    """Factory creating blogs with deterministic, increasing timestamps."""
    counter = {'n': 0}

    def _make(title: str | None = None, content: str | None = None, created_at: datetime | None = None) -> Blog:
        counter['n'] += 1
        n = counter['n']
        blog = Blog(
            title=title or f'Blog {n:02d}',
            content=content or f'Body of blog number {n}',
            created_at=created_at or BASE_TIME + timedelta(minutes=n),
        )
        db.session.add(blog)
        db.session.commit()
        db.session.refresh(blog)
        return blog

    return _make


@pytest.fixture
def many_blogs(make_blog) -> list[Blog]:
    """Twelve blogs, created one minute apart."""
    return [make_blog() for _ in range(12)]


@pytest.fixture
def fetch_blog(app: Flask):
    """Read a blog straight from the database, bypassing stale session state."""

    def _fetch(blog_id: int) -> Blog | None:
        db.session.expire_all()
        return db.session.execute(db.select(Blog).filter_by(id=blog_id)).scalar_one_or_none()

    return _fetch


class FlaskSessionAdapter:
    """Adapts a Flask test client to the slice of ``requests.Session`` BlogsClient uses."""

    def __init__(self, client: FlaskClient):
        self._client = client
        self.calls: list[tuple[str, str, dict]] = []

    def request(self, method, url, headers=None, timeout=None, params=None, json=None, **kwargs):
        self.calls.append((method, url, dict(params or {})))
        resp = self._client.open(url, method=method, headers=headers, query_string=params, json=json)
        return _Response(resp)


class _Response:
    def __init__(self, resp):
        self._resp = resp
        self.status_code = resp.status_code
        self.ok = resp.status_code < 400
        self.content = resp.data
        self.text = resp.get_data(as_text=True)

    def json(self):
        return self._resp.get_json()


@pytest.fixture
def api_client(auth_client: FlaskClient):
    """BlogsClient talking to the app in-process as a verified user."""
    from blogdesk.utils.http_client import BlogsClient

    return BlogsClient('http://localhost/', session=FlaskSessionAdapter(auth_client))
