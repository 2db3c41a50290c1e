from __future__ import annotations

# Import all models so Flask-Migrate sees every table
from blogdesk.models.user import User
from blogdesk.models.blog import Blog

__all__ = [
    "User",
    "Blog",
]
