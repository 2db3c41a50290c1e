from __future__ import annotations

# Re-export common forms for convenience
from .auth import LoginForm  # noqa: F401
from .blogs import BlogForm, DeleteBlogForm  # noqa: F401

__all__ = [
    "LoginForm",
    "BlogForm",
    "DeleteBlogForm",
]
