from __future__ import annotations

# Re-export common schema classes for convenient imports
from .blogs import BlogPayload, field_errors  # noqa: F401

__all__ = [
    "BlogPayload",
    "field_errors",
]
