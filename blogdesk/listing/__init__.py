from __future__ import annotations

from .filters import FilterState, SORTABLE_COLUMNS  # noqa: F401
from .pagination import ELLIPSIS, PageResult, page_numbers  # noqa: F401
from .resolver import resolve_page  # noqa: F401
from .controller import Dialog, ListViewController, NavigationRequest  # noqa: F401

__all__ = [
    "FilterState",
    "SORTABLE_COLUMNS",
    "ELLIPSIS",
    "PageResult",
    "page_numbers",
    "resolve_page",
    "Dialog",
    "ListViewController",
    "NavigationRequest",
]
