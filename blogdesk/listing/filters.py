from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

# Columns a client may sort by. Anything else falls back to DEFAULT_SORT.
SORTABLE_COLUMNS: tuple[str, ...] = ("title", "created_at")
DEFAULT_SORT = "created_at"
DEFAULT_DIRECTION = "desc"
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100

# Query parameters owned by the filter state, in the order they are emitted
FILTER_PARAMS: tuple[str, ...] = ("search", "sort", "direction", "per_page", "page")


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


class FilterState(BaseModel):
    """Everything needed to reproduce one view of the blog list.

    Instances are immutable. A navigation produces a new state with
    :meth:`merge` rather than mutating the current one.
    """

    model_config = ConfigDict(frozen=True)

    search: str | None = None
    sort: str = DEFAULT_SORT
    direction: Literal["asc", "desc"] = DEFAULT_DIRECTION
    per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1)
    page: int = Field(default=1, ge=1)

    @classmethod
    def from_args(
        cls,
        args: Mapping[str, Any],
        *,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = MAX_PER_PAGE,
    ) -> "FilterState":
        """Parse raw query (or form) parameters leniently.

        Bad values never fail the request: an unknown sort column or
        direction, or a non-positive page size or page, falls back to its
        default. Page size is capped at ``max_per_page``.
        """
        search = (args.get("search") or "").strip() or None

        sort = (args.get("sort") or "").strip()
        if sort not in SORTABLE_COLUMNS:
            sort = DEFAULT_SORT

        direction = (args.get("direction") or "").strip().lower()
        if direction not in ("asc", "desc"):
            direction = DEFAULT_DIRECTION

        per_page = min(_positive_int(args.get("per_page"), default_per_page), max_per_page)
        page = _positive_int(args.get("page"), 1)

        return cls(search=search, sort=sort, direction=direction, per_page=per_page, page=page)

    def merge(self, **changes: Any) -> "FilterState":
        """Return a copy with ``changes`` applied, re-validated."""
        unknown = set(changes) - set(FILTER_PARAMS)
        if unknown:
            raise ValueError(f"unknown filter fields: {', '.join(sorted(unknown))}")
        return type(self).model_validate({**self.model_dump(), **changes})

    def to_query(self) -> dict[str, str]:
        """Query parameters describing this state; an empty search is omitted."""
        params: dict[str, str] = {}
        if self.search:
            params["search"] = self.search
        params["sort"] = self.sort
        params["direction"] = self.direction
        params["per_page"] = str(self.per_page)
        params["page"] = str(self.page)
        return params

    def echo(self) -> dict[str, Any]:
        return self.model_dump()
