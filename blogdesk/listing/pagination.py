from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence, Union

ELLIPSIS = "ellipsis"
MAX_VISIBLE_PAGES = 5

PageEntry = Union[int, str]


def page_numbers(current_page: int, last_page: int) -> list[PageEntry]:
    """Page links to render, with ``ELLIPSIS`` standing in for skipped runs.

    Never more than seven entries, whatever ``last_page`` is. The branches
    are checked in order and the first match wins.
    """
    if last_page <= MAX_VISIBLE_PAGES:
        return list(range(1, last_page + 1))

    if current_page <= 3:
        return [1, 2, 3, 4, ELLIPSIS, last_page]

    if current_page >= last_page - 2:
        return [1, ELLIPSIS, last_page - 3, last_page - 2, last_page - 1, last_page]

    return [1, ELLIPSIS, current_page - 1, current_page, current_page + 1, ELLIPSIS, last_page]


def last_page_for(total: int, per_page: int) -> int:
    return max(1, math.ceil(total / per_page)) if per_page > 0 else 1


@dataclass(frozen=True)
class PageResult:
    """One page of the filtered, sorted record set plus its metadata."""

    items: Sequence[Any]
    current_page: int
    last_page: int
    per_page: int
    total: int
    from_: int | None = None
    to: int | None = None

    @classmethod
    def build(cls, items: Sequence[Any], *, page: int, per_page: int, total: int) -> "PageResult":
        items = list(items)
        if items:
            from_ = (page - 1) * per_page + 1
            to = from_ + len(items) - 1
        else:
            from_ = to = None
        return cls(
            items=items,
            current_page=page,
            last_page=last_page_for(total, per_page),
            per_page=per_page,
            total=total,
            from_=from_,
            to=to,
        )

    @property
    def has_pages(self) -> bool:
        return self.last_page > 1

    def page_numbers(self) -> list[PageEntry]:
        return page_numbers(self.current_page, self.last_page)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [item.to_dict() if hasattr(item, "to_dict") else item for item in self.items],
            "current_page": self.current_page,
            "last_page": self.last_page,
            "per_page": self.per_page,
            "total": self.total,
            "from": self.from_,
            "to": self.to,
        }
