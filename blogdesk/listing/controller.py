from __future__ import annotations

import enum
import itertools
from dataclasses import dataclass
from typing import Any, Iterable, Mapping
from urllib.parse import urlencode

from blogdesk.listing.filters import FilterState
from blogdesk.listing.pagination import ELLIPSIS, PageResult, page_numbers


class Dialog(str, enum.Enum):
    CREATE = "create"
    EDIT = "edit"
    CONFIRM_DELETE = "confirm_delete"


@dataclass(frozen=True)
class NavigationRequest:
    """A list request built from the full filter state.

    ``generation`` orders requests issued by one controller; responses to
    anything but the newest request are dropped by
    :meth:`ListViewController.accept`.
    """

    generation: int
    filters: FilterState

    @property
    def params(self) -> dict[str, str]:
        return self.filters.to_query()


@dataclass(frozen=True)
class PaginationLink:
    label: str
    href: str | None
    page: int | None = None
    active: bool = False
    disabled: bool = False

    @property
    def is_ellipsis(self) -> bool:
        return self.page is None and self.label == "..."


@dataclass(frozen=True)
class PaginationWidget:
    summary: str
    first: PaginationLink
    previous: PaginationLink
    pages: list[PaginationLink]
    next: PaginationLink
    last: PaginationLink


class ListViewController:
    """Client-side owner of the blog list's filter state.

    ``filters`` is whatever the server last echoed and is replaced as a
    whole on every accepted response. The only other state is local UI
    state: the uncommitted search box text, the open dialog and its target
    record, and the in-flight delete guard.
    """

    def __init__(self, filters: FilterState | None = None, *, base_url: str = "/blogs") -> None:
        self.filters = filters or FilterState()
        self.base_url = base_url
        self.search_draft = self.filters.search or ""
        self.dialog: Dialog | None = None
        self.target_id: int | None = None
        self.deleting = False
        self._generations = itertools.count(1)
        self.latest_generation = 0

    @classmethod
    def from_request_args(cls, filters: FilterState, args: Mapping[str, Any], **kwargs: Any) -> "ListViewController":
        """Seed a controller for server-side rendering, restoring dialog flags from ``args``."""
        controller = cls(filters, **kwargs)
        if str(args.get("create", "")).lower() in ("1", "true"):
            controller.open_create()
        elif _as_id(args.get("edit")) is not None:
            controller.open_edit(_as_id(args.get("edit")))
        elif _as_id(args.get("confirm_delete")) is not None:
            controller.request_delete(_as_id(args.get("confirm_delete")))
        return controller

    # -- filter transitions (pure) -------------------------------------------

    def search_filters(self, term: str | None = None) -> FilterState:
        if term is None:
            term = self.search_draft
        return self.filters.merge(search=term.strip() or None, page=1)

    def next_direction(self, column: str) -> str:
        if self.filters.sort == column and self.filters.direction == "asc":
            return "desc"
        return "asc"

    def sort_filters(self, column: str) -> FilterState:
        return self.filters.merge(sort=column, direction=self.next_direction(column), page=1)

    def per_page_filters(self, per_page: int) -> FilterState:
        return self.filters.merge(per_page=int(per_page), page=1)

    def page_filters(self, page: int) -> FilterState:
        return self.filters.merge(page=page)

    def href_for(self, filters: FilterState, **flags: Any) -> str:
        params: dict[str, Any] = dict(filters.to_query())
        params.update({k: v for k, v in flags.items() if v is not None})
        return f"{self.base_url}?{urlencode(params)}"

    def sort_href(self, column: str) -> str:
        return self.href_for(self.sort_filters(column))

    def page_href(self, page: int) -> str:
        return self.href_for(self.page_filters(page))

    def dialog_href(self, dialog: Dialog | str, blog_id: int | None = None) -> str:
        """Link that re-renders the current view with a dialog open."""
        dialog = Dialog(dialog)
        value: Any = 1 if dialog is Dialog.CREATE else blog_id
        return self.href_for(self.filters, **{dialog.value: value})

    def close_href(self) -> str:
        return self.href_for(self.filters)

    def sort_indicator(self, column: str) -> str:
        if self.filters.sort != column:
            return "none"
        return "ascending" if self.filters.direction == "asc" else "descending"

    def hidden_fields(self) -> list[tuple[str, str]]:
        """Filter state as form fields, so a write can redirect back to this view."""
        return list(self.filters.to_query().items())

    # -- navigation ------------------------------------------------------------

    def _issue(self, filters: FilterState) -> NavigationRequest:
        self.latest_generation = next(self._generations)
        return NavigationRequest(generation=self.latest_generation, filters=filters)

    def reload(self) -> NavigationRequest:
        return self._issue(self.filters)

    def submit_search(self, term: str | None = None) -> NavigationRequest:
        if term is not None:
            self.search_draft = term
        return self._issue(self.search_filters())

    def click_sort(self, column: str) -> NavigationRequest:
        return self._issue(self.sort_filters(column))

    def change_per_page(self, per_page: int) -> NavigationRequest:
        return self._issue(self.per_page_filters(per_page))

    def go_to_page(self, page: int) -> NavigationRequest:
        return self._issue(self.page_filters(page))

    def accept(self, request: NavigationRequest, echoed: FilterState) -> bool:
        """Adopt the server's echoed filters unless ``request`` has been superseded."""
        if request.generation < self.latest_generation:
            return False
        self.filters = echoed
        return True

    # -- dialogs ---------------------------------------------------------------

    def open_create(self) -> None:
        self.dialog = Dialog.CREATE
        self.target_id = None

    def open_edit(self, blog_id: int) -> None:
        self.dialog = Dialog.EDIT
        self.target_id = blog_id

    def request_delete(self, blog_id: int) -> None:
        self.dialog = Dialog.CONFIRM_DELETE
        self.target_id = blog_id

    def close_dialog(self) -> None:
        if self.deleting:
            return
        self.dialog = None
        self.target_id = None

    def begin_delete(self) -> int | None:
        """Claim the delete guard; returns the confirmed id, or None if refused."""
        if self.deleting or self.dialog is not Dialog.CONFIRM_DELETE or self.target_id is None:
            return None
        self.deleting = True
        return self.target_id

    def finish_delete(self) -> None:
        self.deleting = False
        self.close_dialog()

    # -- rendering -------------------------------------------------------------

    def pagination_links(self, result: PageResult) -> PaginationWidget | None:
        if result.last_page <= 1:
            return None

        current, last = result.current_page, result.last_page
        on_first = current == 1
        on_last = current >= last

        def link(label: str, page: int, disabled: bool = False) -> PaginationLink:
            return PaginationLink(label=label, href=None if disabled else self.page_href(page), page=page, disabled=disabled)

        pages: list[PaginationLink] = []
        for entry in page_numbers(current, last):
            if entry == ELLIPSIS:
                pages.append(PaginationLink(label="...", href=None, disabled=True))
            else:
                pages.append(
                    PaginationLink(label=str(entry), href=self.page_href(entry), page=entry, active=entry == current)
                )

        return PaginationWidget(
            summary=f"Showing {result.from_ or 0} to {result.to or 0} of {result.total} results",
            first=link("First", 1, on_first),
            previous=link("Previous", min(current - 1, last), on_first),
            pages=pages,
            next=link("Next", current + 1, on_last),
            last=link("Last", last, on_last),
        )


def _as_id(raw: Any) -> int | None:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def per_page_choices(options: Iterable[int], current: int) -> list[tuple[int, bool]]:
    """Options for the page-size selector; the current size is always present."""
    values = sorted(set(options) | {current})
    return [(value, value == current) for value in values]
