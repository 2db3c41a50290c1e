from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin

import requests
import structlog

from blogdesk.listing.controller import ListViewController, NavigationRequest
from blogdesk.listing.filters import FilterState

log = structlog.get_logger(__name__)


class ApiError(Exception):
    """Non-success response from the blog API."""

    def __init__(self, status_code: int, payload: dict[str, Any] | None = None):
        self.status_code = status_code
        self.payload = payload or {}
        super().__init__(f"{status_code}: {self.payload.get('message') or self.payload.get('error') or 'request failed'}")


class ValidationFailed(ApiError):
    """422 response; ``errors`` maps field name to message."""

    @property
    def errors(self) -> dict[str, str]:
        return dict(self.payload.get("errors") or {})


@dataclass(frozen=True)
class ListingPage:
    blogs: list[dict[str, Any]]
    current_page: int
    last_page: int
    per_page: int
    total: int
    from_: int | None
    to: int | None
    filters: FilterState
    page_numbers: list[int | str] = field(default_factory=list)
    flash: list[dict[str, str]] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ListingPage":
        blogs = payload["blogs"]
        return cls(
            blogs=list(blogs["data"]),
            current_page=blogs["current_page"],
            last_page=blogs["last_page"],
            per_page=blogs["per_page"],
            total=blogs["total"],
            from_=blogs.get("from"),
            to=blogs.get("to"),
            filters=FilterState.model_validate(payload["filters"]),
            page_numbers=list(payload.get("page_numbers") or []),
            flash=list(payload.get("flash") or []),
        )


class BlogsClient:
    """Drive the blog list over its JSON interface.

    Filter state is owned by a :class:`ListViewController`; every call that
    navigates sends the whole committed state plus the one changed field,
    and adopts the filters the server echoes back. The session must already
    be authenticated (cookie from the login form, or a test client).
    """

    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: float = 10.0):
        if not base_url.startswith(("http://", "https://")):
            base_url = f"http://{base_url}"
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session or requests.Session()
        self.timeout = timeout
        self.controller = ListViewController(base_url="/blogs")
        self.csrf_token: str | None = None
        self.page: ListingPage | None = None

    def _build_url(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.csrf_token:
            headers["X-CSRFToken"] = self.csrf_token
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        resp = self.session.request(
            method, self._build_url(path), headers=self._headers(), timeout=self.timeout, **kwargs
        )
        try:
            payload = resp.json() if resp.content else {}
        except ValueError:
            payload = {"error": "invalid_response", "message": resp.text[:200]}
        if resp.status_code == 422:
            raise ValidationFailed(resp.status_code, payload)
        if not resp.ok:
            log.warning("blogs_api_error", method=method, path=path, status=resp.status_code)
            raise ApiError(resp.status_code, payload)
        return payload

    # -- listing ---------------------------------------------------------------

    def navigate(self, request: NavigationRequest) -> ListingPage | None:
        """Fetch ``request``; returns None when a newer navigation superseded it."""
        payload = self._request("GET", "/blogs", params={**request.params, "format": "json"})
        self.csrf_token = payload.get("csrf_token") or self.csrf_token
        page = ListingPage.from_payload(payload)
        if not self.controller.accept(request, page.filters):
            log.info("blogs_stale_response_dropped", generation=request.generation)
            return None
        self.page = page
        return page

    def load(self) -> ListingPage | None:
        return self.navigate(self.controller.reload())

    def search(self, term: str) -> ListingPage | None:
        return self.navigate(self.controller.submit_search(term))

    def sort_by(self, column: str) -> ListingPage | None:
        return self.navigate(self.controller.click_sort(column))

    def set_per_page(self, per_page: int) -> ListingPage | None:
        return self.navigate(self.controller.change_per_page(per_page))

    def go_to_page(self, page: int) -> ListingPage | None:
        return self.navigate(self.controller.go_to_page(page))

    # -- writes ----------------------------------------------------------------

    def create(self, title: str, content: str) -> dict[str, Any]:
        self.controller.open_create()
        payload = self._request("POST", "/blogs", json={"title": title, "content": content})
        self.controller.close_dialog()
        return payload["blog"]

    def update(self, blog_id: int, title: str, content: str) -> dict[str, Any]:
        self.controller.open_edit(blog_id)
        payload = self._request("PUT", f"/blogs/{blog_id}", json={"title": title, "content": content})
        self.controller.close_dialog()
        return payload["blog"]

    def request_delete(self, blog_id: int) -> None:
        """Open the confirmation step; nothing is sent until :meth:`confirm_delete`."""
        self.controller.request_delete(blog_id)

    def cancel_delete(self) -> None:
        self.controller.close_dialog()

    def confirm_delete(self) -> bool:
        """Send the confirmed delete. Returns False if no delete is pending or one is in flight."""
        blog_id = self.controller.begin_delete()
        if blog_id is None:
            return False
        try:
            self._request("DELETE", f"/blogs/{blog_id}")
        finally:
            self.controller.finish_delete()
        return True
