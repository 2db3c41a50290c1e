from __future__ import annotations

from blogdesk.listing.filters import FilterState
from blogdesk.listing.pagination import PageResult
from blogdesk.repositories.blog import blogs_statement, count_matching, paginate_blogs


def resolve_page(filters: FilterState) -> PageResult:
    """Compute the requested page of blogs from scratch.

    Nothing is remembered between calls; the same ``filters`` against the
    same data always produce the same result.
    """
    stmt = blogs_statement(search=filters.search, sort_column=filters.sort, direction=filters.direction)
    total = count_matching(stmt)

    # Past the end: no offset query, so an unbindable OFFSET never reaches the driver
    if (filters.page - 1) * filters.per_page >= total:
        return PageResult.build([], page=filters.page, per_page=filters.per_page, total=total)

    pag = paginate_blogs(stmt, page=filters.page, per_page=filters.per_page)
    return PageResult.build(pag.items, page=filters.page, per_page=filters.per_page, total=total)
