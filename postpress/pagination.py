"""Split the post collection into fixed-size listing pages."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .collection import Document
from .routes import Route, RouteMapper


@dataclass(frozen=True)
class Page:
    """One listing page with its navigation."""

    number: int
    documents: Tuple[Document, ...]
    total_pages: int
    route: Route
    first: Route
    last: Route
    previous: Optional[Route] = None
    next: Optional[Route] = None

    @property
    def page_numbers(self):
        return get_pagination_links(self.number, self.total_pages)


def page_count(total_items, per_page):
    """Number of listing pages; an empty collection still has page 1."""
    return max(1, (total_items + per_page - 1) // per_page)


def get_pagination_links(current_page, total_pages):
    """
    Returns a list of page numbers (or ellipses) to display in pagination.
    Always shows page 1 and total_pages.
    Shows two pages before and after the current page.
    Inserts '...' when there is a gap.
    """
    delta = 2
    links = [1]

    start = max(current_page - delta, 2)
    end = min(current_page + delta, total_pages - 1)

    if start > 2:
        links.append('...')

    links.extend(range(start, end + 1))

    if end < total_pages - 1:
        links.append('...')

    if total_pages > 1:
        links.append(total_pages)

    return links


def paginate(collection, per_page, routes=None) -> List[Page]:
    """
    Partition ``collection`` into pages of ``per_page`` documents.

    Pages are consecutive slices in collection order; only the last page
    may be short.
    """
    per_page = int(per_page)
    if per_page < 1:
        raise ValueError(f"Posts per page must be at least 1, got {per_page}")

    routes = routes or RouteMapper()
    documents = tuple(collection)
    total_pages = page_count(len(documents), per_page)
    first = routes.list_page(1)
    last = routes.list_page(total_pages)

    pages = []
    for number in range(1, total_pages + 1):
        start = (number - 1) * per_page
        pages.append(Page(
            number=number,
            documents=documents[start:start + per_page],
            total_pages=total_pages,
            route=routes.list_page(number),
            first=first,
            last=last,
            previous=routes.list_page(number - 1) if number > 1 else None,
            next=routes.list_page(number + 1) if number < total_pages else None,
        ))
    return pages
