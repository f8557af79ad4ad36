"""
Canonical output paths and public URLs.

Every link a page emits and every sitemap entry goes through RouteMapper, so
a tag or post is spelled the same way everywhere.
"""

from dataclasses import dataclass
from typing import Dict
from urllib.parse import quote

from .errors import RouteConflictError

HOME = 'home'
LIST_PAGE = 'list'
POST = 'post'
TAG = 'tag'

INDEX_FILE = 'index.html'


def encode_tag(name):
    """Percent-encode a tag for use as a single path segment."""
    encoded = quote(str(name), safe='')
    if encoded in ('.', '..'):
        encoded = encoded.replace('.', '%2E')
    return encoded


@dataclass(frozen=True)
class Route:
    kind: str
    key: object
    path: str
    output_path: str
    url: str


class RouteMapper:
    """Derive routes for the home page, listing pages, posts and tags."""

    def __init__(self, base_url=None):
        self.base_url = (base_url or '').rstrip('/')

    def url(self, path):
        """Join ``path`` onto the base URL; without a base the path is returned."""
        return f"{self.base_url}{path}" if self.base_url else path

    def _route(self, kind, key, segments):
        if segments:
            path = '/' + '/'.join(url_segment for url_segment, _ in segments) + '/'
            output_path = '/'.join(dir_name for _, dir_name in segments) + '/' + INDEX_FILE
        else:
            path = '/'
            output_path = INDEX_FILE
        return Route(kind=kind, key=key, path=path, output_path=output_path, url=self.url(path))

    def home(self):
        return self._route(HOME, None, [])

    def list_page(self, number):
        """Route for listing page ``number``; page 1 is the home page."""
        number = int(number)
        if number < 1:
            raise ValueError(f"Page numbers start at 1, got {number}")
        if number == 1:
            return self.home()
        return self._route(LIST_PAGE, number, [('page', 'page'), (str(number), str(number))])

    def post(self, slug):
        return self._route(POST, slug, [('posts', 'posts'), (quote(slug, safe=''), slug)])

    def tag(self, name):
        encoded = encode_tag(name)
        return self._route(TAG, name, [('tags', 'tags'), (encoded, encoded)])


class RouteTable:
    """Registry of routes that rejects two logical pages sharing a path."""

    def __init__(self):
        self._by_output: Dict[str, Route] = {}

    def add(self, route):
        existing = self._by_output.get(route.output_path)
        if existing is not None:
            if (existing.kind, existing.key) == (route.kind, route.key):
                return existing
            raise RouteConflictError(
                route.output_path,
                f"{existing.kind} {existing.key!r}",
                f"{route.kind} {route.key!r}")
        self._by_output[route.output_path] = route
        return route

    def __len__(self):
        return len(self._by_output)

    def __iter__(self):
        return iter(self._by_output.values())

    def __contains__(self, output_path):
        return output_path in self._by_output
