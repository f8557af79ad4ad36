"""
Postpress - a static blog generator.

Postpress reads Markdown posts with YAML front matter and writes a static
site: one page per post, paginated listings, per-tag pages and a sitemap.
"""

__version__ = "1.0.0"

from .core import BuildResult, Postpress
from .errors import (
    DuplicateIdentifierError,
    OutputError,
    ParseError,
    PostpressError,
    RenderError,
    RouteConflictError,
)

__all__ = [
    'Postpress', 'BuildResult', 'PostpressError', 'ParseError',
    'DuplicateIdentifierError', 'RouteConflictError', 'RenderError', 'OutputError',
]
