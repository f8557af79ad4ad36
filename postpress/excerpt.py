"""Plain-text excerpts for listing pages."""

import html
import re

from markupsafe import Markup, escape

FIRST_PARAGRAPH_RE = re.compile(r'<p(?:\s[^>]*)?>(.*?)</p>', re.IGNORECASE | re.DOTALL)
TAG_RE = re.compile(r'<[^>]+>')
WHITESPACE_RE = re.compile(r'\s+')

DEFAULT_EXCERPT_LENGTH = 220
ELLIPSIS = '...'


def strip_tags(markup):
    """Remove tags, decode entities and collapse whitespace."""
    text = TAG_RE.sub('', markup)
    text = html.unescape(text)
    return WHITESPACE_RE.sub(' ', text).strip()


def extract_excerpt(markup, max_length=DEFAULT_EXCERPT_LENGTH):
    """
    Build a bounded summary from rendered markup.

    The first paragraph is used when there is one, otherwise the whole text.
    Truncation counts characters and appends an ellipsis only when text was
    cut. The result is escaped, so it is safe to interpolate as-is.
    """
    if max_length < 1:
        raise ValueError(f"Excerpt length must be at least 1, got {max_length}")

    markup = markup or ''
    match = FIRST_PARAGRAPH_RE.search(markup)
    text = strip_tags(match.group(1) if match else markup)
    if not text and match:
        text = strip_tags(markup)

    if len(text) > max_length:
        text = text[:max_length].rstrip() + ELLIPSIS

    return Markup(escape(text))
