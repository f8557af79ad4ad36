"""XML sitemap generation."""

import logging
from collections import namedtuple
from datetime import timezone
from xml.sax.saxutils import escape

from .tags import sorted_tag_names

logger = logging.getLogger(__name__)

SITEMAP_NS = 'http://www.sitemaps.org/schemas/sitemap/0.9'

SitemapEntry = namedtuple('SitemapEntry', ['loc', 'lastmod'])


def w3c_datetime(value):
    """Format an aware datetime as a UTC W3C datetime."""
    return value.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')


def collect_sitemap_entries(routes, pages, collection, tag_index, build_time):
    """
    One entry per public route: home, listing pages past the first, posts
    and tags. Generated pages carry the build time, posts their own
    last-modified time.
    """
    entries = [SitemapEntry(routes.home().url, build_time)]
    entries.extend(SitemapEntry(page.route.url, build_time)
                   for page in pages if page.number > 1)
    entries.extend(SitemapEntry(routes.post(doc.slug).url, doc.updated)
                   for doc in collection)
    entries.extend(SitemapEntry(routes.tag(name).url, build_time)
                   for name in sorted_tag_names(tag_index))

    seen = set()
    unique = []
    for entry in entries:
        if entry.loc in seen:
            logger.debug(f"Skipping duplicate sitemap location {entry.loc}")
            continue
        seen.add(entry.loc)
        unique.append(entry)
    return unique


def format_xml_sitemap_entry(entry):
    """Format a single sitemap entry."""
    lastmod = ''
    if entry.lastmod is not None:
        lastmod = f"\n<lastmod>{w3c_datetime(entry.lastmod)}</lastmod>"
    return f'''<url>
<loc>{escape(entry.loc)}</loc>{lastmod}
</url>
'''


def render_sitemap(entries):
    """Render the complete sitemap document."""
    sitemap_content = f'''<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="{SITEMAP_NS}">
'''
    for entry in entries:
        sitemap_content += format_xml_sitemap_entry(entry)
    sitemap_content += '</urlset>\n'
    return sitemap_content
