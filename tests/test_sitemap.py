"""Tests for sitemap generation."""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from postpress.collection import PostCollection
from postpress.pagination import paginate
from postpress.routes import RouteMapper
from postpress.sitemap import (
    SITEMAP_NS,
    SitemapEntry,
    collect_sitemap_entries,
    format_xml_sitemap_entry,
    render_sitemap,
    w3c_datetime,
)
from postpress.tags import build_tag_index

BUILD_TIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def entries_for(documents, per_page=2, base_url='https://example.com'):
    routes = RouteMapper(base_url)
    collection = PostCollection.build(documents)
    pages = paginate(collection, per_page, routes)
    return collect_sitemap_entries(routes, pages, collection, build_tag_index(collection), BUILD_TIME)


def parse_locs(xml_text):
    root = ET.fromstring(xml_text)
    return [el.text for el in root.iter(f'{{{SITEMAP_NS}}}loc')]


class TestCollectSitemapEntries:
    """Test cases for collect_sitemap_entries."""

    def test_empty_site_has_only_home(self):
        entries = entries_for([])
        assert entries == [SitemapEntry('https://example.com/', BUILD_TIME)]

    def test_all_routes_listed_once(self, make_document):
        updated = datetime(2024, 3, 3, tzinfo=timezone.utc)
        entries = entries_for([
            make_document('a', '2024-01-01', tags=['web', 'python']),
            make_document('b', '2024-01-03', tags=['python'], updated=updated),
            make_document('c', '2024-01-02'),
        ])
        locs = [entry.loc for entry in entries]

        assert locs == [
            'https://example.com/',
            'https://example.com/page/2/',
            'https://example.com/posts/b/',
            'https://example.com/posts/c/',
            'https://example.com/posts/a/',
            'https://example.com/tags/python/',
            'https://example.com/tags/web/',
        ]
        assert len(set(locs)) == len(locs)
        lastmods = dict(entries)
        assert lastmods['https://example.com/posts/b/'] == updated
        assert lastmods['https://example.com/page/2/'] == BUILD_TIME
        assert lastmods['https://example.com/tags/web/'] == BUILD_TIME

    def test_untagged_posts_add_no_tag_entries(self, make_document):
        entries = entries_for([make_document('a'), make_document('b')])
        assert not any('/tags/' in entry.loc for entry in entries)

    def test_relative_locations_without_base_url(self, make_document):
        entries = entries_for([make_document('a')], base_url=None)
        assert [entry.loc for entry in entries] == ['/', '/posts/a/']

    def test_repeatable(self, make_document):
        docs = [make_document(f'p{i}', tags=['t']) for i in range(5)]
        assert render_sitemap(entries_for(docs)) == render_sitemap(entries_for(list(reversed(docs))))


class TestRenderSitemap:
    """Test cases for sitemap XML output."""

    def test_well_formed(self, make_document):
        xml_text = render_sitemap(entries_for([make_document('a', tags=['x'])]))
        assert xml_text.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert parse_locs(xml_text) == [
            'https://example.com/',
            'https://example.com/posts/a/',
            'https://example.com/tags/x/',
        ]

    def test_lastmod_format(self):
        xml_text = render_sitemap([SitemapEntry('https://example.com/', BUILD_TIME)])
        assert '<lastmod>2024-06-01T12:00:00Z</lastmod>' in xml_text

    def test_escapes_location(self):
        entry = format_xml_sitemap_entry(SitemapEntry('https://example.com/?a=1&b=2', None))
        assert '<loc>https://example.com/?a=1&amp;b=2</loc>' in entry
        assert '<lastmod>' not in entry

    def test_empty_urlset_is_valid(self):
        assert parse_locs(render_sitemap([])) == []


def test_w3c_datetime_converts_to_utc():
    from datetime import timedelta
    value = datetime(2024, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert w3c_datetime(value) == '2024-01-01T12:00:00Z'
