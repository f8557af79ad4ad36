"""Test configuration and fixtures for Postpress tests."""

import pytest
import tempfile
import shutil
from datetime import datetime, timezone
from pathlib import Path

from postpress.collection import Document

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def mock_content_dir(temp_dir):
    """Create a posts directory holding three dated, tagged posts."""
    posts_dir = Path(temp_dir) / 'content' / 'posts'
    posts_dir.mkdir(parents=True)

    (posts_dir / 'a.md').write_text("""---
title: Post A
date: 2024-01-01
tags: [python, web]
---

First paragraph of A.

Second paragraph of A.
""", encoding='utf-8')

    (posts_dir / 'b.md').write_text("""---
title: Post B
date: 2024-01-03
tags:
  - python
---

Body of **B**.
""", encoding='utf-8')

    (posts_dir / 'c.md').write_text("""---
title: Post C
date: 2024-01-02
---

Body of C, which has no tags.
""", encoding='utf-8')

    return str(posts_dir)


@pytest.fixture
def mock_templates_dir(temp_dir):
    """Create a templates directory overriding the listing template."""
    templates_dir = Path(temp_dir) / 'templates'
    templates_dir.mkdir()

    index_template = templates_dir / 'index.html'
    index_template.write_text("""<ul id="custom">
{% for post in posts %}<li>{{ post.slug }}</li>{% endfor %}
</ul>
<p>page {{ page.number }}/{{ page.total_pages }}</p>""", encoding='utf-8')

    return str(templates_dir)


@pytest.fixture
def mock_output_dir(temp_dir):
    """Output directory path (not created)."""
    return str(Path(temp_dir) / 'output')


@pytest.fixture
def make_document():
    """Factory for in-memory documents."""
    def factory(slug, date='2024-01-01', tags=(), **kwargs):
        when = datetime.strptime(date, '%Y-%m-%d').replace(tzinfo=timezone.utc)
        return Document(
            slug=slug,
            title=kwargs.pop('title', slug),
            date=when,
            updated=kwargs.pop('updated', when),
            tags=tuple(tags),
            source_path=kwargs.pop('source_path', f'/content/{slug}.md'),
            **kwargs
        )
    return factory


@pytest.fixture
def write_post():
    """Write a source file and return its path."""
    def writer(directory, filename, text):
        path = Path(directory) / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
        return str(path)
    return writer
