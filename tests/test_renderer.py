"""Tests for the Markdown renderers."""

import pytest

from postpress.renderer import RENDERERS, create_renderer


class TestMistuneRenderer:
    """Test cases for the default renderer."""

    @pytest.fixture
    def render(self):
        return create_renderer('mistune')

    def test_heading_and_paragraph(self, render):
        html = render("# Title\n\nSome *text*.\n")
        assert '<h1>Title</h1>' in html
        assert '<p>Some <em>text</em>.</p>' in html

    def test_external_link_opens_new_tab(self, render):
        html = render("[site](https://example.com)")
        assert 'href="https://example.com"' in html
        assert 'target="_blank" rel="noopener"' in html

    def test_internal_link_untouched(self, render):
        html = render("[about](/about/)")
        assert 'href="/about/"' in html
        assert 'target=' not in html

    def test_code_block_highlighted(self, render):
        html = render("```python\nprint('<b>')\n```\n")
        assert '<div class="codehilite language-python">' in html
        assert '<span class="nb">print</span>' in html
        assert '&lt;b&gt;' in html
        assert '<b>' not in html

    def test_unknown_language_is_escaped(self, render):
        html = render("```notalanguage\n<b>bold?</b>\n```\n")
        assert '<pre><code class="language-notalanguage">&lt;b&gt;bold?&lt;/b&gt;\n</code></pre>' in html
        assert 'codehilite' not in html

    def test_code_block_without_language(self, render):
        html = render("```\nplain\n```\n")
        assert '<pre><code>plain\n</code></pre>' in html

    def test_table_plugin(self, render):
        html = render("| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert '<table>' in html

    def test_strikethrough_plugin(self, render):
        assert '<del>gone</del>' in render("~~gone~~")

    def test_inline_math(self, render):
        html = render("Area: $a^2 + b^2$ units")
        assert '<span class="math">' in html
        assert 'a^2 + b^2' in html

    def test_block_math(self, render):
        html = render("$$\nx^2 + y^2\n$$\n")
        assert '<div class="math">' in html
        assert 'x^2 + y^2' in html


class TestMarkdownRenderer:
    """Test cases for the Python-Markdown backend."""

    def test_basic_markup(self):
        render = create_renderer('markdown')
        assert render("# Title") == '<h1>Title</h1>'

    def test_fenced_code(self):
        render = create_renderer('markdown')
        html = render("```python\nx = 1\n```\n")
        assert 'class="language-python"' in html


def test_unknown_renderer():
    with pytest.raises(ValueError, match='Unknown renderer'):
        create_renderer('rst')


def test_every_registered_renderer_is_callable():
    for name in RENDERERS:
        assert '<h2>' in create_renderer(name)("## Sub")
