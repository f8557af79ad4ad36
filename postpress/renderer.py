"""
Markdown renderers.

A renderer is any callable taking a Markdown body and returning HTML. The
build only consumes the returned markup; highlighting, math and link
attributes are the renderer's business.
"""

import logging
import re

import markdown
import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

EXTERNAL_LINK_RE = re.compile(r'^https?://', re.IGNORECASE)
HIGHLIGHT_CSS_CLASS = 'codehilite'


class MistuneRenderer(mistune.HTMLRenderer):
    """HTML renderer with highlighted code blocks and external link attributes."""

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code, info=None):
        lang = info.strip().split(None, 1)[0] if info and info.strip() else None
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                logger.debug(f"No lexer for code block language '{lang}'")
            else:
                formatter = HtmlFormatter(cssclass=f'{HIGHLIGHT_CSS_CLASS} language-{lang}')
                return highlight(code, lexer, formatter)
            return '<pre><code class="language-{}">{}</code></pre>\n'.format(
                mistune.escape(lang), mistune.escape(code))
        return '<pre><code>{}</code></pre>\n'.format(mistune.escape(code))

    def link(self, text, url, title=None):
        attrs = ' href="{}"'.format(self.safe_url(url))
        if title:
            attrs += ' title="{}"'.format(mistune.escape(title))
        if EXTERNAL_LINK_RE.match(url):
            attrs += ' target="_blank" rel="noopener"'
        return '<a{}>{}</a>'.format(attrs, text)


def create_mistune_renderer():
    """Create a Mistune markdown parser with the custom renderer."""
    return mistune.create_markdown(
        renderer=MistuneRenderer(),
        plugins=['table', 'task_lists', 'strikethrough', 'math']
    )


def create_markdown_renderer():
    """Create a Python-Markdown based renderer."""
    def render(text):
        return markdown.markdown(text, extensions=['fenced_code', 'tables', 'sane_lists'])
    return render


RENDERERS = {
    'mistune': create_mistune_renderer,
    'markdown': create_markdown_renderer,
}


def create_renderer(name='mistune'):
    """Return a ``body -> html`` callable for the named backend."""
    try:
        factory = RENDERERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown renderer '{name}'. Choose one of: {', '.join(sorted(RENDERERS))}")
    logger.debug(f"Using {name} renderer")
    return factory()
