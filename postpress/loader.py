"""
Load Markdown posts with YAML front matter.

Files without front matter get a synthesized block written back to disk so
later builds see the same title and date.
"""

import logging
import os
import re
from datetime import date, datetime, timezone

import yaml

from .collection import Document
from .errors import ParseError, RenderError
from .excerpt import DEFAULT_EXCERPT_LENGTH, extract_excerpt

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ('.md', '.markdown')
FRONT_MATTER_DELIMITER = '---'
FRONT_MATTER_CLOSERS = ('---', '...')
DATE_FORMATS = ['%Y-%m-%dT%H:%M:%S', '%Y-%m-%d %H:%M:%S', '%Y-%m-%d %H:%M',
                '%Y-%m-%d', '%Y/%m/%d', '%b %d, %Y']


def utc_now():
    return datetime.now(timezone.utc)


def slugify(text):
    """Lowercase ``text`` and collapse anything that is not a word character."""
    text = text.lower()
    text = re.sub(r'[^\w]+', '-', text, flags=re.UNICODE)
    text = text.strip('-_').replace('_', '-')
    return text or 'post'


def to_utc(value):
    """Make a datetime timezone-aware; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date(value):
    """
    Parse a front matter date into an aware UTC datetime.

    Accepts datetimes, dates (midnight UTC) and strings in ISO-8601 or one of
    DATE_FORMATS. Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        try:
            return to_utc(datetime.fromisoformat(re.sub(r'Z$', '+00:00', text)))
        except ValueError:
            pass
        for fmt in DATE_FORMATS:
            try:
                return to_utc(datetime.strptime(text, fmt))
            except ValueError:
                continue
    raise ValueError(f"unrecognised date {value!r}")


def file_created(stat_result):
    """Creation time where the platform records one, else inode change time."""
    timestamp = getattr(stat_result, 'st_birthtime', None) or stat_result.st_ctime
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def file_modified(stat_result):
    return datetime.fromtimestamp(stat_result.st_mtime, tz=timezone.utc)


def split_front_matter(text, path):
    """
    Split ``text`` into (front matter source, body).

    Returns ``(None, text)`` when the document does not open with a
    delimiter line.
    """
    text = text.lstrip('\ufeff')
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return None, text

    for index in range(1, len(lines)):
        if lines[index].strip() in FRONT_MATTER_CLOSERS:
            return ''.join(lines[1:index]), ''.join(lines[index + 1:])

    raise ParseError(path, "front matter block is never closed")


def parse_front_matter(text, path):
    """Parse a document into (metadata dict, body)."""
    source, body = split_front_matter(text, path)
    if source is None:
        return {}, body

    try:
        metadata = yaml.safe_load(source)
    except yaml.YAMLError as e:
        raise ParseError(path, f"invalid YAML: {e}")

    if metadata is None:
        return {}, body
    if not isinstance(metadata, dict):
        raise ParseError(path, f"expected a mapping, got {type(metadata).__name__}")
    return metadata, body


def dump_front_matter(metadata, body):
    return (FRONT_MATTER_DELIMITER + '\n'
            + yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True)
            + FRONT_MATTER_DELIMITER + '\n'
            + body)


def ensure_front_matter(path, clock=utc_now):
    """
    Read ``path`` and make sure it carries front matter.

    When the block is missing or empty a default one (title from the file
    name, current time, no tags) is written back to the file. Files that
    already have metadata are left untouched.

    Returns (metadata, body).
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise ParseError(path, f"not valid UTF-8: {e}")
    except OSError as e:
        raise ParseError(path, f"cannot read file: {e}")

    metadata, body = parse_front_matter(text, path)
    if metadata:
        return metadata, body

    stem = os.path.splitext(os.path.basename(path))[0]
    metadata = {
        'title': stem,
        'date': clock().isoformat(),
        'tags': [],
    }
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(dump_front_matter(metadata, body))
    except OSError as e:
        raise ParseError(path, f"cannot write default front matter: {e}")
    logger.info(f"Added default front matter to {path}")
    return metadata, body


def normalize_tags(value):
    """Coerce a front matter ``tags`` value to a tuple of strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        items = [value]
    tags = (str(item).strip() for item in items if item is not None)
    return tuple(tag for tag in tags if tag)


def _metadata_date(metadata, key, path):
    value = metadata.get(key)
    if value is None or value == '':
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        raise ParseError(path, f"'{key}': {e}")


def _metadata_title(metadata, default, path):
    title = metadata.get('title')
    if title is None or title == '':
        return default
    if isinstance(title, (dict, list)):
        raise ParseError(path, "'title' must be a string")
    return str(title)


def load_document(path, renderer, excerpt_length=DEFAULT_EXCERPT_LENGTH, clock=utc_now):
    """Load, normalize and render a single source file."""
    metadata, raw_body = ensure_front_matter(path, clock)
    stem = os.path.splitext(os.path.basename(path))[0]
    slug = slugify(str(metadata.get('slug') or stem))

    try:
        stat_result = os.stat(path)
    except OSError as e:
        raise ParseError(path, f"cannot stat file: {e}")
    publish_date = _metadata_date(metadata, 'date', path) or file_created(stat_result)
    updated = _metadata_date(metadata, 'updated', path) or file_modified(stat_result)

    try:
        body = renderer(raw_body)
    except Exception as e:
        raise RenderError(path, e) from e

    summary = metadata.get('summary')
    if summary:
        excerpt = extract_excerpt(str(summary), excerpt_length)
    else:
        excerpt = extract_excerpt(body or raw_body, excerpt_length)

    return Document(
        slug=slug,
        title=_metadata_title(metadata, slug, path),
        date=publish_date,
        updated=updated,
        tags=normalize_tags(metadata.get('tags')),
        raw_body=raw_body,
        body=body,
        excerpt=excerpt,
        source_path=path,
        metadata=metadata,
    )


def get_markdown_files(directory):
    """Get all markdown files from a directory, in name order."""
    markdown_files = []
    for file in sorted(os.listdir(directory)):
        file_path = os.path.join(directory, file)
        if file.lower().endswith(MARKDOWN_EXTENSIONS) and os.path.isfile(file_path):
            markdown_files.append(file_path)
    return markdown_files


def load_documents(source_dir, renderer, excerpt_length=DEFAULT_EXCERPT_LENGTH, clock=utc_now):
    """
    Load every post in ``source_dir``.

    A missing directory yields an empty list; an empty site is still a site.
    Any malformed document aborts with ParseError.
    """
    if not os.path.isdir(source_dir):
        logger.warning(f"Content directory {source_dir} does not exist; building an empty site")
        return []

    try:
        paths = get_markdown_files(source_dir)
    except OSError as e:
        raise ParseError(source_dir, f"cannot list directory: {e}")

    documents = [load_document(path, renderer, excerpt_length, clock) for path in paths]
    logger.debug(f"Loaded {len(documents)} documents from {source_dir}")
    return documents
