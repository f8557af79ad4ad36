"""
Documents and the sorted post collection.

The collection is the single ordering every listing, tag page and the
sitemap is derived from.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, Optional, Tuple

from .errors import DuplicateIdentifierError


@dataclass(frozen=True)
class Document:
    """A single post loaded from the content directory."""

    slug: str
    title: str
    date: datetime
    updated: datetime
    tags: Tuple[str, ...] = ()
    raw_body: str = ''
    body: str = ''
    excerpt: str = ''
    source_path: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if not self.slug:
            raise ValueError(f"Document from {self.source_path} has an empty identifier")


class PostCollection:
    """Immutable sequence of documents, newest first, ties by slug."""

    def __init__(self, documents: Tuple[Document, ...] = ()):
        self._documents = tuple(documents)
        self._by_slug = {doc.slug: index for index, doc in enumerate(self._documents)}

    @classmethod
    def build(cls, documents) -> 'PostCollection':
        """Validate slug uniqueness and apply the canonical ordering."""
        seen: Dict[str, Document] = {}
        for document in documents:
            if document.slug in seen:
                raise DuplicateIdentifierError(
                    document.slug, [seen[document.slug].source_path, document.source_path])
            seen[document.slug] = document

        # Two stable passes give date descending with slug ascending on ties
        ordered = sorted(seen.values(), key=lambda doc: doc.slug)
        ordered.sort(key=lambda doc: doc.date, reverse=True)
        return cls(tuple(ordered))

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __getitem__(self, index):
        return self._documents[index]

    def __bool__(self) -> bool:
        return bool(self._documents)

    @property
    def documents(self) -> Tuple[Document, ...]:
        return self._documents

    def neighbours(self, slug: str) -> Tuple[Optional[Document], Optional[Document]]:
        """Return the (newer, older) documents around ``slug``."""
        index = self._by_slug[slug]
        newer = self._documents[index - 1] if index > 0 else None
        older = self._documents[index + 1] if index + 1 < len(self._documents) else None
        return newer, older
