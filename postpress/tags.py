"""Group posts by tag."""

from dataclasses import dataclass, field
from typing import Dict, List

from .collection import Document


@dataclass
class TagGroup:
    name: str
    documents: List[Document] = field(default_factory=list)

    def __len__(self):
        return len(self.documents)


def build_tag_index(collection) -> Dict[str, TagGroup]:
    """
    Map each tag to the documents carrying it.

    The collection is already sorted, so appending in iteration order keeps
    every group in collection order. A tag repeated on one document adds
    that document once.
    """
    index: Dict[str, TagGroup] = {}
    for document in collection:
        for tag in document.tags:
            group = index.get(tag)
            if group is None:
                group = index[tag] = TagGroup(tag)
            if group.documents and group.documents[-1] is document:
                continue
            group.documents.append(document)
    return index


def sorted_tag_names(index):
    """Tag names in lexicographic order, the order every tag page is emitted in."""
    return sorted(index)
