"""
Exception hierarchy for Postpress.

Every error that aborts a build derives from PostpressError so the CLI can
report it and exit with a non-zero status.
"""


class PostpressError(Exception):
    """Base class for build-aborting errors."""


class ParseError(PostpressError):
    """A source document cannot be read or has malformed front matter."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to load {self.path}: {reason}")


class DuplicateIdentifierError(PostpressError):
    """Two source documents resolve to the same slug."""

    def __init__(self, slug, paths):
        self.slug = slug
        self.paths = [str(p) for p in paths]
        super().__init__(
            f"Duplicate post identifier '{slug}' from: {', '.join(self.paths)}"
        )


class RouteConflictError(PostpressError):
    """Two distinct logical pages resolve to the same output path."""

    def __init__(self, path, first, second):
        self.path = path
        self.first = first
        self.second = second
        super().__init__(f"Output path {path} claimed by both {first} and {second}")


class RenderError(PostpressError):
    """Markdown or template rendering failed."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to render {self.path}: {reason}")


class OutputError(PostpressError):
    """The output directory could not be reset or written."""
