"""Write generated files into the output directory."""

import logging
import os
import shutil
import threading

from .errors import OutputError

logger = logging.getLogger(__name__)


class OutputWriter:
    """
    Owns the output directory for one build.

    ``reset`` wipes and recreates the directory; ``write`` places a file at
    a path relative to it. Paths that would leave the directory are refused.
    """

    def __init__(self, output_dir, protected=()):
        self.output_dir = os.path.abspath(output_dir)
        self.protected = [os.path.abspath(p) for p in protected if p]
        self.files_written = 0
        self._lock = threading.Lock()

    def _check_reset_target(self):
        root = self.output_dir
        if root == os.path.abspath(os.sep) or os.path.dirname(root) == root:
            raise OutputError(f"Refusing to clean filesystem root {root}")
        if root == os.path.abspath(os.getcwd()):
            raise OutputError("Refusing to clean the current working directory")
        for path in self.protected:
            if path == root or path.startswith(root + os.sep):
                raise OutputError(f"Refusing to clean {root}: it contains {path}")

    def reset(self):
        """Delete and recreate the output directory."""
        self._check_reset_target()
        try:
            if os.path.isdir(self.output_dir):
                shutil.rmtree(self.output_dir)
            elif os.path.exists(self.output_dir):
                os.remove(self.output_dir)
            os.makedirs(self.output_dir, exist_ok=True)
        except (IOError, OSError) as e:
            raise OutputError(f"Failed to reset output directory {self.output_dir}: {e}")
        self.files_written = 0
        logger.debug(f"Reset output directory {self.output_dir}")

    def resolve(self, relative_path):
        """Absolute target for ``relative_path``, refusing anything outside the root."""
        if os.path.isabs(relative_path):
            raise OutputError(f"Output path must be relative: {relative_path}")
        target = os.path.abspath(os.path.join(self.output_dir, relative_path))
        if not target.startswith(self.output_dir + os.sep):
            raise OutputError(f"Path traversal attempt detected: {relative_path}")
        return target

    def write(self, relative_path, content):
        """Write ``content`` to ``relative_path`` under the output directory."""
        target = self.resolve(relative_path)
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, 'w', encoding='utf-8') as f:
                f.write(content)
        except (IOError, OSError) as e:
            raise OutputError(f"Failed to write {target}: {e}")
        with self._lock:
            self.files_written += 1
        logger.debug(f"Generated {target}")
        return target
