"""Copy static assets into the output and optionally minify them."""

import logging
import os
import shutil

import csscompressor
import rjsmin

from .errors import OutputError

logger = logging.getLogger(__name__)

ASSETS_DIR_NAME = 'assets'


def copy_assets(assets_dir, output_dir, minify=False):
    """
    Copy ``assets_dir`` to ``<output_dir>/assets``.

    Returns the destination, or None when there is nothing to copy.
    """
    if not assets_dir or not os.path.isdir(assets_dir):
        logger.info(f"No assets directory at {assets_dir}; skipping asset copy")
        return None

    output_assets_dir = os.path.join(output_dir, ASSETS_DIR_NAME)
    try:
        if os.path.exists(output_assets_dir):
            shutil.rmtree(output_assets_dir)
        shutil.copytree(assets_dir, output_assets_dir)
    except (IOError, OSError, shutil.Error) as e:
        raise OutputError(f"Failed to copy assets from {assets_dir}: {e}")
    logger.info(f"Copied assets from {assets_dir}")

    if minify:
        minify_assets(output_assets_dir)
    return output_assets_dir


def _minify_file(path, minifier):
    root, ext = os.path.splitext(path)
    minified_path = f"{root}.min{ext}"
    try:
        with open(path, 'r', encoding='utf-8') as f:
            source = f.read()
        with open(minified_path, 'w', encoding='utf-8') as f:
            f.write(minifier(source))
    except (IOError, OSError) as e:
        raise OutputError(f"Failed to minify {path}: {e}")
    logger.debug(f"Minified {os.path.basename(path)}")
    return minified_path


def minify_assets(assets_output_dir):
    """Write a .min.css / .min.js sibling next to every CSS and JS file."""
    minified = []
    for dirpath, _, filenames in os.walk(assets_output_dir):
        for file in sorted(filenames):
            path = os.path.join(dirpath, file)
            if file.endswith('.css') and not file.endswith('.min.css'):
                minified.append(_minify_file(path, csscompressor.compress))
            elif file.endswith('.js') and not file.endswith('.min.js'):
                minified.append(_minify_file(path, rjsmin.jsmin))
    return minified
