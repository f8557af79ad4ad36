#!/usr/bin/env python3
"""
Command-line interface for Postpress - static blog generator.
"""

import os
import sys
import argparse
import logging
import shutil

from . import __version__
from .core import PACKAGE_TEMPLATES_DIR, Postpress, setup_logging
from .errors import PostpressError
from .renderer import RENDERERS
from .settings import PostpressSettings

logger = logging.getLogger(__name__)

SAMPLE_POST = """---
title: Welcome to Postpress
date: 2025-01-01
tags:
  - meta
summary: Your first post, generated by postpress --init.
---

# Welcome

This post lives in `content/posts/welcome.md`. Edit it, add more Markdown
files next to it and run `postpress` to rebuild the site.

Files without front matter get a title and date filled in automatically.
"""


def create_starter_structure(base_dir=None):
    """Create content, template and static directories with sample files."""
    base_dir = base_dir or os.getcwd()

    for directory in ['content/posts', 'templates', 'static']:
        dir_path = os.path.join(base_dir, directory)
        if os.path.exists(dir_path):
            print(f"Directory already exists: {directory}")
        else:
            os.makedirs(dir_path, exist_ok=True)
            print(f"Created directory: {directory}")

    template_dest = os.path.join(base_dir, 'templates')
    for template_file in sorted(os.listdir(PACKAGE_TEMPLATES_DIR)):
        if not template_file.endswith('.html'):
            continue
        dest_path = os.path.join(template_dest, template_file)
        if os.path.exists(dest_path):
            print(f"Template already exists: templates/{template_file}")
        else:
            shutil.copy2(os.path.join(PACKAGE_TEMPLATES_DIR, template_file), dest_path)
            print(f"Created template: templates/{template_file}")

    post_path = os.path.join(base_dir, 'content', 'posts', 'welcome.md')
    if os.path.exists(post_path):
        print("Sample post already exists: content/posts/welcome.md")
    else:
        with open(post_path, 'w', encoding='utf-8') as f:
            f.write(SAMPLE_POST)
        print("Created sample post: content/posts/welcome.md")


def build_parser():
    parser = argparse.ArgumentParser(prog='postpress', description='Postpress - Static Blog Generator')
    parser.add_argument('--content', type=str,
                        help='Directory containing markdown posts')
    parser.add_argument('--output', type=str,
                        help='Output directory for generated site')
    parser.add_argument('--templates', type=str,
                        help='Templates directory (falls back to built-in templates)')
    parser.add_argument('--assets', type=str,
                        help='Static assets directory to copy to output')
    parser.add_argument('--posts-per-page', type=int,
                        help='Number of posts per listing page')
    parser.add_argument('--site-url', type=str,
                        help='Public base URL used for links and the sitemap')
    parser.add_argument('--site-title', type=str, help='Site title for metadata')
    parser.add_argument('--site-tagline', type=str, help='Site tagline for metadata')
    parser.add_argument('--excerpt-length', type=int,
                        help='Maximum excerpt length in characters')
    parser.add_argument('--renderer', type=str, choices=sorted(RENDERERS),
                        help='Markdown renderer')
    parser.add_argument('--minify', action='store_true', default=None,
                        help='Write minified copies of CSS and JS assets')
    parser.add_argument('--workers', type=int,
                        help='Worker threads used to render and write pages')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for debug log files')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show debug output on the console')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file and starter project')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_dir=args.log_dir)

    if args.init:
        settings_loader = PostpressSettings()
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")
        create_starter_structure()
        print("Your new Postpress site is ready. Run 'postpress' to build it.")
        return 0

    settings_loader = PostpressSettings()
    settings_loader.load_settings()

    args_dict = {k: v for k, v in vars(args).items()
                 if v is not None and k not in ('init', 'verbose')}

    try:
        final_settings = settings_loader.merge_with_args(args_dict)
    except ValueError as e:
        logger.error(f"Error: {e}")
        return 1

    if final_settings['log_dir']:
        setup_logging(verbose=args.verbose, log_dir=final_settings['log_dir'])

    for key in ('content', 'output', 'templates', 'assets'):
        if final_settings[key]:
            final_settings[key] = os.path.expanduser(final_settings[key])

    try:
        generator = Postpress(
            content_dir=final_settings['content'],
            output_dir=final_settings['output'],
            templates_dir=final_settings['templates'],
            assets_dir=final_settings['assets'],
            posts_per_page=final_settings['posts_per_page'],
            site_url=final_settings['site_url'],
            site_title=final_settings['site_title'],
            site_tagline=final_settings['site_tagline'],
            excerpt_length=final_settings['excerpt_length'],
            renderer=final_settings['renderer'],
            minify=bool(final_settings['minify']),
            workers=final_settings['workers'],
        )
        generator.build()
    except (PostpressError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
