#!/usr/bin/env python3
"""
Settings loader for Postpress static blog generator.
Supports configuration from postpress.yml, postpress.yaml, or postpress.json files.
"""

import os
import json
import logging
import yaml
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class PostpressSettings:
    """Load and manage Postpress configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'content': os.path.join('content', 'posts'),
        'output': 'dist',
        'templates': 'templates',
        'assets': 'static',
        'posts_per_page': 5,
        'site_url': None,
        'site_title': None,
        'site_tagline': None,
        'excerpt_length': 220,
        'renderer': 'mistune',
        'minify': False,
        'workers': 1,
        'log_dir': None,
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['postpress.yml', 'postpress.yaml', 'postpress.json']

    # Settings that must be positive integers
    POSITIVE_INT_SETTINGS = ('posts_per_page', 'excerpt_length', 'workers')

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        A config file that cannot be read or parsed is reported and the
        defaults are used instead.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            try:
                loaded_settings = self._load_config_file(config_file)
                if loaded_settings:
                    self.settings.update(loaded_settings)
                    logger.info(f"Loaded configuration from: {os.path.relpath(config_file)}")
            except (ValueError, IOError) as e:
                logger.warning(f"Failed to load config file {config_file}: {e}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """Return the first available configuration file, or None."""
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    data = yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    data = json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")
        except (IOError, OSError) as e:
            raise IOError(f"Error reading configuration file {config_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")
        return data

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        filename = f'postpress.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    f.write("# Postpress Configuration File\n\n")
                    f.write("# Site information\n")
                    f.write("site_url: https://example.com\n")
                    f.write("site_title: My Blog\n")
                    f.write("site_tagline: Built with Postpress\n\n")
                    f.write("# Build settings\n")
                    f.write("content: content/posts\n")
                    f.write("output: dist\n")
                    f.write("templates: templates\n")
                    f.write("assets: static\n\n")
                    f.write("# Content settings\n")
                    f.write("posts_per_page: 5\n")
                    f.write("excerpt_length: 220\n")
                    f.write("renderer: mistune  # mistune or markdown\n\n")
                    f.write("# Output settings\n")
                    f.write("minify: false\n")
                    f.write("workers: 1\n")
                elif file_format == 'json':
                    sample = {k: v for k, v in self.DEFAULT_SETTINGS.items() if k != 'log_dir'}
                    sample.update({
                        'site_url': 'https://example.com',
                        'site_title': 'My Blog',
                        'site_tagline': 'Built with Postpress',
                        'content': 'content/posts',
                    })
                    json.dump(sample, f, indent=2)
                else:
                    raise ValueError(f"Unsupported config file format: {file_format}")
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")
        except (IOError, OSError) as e:
            raise IOError(f"Error writing configuration file {config_path}: {e}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged and validated configuration dictionary
        """
        merged = self.settings.copy()

        for key, value in args_dict.items():
            if value is not None:
                merged[key] = value

        return self.validate(merged)

    @classmethod
    def validate(cls, settings: Dict[str, Any]) -> Dict[str, Any]:
        """Coerce numeric settings and reject values a build cannot use."""
        for key in cls.POSITIVE_INT_SETTINGS:
            try:
                value = int(settings[key])
            except (TypeError, ValueError):
                raise ValueError(f"Setting '{key}' must be an integer, got {settings[key]!r}")
            if value < 1:
                raise ValueError(f"Setting '{key}' must be at least 1, got {value}")
            settings[key] = value

        if settings.get('site_url'):
            settings['site_url'] = str(settings['site_url']).rstrip('/')

        return settings
