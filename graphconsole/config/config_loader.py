"""
GraphConsole Configuration Loader

This module provides functionality to load and validate GraphConsole configuration
from YAML files. Every section falls back to default values, so the console
also runs without any configuration file.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
import logging

from ..console.console_parameters import OVERFLOW_POLICIES
from ..rdf.namespaces import Namespace
from ..repository.parser_config import ParserConfig

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when there are configuration loading or validation errors."""
    pass


class GraphConsoleConfig:
    """
    GraphConsole configuration loader and manager.

    Loads configuration from YAML files and provides access to configuration
    sections merged over default values.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_path: Path to configuration file, None for defaults only.
        """
        self.config_data: Dict[str, Any] = {}
        self.config_path: Optional[str] = None

        if config_path:
            self.load_config(config_path)

    def load_config(self, config_path: str) -> None:
        """
        Load configuration from a specific file path.

        Args:
            config_path: Path to the YAML configuration file

        Raises:
            ConfigurationError: If the file cannot be loaded or parsed
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                self.config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML configuration: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration file: {e}")

        if not isinstance(self.config_data, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        self.config_path = str(config_file.absolute())
        logger.info(f"Loaded configuration from: {self.config_path}")

    def _get_default_config(self) -> Dict[str, Any]:
        """
        Get the default configuration values.

        Returns:
            Dictionary containing default configuration values
        """
        return {
            'repository': {
                'path': None,
                'data_files': [],
                'default_namespaces': True
            },
            'console': {
                'width': 80,
                'show_prefix': True,
                'query_prefix': True,
                'overflow': 'overflow'
            },
            'parser': {
                'verify_datatype_values': False,
                'verify_language_tags': True,
                'verify_relative_uris': True
            },
            'app': {
                'log_level': 'WARNING'
            }
        }

    def _get_section(self, name: str) -> Dict[str, Any]:
        defaults = self._get_default_config()[name]
        config = self.config_data.get(name) or {}
        return {**defaults, **config}

    def get_repository_config(self) -> Dict[str, Any]:
        """
        Get repository configuration section.

        Supports the GRAPHCONSOLE_REPOSITORY_PATH environment override.

        Returns:
            Dictionary containing repository configuration
        """
        config = self._get_section('repository')
        config['path'] = os.getenv('GRAPHCONSOLE_REPOSITORY_PATH', config.get('path'))
        return config

    def get_console_config(self) -> Dict[str, Any]:
        """
        Get console rendering configuration section.

        Supports the GRAPHCONSOLE_WIDTH environment override.

        Returns:
            Dictionary containing console configuration
        """
        config = self._get_section('console')
        config['width'] = int(os.getenv('GRAPHCONSOLE_WIDTH', str(config.get('width', 80))))
        return config

    def get_parser_config(self) -> ParserConfig:
        """
        Get the default parser config for new connections.

        Returns:
            ParserConfig built from the parser section
        """
        config = self._get_section('parser')
        return ParserConfig(
            verify_datatype_values=bool(config['verify_datatype_values']),
            verify_language_tags=bool(config['verify_language_tags']),
            verify_relative_uris=bool(config['verify_relative_uris'])
        )

    def get_namespaces(self) -> List[Namespace]:
        """
        Get configured namespaces, in file order.

        Returns:
            List of Namespace entries
        """
        entries = self.config_data.get('namespaces') or []
        return [Namespace(str(entry['prefix']), str(entry['namespace'])) for entry in entries]

    def get_app_config(self) -> Dict[str, Any]:
        """
        Get application configuration section.

        Supports the GRAPHCONSOLE_LOG_LEVEL environment override.

        Returns:
            Dictionary containing app configuration
        """
        config = self._get_section('app')
        config['log_level'] = os.getenv('GRAPHCONSOLE_LOG_LEVEL', config.get('log_level', 'WARNING'))
        return config

    def validate_config(self) -> None:
        """
        Validate the loaded configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        try:
            width = self.get_console_config()['width']
        except (ValueError, TypeError):
            raise ConfigurationError("Console width must be a valid integer")
        if width < 10:
            raise ConfigurationError(f"Invalid console width: {width}")

        overflow = self.get_console_config()['overflow']
        if overflow not in OVERFLOW_POLICIES:
            raise ConfigurationError(f"Invalid overflow policy: {overflow}")

        entries = self.config_data.get('namespaces') or []
        if not isinstance(entries, list):
            raise ConfigurationError("Namespaces must be a list of prefix/namespace entries")
        for entry in entries:
            if not isinstance(entry, dict) or 'prefix' not in entry or not entry.get('namespace'):
                raise ConfigurationError(f"Invalid namespace entry: {entry}")

        data_files = self.get_repository_config().get('data_files') or []
        if not isinstance(data_files, list):
            raise ConfigurationError("Repository data_files must be a list")

        log_level = str(self.get_app_config()['log_level']).upper()
        if log_level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ConfigurationError(f"Invalid log level: {log_level}")

        logger.info("Configuration validation passed")

    def __str__(self) -> str:
        """String representation of the configuration."""
        return f"GraphConsoleConfig(path={self.config_path}, sections={list(self.config_data.keys())})"
