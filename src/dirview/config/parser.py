"""
YAML configuration parser for dirview.

This module provides functionality to load, parse, and validate YAML configuration
files for dirview. It handles configuration file discovery, environment variable
overrides, and provides helpful error messages for configuration issues.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Union, Mapping
import logging
from dataclasses import dataclass

from ..models.config import (
    DirviewConfig,
    validate_config_dict,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_SEARCH_LIMIT,
)


logger = logging.getLogger(__name__)


# Environment variable -> (section, key)
ENV_OVERRIDES = {
    'FILES_PATH': ('crawl', 'root'),
    'DIRVIEW_REFRESH_INTERVAL': ('refresh', 'interval_seconds'),
    'DIRVIEW_SEARCH_LIMIT': ('search', 'default_limit'),
}


@dataclass
class ConfigParseResult:
    """
    Result of configuration parsing operation.

    Attributes:
        config: The parsed and validated configuration
        warnings: List of non-fatal warnings
        config_path: Path to the configuration file used
        is_default: Whether default configuration was used
    """
    config: DirviewConfig
    warnings: List[str]
    config_path: Optional[Path]
    is_default: bool


class ConfigurationError(Exception):
    """Raised when configuration parsing or validation fails."""
    pass


class ConfigParser:
    """
    YAML configuration parser with validation and error handling.

    Loads a YAML file (explicit or discovered), applies environment overrides,
    validates the result and converts it to a DirviewConfig.
    """

    DEFAULT_CONFIG_NAMES = [
        '.dirview.yaml',
        '.dirview.yml',
        'dirview.yaml',
        'dirview.yml',
    ]

    def __init__(self, strict_mode: bool = False, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the configuration parser.

        Args:
            strict_mode: If True, treat warnings as errors
            environ: Environment to read overrides from (defaults to os.environ)
        """
        self.strict_mode = strict_mode
        self.environ = os.environ if environ is None else environ
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> ConfigParseResult:
        """
        Load and parse configuration from file or use defaults.

        Args:
            config_path: Path to configuration file. If None, searches for default files.

        Returns:
            ConfigParseResult containing parsed configuration and metadata

        Raises:
            ConfigurationError: If configuration is invalid or file cannot be read
        """
        try:
            if config_path:
                config_path = Path(config_path)
                if not config_path.exists():
                    raise ConfigurationError(f"Configuration file not found: {config_path}")

                config_data = self._load_yaml_file(config_path)
                is_default = False
            else:
                config_path, config_data = self._find_and_load_config()
                is_default = config_data is None

                if is_default:
                    config_data = self._get_default_config()

            config_data = self._apply_env_overrides(config_data)
            validated_data = self._validate_config_data(config_data)
            dirview_config = DirviewConfig.from_dict(validated_data)

            warnings = dirview_config.validate_configuration()
            if is_default:
                warnings.append("No configuration file found, using default settings")

            if self.strict_mode and warnings:
                raise ConfigurationError(f"Configuration warnings in strict mode: {'; '.join(warnings)}")

            self.logger.info(f"Configuration loaded successfully from {config_path or 'defaults'}")

            return ConfigParseResult(
                config=dirview_config,
                warnings=warnings,
                config_path=config_path,
                is_default=is_default
            )

        except Exception as e:
            if isinstance(e, ConfigurationError):
                raise
            else:
                raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def _find_and_load_config(self) -> tuple[Optional[Path], Optional[Dict[str, Any]]]:
        """
        Find and load configuration file from default locations.

        Returns:
            Tuple of (config_path, config_data) or (None, None) if not found
        """
        search_paths = [
            Path.cwd(),
            Path.home(),
            Path.home() / '.config' / 'dirview',
        ]

        for search_path in search_paths:
            for config_name in self.DEFAULT_CONFIG_NAMES:
                config_file = search_path / config_name
                if config_file.exists() and config_file.is_file():
                    try:
                        config_data = self._load_yaml_file(config_file)
                        self.logger.info(f"Found configuration file: {config_file}")
                        return config_file, config_data
                    except ConfigurationError as e:
                        self.logger.warning(f"Failed to load {config_file}: {e}")
                        continue

        self.logger.info("No configuration file found, using defaults")
        return None, None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse YAML file.

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed YAML data as dictionary

        Raises:
            ConfigurationError: If file cannot be read or parsed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()

            if not content.strip():
                self.logger.warning(f"Configuration file is empty: {file_path}")
                return {}

            data = yaml.safe_load(content)

            if data is None:
                return {}

            if not isinstance(data, dict):
                raise ConfigurationError(f"Configuration file must contain a YAML object, got {type(data).__name__}")

            return data

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {file_path}: {e}") from e
        except (OSError, IOError) as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {e}") from e

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Overlay environment variables on top of file configuration.

        Args:
            config_data: Configuration loaded from file or defaults

        Returns:
            New configuration dictionary with overrides applied
        """
        merged = {
            section: dict(values) if isinstance(values, dict) else values
            for section, values in config_data.items()
        }

        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = self.environ.get(env_var)
            if value is None or not value.strip():
                continue

            target = merged.get(section)
            if target is None:
                target = merged[section] = {}
            elif not isinstance(target, dict):
                raise ConfigurationError(f"Section '{section}' must be a mapping to apply {env_var}")

            target[key] = value.strip()
            self.logger.debug(f"Applied {env_var} override to {section}.{key}")

        return merged

    def _validate_config_data(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate configuration data structure and values.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        try:
            return validate_config_dict(config_data)
        except ValueError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration when no config file is found."""
        return {
            'crawl': {
                'root': str(Path.cwd()),
                'follow_symlinks': False,
            },
            'refresh': {
                'interval_seconds': DEFAULT_REFRESH_INTERVAL,
            },
            'search': {
                'default_limit': DEFAULT_SEARCH_LIMIT,
            },
        }

    def save_config(self, config: DirviewConfig, output_path: Union[str, Path]) -> None:
        """
        Save configuration to YAML file.

        Raises:
            ConfigurationError: If file cannot be written
        """
        try:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)

            yaml_content = self._generate_yaml_with_comments(config.to_dict())

            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(yaml_content)

            self.logger.info(f"Configuration saved to {output_path}")

        except (OSError, IOError) as e:
            raise ConfigurationError(f"Cannot write configuration file {output_path}: {e}") from e

    def _generate_yaml_with_comments(self, config_dict: Dict[str, Any]) -> str:
        """
        Generate YAML content with helpful comments.

        Args:
            config_dict: Configuration dictionary

        Returns:
            YAML content with comments
        """
        lines = [
            "# dirview configuration",
            "# FILES_PATH, DIRVIEW_REFRESH_INTERVAL and DIRVIEW_SEARCH_LIMIT override these values",
            "",
        ]

        sections = [
            ("crawl", "Directory tree to snapshot"),
            ("refresh", "Snapshot refresh timer"),
            ("search", "Search defaults"),
        ]

        for section_name, comment in sections:
            if section_name in config_dict:
                lines.append(f"# {comment}")
                section_yaml = yaml.dump({section_name: config_dict[section_name]},
                                         default_flow_style=False,
                                         sort_keys=False)
                lines.append(section_yaml.rstrip())
                lines.append("")

        return "\n".join(lines)


def load_config(config_path: Optional[Union[str, Path]] = None, strict_mode: bool = False) -> ConfigParseResult:
    """
    Convenience function to load configuration.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    parser = ConfigParser(strict_mode=strict_mode)
    return parser.load_config(config_path)
