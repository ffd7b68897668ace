"""
Configuration data models for dirview.

This module defines the data structures for managing application configuration:
the crawl root, the refresh interval of the snapshot store, and search defaults.
"""

from typing import Dict, List, Any
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


DEFAULT_REFRESH_INTERVAL = 15 * 60
DEFAULT_SEARCH_LIMIT = 100


class CrawlConfig(BaseModel):
    """
    Configuration for the directory crawl.

    Attributes:
        root: Directory whose tree is snapshotted
        follow_symlinks: Whether symlinked files and directories are followed
    """

    root: str = Field(".", description="Directory whose tree is snapshotted")
    follow_symlinks: bool = Field(False, description="Follow symbolic links while crawling")

    @field_validator('root')
    @classmethod
    def validate_root(cls, v: str) -> str:
        """Validate and expand the crawl root."""
        if not v or not v.strip():
            raise ValueError("Crawl root cannot be empty")
        return str(Path(v.strip()).expanduser())

    def get_root_path(self) -> Path:
        """Get the fully resolved crawl root."""
        return Path(self.root).resolve()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class RefreshConfig(BaseModel):
    """
    Configuration for the periodic snapshot refresh.

    Attributes:
        interval_seconds: Seconds between two refresh crawls
    """

    interval_seconds: float = Field(DEFAULT_REFRESH_INTERVAL, gt=0, description="Seconds between refreshes")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class SearchConfig(BaseModel):
    """
    Configuration for search requests.

    Attributes:
        default_limit: Result limit used when a caller does not pass one
    """

    default_limit: int = Field(DEFAULT_SEARCH_LIMIT, gt=0, description="Default search result limit")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class DirviewConfig(BaseModel):
    """
    Main configuration class for dirview.

    Attributes:
        crawl: Crawl settings
        refresh: Refresh timer settings
        search: Search defaults
    """

    crawl: CrawlConfig = Field(default_factory=CrawlConfig, description="Crawl settings")
    refresh: RefreshConfig = Field(default_factory=RefreshConfig, description="Refresh settings")
    search: SearchConfig = Field(default_factory=SearchConfig, description="Search settings")

    def validate_configuration(self) -> List[str]:
        """
        Check the configuration for problems that do not prevent startup.

        Returns:
            List of warning messages
        """
        warnings = []

        root_path = self.crawl.get_root_path()
        if not root_path.exists():
            warnings.append(f"Crawl root does not exist and will be served as empty: {root_path}")
        elif not root_path.is_dir():
            warnings.append(f"Crawl root is not a directory and will be served as empty: {root_path}")

        if self.refresh.interval_seconds < 60:
            warnings.append(
                f"Refresh interval of {self.refresh.interval_seconds}s is very short; "
                "every refresh re-crawls the whole tree"
            )

        if self.crawl.follow_symlinks:
            warnings.append("Following symlinks may pull directories outside the crawl root into the snapshot")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'crawl': self.crawl.to_dict(),
            'refresh': self.refresh.to_dict(),
            'search': self.search.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DirviewConfig':
        """Create configuration from dictionary."""
        return cls(**data)

    def __str__(self) -> str:
        return (
            f"DirviewConfig(root={self.crawl.root}, "
            f"refresh={self.refresh.interval_seconds}s, "
            f"limit={self.search.default_limit})"
        )


def validate_config_dict(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a configuration dictionary using Pydantic.

    Args:
        config_data: Dictionary containing configuration data

    Returns:
        Validated and normalized configuration dictionary

    Raises:
        ValueError: If configuration is invalid
    """
    known_sections = {'crawl', 'refresh', 'search'}
    unknown = set(config_data) - known_sections
    if unknown:
        raise ValueError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

    for section in known_sections:
        value = config_data.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Section '{section}' must be a mapping, got {type(value).__name__}")

    try:
        config = DirviewConfig.from_dict({k: v for k, v in config_data.items() if v is not None})
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    return config.to_dict()
