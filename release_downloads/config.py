"""
Configuration file parsing and management.

Reads YAML configuration files and merges them with environment defaults
(project -> user -> defaults). Command line flags are applied on top by the CLI.

Example ``.release-downloads.yml``::

    username: octocat
    group: minor
    match: all
    per_page: 100
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

import yaml

from .tags import GROUP_MODES

logger = logging.getLogger(__name__)

MATCH_MODES = ("sha", "binary", "all")

DEFAULT_API_URL = "https://api.github.com"

# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".release-downloads.yml",                                       # Project (highest priority)
    ".release-downloads.yaml",
    os.path.expanduser("~/.config/release-downloads/config.yml"),   # User global
    os.path.expanduser("~/.config/release-downloads/config.yaml"),
]

# Environment variables consulted for defaults
ENV_USERNAME = "GITHUB_USERNAME"
ENV_TOKEN = "GITHUB_TOKEN"
ENV_API_URL = "RELEASE_DOWNLOADS_API_URL"

# Settings a config source may set
SETTING_KEYS = ("username", "token", "api_url", "group", "match", "per_page", "timeout_seconds")


class ConfigError(ValueError):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


@dataclass(frozen=True)
class Config:
    """
    Settings for a download report run.

    Attributes:
        username: GitHub username for Basic auth
        token: Personal access token for Basic auth
        api_url: REST API base (GitHub Enterprise installs differ)
        group: Tag grouping mode ('none', 'minor', 'major')
        match: Asset match mode ('sha', 'binary', 'all')
        per_page: Releases per page (1-100), None for the API default
        timeout_seconds: Per-request timeout, None to wait indefinitely
        source: Path of the configuration file(s) that were loaded
        explicit: Names of the settings this source actually set
    """
    username: str | None = None
    token: str | None = None
    api_url: str = DEFAULT_API_URL
    group: str = "none"
    match: str = "binary"
    per_page: int | None = None
    timeout_seconds: float | None = None
    source: str = ""
    explicit: frozenset[str] = field(default=frozenset(), compare=False, repr=False)

    def __post_init__(self):
        """Validate config after initialization."""
        if self.group not in GROUP_MODES:
            raise ConfigError(
                f"Invalid group: {self.group}. "
                f"Must be one of: {', '.join(GROUP_MODES)}"
            )

        if self.match not in MATCH_MODES:
            raise ConfigError(
                f"Invalid match: {self.match}. "
                f"Must be one of: {', '.join(MATCH_MODES)}"
            )

        if not self.api_url.startswith(("http://", "https://")):
            raise ConfigError(f"Invalid api_url: {self.api_url}. Must be an http(s) URL")

        if self.per_page is not None and not 1 <= self.per_page <= 100:
            raise ConfigError(
                f"Invalid per_page: {self.per_page}. "
                "Must be between 1 and 100"
            )

        if self.timeout_seconds is not None and not 1 <= self.timeout_seconds <= 600:
            raise ConfigError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 600"
            )

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        try:
            return Config(
                username=data.get("username"),
                token=data.get("token"),
                api_url=data.get("api_url", DEFAULT_API_URL),
                group=data.get("group", "none"),
                match=data.get("match", "binary"),
                per_page=data.get("per_page"),
                timeout_seconds=data.get("timeout_seconds"),
                source=source,
                explicit=frozenset(key for key in SETTING_KEYS if key in data),
            )
        except TypeError as e:
            raise ConfigError(f"Invalid value type in {source or 'config'}: {e}") from e

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        A setting keeps this config's value when this config set it explicitly,
        even if that value equals the default.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        merged = {
            name: getattr(self, name) if name in self.explicit else getattr(other, name)
            for name in SETTING_KEYS
        }

        sources = [s for s in (self.source, other.source) if s]
        return Config(
            source=", ".join(sources),
            explicit=self.explicit | other.explicit,
            **merged,
        )

    def with_overrides(self, **overrides: Any) -> Config:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, explicit=self.explicit | frozenset(changes), **changes)


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError) as e:
        logger.debug(f"Could not parse {file_path}: {e}")
        return None


def load_config_file(file_path: str) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file

    Returns:
        Config object, or None if the file is missing, unreadable or invalid
    """
    if not os.path.exists(file_path):
        return None

    logger.debug(f"Loading config from: {file_path}")

    data = _load_yaml(file_path)
    if data is None:
        logger.warning(f"Invalid config file: {file_path}")
        return None

    try:
        return Config.from_dict(data, source=file_path)
    except ConfigError as e:
        logger.warning(f"Config validation failed for {file_path}: {e}")
        return None


def config_from_environment(environ: Mapping[str, str] | None = None) -> Config:
    """Build a config holding only the values found in the environment."""
    if environ is None:
        environ = os.environ

    variables = {"username": ENV_USERNAME, "token": ENV_TOKEN, "api_url": ENV_API_URL}
    found = {key: environ[var] for key, var in variables.items() if environ.get(var)}

    return Config(
        username=found.get("username"),
        token=found.get("token"),
        api_url=found.get("api_url", DEFAULT_API_URL),
        source="environment" if found else "",
        explicit=frozenset(found),
    )


def load_config(
    custom_path: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Environment (GITHUB_USERNAME, GITHUB_TOKEN, RELEASE_DOWNLOADS_API_URL)
    2. Custom path (if provided)
    3. Project .release-downloads.yml
    4. User ~/.config/release-downloads/config.yml
    5. Default configuration

    Args:
        custom_path: Optional path to custom configuration file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Merged Config object (never None, returns defaults if nothing is configured)

    Raises:
        ConfigError: If custom_path is provided but cannot be loaded
    """
    configs: list[Config] = [config_from_environment(environ)]

    if custom_path:
        config = load_config_file(custom_path)
        if config is None:
            raise ConfigError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location)
        if config is not None:
            configs.append(config)
            logger.debug(f"Found config at: {location}")

    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)

    logger.debug(f"Merged {len(configs)} config source(s)")
    return merged
