"""
Configuration management for mvfinder.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

The configuration file contains:
    - Path of the SQLite file holding the collection
    - Output directory for logs and exports
    - Network settings shared by all API clients (timeout, User-Agent)
    - Delay between enrichment calls
    - Optional YouTube Data API key (for playlist import)

Configuration File Location:
    config.yaml is looked up in the current working directory unless an
    explicit path is given. Unlike credentials-based tools, every setting
    has a default, so a missing file simply yields the default
    configuration.

Secrets:
    A .env file in the working directory is loaded with python-dotenv.
    MVFINDER_YOUTUBE_API_KEY overrides youtube.api_key.

Example config.yaml:
    storage:
      path: "~/.mvfinder/collection.db"

    output:
      directory: "~/MusicVideoFinder"
      export_directory: null   # defaults to {directory}/exports

    network:
      timeout: 15
      user_agent: "MusicVideoFinder/1.0.0 (https://github.com/mvfinder)"

    enrichment:
      delay: 0.5

    youtube:
      api_key: null
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from mvfinder.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

YOUTUBE_API_KEY_ENV = "MVFINDER_YOUTUBE_API_KEY"

DEFAULT_STORAGE_PATH = "~/.mvfinder/collection.db"
DEFAULT_OUTPUT_DIRECTORY = "~/MusicVideoFinder"
DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = "MusicVideoFinder/1.0.0 (https://github.com/mvfinder)"
DEFAULT_ENRICHMENT_DELAY = 0.5


@dataclass(frozen=True)
class StorageConfig:
    """
    Collection storage configuration.

    Attributes:
        path: Absolute path of the SQLite file that holds the collection.
    """
    path: Path


@dataclass(frozen=True)
class OutputConfig:
    """
    Output directory configuration.

    Attributes:
        directory: Base directory; logs are written to {directory}/logs.
        export_directory: Where export files and downloaded thumbnails go.
                          Defaults to {directory}/exports.
    """
    directory: Path
    export_directory: Path


@dataclass(frozen=True)
class NetworkConfig:
    """
    Settings shared by all HTTP clients.

    Attributes:
        timeout: Per-request timeout in seconds.
        user_agent: User-Agent header. MusicBrainz rejects anonymous clients.
    """
    timeout: float
    user_agent: str


@dataclass(frozen=True)
class EnrichmentConfig:
    """
    Batch enrichment settings.

    Attributes:
        delay: Seconds to wait between two consecutive artist detail calls.
    """
    delay: float


@dataclass(frozen=True)
class YouTubeConfig:
    """
    YouTube Data API settings.

    Attributes:
        api_key: API key used for playlist listing, or None if not configured.
    """
    api_key: str | None


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        print(f"Collection at: {config.storage.path}")
        print(f"Export to: {config.output.export_directory}")
    """
    storage: StorageConfig
    output: OutputConfig
    network: NetworkConfig
    enrichment: EnrichmentConfig
    youtube: YouTubeConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, or contains invalid values.

    Behavior:
        1. Load .env (if any) so environment overrides are visible
        2. Locate config file (explicit path or CWD/config.yaml)
        3. Read and parse YAML content; an absent default file means {}
        4. Validate structure (every present section is a dictionary)
        5. Parse each section, applying defaults
        6. Create and return frozen Config object
    """
    load_dotenv()

    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        if explicit:
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                details={"file_path": str(config_path)}
            )
        raw_config: Any = {}
    else:
        raw_config = _read_yaml(config_path)

    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    _validate_config(raw_config)

    output_config = _parse_output_config(raw_config.get("output"))

    return Config(
        storage=_parse_storage_config(raw_config.get("storage")),
        output=output_config,
        network=_parse_network_config(raw_config.get("network")),
        enrichment=_parse_enrichment_config(raw_config.get("enrichment")),
        youtube=_parse_youtube_config(raw_config.get("youtube")),
    )


def _read_yaml(config_path: Path) -> Any:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e


def _validate_config(raw_config: dict[str, Any]) -> None:
    """
    Check that every known section, when present, is a dictionary.

    Raises:
        ConfigError: If a section has the wrong type.
    """
    for section in ("storage", "output", "network", "enrichment", "youtube"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )


def _parse_path(value: Any, field: str, default: str) -> Path:
    if value is None:
        value = default
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{field}' must be a non-empty string",
            details={"field": field}
        )
    return Path(value.strip()).expanduser().resolve()


def _parse_storage_config(section: dict[str, Any] | None) -> StorageConfig:
    section = section or {}
    return StorageConfig(
        path=_parse_path(section.get("path"), "storage.path", DEFAULT_STORAGE_PATH)
    )


def _parse_output_config(section: dict[str, Any] | None) -> OutputConfig:
    """
    Parse the output section.

    Expands ~ to home directory and converts to absolute Path.
    Does NOT create the directories.
    """
    section = section or {}
    directory = _parse_path(section.get("directory"), "output.directory", DEFAULT_OUTPUT_DIRECTORY)

    export_raw = section.get("export_directory")
    if export_raw is not None:
        export_directory = _parse_path(export_raw, "output.export_directory", "")
    else:
        export_directory = directory / "exports"

    return OutputConfig(directory=directory, export_directory=export_directory)


def _parse_network_config(section: dict[str, Any] | None) -> NetworkConfig:
    """
    Parse the network section.

    Raises:
        ConfigError: If timeout is not a positive number or user_agent is empty.
    """
    section = section or {}

    timeout = section.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(
            "'network.timeout' must be a positive number",
            details={"field": "network.timeout", "value": timeout}
        )

    user_agent = section.get("user_agent", DEFAULT_USER_AGENT)
    if not isinstance(user_agent, str) or not user_agent.strip():
        raise ConfigError(
            "'network.user_agent' must be a non-empty string",
            details={"field": "network.user_agent"}
        )

    return NetworkConfig(timeout=float(timeout), user_agent=user_agent.strip())


def _parse_enrichment_config(section: dict[str, Any] | None) -> EnrichmentConfig:
    section = section or {}

    delay = section.get("delay", DEFAULT_ENRICHMENT_DELAY)
    if isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay < 0:
        raise ConfigError(
            "'enrichment.delay' must be a non-negative number",
            details={"field": "enrichment.delay", "value": delay}
        )

    return EnrichmentConfig(delay=float(delay))


def _parse_youtube_config(section: dict[str, Any] | None) -> YouTubeConfig:
    """
    Parse the youtube section.

    The environment variable MVFINDER_YOUTUBE_API_KEY takes precedence
    over the value in the file.
    """
    section = section or {}

    api_key = os.environ.get(YOUTUBE_API_KEY_ENV) or section.get("api_key")
    if api_key is not None and not isinstance(api_key, str):
        raise ConfigError(
            "'youtube.api_key' must be a string or null",
            details={"field": "youtube.api_key"}
        )

    api_key = api_key.strip() if api_key else None
    return YouTubeConfig(api_key=api_key or None)
