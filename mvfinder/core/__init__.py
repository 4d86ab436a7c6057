"""
Core module for mvfinder.

Foundational components shared by the rest of the package:
    - exceptions: Error hierarchy rooted at MVFinderError
    - config: config.yaml loading and validation
    - logger: Console and file logging, failure reports
    - storage: Key/value backends (SQLite, in-memory)

The collection store (core.store) is imported directly from its module.

Usage:
    from mvfinder.core import (
        Config, load_config,
        SQLiteStorage,
        setup_logging, get_logger,
        MVFinderError, ConfigError, StorageError
    )
"""

from mvfinder.core.config import (
    Config,
    EnrichmentConfig,
    NetworkConfig,
    OutputConfig,
    StorageConfig,
    YouTubeConfig,
    load_config,
)
from mvfinder.core.exceptions import (
    ConfigError,
    MVFinderError,
    ParseError,
    StorageError,
    TransportError,
)
from mvfinder.core.logger import (
    get_logger,
    log_enrichment_failure,
    log_search_failure,
    setup_logging,
    shutdown_logging,
)
from mvfinder.core.storage import KeyValueStorage, MemoryStorage, SQLiteStorage

__all__ = [
    # Config
    "Config",
    "StorageConfig",
    "OutputConfig",
    "NetworkConfig",
    "EnrichmentConfig",
    "YouTubeConfig",
    "load_config",
    # Storage
    "KeyValueStorage",
    "MemoryStorage",
    "SQLiteStorage",
    # Exceptions
    "MVFinderError",
    "ConfigError",
    "StorageError",
    "TransportError",
    "ParseError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_search_failure",
    "log_enrichment_failure",
    "shutdown_logging",
]
