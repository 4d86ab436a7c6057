"""
Exception classes for mvfinder.

Every exception raised by mvfinder derives from MVFinderError and
carries a human-readable message plus an optional details dictionary,
so callers can log context without parsing strings.

Exception Hierarchy:
    MVFinderError (base)
        ConfigError - Configuration file issues
        StorageError - Durable key-value storage issues
        TransportError - Network/HTTP failures talking to external APIs
        ParseError - Malformed stored or imported JSON

Note:
    "Nothing found" is never an exception. Lookups that find no match
    return None or an empty list.
"""


class MVFinderError(Exception):
    """
    Base exception for all mvfinder errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., URLs, ids).

    Example:
        try:
            store.save(data)
        except MVFinderError as e:
            logger.error(f"Could not save: {e.message}")
            logger.debug(e.details)
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(MVFinderError):
    """
    The configuration cannot be loaded or a required setting is missing.

    The CLI exits with code 1.

    Common causes:
        - config.yaml is not valid YAML
        - A section is not a dictionary
        - Invalid field values (e.g., negative timeout)
        - A YouTube API key is required but not configured

    Example:
        raise ConfigError(
            "'network.timeout' must be a positive number",
            details={'field': 'network.timeout', 'value': -1}
        )
    """
    pass


class StorageError(MVFinderError):
    """
    The key-value storage cannot be opened, read or written.

    The CLI exits with code 2; the work queue re-raises it instead of
    moving on to the next item.

    Common causes:
        - Parent directory of the database file does not exist
        - No permission on the database file
        - Disk full
        - Schema version mismatch

    Example:
        raise StorageError(
            "Failed to write collection",
            details={'path': '/path/to/collection.db'}
        )
    """
    pass


class TransportError(MVFinderError):
    """
    Raised when an external API cannot be reached or answers with an error.

    NON-CRITICAL for batch work: a single artist failing to resolve is
    logged and the batch continues. Propagated to the caller of a single
    lookup so it can decide what to record.

    Common causes:
        - Network connectivity issues / timeouts
        - HTTP 5xx from MusicBrainz, TheAudioDB or YouTube
        - HTTP 503 / 429 rate limiting
        - Response body that is not JSON

    Attributes:
        status_code: HTTP status code when the server answered, else None.
        is_rate_limit: True if the service signalled rate limiting.

    Example:
        raise TransportError(
            "MusicBrainz request failed: 503",
            details={'url': url},
            status_code=503,
            is_rate_limit=True
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None,
        is_rate_limit: bool = False
    ) -> None:
        """
        Initialize transport error with HTTP information.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            status_code: HTTP status code if a response was received.
            is_rate_limit: Set to True for 429/503 responses.
        """
        super().__init__(message, details)
        self.status_code = status_code
        self.is_rate_limit = is_rate_limit


class ParseError(MVFinderError):
    """
    Raised when stored or imported JSON cannot be decoded.

    Always recovered locally: the collection store and the importer catch
    it and substitute an empty default, so it never reaches the CLI.

    Example:
        raise ParseError(
            "Stored artist data is not valid JSON",
            details={'key': 'ARTIST_DATA_JSON'}
        )
    """
    pass
