"""Domain-specific errors for httpdimmer."""


class HttpDimmerError(Exception):
    """Base error for httpdimmer."""


class ConfigValidationError(HttpDimmerError):
    """Raised when a configuration file does not conform to schema or semantics."""


class ConfigLoadError(HttpDimmerError):
    """Raised when reading the configuration file fails."""


class DeviceSelectionError(HttpDimmerError):
    """Raised when a device hint cannot be resolved to a single accessory."""


class TransportError(HttpDimmerError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the HTTP request cannot be completed."""


class TransportTimeoutError(TransportError):
    """Raised when no HTTP response arrives within the timeout."""
