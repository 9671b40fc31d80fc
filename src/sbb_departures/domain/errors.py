"""Error taxonomy for upstream access and configuration."""


class UpstreamError(Exception):
    """Base class for retryable upstream failures."""


class UpstreamTransportError(UpstreamError):
    """Upstream answered with a non-2xx status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamProtocolError(UpstreamError):
    """Upstream payload is missing the expected envelope or fields."""


class ConfigurationError(Exception):
    """Process is misconfigured (e.g. missing credential). Never retried."""
