"""mcpcat_events exception hierarchy.

The sanitize and truncate stages never raise; these exceptions cover the
surrounding surfaces (customer redaction callbacks and configuration).
"""


class McpcatError(Exception):
    """Base exception for all mcpcat_events errors."""


class RedactionError(McpcatError):
    """A customer redaction callback failed while processing an event."""

    def __init__(self, message: str = "", *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ConfigError(McpcatError):
    """Invalid or missing configuration."""
