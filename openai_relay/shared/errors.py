"""
Failure kinds raised while relaying a chat completion.

Every error carries the message that ends up in the caller-facing
``{"success": false, "error": ...}`` envelope, plus a short ``kind`` label
used for logs and metrics.
"""

from typing import Optional


class RelayError(Exception):
    kind = "relay"
    default_message = "Unknown error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(RelayError):
    """The upstream credential is missing from the process configuration."""
    kind = "configuration"
    default_message = "OpenAI API key not configured"


class MessageValidationError(RelayError):
    """The inbound body cannot be turned into a relay request."""
    kind = "validation"
    default_message = "messages array is required"


class UpstreamError(RelayError):
    """The upstream call failed or answered with a non-success status."""
    kind = "upstream"
    default_message = "OpenAI API request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class ContentMissingError(RelayError):
    kind = "content_missing"
    default_message = "No content in OpenAI response"


class UnknownRelayError(RelayError):
    kind = "unknown"
    default_message = "Unknown error"
