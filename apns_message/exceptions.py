"""
Custom exception classes with context for apns-message.

All exceptions inherit from ApnsMessageError and support attaching
contextual information for better debugging and logging.
"""

from __future__ import annotations


class ApnsMessageError(Exception):
    """
    Base exception for apns-message.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary with additional context for logging/debugging
    """

    def __init__(self, message: str, context: dict[str, object] | None = None):
        """
        Initialize exception with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dictionary with contextual information
                    (field name, offending value, sizes, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(ApnsMessageError):
    """
    Input validation failed.

    Raised when a device token is malformed, a field receives a value of
    the wrong type, a custom property collides with the reserved namespace,
    or a recipient/custom property lookup misses. The message is left
    unmodified.

    Example:
        raise ValidationError(
            "Invalid badge number '3.5'",
            context={"field": "badge", "value": 3.5}
        )
    """


class PayloadTooLargeError(ApnsMessageError):
    """
    Encoded payload exceeds the maximum allowed size.

    Raised when auto-adjust is disabled or the alert text can not be
    shortened enough for the payload to fit.

    Example:
        raise PayloadTooLargeError(
            "JSON Payload is too long: 2100 bytes. Maximum size is 2048 bytes",
            size=2100,
            maximum_size=2048,
        )
    """

    def __init__(
        self,
        message: str,
        size: int,
        maximum_size: int,
        context: dict[str, object] | None = None,
    ):
        merged: dict[str, object] = {"size": size, "maximum_size": maximum_size}
        if context:
            merged.update(context)
        super().__init__(message, context=merged)
        self.size = size
        self.maximum_size = maximum_size


class ConfigurationError(ApnsMessageError):
    """
    Configuration error.

    Raised when configuration loading, validation, or parsing fails.

    Example:
        raise ConfigurationError(
            "Invalid YAML in configuration file",
            context={"config_file": "/etc/apns-message/config.yaml"}
        )
    """
