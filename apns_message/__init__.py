"""Size-bounded Apple Push Notification payload builder."""

from apns_message.exceptions import (
    ApnsMessageError,
    ConfigurationError,
    PayloadTooLargeError,
    ValidationError,
)
from apns_message.models import MessageRequest, PlainAlert, StructuredAlert
from apns_message.services.builder import build_message, parse_request
from apns_message.services.message import (
    APPLE_RESERVED_NAMESPACE,
    DEFAULT_EXPIRY_SECONDS,
    DEFAULT_SOUND,
    PAYLOAD_MAXIMUM_SIZE,
    Message,
)
from apns_message.services.tokens import validate_token_format

__all__ = [
    "APPLE_RESERVED_NAMESPACE",
    "DEFAULT_EXPIRY_SECONDS",
    "DEFAULT_SOUND",
    "PAYLOAD_MAXIMUM_SIZE",
    "ApnsMessageError",
    "ConfigurationError",
    "Message",
    "MessageRequest",
    "PayloadTooLargeError",
    "PlainAlert",
    "StructuredAlert",
    "ValidationError",
    "build_message",
    "parse_request",
    "validate_token_format",
]
