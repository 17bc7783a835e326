"""Models for apns-message."""

from apns_message.models.alert import Alert, PlainAlert, StructuredAlert, make_alert
from apns_message.models.payload import ApsDictionary, MessageRequest

__all__ = [
    "Alert",
    "ApsDictionary",
    "MessageRequest",
    "PlainAlert",
    "StructuredAlert",
    "make_alert",
]
