"""Push notification message and its size-bounded payload encoder."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from apns_message.exceptions import ApnsMessageError, PayloadTooLargeError, ValidationError
from apns_message.models.alert import Alert, make_alert
from apns_message.models.payload import ApsDictionary
from apns_message.services.tokens import mask_token, validate_token_format
from apns_message.utils.json_encoding import (
    byte_length,
    encode_compact,
    normalize_empty_namespace,
    truncate_utf8,
)

logger = logging.getLogger(__name__)

PAYLOAD_MAXIMUM_SIZE = 2048
APPLE_RESERVED_NAMESPACE = "aps"
DEFAULT_EXPIRY_SECONDS = 604800  # 7 days
DEFAULT_SOUND = "default"


def _is_int(value: object) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool)


class Message:
    """
    A push notification message addressed to one or more devices.

    Fields are validated when set. get_payload() turns the message into a
    JSON document of at most PAYLOAD_MAXIMUM_SIZE bytes, shortening the
    alert text when auto-adjust is enabled.

    Not thread-safe: encoding may shorten the stored alert text.
    """

    def __init__(self, device_token: str | None = None) -> None:
        """
        Initialize a message.

        Args:
            device_token: Optional first recipient device token

        Raises:
            ValidationError: If device_token is malformed
        """
        self._device_tokens: list[str] = []
        self._text: str | None = None
        self._alert: Alert | None = None
        self._badge: int | None = None
        self._sound: str | None = None
        self._category: str | None = None
        self._content_available: bool | None = None
        self._custom_properties: dict[str, Any] = {}
        self._expiry = DEFAULT_EXPIRY_SECONDS
        self._custom_identifier: Any = None
        self._auto_adjust_long_payload = True

        if device_token is not None:
            self.add_recipient(device_token)

    def __str__(self) -> str:
        """Return the JSON payload, or an empty string if it can not be encoded."""
        try:
            return self.get_payload()
        except ApnsMessageError as e:
            logger.debug(
                "Payload not available for string conversion",
                extra={"error_type": type(e).__name__, "error": str(e)},
            )
            return ""

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(recipients={len(self._device_tokens)}, "
            f"text={self._text!r}, custom_identifier={self._custom_identifier!r})"
        )

    # Recipients

    def add_recipient(self, device_token: str) -> None:
        """
        Add a recipient device token.

        Args:
            device_token: APNs device token (64 hex characters, any case)

        Raises:
            ValidationError: If the token is not well formed
        """
        if not validate_token_format(device_token):
            logger.warning("Invalid token format: %s", mask_token(device_token))
            msg = f"Invalid device token '{device_token}'"
            raise ValidationError(msg, context={"field": "device_token", "value": device_token})
        self._device_tokens.append(device_token)
        logger.debug("Recipient added: token=%s", mask_token(device_token))

    def get_recipient(self, index: int = 0) -> str:
        """
        Get a recipient device token.

        Args:
            index: 0-based recipient position

        Raises:
            ValidationError: If no recipient exists at index
        """
        if not _is_int(index) or not 0 <= index < len(self._device_tokens):
            msg = f"No recipient at index '{index}'"
            raise ValidationError(msg, context={"field": "recipient", "index": index})
        return self._device_tokens[index]

    def get_recipients(self) -> list[str]:
        """Get a copy of all recipient device tokens, in insertion order."""
        return list(self._device_tokens)

    def count(self) -> int:
        """Number of recipients."""
        return len(self._device_tokens)

    # Alert

    def get_text(self) -> str | None:
        return self._text

    def set_text(self, text: str | None) -> None:
        """Set the alert message to display to the user (None clears it)."""
        if text is not None and not isinstance(text, str):
            msg = f"Invalid alert text '{text}'"
            raise ValidationError(msg, context={"field": "text", "value": text})
        self._text = text

    def get_alert(self) -> str | dict[str, Any] | None:
        """Get the alert as set: a string, a dictionary, or None."""
        if self._alert is None:
            return None
        return self._alert.to_wire()

    def set_alert(self, alert: str | Mapping[str, Any]) -> None:
        """
        Set the alert as a string or a dictionary of alert fields.

        When set, it takes precedence over the alert text in the payload.

        Raises:
            ValidationError: If alert is neither a string nor a mapping with string keys
        """
        wrapped = make_alert(alert)
        if wrapped is None:
            msg = "Alert must be string or dictionary"
            raise ValidationError(msg, context={"field": "alert", "type": type(alert).__name__})
        if isinstance(alert, Mapping) and not all(isinstance(key, str) for key in alert):
            msg = "Alert dictionary keys must be strings"
            raise ValidationError(msg, context={"field": "alert"})
        self._alert = wrapped

    # Simple fields

    def get_badge(self) -> int | None:
        return self._badge

    def set_badge(self, badge: int) -> None:
        """
        Set the number to badge the application icon with.

        Raises:
            ValidationError: If badge is not an integer
        """
        if not _is_int(badge):
            msg = f"Invalid badge number '{badge}'"
            raise ValidationError(msg, context={"field": "badge", "value": badge})
        self._badge = badge

    def get_sound(self) -> str | None:
        return self._sound

    def set_sound(self, sound: str = DEFAULT_SOUND) -> None:
        """Set the sound to play ('default' plays the default sound)."""
        if not isinstance(sound, str):
            msg = f"Invalid sound '{sound}'"
            raise ValidationError(msg, context={"field": "sound", "value": sound})
        self._sound = sound

    def get_category(self) -> str | None:
        return self._category

    def set_category(self, category: str = "") -> None:
        if not isinstance(category, str):
            msg = f"Invalid category '{category}'"
            raise ValidationError(msg, context={"field": "category", "value": category})
        self._category = category

    def get_content_available(self) -> bool | None:
        return self._content_available

    def set_content_available(self, content_available: bool = True) -> None:
        """
        Set the content-available (background update) flag.

        False is stored as unset, so it never appears in the payload.

        Raises:
            ValidationError: If content_available is not a boolean
        """
        if not isinstance(content_available, bool):
            msg = f"Invalid content-available value '{content_available}'"
            raise ValidationError(
                msg, context={"field": "content_available", "value": content_available}
            )
        self._content_available = True if content_available else None

    def get_expiry(self) -> int:
        """Seconds before an undelivered message expires."""
        return self._expiry

    def set_expiry(self, seconds: int) -> None:
        """
        Set the expiry value.

        Raises:
            ValidationError: If seconds is not an integer
        """
        if not _is_int(seconds):
            msg = f"Invalid seconds number '{seconds}'"
            raise ValidationError(msg, context={"field": "expiry", "value": seconds})
        self._expiry = seconds

    def get_custom_identifier(self) -> Any:
        return self._custom_identifier

    def set_custom_identifier(self, custom_identifier: Any) -> None:
        """Set an opaque identifier used to correlate this message (never encoded)."""
        self._custom_identifier = custom_identifier

    def get_auto_adjust_long_payload(self) -> bool:
        return self._auto_adjust_long_payload

    def set_auto_adjust_long_payload(self, auto_adjust: bool) -> None:
        self._auto_adjust_long_payload = bool(auto_adjust)

    # Custom properties

    def set_custom_property(self, name: str, value: Any) -> None:
        """
        Set a custom property placed next to the aps dictionary.

        Args:
            name: Property name, surrounding whitespace is stripped
            value: Any JSON-representable value

        Raises:
            ValidationError: If name is not a string or is the reserved 'aps' key
        """
        if not isinstance(name, str):
            msg = f"Invalid custom property name '{name}'"
            raise ValidationError(msg, context={"field": "custom_property", "name": name})
        key = name.strip()
        if key == APPLE_RESERVED_NAMESPACE:
            msg = (
                f"Property name '{APPLE_RESERVED_NAMESPACE}' can not be used "
                "for custom property."
            )
            raise ValidationError(msg, context={"field": "custom_property", "name": name})
        self._custom_properties[key] = value

    def get_custom_property(self, name: str) -> Any:
        """
        Get a custom property value.

        Raises:
            ValidationError: If no property exists with the specified name
        """
        if not isinstance(name, str) or name not in self._custom_properties:
            msg = f"No property exists with the specified name '{name}'."
            raise ValidationError(msg, context={"field": "custom_property", "name": name})
        return self._custom_properties[name]

    def get_custom_property_names(self) -> list[str]:
        return list(self._custom_properties)

    # Encoding

    def build_payload_dict(self) -> dict[str, Any]:
        """
        Assemble the payload dictionary.

        The reserved 'aps' key comes first and is always a dictionary;
        custom properties follow as top-level keys in insertion order.
        """
        alert: str | dict[str, Any] | None = None
        if self._alert is not None:
            alert = self._alert.to_wire()
        elif self._text is not None:
            alert = self._text

        aps = ApsDictionary(
            alert=alert,
            badge=self._badge if self._badge is not None and self._badge >= 0 else None,
            sound=self._sound,
            content_available=1 if self._content_available else None,
            category=self._category,
        )

        payload: dict[str, Any] = {APPLE_RESERVED_NAMESPACE: aps.to_wire()}
        for name, value in self._custom_properties.items():
            payload[name] = value
        return payload

    def _encode(self) -> str:
        try:
            encoded = encode_compact(self.build_payload_dict())
            # lone surrogates survive json.dumps but not UTF-8 encoding
            encoded.encode("utf-8")
        except (TypeError, ValueError) as e:
            msg = f"Payload can not be encoded as JSON: {e}"
            raise ValidationError(msg, context={"field": "payload"}) from e
        return normalize_empty_namespace(encoded, APPLE_RESERVED_NAMESPACE)

    def _text_is_alert(self) -> bool:
        return self._alert is None and self._text is not None

    def get_payload(self) -> str:
        """
        Convert the message to a JSON-encoded payload.

        If the payload is longer than PAYLOAD_MAXIMUM_SIZE bytes and
        auto-adjust is enabled, the alert text is shortened (permanently)
        until the payload fits.

        Returns:
            JSON-encoded payload

        Raises:
            PayloadTooLargeError: If the payload is too long and auto-adjust is
                disabled, or the alert text can not be shortened enough
            ValidationError: If a custom property value is not JSON-representable
        """
        while True:
            payload = self._encode()
            payload_len = byte_length(payload)

            if payload_len <= PAYLOAD_MAXIMUM_SIZE:
                logger.debug("Payload encoded: %d bytes", payload_len)
                return payload

            if not self._auto_adjust_long_payload:
                msg = (
                    f"JSON Payload is too long: {payload_len} bytes. "
                    f"Maximum size is {PAYLOAD_MAXIMUM_SIZE} bytes"
                )
                raise PayloadTooLargeError(msg, size=payload_len, maximum_size=PAYLOAD_MAXIMUM_SIZE)

            # only the alert text is ever shortened, and only when it is the alert shown
            text = self._text if self._text_is_alert() else None
            text_len = byte_length(text) if text is not None else 0
            max_text_len = text_len - (payload_len - PAYLOAD_MAXIMUM_SIZE)
            if text is None or max_text_len <= 0:
                msg = (
                    f"JSON Payload is too long: {payload_len} bytes. "
                    f"Maximum size is {PAYLOAD_MAXIMUM_SIZE} bytes. "
                    "The message text can not be auto-adjusted."
                )
                raise PayloadTooLargeError(
                    msg,
                    size=payload_len,
                    maximum_size=PAYLOAD_MAXIMUM_SIZE,
                    context={"text_bytes": text_len},
                )

            shortened = truncate_utf8(text, max_text_len)
            logger.info(
                "Alert text shortened to fit payload",
                extra={
                    "payload_bytes": payload_len,
                    "text_bytes_before": text_len,
                    "text_bytes_after": byte_length(shortened),
                },
            )
            self._text = shortened
