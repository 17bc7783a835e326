"""Build messages from declarative requests and configured defaults."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import pydantic

from apns_message.config import get_settings
from apns_message.exceptions import ValidationError
from apns_message.models.payload import MessageRequest
from apns_message.services.message import Message
from apns_message.utils.error_handling import log_errors

if TYPE_CHECKING:
    from apns_message.config import Settings

logger = logging.getLogger(__name__)


def parse_request(data: Mapping[str, Any] | str | bytes) -> MessageRequest:
    """
    Validate raw input into a MessageRequest.

    Args:
        data: A mapping of request fields, or its JSON text

    Raises:
        ValidationError: If the input does not describe a valid request
    """
    try:
        if isinstance(data, (str, bytes)):
            return MessageRequest.model_validate_json(data)
        return MessageRequest.model_validate(dict(data))
    except pydantic.ValidationError as e:
        msg = f"Invalid message request: {e.error_count()} validation error(s)"
        raise ValidationError(msg, context={"errors": e.errors(include_url=False)}) from e


@log_errors("build_message")
def build_message(
    request: MessageRequest | Mapping[str, Any],
    settings: Settings | None = None,
) -> Message:
    """
    Create a Message from a request.

    Fields left unset in the request take their value from settings
    (expiry and auto-adjust) or stay unset on the message.

    Args:
        request: MessageRequest or a mapping of its fields
        settings: Settings to take defaults from (process settings if omitted)

    Returns:
        A populated Message

    Raises:
        ValidationError: If the request or any token/field is invalid
    """
    if not isinstance(request, MessageRequest):
        request = parse_request(request)
    if settings is None:
        settings = get_settings()

    message = Message()
    for token in request.tokens:
        message.add_recipient(token)

    if request.text is not None:
        message.set_text(request.text)
    if request.alert is not None:
        message.set_alert(request.alert)
    if request.badge is not None:
        message.set_badge(request.badge)
    if request.sound is not None:
        message.set_sound(request.sound or settings.default_sound)
    if request.category is not None:
        message.set_category(request.category)
    if request.content_available is not None:
        message.set_content_available(request.content_available)
    for name, value in request.custom_properties.items():
        message.set_custom_property(name, value)

    message.set_expiry(
        request.expiry if request.expiry is not None else settings.default_expiry_seconds
    )
    message.set_auto_adjust_long_payload(
        request.auto_adjust_long_payload
        if request.auto_adjust_long_payload is not None
        else settings.auto_adjust_long_payload
    )
    message.set_custom_identifier(request.custom_identifier)

    logger.debug(
        "Message built",
        extra={"recipients": message.count(), "custom_properties": len(request.custom_properties)},
    )
    return message
