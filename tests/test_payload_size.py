"""Tests for the payload size ceiling and alert text auto-adjustment."""

import logging

import pytest

from apns_message.exceptions import PayloadTooLargeError
from apns_message.services.message import PAYLOAD_MAXIMUM_SIZE, Message

# {"aps":{"alert":""}}
ALERT_ONLY_OVERHEAD = 20


def payload_bytes(payload: str) -> int:
    return len(payload.encode("utf-8"))


class TestPayloadWithinLimit:
    """Payloads at or under the ceiling are returned unchanged."""

    def test_exactly_at_limit(self, message):
        """A payload of exactly PAYLOAD_MAXIMUM_SIZE bytes is accepted."""
        text = "x" * (PAYLOAD_MAXIMUM_SIZE - ALERT_ONLY_OVERHEAD)
        message.set_text(text)

        payload = message.get_payload()
        assert payload_bytes(payload) == PAYLOAD_MAXIMUM_SIZE
        assert message.get_text() == text

    def test_one_byte_over_with_auto_adjust_disabled(self, message):
        """One byte over the limit raises when auto-adjust is off."""
        message.set_auto_adjust_long_payload(False)
        message.set_text("x" * (PAYLOAD_MAXIMUM_SIZE - ALERT_ONLY_OVERHEAD + 1))

        with pytest.raises(PayloadTooLargeError) as exc_info:
            message.get_payload()

        assert exc_info.value.size == PAYLOAD_MAXIMUM_SIZE + 1
        assert exc_info.value.maximum_size == PAYLOAD_MAXIMUM_SIZE


class TestAutoAdjust:
    """Alert text is shortened until the payload fits."""

    def test_ascii_text_shortened(self, message):
        """ASCII text is cut to the exact remaining budget."""
        original = "abcdefghij" * 300
        message.set_text(original)

        payload = message.get_payload()

        assert payload_bytes(payload) == PAYLOAD_MAXIMUM_SIZE
        text = message.get_text()
        assert len(text) == PAYLOAD_MAXIMUM_SIZE - ALERT_ONLY_OVERHEAD
        assert original.startswith(text)

    def test_two_byte_characters(self, message):
        """Multi-byte text is cut on character boundaries."""
        original = "é" * 2000
        message.set_text(original)

        payload = message.get_payload()

        assert payload_bytes(payload) == PAYLOAD_MAXIMUM_SIZE
        assert message.get_text() == "é" * 1014

    def test_boundary_never_splits_character(self, message):
        """A character that would straddle the budget is dropped whole."""
        original = "a" + "€" * 1000
        message.set_text(original)

        payload = message.get_payload()

        text = message.get_text()
        assert payload_bytes(payload) <= PAYLOAD_MAXIMUM_SIZE
        assert text == "a" + "€" * 675
        assert original.startswith(text)
        assert "�" not in payload

    def test_emoji_text(self, message):
        """Four-byte characters are handled."""
        original = "🚀" * 600
        message.set_text(original)

        payload = message.get_payload()

        text = message.get_text()
        assert payload_bytes(payload) <= PAYLOAD_MAXIMUM_SIZE
        assert len(text) < len(original)
        assert original.startswith(text)

    def test_escaped_characters(self, message):
        """Characters that escape in JSON still converge under the limit."""
        original = '"' * 1000 + "a" * 1500
        message.set_text(original)

        payload = message.get_payload()

        text = message.get_text()
        assert payload_bytes(payload) <= PAYLOAD_MAXIMUM_SIZE
        assert original.startswith(text)
        assert len(text) < len(original)

    def test_other_fields_untouched(self, message):
        """Only the text shrinks; other fields are kept."""
        message.set_text("z" * 4000)
        message.set_badge(9)
        message.set_sound("chime")
        message.set_category("news")
        message.set_custom_property("article", {"id": 1234, "tags": ["a", "b"]})

        payload = message.get_payload()

        assert payload_bytes(payload) <= PAYLOAD_MAXIMUM_SIZE
        assert message.get_badge() == 9
        assert message.get_sound() == "chime"
        assert message.get_category() == "news"
        assert message.get_custom_property("article") == {"id": 1234, "tags": ["a", "b"]}
        assert '"article":{"id":1234,"tags":["a","b"]}' in payload

    def test_shortening_is_permanent(self, message):
        """The shortened text stays and later encodings are stable."""
        message.set_text("q" * 5000)

        first = message.get_payload()
        shortened = message.get_text()
        second = message.get_payload()

        assert first == second
        assert message.get_text() == shortened

    def test_shortening_is_logged(self, message, caplog):
        """Shortening emits an info record."""
        message.set_text("q" * 5000)

        with caplog.at_level(logging.INFO, logger="apns_message.services.message"):
            message.get_payload()

        assert any("shortened" in record.getMessage() for record in caplog.records)


class TestPayloadTooLarge:
    """Payloads that can not be made to fit raise PayloadTooLargeError."""

    def test_disabled_auto_adjust_keeps_text(self, message):
        """With auto-adjust off the text is not modified."""
        original = "x" * 2100
        message.set_auto_adjust_long_payload(False)
        message.set_text(original)

        with pytest.raises(PayloadTooLargeError) as exc_info:
            message.get_payload()

        assert exc_info.value.size == 2100 + ALERT_ONLY_OVERHEAD
        assert "Maximum size is 2048 bytes" in str(exc_info.value)
        assert exc_info.value.context["size"] == 2120
        assert message.get_text() == original

    @pytest.mark.parametrize("text", [None, "", "short"])
    def test_non_text_fields_exceed_limit(self, message, text):
        """Custom data alone over the limit can not be fixed by the text."""
        message.set_custom_property("blob", "d" * 2100)
        message.set_text(text)

        with pytest.raises(PayloadTooLargeError) as exc_info:
            message.get_payload()

        assert "can not be auto-adjusted" in str(exc_info.value)
        assert exc_info.value.size > PAYLOAD_MAXIMUM_SIZE
        assert message.get_text() == text

    def test_alert_object_is_never_shortened(self, message):
        """An oversized alert object raises; text is not cut in its place."""
        message.set_text("t" * 3000)
        message.set_alert({"body": "b" * 3000})

        with pytest.raises(PayloadTooLargeError):
            message.get_payload()

        assert message.get_text() == "t" * 3000
        assert message.get_alert() == {"body": "b" * 3000}

    def test_error_is_an_apns_message_error(self):
        """PayloadTooLargeError is part of the package hierarchy."""
        from apns_message.exceptions import ApnsMessageError

        error = PayloadTooLargeError("too long", size=3000, maximum_size=2048)
        assert isinstance(error, ApnsMessageError)
        assert error.context == {"size": 3000, "maximum_size": 2048}
