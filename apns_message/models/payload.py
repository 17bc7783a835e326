"""Models for the APNs payload document and declarative message input."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ApsDictionary(BaseModel):
    """Body of the Apple-reserved "aps" key.

    Field order is the order keys appear in the encoded payload.
    """

    model_config = ConfigDict(populate_by_name=True)

    alert: str | dict[str, Any] | None = Field(None, description="Alert text or alert dictionary")
    badge: int | None = Field(None, description="Number to badge the application icon with")
    sound: str | None = Field(None, description="Sound to play")
    content_available: Literal[1] | None = Field(
        None,
        alias="content-available",
        description="Background update flag, only ever 1",
    )
    category: str | None = Field(None, description="Notification category")

    def to_wire(self) -> dict[str, Any]:
        """Dump set keys only, using wire names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class MessageRequest(BaseModel):
    """Declarative description of a push notification message."""

    model_config = ConfigDict(extra="forbid", strict=True)

    tokens: list[str] = Field(
        default_factory=list,
        description="APNs device tokens (64 hex characters each)",
    )
    text: str | None = Field(None, description="Alert text, shortened if the payload is too long")
    alert: str | dict[str, Any] | None = Field(
        None,
        description="Alert string or dictionary, takes precedence over text",
    )
    badge: int | None = Field(None, description="Badge count (optional)")
    sound: str | None = Field(None, description="Notification sound")
    category: str | None = Field(None, description="Notification category")
    content_available: bool | None = Field(None, description="Background update flag")
    custom_properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Custom data placed next to the aps dictionary",
    )
    expiry: int | None = Field(
        None,
        description="Seconds before an undelivered message expires (configured default if omitted)",
    )
    custom_identifier: Any = Field(None, description="Opaque caller identifier, never encoded")
    auto_adjust_long_payload: bool | None = Field(
        None,
        description="Shorten text when the payload is too long (configured default if omitted)",
    )
