"""
Core types for the Twitter direct-message and user endpoints.

Field names on the wire are fixed by the API, including the irregular
`message_create`, `event` and `events` wrappers.
"""

from dataclasses import dataclass, field
from typing import Any

MESSAGE_CREATE = "message_create"


# =============================================================================
# User Types
# =============================================================================


@dataclass
class User:
    """A Twitter user resolved from a handle."""

    id: str
    name: str
    username: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        """Create from the `data` object of a user lookup response."""
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            username=data.get("username") or "",
        )


# =============================================================================
# Direct Message Types
# =============================================================================


@dataclass
class MessageCreate:
    """Payload of a `message_create` event."""

    recipient_id: str
    text: str
    sender_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MessageCreate":
        """Create from API response dict."""
        target = data.get("target") or {}
        message_data = data.get("message_data") or {}
        return cls(
            recipient_id=target["recipient_id"],
            text=message_data.get("text", ""),
            sender_id=data.get("sender_id") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        result: dict[str, Any] = {"target": {"recipient_id": self.recipient_id}}
        if self.sender_id:
            result["sender_id"] = self.sender_id
        result["message_data"] = {"text": self.text}
        return result


@dataclass
class DirectMessageEvent:
    """A direct message event, either outbound or as returned by the server."""

    message: MessageCreate | None
    type: str = MESSAGE_CREATE
    id: str | None = None
    created_timestamp: str | None = None

    @property
    def is_sendable(self) -> bool:
        """Check if the event can be posted: no server-assigned fields, a recipient set."""
        return (
            self.type == MESSAGE_CREATE
            and self.message is not None
            and bool(self.message.recipient_id)
            and not self.id
            and not self.created_timestamp
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DirectMessageEvent":
        """Create from API response dict."""
        raw_message = data.get(MESSAGE_CREATE)
        return cls(
            message=MessageCreate.from_dict(raw_message) if raw_message else None,
            type=data.get("type") or "",
            id=data.get("id") or None,
            created_timestamp=data.get("created_timestamp") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request, omitting empty server-assigned fields."""
        result: dict[str, Any] = {}
        if self.id:
            result["id"] = self.id
        if self.created_timestamp:
            result["created_timestamp"] = self.created_timestamp
        result["type"] = self.type
        result[MESSAGE_CREATE] = self.message.to_dict() if self.message else None
        return result


@dataclass
class DirectMessageEnvelope:
    """Single-event wrapper used by show and new."""

    event: DirectMessageEvent

    @classmethod
    def sendable(cls, recipient_id: str, text: str) -> "DirectMessageEnvelope":
        """Build an outbound envelope for a plain text message."""
        return cls(event=DirectMessageEvent(message=MessageCreate(recipient_id=recipient_id, text=text)))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DirectMessageEnvelope":
        """Create from API response dict."""
        return cls(event=DirectMessageEvent.from_dict(data["event"]))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"event": self.event.to_dict()}


@dataclass
class DirectMessageList:
    """First page of direct message events."""

    events: list[DirectMessageEvent] = field(default_factory=list)
    next_cursor: str = ""

    @property
    def has_more(self) -> bool:
        """Check if the API reported another page."""
        return bool(self.next_cursor)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DirectMessageList":
        """Create from API response dict."""
        return cls(
            events=[DirectMessageEvent.from_dict(item) for item in data.get("events") or []],
            next_cursor=data.get("next_cursor") or "",
        )
