"""
Core layer - Wire types and signed HTTP client.

This layer provides:
- Typed dataclasses matching the API's JSON shapes
- Low-level HTTP client with OAuth 1.0a signing and error envelope handling
"""

from dm_cli.core.client import (
    APIClient,
    APIError,
    BodyReadError,
    CLIError,
    Credentials,
    DecodeError,
    ParsedResponse,
    ResponseError,
    ResponseKind,
    TransportError,
    ValidationError,
    format_error_codes,
    parse_response,
)
from dm_cli.core.types import (
    MESSAGE_CREATE,
    DirectMessageEnvelope,
    DirectMessageEvent,
    DirectMessageList,
    MessageCreate,
    User,
)

__all__ = [
    "MESSAGE_CREATE",
    "APIClient",
    "APIError",
    "BodyReadError",
    "CLIError",
    "Credentials",
    "DecodeError",
    "DirectMessageEnvelope",
    "DirectMessageEvent",
    "DirectMessageList",
    "MessageCreate",
    "ParsedResponse",
    "ResponseError",
    "ResponseKind",
    "TransportError",
    "User",
    "ValidationError",
    "format_error_codes",
    "parse_response",
]
