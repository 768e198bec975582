"""
DM SDK - High-level client with typed operations.

This layer provides a clean, typed interface over the direct-message and
user lookup endpoints. Built on top of the core APIClient.
"""

import logging
import os
import urllib.request
from collections.abc import Callable
from typing import Any, TypeVar

from dm_cli.core.client import (
    DEFAULT_TIMEOUT,
    DM_LIST_URL,
    DM_NEW_URL,
    DM_RATE_LIMIT_URL,
    DM_SHOW_URL,
    USER_BY_USERNAME_URL,
    APIClient,
    APIError,
    CLIError,
    Credentials,
    DecodeError,
    ValidationError,
)
from dm_cli.core.types import DirectMessageEnvelope, DirectMessageList, User

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENV_CONSUMER_KEY = "TWITTER_CONSUMER_KEY"
ENV_CONSUMER_SECRET = "TWITTER_CONSUMER_SECRET"
ENV_ACCESS_TOKEN = "TWITTER_ACCESS_TOKEN"
ENV_ACCESS_SECRET = "TWITTER_ACCESS_SECRET"


def _decode(parser: Callable[[Any], T], data: Any) -> T:
    """Run a typed parser, turning shape mismatches into DecodeError."""
    try:
        return parser(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DecodeError(f"Unexpected response shape: {e!r}")


def _setting(value: str | None, env_var: str) -> str:
    value = value or os.environ.get(env_var)
    if not value:
        raise ValidationError(f"{env_var} environment variable not set")
    return value


class TwitterClient:
    """
    High-level Twitter DM client with typed methods.

    Example:
        client = TwitterClient()

        user = client.users.resolve("jack")
        sent = client.messages.send_text(user.id, "hello")
        page = client.messages.list()

    """

    def __init__(
        self,
        consumer_key: str | None = None,
        consumer_secret: str | None = None,
        access_token: str | None = None,
        access_secret: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
        opener: urllib.request.OpenerDirector | None = None,
    ):
        """
        Initialize the client.

        Args:
            consumer_key: App key (or TWITTER_CONSUMER_KEY env var)
            consumer_secret: App secret (or TWITTER_CONSUMER_SECRET env var)
            access_token: User access token (or TWITTER_ACCESS_TOKEN env var)
            access_secret: User access secret (or TWITTER_ACCESS_SECRET env var)
            timeout: Request timeout in seconds
            opener: Optional urllib opener used as transport

        """
        credentials = Credentials(
            consumer_key=_setting(consumer_key, ENV_CONSUMER_KEY),
            consumer_secret=_setting(consumer_secret, ENV_CONSUMER_SECRET),
            access_token=_setting(access_token, ENV_ACCESS_TOKEN),
            access_secret=_setting(access_secret, ENV_ACCESS_SECRET),
        )
        self._client = APIClient(credentials, timeout=timeout, opener=opener)

        # Sub-clients for different domains
        self.users = UserOperations(self._client)
        self.messages = MessageOperations(self._client)

    def rate_limit_status(self, raise_errors: bool = False) -> bytes | None:
        """
        Fetch the raw direct-message rate limit status.

        Args:
            raise_errors: Raise on failure instead of returning None

        Returns:
            Unparsed response body, or None when the call failed and
            raise_errors is False

        """
        try:
            status, content = self._client.get_raw(DM_RATE_LIMIT_URL)
        except CLIError as e:
            if raise_errors:
                raise
            logger.warning("Rate limit status unavailable: %s", e.message)
            return None

        if raise_errors and not 200 <= status < 300:
            raise APIError(f"Rate limit status request failed with HTTP {status}", status=status)
        return content


# =============================================================================
# User Operations
# =============================================================================


class UserOperations:
    """Operations for looking up users."""

    def __init__(self, client: APIClient):
        self._client = client

    def resolve(self, handle: str) -> User:
        """
        Resolve a handle to a user.

        Args:
            handle: The @-name without the @; not URL-escaped here

        Returns:
            User with id, name and username

        """
        if not handle:
            raise ValidationError("Handle must not be empty")
        result = self._client.get(USER_BY_USERNAME_URL + handle)
        return _decode(lambda data: User.from_dict(data["data"]), result)


# =============================================================================
# Message Operations
# =============================================================================


class MessageOperations:
    """Operations for direct message events."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(self) -> DirectMessageList:
        """
        List direct message events.

        Only the first page is fetched; `next_cursor` is returned as-is.

        Returns:
            DirectMessageList with events and cursor

        """
        result = self._client.get(DM_LIST_URL)
        return _decode(DirectMessageList.from_dict, result)

    def show(self, msg_id: str) -> DirectMessageEnvelope:
        """
        Get a single direct message event.

        Args:
            msg_id: The event ID

        Returns:
            DirectMessageEnvelope with the event

        """
        if not msg_id:
            raise ValidationError("Message ID must not be empty")
        result = self._client.get(f"{DM_SHOW_URL}?id={msg_id}")
        return _decode(DirectMessageEnvelope.from_dict, result)

    def send(self, envelope: DirectMessageEnvelope) -> DirectMessageEnvelope:
        """
        Send a direct message event.

        Args:
            envelope: Outbound envelope, see DirectMessageEnvelope.sendable()

        Returns:
            The envelope echoed by the server, with id and timestamp set

        """
        if not envelope.event.is_sendable:
            raise ValidationError(
                "Event is not sendable: type must be message_create with a recipient and no server-assigned fields"
            )
        result = self._client.post(DM_NEW_URL, envelope.to_dict())
        return _decode(DirectMessageEnvelope.from_dict, result)

    def send_text(self, recipient_id: str, text: str) -> DirectMessageEnvelope:
        """Send a plain text message to a user ID."""
        return self.send(DirectMessageEnvelope.sendable(recipient_id, text))
