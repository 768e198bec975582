"""
Core HTTP client for the Twitter direct-message API.

Handles OAuth 1.0a signing, request/response, and API error envelopes.
"""

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from enum import Enum
from http.client import HTTPException
from typing import Any

from oauthlib.oauth1 import SIGNATURE_HMAC
from oauthlib.oauth1 import Client as OAuth1Signer

logger = logging.getLogger(__name__)

# Endpoints
DM_NEW_URL = "https://api.twitter.com/1.1/direct_messages/events/new.json"
DM_SHOW_URL = "https://api.twitter.com/1.1/direct_messages/events/show.json"
DM_LIST_URL = "https://api.twitter.com/1.1/direct_messages/events/list.json"
DM_DESTROY_URL = "https://api.twitter.com/1.1/direct_messages/events/destroy.json"  # reserved, no operation
DM_RATE_LIMIT_URL = "https://api.twitter.com/1.1/application/rate_limit_status.json?resources=direct_messages"
USER_BY_USERNAME_URL = "https://api.twitter.com/2/users/by/username/"

DEFAULT_TIMEOUT = 30


class CLIError(Exception):
    """Base error class for client and CLI errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class APIError(CLIError):
    """Error envelope returned by the API, carrying only the error codes."""

    def __init__(
        self,
        message: str,
        status: int = 0,
        codes: list[int] | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.status = status
        self.codes = codes or []

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        if self.codes:
            result["codes"] = self.codes
        return result


class TransportError(CLIError):
    """Connection, DNS, timeout or malformed URL failure."""


class BodyReadError(CLIError):
    """Response body could not be read in full."""


class DecodeError(CLIError):
    """Response body did not match the expected shape."""


class ValidationError(CLIError):
    """Validation error for local input/data issues (not API errors)."""


@dataclass(frozen=True)
class Credentials:
    """OAuth 1.0a consumer and access secrets."""

    consumer_key: str
    consumer_secret: str
    access_token: str
    access_secret: str

    def __repr__(self) -> str:
        return f"Credentials(consumer_key={self.consumer_key!r}, ...)"


@dataclass
class ResponseError:
    """One entry of an API error envelope."""

    code: int = 0
    message: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ResponseError":
        """Create from an `errors` list entry; non-object entries become code 0."""
        if not isinstance(data, dict):
            return cls()
        try:
            code = int(data.get("code") or 0)
        except (TypeError, ValueError):
            code = 0
        message = data.get("message") or data.get("detail") or ""
        return cls(code=code, message=str(message))


# =============================================================================
# Response parsing
# =============================================================================


class ResponseKind(Enum):
    SUCCESS = "success"
    API_ERROR = "api_error"
    MALFORMED = "malformed"


@dataclass
class ParsedResponse:
    """Tagged result of inspecting a response body."""

    kind: ResponseKind
    data: Any = None
    errors: list[ResponseError] = field(default_factory=list)
    reason: str = ""


def format_error_codes(errors: list[ResponseError]) -> str:
    """Join error codes with ", " in their original order."""
    return ", ".join(str(error.code) for error in errors)


def parse_response(body: bytes) -> ParsedResponse:
    """
    Classify a response body.

    The error envelope is checked before anything else: the API can answer
    HTTP 200 with an `errors` list instead of the expected payload.
    """
    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        return ParsedResponse(ResponseKind.MALFORMED, reason=f"Invalid JSON response: {e}")

    raw_errors = data.get("errors") if isinstance(data, dict) else None
    if isinstance(raw_errors, list) and raw_errors:
        errors = [ResponseError.from_dict(item) for item in raw_errors]
        return ParsedResponse(ResponseKind.API_ERROR, data=data, errors=errors)

    return ParsedResponse(ResponseKind.SUCCESS, data=data)


# =============================================================================
# Client
# =============================================================================


class APIClient:
    """
    Low-level HTTP client for the Twitter API.

    Handles:
    - OAuth 1.0a signing of every request
    - GET and POST with a fixed timeout
    - Error envelope detection and response parsing
    """

    def __init__(
        self,
        credentials: Credentials,
        timeout: int = DEFAULT_TIMEOUT,
        opener: urllib.request.OpenerDirector | None = None,
    ):
        """
        Initialize the API client.

        Args:
            credentials: Consumer and access secrets used for signing
            timeout: Request timeout in seconds
            opener: urllib opener used as transport (built if not given)

        """
        self.credentials = credentials
        self.timeout = timeout
        self._signer = OAuth1Signer(
            credentials.consumer_key,
            client_secret=credentials.consumer_secret,
            resource_owner_key=credentials.access_token,
            resource_owner_secret=credentials.access_secret,
            signature_method=SIGNATURE_HMAC,
        )
        self._opener = opener or urllib.request.build_opener()

    def _sign(self, method: str, url: str, body: str | None) -> tuple[str, dict[str, str], str | None]:
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json"
        return self._signer.sign(url, http_method=method, body=body, headers=headers)

    def _send(self, method: str, url: str, data: dict | None = None) -> tuple[int, bytes]:
        """
        Send a signed request and read the whole body.

        Non-2xx responses are returned like any other; the caller decides
        what a status means.

        Raises:
            TransportError: On connection errors and timeouts
            BodyReadError: If the body cannot be read

        """
        body = json.dumps(data) if data is not None else None
        try:
            signed_url, headers, signed_body = self._sign(method, url, body)
            payload = signed_body.encode("utf-8") if signed_body is not None else None
            req = urllib.request.Request(signed_url, data=payload, headers=headers, method=method)
        except ValueError as e:
            raise TransportError(f"Invalid request URL {url!r}: {e}")
        logger.debug("%s %s", method, url)

        try:
            response = self._opener.open(req, timeout=self.timeout)
        except urllib.error.HTTPError as e:
            response = e
        except urllib.error.URLError as e:
            raise TransportError(f"Connection error: {e.reason}")
        except TimeoutError:
            raise TransportError(f"Request timed out after {self.timeout} seconds")
        except (OSError, HTTPException) as e:
            raise TransportError(f"Connection error: {e}")

        with response:
            status = response.getcode()
            try:
                content = response.read()
            except TimeoutError:
                raise TransportError(f"Request timed out after {self.timeout} seconds")
            except (OSError, HTTPException) as e:
                raise BodyReadError(f"Failed to read response body: {e}", details={"status": status})

        logger.debug("%s %s -> %s (%d bytes)", method, url, status, len(content))
        return status, content

    def request(self, method: str, url: str, data: dict | None = None) -> Any:
        """
        Make a request and return the decoded JSON payload.

        Args:
            method: HTTP method (GET, POST)
            url: Full endpoint URL, query string included
            data: Request body for POST, serialized as JSON

        Returns:
            Decoded JSON body of a successful response

        Raises:
            APIError: If the body carries a non-empty error envelope
            DecodeError: If the body is not JSON

        """
        status, content = self._send(method, url, data)
        parsed = parse_response(content)

        if parsed.kind is ResponseKind.API_ERROR:
            raise APIError(
                format_error_codes(parsed.errors),
                status=status,
                codes=[error.code for error in parsed.errors],
            )
        if parsed.kind is ResponseKind.MALFORMED:
            raise DecodeError(parsed.reason, details={"status": status})
        return parsed.data

    def get(self, url: str) -> Any:
        """Make a GET request."""
        return self.request("GET", url)

    def post(self, url: str, data: dict) -> Any:
        """Make a POST request with a JSON body."""
        return self.request("POST", url, data)

    def get_raw(self, url: str) -> tuple[int, bytes]:
        """Make a GET request and return status and body without parsing."""
        return self._send("GET", url)
