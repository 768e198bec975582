"""Pytest configuration - loads .env and provides a fake transport."""

import io
import json
import urllib.error
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from dm_cli.core.client import APIClient, Credentials

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class FakeResponse:
    """Stand-in for http.client.HTTPResponse."""

    def __init__(self, body: bytes, status: int = 200, read_error: Exception | None = None):
        self.body = body
        self.status = status
        self.read_error = read_error
        self.closed = False

    def getcode(self) -> int:
        return self.status

    def read(self) -> bytes:
        if self.read_error:
            raise self.read_error
        return self.body

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class FakeOpener:
    """Records requests and replays queued responses or exceptions."""

    def __init__(self) -> None:
        self.requests: list[Any] = []
        self.timeouts: list[float] = []
        self.responses: list[Any] = []

    def queue(self, payload: Any, status: int = 200) -> FakeResponse:
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        if status >= 400:
            response = urllib.error.HTTPError("https://api.twitter.com", status, "error", {}, io.BytesIO(body))
        else:
            response = FakeResponse(body, status)
        self.responses.append(response)
        return response

    def fail(self, error: Exception) -> None:
        self.responses.append(error)

    def fail_read(self, error: Exception) -> FakeResponse:
        response = FakeResponse(b"", read_error=error)
        self.responses.append(response)
        return response

    def open(self, req: Any, timeout: float | None = None) -> Any:
        self.requests.append(req)
        self.timeouts.append(timeout)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def credentials() -> Credentials:
    return Credentials("ck", "cs", "at", "as")


@pytest.fixture
def opener() -> FakeOpener:
    return FakeOpener()


@pytest.fixture
def api_client(credentials: Credentials, opener: FakeOpener) -> APIClient:
    return APIClient(credentials, opener=opener)
