"""Global test fixtures."""

from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import pytest
from starlette.requests import Request

TEST_OPTIONS = {
    "domain": "test.auth0.com",
    "clientID": "testid",
    "clientSecret": "testsecret",
    "callbackURL": "/callback",
}


def build_request(
    query: dict[str, str] | None = None,
    session: dict[str, Any] | None = None,
) -> Request:
    """Build a bare Starlette request; ``session`` mimics SessionMiddleware."""
    scope: dict[str, Any] = {
        "type": "http",
        "method": "GET",
        "path": "/auth/auth0/callback",
        "headers": [],
        "query_string": urlencode(query or {}).encode(),
    }
    if session is not None:
        scope["session"] = session
    return Request(scope)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    return build_request


@pytest.fixture
def options() -> dict[str, Any]:
    """Fresh copy of the minimal Auth0 strategy options."""
    return dict(TEST_OPTIONS)
