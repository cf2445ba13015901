"""Tests for the Auth0-Client telemetry header."""

import base64
import json
import platform

from auth0_strategy import __version__
from auth0_strategy.domain.telemetry import LIBRARY_NAME, client_info


def _decode(value: str) -> dict:
    return json.loads(base64.b64decode(value).decode("ascii"))


class TestClientInfo:
    def test_contains_library_name_and_version(self) -> None:
        info = _decode(client_info())

        assert info["name"] == LIBRARY_NAME == "auth0-strategy"
        assert info["version"] == __version__

    def test_contains_runtime_environment(self) -> None:
        info = _decode(client_info())
        assert info["env"]["python"] == platform.python_version()

    def test_value_is_ascii_base64(self) -> None:
        value = client_info()
        assert value.isascii()
        assert base64.b64encode(base64.b64decode(value)).decode("ascii") == value

    def test_is_stable(self) -> None:
        assert client_info() == client_info()
