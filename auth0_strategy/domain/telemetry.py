"""Auth0-Client diagnostic header."""

import base64
import json
import platform

from auth0_strategy.version import __version__

CLIENT_INFO_HEADER = "Auth0-Client"
LIBRARY_NAME = "auth0-strategy"


def client_info() -> str:
    """Build the Auth0-Client header value.

    Base64 of the JSON document ``{"name", "version", "env": {"python"}}``.
    Auth0 parses this for SDK telemetry, so the encoding must stay stable.
    """
    info = {
        "name": LIBRARY_NAME,
        "version": __version__,
        "env": {"python": platform.python_version()},
    }
    payload = json.dumps(info, separators=(",", ":")).encode("ascii")
    return base64.b64encode(payload).decode("ascii")
