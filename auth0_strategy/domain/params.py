"""Extra authorization parameters forwarded to the Auth0 /authorize endpoint."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


@dataclass(frozen=True)
class AuthorizationParam:
    """An allow-listed authorization parameter.

    The value is forwarded only if ``accepts(value)`` is true and, when
    ``depends_on`` is set, that parameter was forwarded in the same call.
    """

    name: str
    accepts: Callable[[Any], bool] = _is_str
    depends_on: str | None = None


# Order matters: a dependency must appear before the params that need it.
AUTHORIZATION_PARAMS: tuple[AuthorizationParam, ...] = (
    AuthorizationParam("connection"),
    AuthorizationParam("connection_scope", depends_on="connection"),
    AuthorizationParam("audience"),
    AuthorizationParam("prompt"),
    AuthorizationParam("login_hint"),
    AuthorizationParam("acr_values"),
)


def map_authorization_params(options: Mapping[str, Any] | None) -> dict[str, str]:
    """Select the allow-listed authorization parameters from request options.

    Values that fail their type check are dropped silently rather than coerced,
    so loosely-typed input (e.g. ``{"audience": 42}``) never reaches the IdP.

    Args:
        options: Per-request options; None is treated as empty.

    Returns:
        New dict containing only accepted parameters.
    """
    options = options or {}
    params: dict[str, str] = {}

    for param in AUTHORIZATION_PARAMS:
        if param.name not in options:
            continue
        if param.depends_on is not None and param.depends_on not in params:
            continue
        value = options[param.name]
        if param.accepts(value):
            params[param.name] = value

    return params
