"""Strategy options and their normalization."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError, model_validator

from auth0_strategy.domain.error import ConfigurationError
from auth0_strategy.domain.telemetry import CLIENT_INFO_HEADER, LIBRARY_NAME, client_info

# (field name, camelCase alias, path appended to https://{domain})
_ENDPOINTS = (
    ("authorization_url", "authorizationURL", "/authorize"),
    ("token_url", "tokenURL", "/oauth/token"),
    ("user_info_url", "userInfoURL", "/userinfo"),
)

_REQUIRED = ("domain", "client_id", "client_secret", "callback_url")


class OAuth2Options(BaseModel):
    """Options consumed by the generic OAuth2 authorization-code strategy.

    Fields accept either their Python name or the camelCase alias
    (``clientID``, ``callbackURL``, ...). Unknown keys are kept as extras.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    client_id: str = Field(alias="clientID", min_length=1)
    client_secret: str = Field(alias="clientSecret", min_length=1, repr=False)
    callback_url: str = Field(alias="callbackURL", min_length=1)
    authorization_url: str = Field(alias="authorizationURL", min_length=1)
    token_url: str = Field(alias="tokenURL", min_length=1)
    state: StrictBool = True  # Only applied when the key is absent
    custom_headers: dict[str, str] = Field(default_factory=dict, alias="customHeaders")
    skip_user_profile: bool = Field(default=False, alias="skipUserProfile")
    scope: str | list[str] | None = None
    scope_separator: str = Field(default=" ", alias="scopeSeparator")


class StrategyOptions(OAuth2Options):
    """Auth0 strategy options.

    Endpoint URLs default to the tenant ``domain`` and the Auth0-Client
    telemetry header is added unless the caller already set that exact key.
    """

    domain: str = Field(min_length=1)
    user_info_url: str = Field(alias="userInfoURL", min_length=1)

    @model_validator(mode="before")
    @classmethod
    def fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        # Work on a copy; the caller's mapping must not gain derived keys
        data = dict(data)

        domain = data.get("domain")
        if isinstance(domain, str) and domain:
            for name, alias, path in _ENDPOINTS:
                if data.get(name) is None and data.get(alias) is None:
                    data[name] = f"https://{domain}{path}"

        aliased_headers = data.pop("customHeaders", None)
        headers = data.get("custom_headers", aliased_headers)
        if headers is None:
            headers = {}
        if isinstance(headers, Mapping):
            # Both spellings given: merge, the Python name wins on conflicts
            if isinstance(aliased_headers, Mapping) and headers is not aliased_headers:
                headers = {**aliased_headers, **headers}
            headers = dict(headers)
            headers.setdefault(CLIENT_INFO_HEADER, client_info())
        data["custom_headers"] = headers

        return data


def _lookup(raw: Mapping[str, Any], name: str) -> Any:
    alias = StrategyOptions.model_fields[name].alias
    if name in raw:
        return raw[name]
    return raw.get(alias) if alias else None


def normalize_options(raw: Mapping[str, Any] | StrategyOptions) -> StrategyOptions:
    """Build effective strategy options from caller configuration.

    The result is always a new object; ``raw`` is never modified.

    Raises:
        ConfigurationError: If ``raw`` is not a mapping, a required value is
            missing or empty, or a field has the wrong type.
    """
    if isinstance(raw, StrategyOptions):
        return raw.model_copy(deep=True)

    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"Strategy options must be a mapping, got {type(raw).__name__}",
            code="invalid_options",
        )

    for name in _REQUIRED:
        if not _lookup(raw, name):
            raise ConfigurationError(
                f"You must provide the {name} configuration value to use {LIBRARY_NAME}.",
                code="missing_option",
            )

    try:
        return StrategyOptions.model_validate(raw)
    except ValidationError as e:
        # Field locations only: error details would echo input values (secrets)
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in e.errors())
        raise ConfigurationError(
            f"Invalid strategy options: {fields}",
            code="invalid_options",
        ) from None
