"""Tests for strategy option normalization."""

import traceback

import pytest

from auth0_strategy.domain.error import ConfigurationError
from auth0_strategy.domain.options import StrategyOptions, normalize_options
from auth0_strategy.domain.telemetry import CLIENT_INFO_HEADER


class TestEndpointDerivation:
    @pytest.mark.parametrize("domain", ["test.auth0.com", "tenant.eu.auth0.com", "login.example.org"])
    def test_endpoints_derived_from_domain(self, options, domain: str) -> None:
        options["domain"] = domain

        result = normalize_options(options)

        assert result.authorization_url == f"https://{domain}/authorize"
        assert result.token_url == f"https://{domain}/oauth/token"
        assert result.user_info_url == f"https://{domain}/userinfo"

    def test_caller_endpoints_take_precedence(self, options) -> None:
        options["authorizationURL"] = "https://login.example.org/custom/authorize"
        options["token_url"] = "https://login.example.org/custom/token"

        result = normalize_options(options)

        assert result.authorization_url == "https://login.example.org/custom/authorize"
        assert result.token_url == "https://login.example.org/custom/token"
        assert result.user_info_url == "https://test.auth0.com/userinfo"


class TestStateDefault:
    def test_state_defaults_to_true(self, options) -> None:
        assert normalize_options(options).state is True

    def test_explicit_false_is_preserved(self, options) -> None:
        options["state"] = False
        assert normalize_options(options).state is False

    def test_explicit_true_is_preserved(self, options) -> None:
        options["state"] = True
        assert normalize_options(options).state is True

    def test_non_bool_state_is_rejected(self, options) -> None:
        options["state"] = "yes"
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options(options)
        assert exc_info.value.code == "invalid_options"


class TestCustomHeaders:
    def test_telemetry_header_added_by_default(self, options) -> None:
        result = normalize_options(options)
        assert CLIENT_INFO_HEADER in result.custom_headers

    def test_caller_headers_are_kept(self, options) -> None:
        options["customHeaders"] = {"testCustomHeader": "Test Custom Header"}

        result = normalize_options(options)

        assert result.custom_headers["testCustomHeader"] == "Test Custom Header"
        assert CLIENT_INFO_HEADER in result.custom_headers

    def test_caller_telemetry_value_wins(self, options) -> None:
        options["customHeaders"] = {CLIENT_INFO_HEADER: "my-own-value"}

        result = normalize_options(options)

        assert result.custom_headers[CLIENT_INFO_HEADER] == "my-own-value"

    def test_header_key_match_is_exact(self, options) -> None:
        options["customHeaders"] = {"auth0-client": "lowercase"}

        result = normalize_options(options)

        assert result.custom_headers["auth0-client"] == "lowercase"
        assert result.custom_headers[CLIENT_INFO_HEADER] != "lowercase"

    def test_caller_headers_mapping_not_mutated(self, options) -> None:
        headers = {"testCustomHeader": "Test Custom Header"}
        options["customHeaders"] = headers

        normalize_options(options)

        assert headers == {"testCustomHeader": "Test Custom Header"}

    def test_both_header_spellings_are_merged(self, options) -> None:
        options["customHeaders"] = {"X-From-Alias": "a", "X-Shared": "alias"}
        options["custom_headers"] = {"X-From-Name": "b", "X-Shared": "name"}

        result = normalize_options(options)

        assert result.custom_headers["X-From-Alias"] == "a"
        assert result.custom_headers["X-From-Name"] == "b"
        assert result.custom_headers["X-Shared"] == "name"
        assert CLIENT_INFO_HEADER in result.custom_headers


class TestNoMutation:
    def test_returns_new_object_and_leaves_input_untouched(self, options) -> None:
        before = dict(options)

        result = normalize_options(options)

        assert result is not options
        assert options == before
        assert "authorizationURL" not in options
        assert "authorization_url" not in options

    def test_existing_options_are_copied(self, options) -> None:
        first = normalize_options(options)

        second = normalize_options(first)

        assert second is not first
        assert second == first
        assert second.custom_headers is not first.custom_headers

    def test_later_changes_to_caller_headers_are_not_seen(self, options) -> None:
        headers = {"testCustomHeader": "Test Custom Header"}
        options["customHeaders"] = headers

        result = normalize_options(options)
        headers["testCustomHeader"] = "changed"
        headers["X-Added-Later"] = "1"

        assert result.custom_headers["testCustomHeader"] == "Test Custom Header"
        assert "X-Added-Later" not in result.custom_headers

    def test_options_are_frozen(self, options) -> None:
        result = normalize_options(options)
        with pytest.raises(ValueError):
            result.state = False  # type: ignore[misc]


class TestPassthrough:
    def test_known_passthrough_fields(self, options) -> None:
        options["skipUserProfile"] = True
        options["scope"] = "openid email"

        result = normalize_options(options)

        assert result.skip_user_profile is True
        assert result.scope == "openid email"

    def test_unknown_fields_are_preserved(self, options) -> None:
        options["passReqToCallback"] = True

        result = normalize_options(options)

        assert result.model_extra == {"passReqToCallback": True}

    def test_snake_case_names_accepted(self) -> None:
        result = normalize_options(
            {
                "domain": "test.auth0.com",
                "client_id": "testid",
                "client_secret": "testsecret",
                "callback_url": "/callback",
            }
        )
        assert result.client_id == "testid"
        assert result.callback_url == "/callback"

    def test_client_secret_hidden_from_repr(self, options) -> None:
        assert "testsecret" not in repr(normalize_options(options))


class TestValidation:
    @pytest.mark.parametrize(
        ("key", "field"),
        [
            ("domain", "domain"),
            ("clientID", "client_id"),
            ("clientSecret", "client_secret"),
            ("callbackURL", "callback_url"),
        ],
    )
    def test_missing_required_value(self, options, key: str, field: str) -> None:
        del options[key]

        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options(options)

        assert exc_info.value.code == "missing_option"
        assert field in exc_info.value.message

    def test_empty_required_value(self, options) -> None:
        options["clientID"] = ""
        with pytest.raises(ConfigurationError, match="client_id"):
            normalize_options(options)

    @pytest.mark.parametrize("raw", [None, "test.auth0.com", 42, ["domain"]])
    def test_non_mapping_input(self, raw) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options(raw)  # type: ignore[arg-type]
        assert exc_info.value.code == "invalid_options"

    def test_validation_error_does_not_echo_secret(self, options) -> None:
        options["clientSecret"] = "super-secret-value"
        options["customHeaders"] = {"X-Bad": 42}

        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options(options)

        assert "super-secret-value" not in str(exc_info.value)
        assert "custom_headers" in exc_info.value.message or "customHeaders" in exc_info.value.message

    def test_traceback_does_not_echo_secret(self, options) -> None:
        options["clientSecret"] = 987654321012

        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options(options)

        assert exc_info.value.code == "invalid_options"
        assert exc_info.value.__cause__ is None
        assert "987654321012" not in "".join(traceback.format_exception(exc_info.value))

    def test_model_validate_applies_same_defaults(self, options) -> None:
        result = StrategyOptions.model_validate(options)
        assert result.authorization_url == "https://test.auth0.com/authorize"
        assert result.state is True
