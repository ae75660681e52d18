"""CORS policy registry tests"""

import pytest

from rym_lubricentro_api.core.cors import CorsOptions, CorsOptionsFrozenError, CorsPolicy, CorsPolicyNotFoundError
from rym_lubricentro_api.core.exceptions import StartupError


def test_credentials_cannot_be_combined_with_any_origin():
    with pytest.raises(ValueError):
        CorsPolicy(origins=("*",), allow_credentials=True)


def test_any_origin_without_credentials():
    policy = CorsPolicy(origins=("*",))
    assert policy.is_origin_allowed("https://cualquiera.example")


def test_trailing_slash_is_ignored():
    policy = CorsPolicy(origins=("https://bacosta30762.github.io/",))

    assert policy.origins == ("https://bacosta30762.github.io",)
    assert policy.is_origin_allowed("https://bacosta30762.github.io")
    assert not policy.is_origin_allowed("https://otro.github.io")


def test_explicit_methods_and_headers():
    policy = CorsPolicy(origins=("http://localhost:3000",), methods=("GET", "POST"), headers=("Content-Type",))

    assert policy.allowed_methods == ["GET", "POST"]
    assert policy.allowed_headers == ["Content-Type"]


def test_middleware_options():
    policy = CorsPolicy(
        origins=("http://localhost:3000", "http://localhost:3001"),
        allow_any_header=True,
        allow_any_method=True,
        allow_credentials=True,
    )

    assert policy.middleware_options() == {
        "allow_origins": ["http://localhost:3000", "http://localhost:3001"],
        "allow_methods": ["*"],
        "allow_headers": ["*"],
        "allow_credentials": True,
        "expose_headers": [],
        "max_age": 600,
    }


class TestCorsOptions:
    def test_policies_are_looked_up_by_name(self):
        options = CorsOptions()
        policy = CorsPolicy(origins=("http://localhost:3000",))
        options.add_policy("PermitirFrontend", policy)

        assert options.get_policy("PermitirFrontend") is policy

    def test_duplicate_name(self):
        options = CorsOptions()
        options.add_policy("PermitirFrontend", CorsPolicy())

        with pytest.raises(ValueError):
            options.add_policy("PermitirFrontend", CorsPolicy())

    def test_unknown_name(self):
        with pytest.raises(CorsPolicyNotFoundError) as exc_info:
            CorsOptions().get_policy("PermitirFrontend")

        assert isinstance(exc_info.value, KeyError)
        assert isinstance(exc_info.value, StartupError)
        assert str(exc_info.value) == "Política CORS no registrada: PermitirFrontend"

    def test_frozen_options_reject_new_policies(self):
        options = CorsOptions()
        options.add_policy("PermitirFrontend", CorsPolicy())
        options.freeze()

        with pytest.raises(CorsOptionsFrozenError):
            options.add_policy("OtraPolitica", CorsPolicy())
        assert options.frozen is True
        assert list(options.policies) == ["PermitirFrontend"]

    def test_policies_view_is_read_only(self):
        options = CorsOptions()
        options.add_policy("PermitirFrontend", CorsPolicy())

        with pytest.raises(TypeError):
            options.policies["OtraPolitica"] = CorsPolicy()
        with pytest.raises(TypeError):
            del options.policies["PermitirFrontend"]
