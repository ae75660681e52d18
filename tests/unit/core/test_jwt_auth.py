"""JWT authentication tests"""

import time
from datetime import timedelta

import jwt
import pytest

from rym_lubricentro_api.core.exceptions import UnauthorizedException
from rym_lubricentro_api.core.security import JWTAuth, JWTSecretManager


@pytest.fixture
def jwt_auth(make_settings):
    return JWTAuth(make_settings())


def test_token_round_trip(jwt_auth):
    token = jwt_auth.create_access_token("42", "juan.perez", roles=["Mecanico"])
    token_data = jwt_auth.verify_token(token)

    assert token_data.user_id == "42"
    assert token_data.username == "juan.perez"
    assert token_data.roles == ["Mecanico"]


def test_default_lifetime_is_one_hour(jwt_auth):
    token = jwt_auth.create_access_token("42", "juan.perez")
    claims = jwt.decode(token, options={"verify_signature": False})

    assert abs(claims["exp"] - (time.time() + 3600)) < 10


def test_expired_token(jwt_auth):
    token = jwt_auth.create_access_token("42", "juan.perez", expires_delta=timedelta(seconds=-5))

    with pytest.raises(UnauthorizedException) as exc_info:
        jwt_auth.verify_token(token)
    assert exc_info.value.detail == "El token ha expirado"


def test_tampered_token(jwt_auth):
    token = jwt_auth.create_access_token("42", "juan.perez")

    with pytest.raises(UnauthorizedException):
        jwt_auth.verify_token(token[:-4] + "AAAA")


def test_token_signed_with_another_secret(jwt_auth, make_settings):
    other = JWTAuth(make_settings(JWT_SECRET_KEY="otra-clave-de-pruebas-0123456789abcdef"))

    with pytest.raises(UnauthorizedException):
        jwt_auth.verify_token(other.create_access_token("42", "juan.perez"))


def test_single_role_claim_is_accepted(jwt_auth, make_settings):
    settings = make_settings()
    token = jwt.encode(
        {"sub": "7", "username": "ana", "roles": "Administrador", "exp": 4102444800},
        settings.JWT_SECRET_KEY,
        algorithm="HS256",
    )

    assert jwt_auth.verify_token(token).roles == ["Administrador"]


def test_username_is_required(jwt_auth, make_settings):
    token = jwt.encode({"sub": "7", "exp": 4102444800}, make_settings().JWT_SECRET_KEY, algorithm="HS256")

    with pytest.raises(UnauthorizedException):
        jwt_auth.verify_token(token)


class TestIssuerAndAudience:
    @pytest.fixture
    def issuing_auth(self, make_settings):
        return JWTAuth(make_settings(JWT_ISSUER="rym-lubricentro", JWT_AUDIENCE="rym-frontend"))

    def test_matching_claims(self, issuing_auth):
        token = issuing_auth.create_access_token("42", "juan.perez")
        assert issuing_auth.verify_token(token).user_id == "42"

    def test_issuer_mismatch(self, issuing_auth, make_settings):
        other = JWTAuth(make_settings(JWT_ISSUER="otro-emisor", JWT_AUDIENCE="rym-frontend"))

        with pytest.raises(UnauthorizedException):
            issuing_auth.verify_token(other.create_access_token("42", "juan.perez"))

    def test_audience_mismatch(self, issuing_auth, make_settings):
        other = JWTAuth(make_settings(JWT_ISSUER="rym-lubricentro", JWT_AUDIENCE="otra-app"))

        with pytest.raises(UnauthorizedException):
            issuing_auth.verify_token(other.create_access_token("42", "juan.perez"))


class TestJWTSecretManager:
    def test_configured_secret_wins(self, make_settings):
        assert JWTSecretManager(make_settings(JWT_SECRET_KEY="clave-configurada")).get_secret() == "clave-configurada"

    def test_generated_secret_is_persisted(self, make_settings, tmp_path):
        secret_file = tmp_path / "claves" / ".jwt_secret"
        settings = make_settings(JWT_SECRET_KEY="", JWT_SECRET_FILE=str(secret_file))

        secret = JWTSecretManager(settings).get_secret()

        assert len(secret) == 128
        assert secret_file.read_text() == secret
        assert JWTSecretManager(settings).get_secret() == secret

    def test_secret_is_read_from_file(self, make_settings, tmp_path):
        secret_file = tmp_path / ".jwt_secret"
        secret_file.write_text("clave-desde-archivo\n")

        settings = make_settings(JWT_SECRET_KEY="", JWT_SECRET_FILE=str(secret_file))

        assert JWTSecretManager(settings).get_secret() == "clave-desde-archivo"
