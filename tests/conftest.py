import pytest
from fastapi.testclient import TestClient

from rym_lubricentro_api.bootstrap import create_app
from rym_lubricentro_api.core.config import Settings
from rym_lubricentro_api.core.security import JWTAuth

TEST_SECRET = "clave-de-pruebas-rym-lubricentro-0123456789abcdef"


@pytest.fixture
def make_settings(tmp_path):
    """Settings isolated from the environment and the project .env"""

    def _make(**overrides) -> Settings:
        values = {
            "ENVIRONMENT": "Production",
            "LOG_TO_FILE": False,
            "LOG_LEVEL": "WARNING",
            "JWT_SECRET_KEY": TEST_SECRET,
            "BASE_DIR": str(tmp_path),
            "STATIC_FILES_DIR": str(tmp_path / "wwwroot"),
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def dev_app(make_settings):
    return create_app(make_settings(ENVIRONMENT="Development"))


@pytest.fixture
def prod_app(make_settings):
    return create_app(make_settings(ENVIRONMENT="Production"))


@pytest.fixture
def dev_client(dev_app):
    return TestClient(dev_app)


@pytest.fixture
def prod_client(prod_app):
    return TestClient(prod_app)


@pytest.fixture
def make_token(prod_app):
    jwt_auth = prod_app.state.services.get_required_service(JWTAuth)

    def _make(user_id="42", username="juan.perez", roles=None, **kwargs) -> str:
        return jwt_auth.create_access_token(user_id, username, roles=roles, **kwargs)

    return _make
