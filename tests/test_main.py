import pytest

from credential_gate.config import Settings
from credential_gate.main import create_app
from credential_gate.security import GateConfigurationError
from tests.conftest import basic


def test_health_is_not_gated(app_client):
    response = app_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service_name": "Test Gate"}


def test_favicon_is_not_gated(app_client):
    assert app_client.get("/favicon.ico").status_code == 204


def test_root_requires_credentials(app_client):
    response = app_client.get("/")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == 'Basic realm="Protected"'
    assert response.text == "Unauthorized"


def test_root_greets_authenticated_user(app_client):
    response = app_client.get("/", headers={"Authorization": "Basic YWRtaW46c2VjcmV0"})
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to Test Gate! All systems operational."}


def test_whoami_is_checked_by_the_route_dependency(app_client):
    response = app_client.get("/protected/whoami", headers={"Authorization": basic("admin:secret")})
    assert response.json() == {"username": "admin"}

    for headers in ({}, {"Authorization": basic("admin:x")}, {"Authorization": "Bearer abcdef"}):
        rejected = app_client.get("/protected/whoami", headers=headers)
        assert rejected.status_code == 401
        assert rejected.headers["www-authenticate"] == 'Basic realm="Protected"'
        assert rejected.headers["x-content-type-options"] == "nosniff"
        assert rejected.text == "Unauthorized"


def test_realm_comes_from_settings(settings):
    settings = settings.model_copy(update={"GATE_REALM": "Staff"})
    client_app = create_app(settings)
    assert client_app.state.gate.config.realm_message == "Staff"


@pytest.mark.parametrize("username,password", [("", "secret"), ("admin", " ")])
def test_blank_credentials_abort_startup(username, password):
    settings = Settings(GATE_USERNAME=username, GATE_PASSWORD=password)
    with pytest.raises(GateConfigurationError):
        create_app(settings)


def test_log_level_is_normalized():
    assert Settings(LOG_LEVEL=" debug ", GATE_USERNAME="a", GATE_PASSWORD="b").LOG_LEVEL == "DEBUG"
    assert Settings(LOG_LEVEL="", GATE_USERNAME="a", GATE_PASSWORD="b").LOG_LEVEL == "INFO"
