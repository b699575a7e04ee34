import base64

import pytest
from fastapi.testclient import TestClient
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from credential_gate.config import Settings
from credential_gate.main import create_app
from credential_gate.security import CredentialGate, with_user_pass

UNAUTHORIZED_BODY = "Unauthorized"
DEFAULT_CHALLENGE = 'Basic realm="Protected"'


def basic(payload: str) -> str:
    return "Basic " + base64.b64encode(payload.encode("utf-8")).decode("ascii")


async def downstream(request):
    return PlainTextResponse("downstream reached", status_code=202, headers={"X-Downstream": "yes"})


@pytest.fixture
def gate() -> CredentialGate:
    return CredentialGate(with_user_pass("admin", "secret"))


@pytest.fixture
def downstream_app() -> Starlette:
    return Starlette(routes=[Route("/", downstream), Route("/health", downstream)])


@pytest.fixture
def gated_client(gate, downstream_app) -> TestClient:
    return TestClient(gate.wrap(downstream_app))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SERVICE_NAME="Test Gate",
        LOG_LEVEL="DEBUG",
        GATE_USERNAME="admin",
        GATE_PASSWORD="secret",
        GATE_REALM="Protected",
        GATE_REJECTION_MESSAGE="",
    )


@pytest.fixture
def app_client(settings):
    with TestClient(create_app(settings)) as client:
        yield client
