# credential_gate/security.py
import base64
import binascii
import re
import secrets
from typing import Awaitable, Callable, Optional

from fastapi import Request, status
from fastapi.responses import PlainTextResponse, Response
from loguru import logger
from pydantic import ValidationError

from credential_gate.middleware import BasicAuthMiddleware
from credential_gate.models import (
    Allow, Credentials, Decision, DEFAULT_REJECTION_MESSAGE, GateConfig, HEADER_WHITESPACE, Reject, is_blank
)

AUTHORIZATION_HEADER = "Authorization"
BASIC_SCHEME = "Basic"

# Canonical standard-alphabet base64: whole 4-char groups, padding only at the very end
BASE64_TOKEN = re.compile(r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?")

CallNext = Callable[[Request], Awaitable[Response]]


class GateConfigurationError(ValueError):
    pass


def build_config(**values) -> GateConfig:
    try:
        return GateConfig(**values)
    except ValidationError as e:
        raise GateConfigurationError(f"auth: invalid gate configuration: {e.errors()[0]['msg']}") from e


def with_user_pass(username: str, password: str) -> GateConfig:
    """Config with the given credentials, the default realm and the default rejection message."""
    return build_config(username=username, password=password)


def with_user_pass_message(username: str, password: str, message: str) -> GateConfig:
    """Like with_user_pass, but with a custom realm message shown in the client prompt."""
    return build_config(username=username, password=password, realm_message=message)


def parse_credentials(authorization: Optional[str]) -> Optional[Credentials]:
    """
    Extracts the user/password pair from an Authorization header value.
    Returns None when the header is missing or malformed in any way.
    """
    value = (authorization or "").strip(HEADER_WHITESPACE)
    if not value:
        logger.trace("Credential gate: Authorization header missing or empty.")
        return None

    parts = value.split(" ")
    if len(parts) != 2 or parts[0] != BASIC_SCHEME:
        logger.trace("Credential gate: Authorization header is not a single 'Basic <token>' pair.")
        return None

    if not BASE64_TOKEN.fullmatch(parts[1]):
        logger.trace("Credential gate: Basic token is not canonical base64.")
        return None

    try:
        payload = base64.b64decode(parts[1], validate=True)
    except (binascii.Error, ValueError):
        logger.trace("Credential gate: Basic token is not valid base64.")
        return None

    pair = payload.split(b":")
    if len(pair) != 2:
        logger.trace(f"Credential gate: decoded payload has {len(pair) - 1} colons, expected exactly one.")
        return None

    return Credentials(username=pair[0], password=pair[1])


class CredentialGate:
    def __init__(self, config: GateConfig):
        # model_construct skips GateConfig validation
        if is_blank(config.username) or is_blank(config.password):
            raise GateConfigurationError("auth: username and/or password are empty")
        self.config = config
        self._username = config.username.encode("utf-8")
        self._password = config.password.encode("utf-8")
        logger.info(f"Credential gate configured for realm '{config.realm_message}'.")

    def _reject(self) -> Reject:
        # Fresh per call, callers may mutate the headers dict
        return Reject(
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": self.config.challenge},
            # rejection_message is stored on the config but not emitted
            body=DEFAULT_REJECTION_MESSAGE,
        )

    @classmethod
    def from_credentials(cls, username: str, password: str, message: Optional[str] = None) -> "CredentialGate":
        if message is None:
            return cls(with_user_pass(username, password))
        return cls(with_user_pass_message(username, password, message))

    def decide(self, authorization: Optional[str]) -> Decision:
        credentials = parse_credentials(authorization)
        if credentials is None:
            return self._reject()

        # Both comparisons always run
        user_ok = secrets.compare_digest(credentials.username, self._username)
        password_ok = secrets.compare_digest(credentials.password, self._password)
        if not (user_ok and password_ok):
            logger.trace("Credential gate: supplied credentials do not match.")
            return self._reject()

        return Allow(username=self.config.username)

    def decide_request(self, request: Request) -> Decision:
        return self.decide(request.headers.get(AUTHORIZATION_HEADER))

    async def handle(self, request: Request, call_next: CallNext) -> Response:
        decision = self.decide_request(request)
        if isinstance(decision, Reject):
            return rejection_response(decision)
        return await call_next(request)

    def wrap(self, app, exempt_paths=()):
        """Adapts a downstream ASGI app into one that sits behind this gate."""
        return BasicAuthMiddleware(app, gate=self, exempt_paths=exempt_paths)


def rejection_response(decision: Reject) -> Response:
    response = PlainTextResponse(
        content=decision.body,
        status_code=decision.status_code,
        headers=decision.headers,
    )
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


class CredentialsRejected(Exception):
    def __init__(self, decision: Reject):
        super().__init__(decision.body)
        self.decision = decision


async def credentials_rejected_handler(request: Request, exc: CredentialsRejected) -> Response:
    return rejection_response(exc.decision)


def require_credentials(gate: CredentialGate):
    async def get_current_username(request: Request) -> str:
        decision = gate.decide_request(request)
        if isinstance(decision, Reject):
            raise CredentialsRejected(decision)
        return decision.username
    return get_current_username


def install_gate(app) -> None:
    app.add_exception_handler(CredentialsRejected, credentials_rejected_handler)
