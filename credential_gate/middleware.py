# credential_gate/middleware.py
from typing import TYPE_CHECKING, Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

if TYPE_CHECKING:
    from credential_gate.security import CredentialGate


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """
    Puts a CredentialGate in front of every request reaching the wrapped app.
    Paths listed in exempt_paths (exact match) are forwarded without a check.
    """

    def __init__(self, app: ASGIApp, gate: "CredentialGate", exempt_paths: Iterable[str] = ()):
        super().__init__(app)
        self.gate = gate
        self.exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)
        return await self.gate.handle(request, call_next)
