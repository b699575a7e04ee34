from fastapi import APIRouter, Depends

from credential_gate.security import CredentialGate, require_credentials


def build_router(gate: CredentialGate) -> APIRouter:
    router = APIRouter(
        prefix="/protected",
        tags=["Protected"],
    )

    @router.get("/whoami")
    async def whoami(username: str = Depends(require_credentials(gate))):
        return {"username": username}

    return router
