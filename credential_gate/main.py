# credential_gate/main.py

from contextlib import asynccontextmanager
from typing import Optional
import sys

from fastapi import FastAPI
from fastapi.responses import Response
from loguru import logger

from credential_gate.config import Settings, get_settings
from credential_gate.models import GateConfig
from credential_gate.middleware import BasicAuthMiddleware
from credential_gate.routers import protected_router
from credential_gate.security import (
    CredentialGate, GateConfigurationError, install_gate, build_config
)

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# /protected routes check credentials through the route dependency instead
EXEMPT_PATHS = ("/health", "/favicon.ico", "/protected/whoami")


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)


def build_gate(settings: Settings) -> CredentialGate:
    try:
        config: GateConfig = build_config(
            username=settings.GATE_USERNAME,
            password=settings.GATE_PASSWORD,
            realm_message=settings.GATE_REALM,
            rejection_message=settings.GATE_REJECTION_MESSAGE,
        )
        return CredentialGate(config)
    except GateConfigurationError as e:
        logger.critical(f"{settings.SERVICE_NAME} cannot start, gate misconfigured: {e}")
        raise


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    # Raises before any route is served if credentials are blank
    gate = build_gate(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.SERVICE_NAME} startup complete, realm '{gate.config.realm_message}'.")
        yield
        logger.info(f"{settings.SERVICE_NAME} shutdown complete.")

    app = FastAPI(
        title=settings.SERVICE_NAME,
        description="HTTP Basic credential gate in front of protected routes.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.gate = gate
    app.add_middleware(BasicAuthMiddleware, gate=gate, exempt_paths=EXEMPT_PATHS)
    install_gate(app)

    @app.get('/favicon.ico', include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    @app.get("/", tags=["Root"])
    async def read_root():
        return {"message": f"Welcome to {settings.SERVICE_NAME}! All systems operational."}

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "ok", "service_name": settings.SERVICE_NAME}

    app.include_router(protected_router.build_router(gate))
    return app


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    logger.info(f"Starting {settings.SERVICE_NAME} locally on host 0.0.0.0 port {settings.SERVICE_PORT}")
    uvicorn.run(
        "credential_gate.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
