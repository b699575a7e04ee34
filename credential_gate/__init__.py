from credential_gate.middleware import BasicAuthMiddleware
from credential_gate.models import (
    Allow, Credentials, Decision, DEFAULT_REALM_MESSAGE, DEFAULT_REJECTION_MESSAGE, GateConfig, Reject
)
from credential_gate.security import (
    CredentialGate,
    CredentialsRejected,
    GateConfigurationError,
    build_config,
    install_gate,
    parse_credentials,
    require_credentials,
    with_user_pass,
    with_user_pass_message,
)

__all__ = [
    "Allow",
    "BasicAuthMiddleware",
    "CredentialGate",
    "Credentials",
    "CredentialsRejected",
    "DEFAULT_REALM_MESSAGE",
    "DEFAULT_REJECTION_MESSAGE",
    "Decision",
    "GateConfig",
    "GateConfigurationError",
    "Reject",
    "build_config",
    "install_gate",
    "parse_credentials",
    "require_credentials",
    "with_user_pass",
    "with_user_pass_message",
]
