from .session import (
    AzureCliSession,
    AzureSession,
    ClientSecretSession,
    create_session,
    ensure_authenticated,
)

__all__ = [
    "AzureCliSession",
    "AzureSession",
    "ClientSecretSession",
    "create_session",
    "ensure_authenticated",
]
