"""
Vault Client - Python client for the Veeva Vault REST API.

Authenticate once, then work with documents, binders and
document relationships through a session-scoped client.
"""

__version__ = "0.2.0"
__prog_name__ = "vault"

from .api import VaultClient, get_client
from .exceptions import (
    VaultError,
    ConfigurationError,
    APIError,
    AuthenticationError,
    RemoteOperationError,
    SequencePartialFailureError,
    ProtocolStateError,
)

__all__ = [
    "__version__",
    "VaultClient",
    "get_client",
    "VaultError",
    "ConfigurationError",
    "APIError",
    "AuthenticationError",
    "RemoteOperationError",
    "SequencePartialFailureError",
    "ProtocolStateError",
]
