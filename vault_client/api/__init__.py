"""
Vault API Client Package.

Structure:
    - client.py: Main VaultClient facade
    - _http.py: Session, request template and response handling
    - _result.py: Response classification
    - objects.py: Vault object listing
    - documents.py: Documents and the file lock protocol
    - binders.py: Binders and ordered binder membership
    - relationships.py: Document version relationships

Usage:
    from vault_client.api import VaultClient

    client = VaultClient(config)
    client.authenticate()
    binder = client.binders.get(42)
"""

from .client import VaultClient, get_client
from ._http import HTTPClient, VaultSession, normalize_host
from .objects import VaultObjectsAPI
from .documents import DocumentsAPI
from .binders import BindersAPI
from .relationships import RelationshipsAPI, get_relationships_path

__all__ = [
    # Main client
    "VaultClient",
    "get_client",
    # HTTP layer
    "HTTPClient",
    "VaultSession",
    "normalize_host",
    # Domain APIs
    "VaultObjectsAPI",
    "DocumentsAPI",
    "BindersAPI",
    "RelationshipsAPI",
    "get_relationships_path",
]
