"""
Vault API Client - Main facade for all API operations.

Each client instance owns its own session, so several Vaults (or
several users) can be driven from one process.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..config import VaultConfig
from ._http import HTTPClient, VaultSession
from .binders import BindersAPI, NodeRef
from .documents import DocumentsAPI, FileArg
from .objects import VaultObjectsAPI
from .relationships import DocumentRef, RelationshipsAPI


class VaultClient:
    """
    Client for the Veeva Vault REST API.

    Provides both:
    - Domain-specific sub-clients (client.documents, client.binders, ...)
    - Flat methods (client.get_document(), client.set_binder_documents(), ...)

    Usage:
        with VaultClient(config) as client:
            client.authenticate(config.credentials())
            nodes = client.get_binder_documents(42)
            client.set_binder_documents(42, [101, 102, 103])
    """

    def __init__(
        self,
        config: Optional[VaultConfig] = None,
        logger: Optional[logging.Logger] = None,
        verbose: Optional[bool] = None,
    ):
        """
        Initialize the API client.

        Args:
            config: Optional configuration. Loaded from the default
                credentials file if not provided.
            logger: Sink for call traces and error lists.
            verbose: Trace every successful call. Defaults to config.verbose.
        """
        self._http = HTTPClient(config, logger=logger, verbose=verbose)

        self.objects = VaultObjectsAPI(self._http)
        self.documents = DocumentsAPI(self._http)
        self.binders = BindersAPI(self._http)
        self.relationships = RelationshipsAPI(self._http)

    @property
    def config(self) -> VaultConfig:
        """Get the configuration."""
        return self._http.config

    @property
    def session(self) -> Optional[VaultSession]:
        """Get the authenticated session, if any."""
        return self._http.vault_session

    def authenticate(self, credentials: Optional[Mapping[str, str]] = None) -> VaultSession:
        """
        Authenticate and store the session on this client.

        Args:
            credentials: ``{host, username, password}``. Taken from the
                configuration when omitted.
        """
        if credentials is None:
            credentials = self.config.credentials()
        return self._http.authenticate(credentials)

    # ========== Vault Objects ==========

    def get_vault_objects(self, object_type: str) -> List[Dict[str, Any]]:
        """Get all records of a Vault object type."""
        return self.objects.list(object_type)

    def get_products(self) -> List[Dict[str, Any]]:
        return self.objects.products()

    def get_countries(self) -> List[Dict[str, Any]]:
        return self.objects.countries()

    # ========== Binders ==========

    def get_binders(self) -> List[Dict[str, Any]]:
        """Get every binder."""
        return self.binders.list()

    def get_binder(self, binder_id: Any) -> Dict[str, Any]:
        """Get a binder with its nodes."""
        return self.binders.get(binder_id)

    def create_binder(self, binder_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a binder and return it."""
        return self.binders.create(binder_data)

    def update_binder(self, binder_id: Any, binder_data: Dict[str, Any]) -> None:
        self.binders.update(binder_id, binder_data)

    def delete_binder(self, binder_id: Any) -> None:
        self.binders.delete(binder_id)

    def get_binder_documents(self, binder_id: Any) -> List[Dict[str, Any]]:
        """Get ``{node_id, document_id}`` pairs of a binder, in order."""
        return self.binders.get_documents(binder_id)

    def set_binder_documents(
        self, binder_id: Any, document_ids: Sequence[Any]
    ) -> List[Dict[str, Any]]:
        """Add documents to a binder in the given order."""
        return self.binders.set_documents(binder_id, document_ids)

    def remove_binder_documents(
        self, binder_id: Any, documents: Sequence[NodeRef]
    ) -> List[Any]:
        """Remove documents (by node) from a binder."""
        return self.binders.remove_documents(binder_id, documents)

    # ========== Documents ==========

    def get_document(self, document_id: Any) -> Dict[str, Any]:
        """Get a document's fields."""
        return self.documents.get(document_id)

    def create_document(
        self, document_data: Dict[str, Any], file: Optional[FileArg] = None
    ) -> Any:
        """Create a document with its file; returns the new id."""
        return self.documents.create(document_data, file)

    def update_document(self, document_id: Any, document_data: Dict[str, Any]) -> Any:
        """Update a document's fields."""
        return self.documents.update(document_id, document_data)

    def update_document_file(self, document_id: Any, file: FileArg) -> None:
        """Replace a document's file (lock, upload, unlock)."""
        self.documents.update_file(document_id, file)

    def delete_document(self, document_id: Any) -> None:
        self.documents.delete(document_id)

    def lock_document(self, document_id: Any) -> None:
        self.documents.lock(document_id)

    def unlock_document(self, document_id: Any) -> None:
        self.documents.unlock(document_id)

    # ========== Relationships ==========

    def get_document_relationships(self, document: DocumentRef) -> List[Dict[str, Any]]:
        """Get the relationships of a document version."""
        return self.relationships.list(document)

    def create_document_relationship(
        self, document: DocumentRef, shared_document_id: Any
    ) -> Any:
        """Make ``shared_document_id`` a shared resource of ``document``."""
        return self.relationships.create(document, shared_document_id)

    def remove_document_relationship(self, document: DocumentRef, relationship_id: Any) -> None:
        self.relationships.remove(document, relationship_id)

    # ========== Context Manager ==========

    def close(self) -> None:
        """Close the HTTP session."""
        self._http.close()

    def __enter__(self) -> "VaultClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def get_client(config: Optional[VaultConfig] = None, authenticate: bool = True) -> VaultClient:
    """
    Get an API client instance.

    Args:
        config: Optional configuration
        authenticate: Authenticate with the configured credentials

    Returns:
        VaultClient instance
    """
    client = VaultClient(config)
    if authenticate:
        client.authenticate()
    return client
