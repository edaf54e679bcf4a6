"""
Relationships API - relationships between specific document versions.
"""

from typing import Any, Dict, List, Mapping, Union

from ._http import HTTPClient
from ._result import format_args

SHARED_RESOURCE = "related_shared_resource__v"

DocumentRef = Union[Mapping[str, Any], Any]


def _version_fields(document: DocumentRef):
    if isinstance(document, Mapping):
        return document["id"], document["version_major"], document["version_minor"]
    return document.id, document.version_major, document.version_minor


def get_relationships_path(document: DocumentRef) -> str:
    """
    Build the relationships path of a document version.

    Args:
        document: Mapping (or object) with ``id``, ``version_major`` and
            ``version_minor``

    Returns:
        e.g. ``"objects/documents/123/versions/0/15/relationships"``
    """
    document_id, major, minor = _version_fields(document)
    return "/".join([
        "objects", "documents", str(document_id),
        "versions", str(major), str(minor),
        "relationships",
    ])


class RelationshipsAPI:
    """API for document-to-document relationships."""

    def __init__(self, http: HTTPClient):
        self._http = http

    def list(self, document: DocumentRef) -> List[Dict[str, Any]]:
        """
        Get the relationships of a document version.

        Returns:
            ``[{"relationship": {"id", "source_doc_id__v",
            "target_doc_id__v", "relationship_type__v"}}, ...]``
        """
        document_id, major, minor = _version_fields(document)
        result = self._http.request(
            "GET",
            get_relationships_path(document),
            call="get_document_relationships",
            args=format_args(
                document_id=document_id, version_major=major, version_minor=minor
            ),
        )
        return result.get("relationships", [])

    def create(
        self,
        document: DocumentRef,
        target_document_id: Any,
        relationship_type: str = SHARED_RESOURCE,
    ) -> Any:
        """
        Relate a document version to another document.

        By default the target becomes a shared resource of ``document``.

        Returns:
            Id of the new relationship, when the Vault returns one
        """
        document_id, _, _ = _version_fields(document)
        result = self._http.request(
            "POST",
            get_relationships_path(document),
            call="create_document_relationship",
            args=format_args(
                document_id=document_id, shared_document_id=target_document_id
            ),
            form={
                "relationship_type__v": relationship_type,
                "target_doc_id__v": target_document_id,
            },
        )
        return result.get("id")

    def remove(self, document: DocumentRef, relationship_id: Any) -> None:
        """Remove a relationship from a document version."""
        document_id, major, minor = _version_fields(document)
        self._http.request(
            "DELETE",
            f"{get_relationships_path(document)}/{relationship_id}",
            call="remove_document_relationship",
            args=format_args(
                document_id=document_id,
                version_major=major,
                version_minor=minor,
                relationship_id=relationship_id,
            ),
        )
