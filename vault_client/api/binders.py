"""
Binders API - binder CRUD and ordered document membership.

The Vault only accepts one membership change per call and encodes
position as an explicit ``order__v``, so membership lists are applied
strictly one call at a time, in the caller's order.
"""

import logging
from typing import Any, Dict, List, Mapping, Sequence, Union

from ._http import HTTPClient
from ._result import format_args
from ..exceptions import APIError, RemoteOperationError, SequencePartialFailureError

logger = logging.getLogger(__name__)

NodeRef = Union[str, int, Mapping[str, Any]]


def _node_id(document: NodeRef) -> Any:
    """Normalize a bare node id or a ``{node_id, document_id}`` mapping."""
    if isinstance(document, Mapping):
        if document.get("node_id") is None:
            raise ValueError(f"Binder document entry has no node_id: {dict(document)!r}")
        return document["node_id"]
    return document


class BindersAPI:
    """
    API for Vault binders.

    Handles:
    - Binder CRUD
    - Reading binder membership
    - Ordered add/remove of binder documents
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Binders API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(self) -> List[Dict[str, Any]]:
        """Get every binder, as document field mappings."""
        result = self._http.request("GET", "objects/documents", call="get_binders")
        binders = []
        for entry in result.get("documents", []):
            document = entry.get("document", {})
            if document.get("binder__v") is True:
                binders.append(document)
        return binders

    def get(self, binder_id: Any) -> Dict[str, Any]:
        """
        Get a binder.

        Returns:
            The full response: ``document`` fields, ``versions`` and
            ``binder`` with its ``nodes``
        """
        return self._http.request(
            "GET",
            f"objects/binders/{binder_id}",
            call="get_binder",
            args=format_args(binder_id=binder_id),
        )

    def create(self, binder_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a new binder.

        Args:
            binder_data: Binder field values (name__v, title__v, type__v,
                lifecycle__v, ...)

        Returns:
            The created binder, as returned by :meth:`get`
        """
        args = format_args(title__v=binder_data.get("title__v"))
        result = self._http.request(
            "POST",
            "objects/binders",
            call="create_binder",
            args=args,
            form=binder_data,
        )
        if result.get("id") is None:
            raise RemoteOperationError(
                "create_binder",
                "Binder created but no id in response",
                args,
                response_data=result,
            )
        return self.get(result["id"])

    def update(self, binder_id: Any, binder_data: Dict[str, Any]) -> None:
        """Update the field values of a binder."""
        self._http.request(
            "PUT",
            f"objects/binders/{binder_id}",
            call="update_binder",
            args=format_args(binder_id=binder_id, name__v=binder_data.get("name__v")),
            form=binder_data,
        )

    def delete(self, binder_id: Any) -> None:
        """Delete a binder."""
        self._http.request(
            "DELETE",
            f"objects/binders/{binder_id}",
            call="delete_binder",
            args=format_args(binder_id=binder_id),
        )

    def get_documents(self, binder_id: Any) -> List[Dict[str, Any]]:
        """
        Get the documents in a binder, in binder order.

        Returns:
            ``[{"node_id": ..., "document_id": ...}, ...]``. The node id is
            what :meth:`remove_documents` needs.
        """
        binder = self.get(binder_id)
        nodes = (binder.get("binder") or {}).get("nodes") or []
        return [
            {
                "node_id": node["properties"]["id"],
                "document_id": node["properties"]["document_id__v"],
            }
            for node in nodes
        ]

    def set_documents(
        self,
        binder_id: Any,
        document_ids: Sequence[Any],
    ) -> List[Dict[str, Any]]:
        """
        Add documents to a binder in the given order.

        Each document is posted with ``order__v`` 1, 2, 3, ... and the next
        call is only made once the previous one succeeded.

        Args:
            binder_id: Binder to add documents to
            document_ids: Document ids, in the order they should appear

        Returns:
            The applied ``{"document_id__v", "order__v"}`` form values

        Raises:
            SequencePartialFailureError: On the first rejected call. Earlier
                assignments stay applied; later ones are never sent.
        """
        pending = list(document_ids)
        completed: List[Dict[str, Any]] = []

        while pending:
            document_id = pending.pop(0)
            form = {"document_id__v": document_id, "order__v": len(completed) + 1}
            try:
                self._http.request(
                    "POST",
                    f"objects/binders/{binder_id}/documents",
                    call="set_binder_documents",
                    args=format_args(
                        binder_id=binder_id,
                        document_id=document_id,
                        index=form["order__v"],
                    ),
                    form=form,
                )
            except APIError as e:
                raise SequencePartialFailureError(
                    e, completed=completed, failed=document_id, pending=pending
                ) from e
            completed.append(form)

        return completed

    def remove_documents(
        self,
        binder_id: Any,
        documents: Sequence[NodeRef],
    ) -> List[Any]:
        """
        Remove documents from a binder, one node at a time.

        The documents themselves are not deleted.

        Args:
            binder_id: Binder to remove documents from
            documents: Node ids, or ``{"node_id", "document_id"}`` mappings
                as returned by :meth:`get_documents`

        Returns:
            The removed node ids, in order

        Raises:
            ValueError: If a mapping has no ``node_id``; raised before any call.
            SequencePartialFailureError: On the first rejected call.
        """
        pending = [_node_id(document) for document in documents]
        completed: List[Any] = []

        while pending:
            node_id = pending.pop(0)
            try:
                self._http.request(
                    "DELETE",
                    f"objects/binders/{binder_id}/documents/{node_id}",
                    call="remove_binder_documents",
                    args=format_args(binder_id=binder_id, node_id=node_id),
                )
            except APIError as e:
                raise SequencePartialFailureError(
                    e, completed=completed, failed=node_id, pending=pending
                ) from e
            completed.append(node_id)

        return completed
