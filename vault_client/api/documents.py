"""
Documents API - document CRUD and the lock/update/unlock file protocol.
"""

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Union

from ._http import HTTPClient
from ._result import format_args
from ..exceptions import APIError, ProtocolStateError

logger = logging.getLogger(__name__)

FileArg = Union[str, Path, BinaryIO]


def _open_file(stack: ExitStack, file: FileArg) -> Any:
    """Turn a path or open binary file into a requests ``files`` entry."""
    if isinstance(file, (str, Path)):
        path = Path(file)
        return (path.name, stack.enter_context(open(path, "rb")))
    name = getattr(file, "name", None)
    if isinstance(name, str):
        return (Path(name).name, file)
    return file


class DocumentsAPI:
    """
    API for Vault documents.

    Handles:
    - Document CRUD
    - Lock (check out) and unlock (check in)
    - Replacing the file content of an existing document
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Documents API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(self) -> List[Dict[str, Any]]:
        """Get every document (binders included) visible to the session."""
        result = self._http.request("GET", "objects/documents", call="get_documents")
        return [entry["document"] for entry in result.get("documents", [])]

    def get(self, document_id: Any) -> Dict[str, Any]:
        """
        Retrieve a document.

        Args:
            document_id: Vault document id

        Returns:
            Field names and values of the document
        """
        result = self._http.request(
            "GET",
            f"objects/documents/{document_id}",
            call="get_document",
            args=format_args(document_id=document_id),
        )
        return result.get("document", {})

    def create(
        self,
        document_data: Dict[str, Any],
        file: Optional[FileArg] = None,
    ) -> Any:
        """
        Create a new document, uploading its file in the same request.

        Args:
            document_data: Field values for the new document. A ``file``
                key is used as the upload when ``file`` is not given.
            file: Path or open binary file for the document content

        Returns:
            Vault id of the created document
        """
        fields = dict(document_data)
        upload = file if file is not None else fields.pop("file", None)
        args = format_args(name__v=fields.get("name__v"))

        with ExitStack() as stack:
            files = {"file": _open_file(stack, upload)} if upload is not None else None
            result = self._http.request(
                "POST",
                "objects/documents",
                call="create_document",
                args=args,
                form=fields,
                files=files,
            )
        return result.get("id")

    def update(self, document_id: Any, document_data: Dict[str, Any]) -> Any:
        """
        Update the field values of a document.

        Args:
            document_id: Vault document id
            document_data: Fields and values to change

        Returns:
            Id of the updated document
        """
        result = self._http.request(
            "PUT",
            f"objects/documents/{document_id}",
            call="update_document",
            args=format_args(
                document_id=document_id, name__v=document_data.get("name__v")
            ),
            form=document_data,
        )
        return result.get("id", document_id)

    def delete(self, document_id: Any) -> None:
        """
        Delete a document.

        Documents assigned to a binder cannot be deleted.
        """
        self._http.request(
            "DELETE",
            f"objects/documents/{document_id}",
            call="delete_document",
            args=format_args(document_id=document_id),
        )

    def lock(self, document_id: Any) -> None:
        """Lock (check out) a document."""
        self._http.request(
            "POST",
            f"objects/documents/{document_id}/lock",
            call="lock_document",
            args=format_args(document_id=document_id),
        )

    def unlock(self, document_id: Any) -> None:
        """Unlock (check in) a document."""
        self._http.request(
            "DELETE",
            f"objects/documents/{document_id}/lock",
            call="unlock_document",
            args=format_args(document_id=document_id),
        )

    def _upload_file(self, document_id: Any, upload: Any) -> None:
        self._http.request(
            "POST",
            f"objects/documents/{document_id}",
            call="update_document_file",
            args=format_args(document_id=document_id),
            files={"file": upload},
        )

    def update_file(self, document_id: Any, file: FileArg) -> None:
        """
        Replace the file content of an existing document.

        The Vault refuses new content on an unlocked document, so this
        locks the document, uploads the file and unlocks it again. If the
        upload fails the unlock is still attempted.

        Locking a document immediately after creating it is known to fail;
        check the document state before calling this on a new document.

        Args:
            document_id: Vault document id
            file: Path or open binary file with the new content

        Raises:
            ProtocolStateError: If any step fails. ``locked`` tells whether
                the document may have been left locked.
            OSError: If the file cannot be opened; raised before locking.
        """
        with ExitStack() as stack:
            # The file is opened before the document is locked
            upload = _open_file(stack, file)

            try:
                self.lock(document_id)
            except APIError as e:
                raise ProtocolStateError(e, document_id, step="lock", locked=False) from e

            try:
                self._upload_file(document_id, upload)
            except APIError as upload_error:
                locked = not self._unlock_after_failure(document_id)
                raise ProtocolStateError(
                    upload_error, document_id, step="update", locked=locked
                ) from upload_error
            except Exception:
                self._unlock_after_failure(document_id)
                raise

        try:
            self.unlock(document_id)
        except APIError as e:
            raise ProtocolStateError(e, document_id, step="unlock", locked=True) from e

    def _unlock_after_failure(self, document_id: Any) -> bool:
        """Attempt the cleanup unlock; return whether it succeeded."""
        try:
            self.unlock(document_id)
        except APIError as e:
            logger.error(
                "Document %s may still be locked: unlock after failed upload "
                "also failed: %s", document_id, e
            )
            return False
        return True
