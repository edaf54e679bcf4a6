"""
Exceptions raised by the Vault client.

Every failure is raised to the caller; nothing in this package retries
or swallows an error.
"""

from typing import Any, Dict, List, Optional


class VaultError(Exception):
    """Base exception for all Vault client errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ConfigurationError(VaultError):
    """Credentials or configuration could not be loaded."""


class APIError(VaultError):
    """
    A Vault API call failed.

    Carries the originating method name and a description of the
    identifying arguments, so the call can be reproduced by hand.
    """

    def __init__(
        self,
        method: str,
        message: str,
        args_description: str = "",
        response_data: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        self.method = method
        self.args_description = args_description
        self.reason = message
        self.response_data = response_data or {}
        self.status_code = status_code
        super().__init__(
            f"Error in vault.{method}({args_description}): {message}",
            details=details,
        )


class AuthenticationError(APIError):
    """Authentication failed or no session has been established."""


class RemoteOperationError(APIError):
    """The Vault reported a failure for a resource operation."""


class SequencePartialFailureError(RemoteOperationError):
    """
    A binder membership sequence stopped partway through.

    Items in ``completed`` were applied and are not rolled back;
    ``failed`` is the item whose call was rejected and ``pending``
    holds the items that were never sent.
    """

    def __init__(
        self,
        cause: APIError,
        completed: List[Any],
        failed: Any,
        pending: List[Any],
    ):
        self.completed = list(completed)
        self.failed = failed
        self.pending = list(pending)
        super().__init__(
            cause.method,
            f"{cause.reason} ({len(self.completed)} applied, {len(self.pending)} not attempted)",
            args_description=cause.args_description,
            response_data=cause.response_data,
            status_code=cause.status_code,
            details=cause.details,
        )


class ProtocolStateError(RemoteOperationError):
    """
    A step of the document lock protocol failed.

    ``locked`` is True when the document may have been left locked and
    needs manual attention.
    """

    def __init__(
        self,
        cause: APIError,
        document_id: Any,
        step: str,
        locked: bool,
    ):
        self.document_id = document_id
        self.step = step
        self.locked = locked
        state = "document may still be locked" if locked else "document is unlocked"
        super().__init__(
            cause.method,
            f"{cause.reason} [{step} step failed, {state}]",
            args_description=cause.args_description,
            response_data=cause.response_data,
            status_code=cause.status_code,
            details=cause.details,
        )
