"""
Base HTTP client for the Vault API.

Handles the authenticated session, the baseline request shape and
classification of every response.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Type

import requests

from .. import __version__
from ..config import VaultConfig, get_config
from ..exceptions import APIError, AuthenticationError, RemoteOperationError
from ._result import ErrorList, ErrorMessage, Success, classify, format_args

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaultSession:
    """An authenticated Vault session: token plus API base URL."""

    id: str
    host: str


def normalize_host(host: str) -> str:
    """Return ``host`` ending in exactly one slash."""
    return host.strip().rstrip("/") + "/"


class HTTPClient:
    """
    Base HTTP client for the Vault API.

    Handles:
    - Authentication and the current session
    - Authorization headers on every call
    - Response classification and error raising
    """

    def __init__(
        self,
        config: Optional[VaultConfig] = None,
        logger: Optional[logging.Logger] = None,
        verbose: Optional[bool] = None,
    ):
        """
        Initialize the HTTP client.

        Args:
            config: Optional configuration. Loaded from the default
                credentials file if not provided.
            logger: Sink for call traces. Defaults to this module's logger.
            verbose: Trace successful calls. Defaults to ``config.verbose``.
        """
        self.config = config or get_config()
        self.logger = logger or logging.getLogger(__name__)
        self.verbose = self.config.verbose if verbose is None else verbose
        self._session: Optional[requests.Session] = None
        self._vault_session: Optional[VaultSession] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the underlying HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                "User-Agent": f"vault-client/{__version__}",
                "Accept": "application/json",
            })
        return self._session

    @property
    def vault_session(self) -> Optional[VaultSession]:
        """The current authenticated session, if any."""
        return self._vault_session

    @property
    def is_authenticated(self) -> bool:
        return self._vault_session is not None

    def authenticate(self, credentials: Mapping[str, str]) -> VaultSession:
        """
        Exchange username/password for a session id.

        Args:
            credentials: Mapping with ``host``, ``username`` and ``password``.
                ``host`` is the versioned API URL, e.g.
                ``https://myvault.veevavault.com/api/v13.0``.

        Returns:
            The new session. It replaces any previous one only on success.

        Raises:
            AuthenticationError: On rejected credentials or a bad host.
        """
        host = credentials.get("host") or ""
        if not host.strip():
            raise AuthenticationError("authenticate", "No host given")
        host = normalize_host(host)
        args = format_args(host=host, username=credentials.get("username"))

        try:
            response = self.session.request(
                method="POST",
                url=host + "auth",
                data={
                    "username": credentials.get("username"),
                    "password": credentials.get("password"),
                },
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.exceptions.RequestException as e:
            raise AuthenticationError("authenticate", f"Connection failed: {e}", args)

        body = self._decode(response)
        result = self._handle_result(
            "authenticate", body, args, response.status_code, AuthenticationError
        )

        session_id = result.get("sessionId")
        if not session_id:
            raise AuthenticationError(
                "authenticate",
                "Authentication succeeded but no sessionId in response",
                args,
                response_data=result,
            )

        self._vault_session = VaultSession(id=session_id, host=host)
        return self._vault_session

    def _get_headers(self, extra_headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Get request headers including the session Authorization."""
        headers = dict(extra_headers or {})
        if self._vault_session is not None:
            headers["Authorization"] = self._vault_session.id
        return headers

    def _require_session(self, call: str, args: str) -> VaultSession:
        if self._vault_session is None:
            raise AuthenticationError(
                call, "Not authenticated; call authenticate() first", args
            )
        return self._vault_session

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return {}

    def _handle_result(
        self,
        call: str,
        body: Any,
        args: str = "",
        status_code: Optional[int] = None,
        error_class: Type[APIError] = RemoteOperationError,
    ) -> Dict[str, Any]:
        """Raise for any non-success body, otherwise return it."""
        result = classify(body)

        if isinstance(result, Success):
            if self.verbose:
                self.logger.info("vault.%s(%s): OK", call, args)
            return result.body

        response_data = body if isinstance(body, dict) else {}

        if isinstance(result, ErrorMessage):
            raise error_class(
                call, result.text, args,
                response_data=response_data, status_code=status_code,
            )

        if isinstance(result, ErrorList):
            self.logger.error("Error in vault.%s(%s): %s", call, args, result.errors)
            raise error_class(
                call, "Aborting", args,
                response_data=response_data, status_code=status_code,
                details=str(result.errors),
            )

        raise error_class(
            call, "Aborting", args,
            response_data=response_data, status_code=status_code,
            details=f"HTTP {status_code}" if status_code is not None else None,
        )

    def request(
        self,
        method: str,
        endpoint: str,
        call: str,
        args: str = "",
        form: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an authenticated API request.

        Args:
            method: HTTP method
            endpoint: Path relative to the session host
            call: Name of the client operation, used in errors and traces
            args: Identifying arguments, used in errors and traces
            form: Form fields (url-encoded, or multipart alongside ``files``)
            files: Files for multipart upload

        Returns:
            Decoded response body
        """
        vault_session = self._require_session(call, args)
        url = vault_session.host + endpoint

        logger.debug("Request: %s %s", method, url)

        try:
            response = self.session.request(
                method=method,
                url=url,
                data=form,
                files=files,
                headers=self._get_headers(),
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.exceptions.RequestException as e:
            raise RemoteOperationError(call, f"Request failed: {e}", args)

        logger.debug("Response: %s", response.status_code)

        return self._handle_result(call, self._decode(response), args, response.status_code)

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
