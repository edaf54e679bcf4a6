"""
Tests for authentication, request building and error handling.
"""

import logging

import pytest
import requests

from vault_client.api import HTTPClient, VaultClient, normalize_host
from vault_client.exceptions import AuthenticationError, RemoteOperationError

from conftest import HOST, SESSION_ID, failure, make_response, ok, sent


class TestNormalizeHost:
    """Tests for normalize_host function."""

    @pytest.mark.parametrize("host", [
        "https://x.veevavault.com/api/v13.0",
        "https://x.veevavault.com/api/v13.0/",
        "https://x.veevavault.com/api/v13.0///",
        "https://x.veevavault.com/api/v13.0  ",
        "https://x.veevavault.com/api/v13.0/ \n",
    ])
    def test_exactly_one_trailing_slash(self, host):
        """Test exactly one trailing slash."""
        assert normalize_host(host) == "https://x.veevavault.com/api/v13.0/"


class TestAuthenticate:
    """Tests for authenticate."""

    def test_stores_session(self, anonymous_client, http_session):
        """Test stores session."""
        http_session.request.return_value = make_response(ok(sessionId="abc"))

        session = anonymous_client.authenticate({
            "host": "https://x.veevavault.com/api/v13.0",
            "username": "u",
            "password": "p",
        })

        assert session.id == "abc"
        assert session.host == "https://x.veevavault.com/api/v13.0/"
        assert anonymous_client.session == session

    def test_posts_form_credentials_without_authorization(self, anonymous_client, http_session):
        """Test posts form credentials without authorization."""
        http_session.request.return_value = make_response(ok(sessionId="abc"))

        anonymous_client.authenticate({"host": HOST, "username": "u", "password": "p"})

        kwargs = http_session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == HOST + "auth"
        assert kwargs["data"] == {"username": "u", "password": "p"}
        assert "Authorization" not in (kwargs.get("headers") or {})

    def test_uses_configured_credentials(self, anonymous_client, http_session):
        """Test uses configured credentials."""
        http_session.request.return_value = make_response(ok(sessionId="abc"))

        anonymous_client.authenticate()

        assert http_session.request.call_args.kwargs["url"] == HOST + "auth"

    def test_rejected_credentials(self, anonymous_client, http_session):
        """Test rejected credentials."""
        http_session.request.return_value = make_response(
            failure("Authentication failed for user: u")
        )

        with pytest.raises(AuthenticationError) as exc_info:
            anonymous_client.authenticate({"host": HOST, "username": "u", "password": "bad"})

        assert "vault.authenticate" in str(exc_info.value)
        assert "Authentication failed for user" in str(exc_info.value)
        assert anonymous_client.session is None

    def test_failure_keeps_previous_session(self, client, http_session):
        """Test failure keeps previous session."""
        previous = client.session
        http_session.request.return_value = make_response(failure("bad"))

        with pytest.raises(AuthenticationError):
            client.authenticate({"host": HOST, "username": "u", "password": "bad"})

        assert client.session == previous

    def test_missing_session_id(self, anonymous_client, http_session):
        """Test missing session id."""
        http_session.request.return_value = make_response(ok())

        with pytest.raises(AuthenticationError) as exc_info:
            anonymous_client.authenticate({"host": HOST, "username": "u", "password": "p"})

        assert "sessionId" in str(exc_info.value)
        assert anonymous_client.session is None

    def test_empty_host(self, anonymous_client, http_session):
        """Test empty host."""
        with pytest.raises(AuthenticationError):
            anonymous_client.authenticate({"host": "  ", "username": "u", "password": "p"})

        http_session.request.assert_not_called()

    def test_connection_error(self, anonymous_client, http_session):
        """Test connection error."""
        http_session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(AuthenticationError) as exc_info:
            anonymous_client.authenticate({"host": HOST, "username": "u", "password": "p"})

        assert "Connection failed" in str(exc_info.value)

    def test_clients_hold_separate_sessions(self, config, http_session):
        """Test clients hold separate sessions."""
        first = VaultClient(config)
        second = VaultClient(config)
        first._http._session = http_session
        http_session.request.return_value = make_response(ok(sessionId="abc"))

        first.authenticate()

        assert first.session is not None
        assert second.session is None


class TestRequest:
    """Tests for authenticated requests."""

    def test_authorization_header_on_every_call(self, client, http_session):
        """Test authorization header on every call."""
        http_session.request.return_value = make_response(ok(document={"id": 1}))

        client.get_document(1)
        client.get_vault_objects("product__v")

        for call in http_session.request.call_args_list:
            assert call.kwargs["headers"]["Authorization"] == SESSION_ID

    def test_extra_headers_cannot_replace_authorization(self, client):
        """Test extra headers cannot replace authorization."""
        headers = client._http._get_headers({"Authorization": "other", "X-Test": "1"})
        assert headers == {"Authorization": SESSION_ID, "X-Test": "1"}

    def test_url_built_from_session_host(self, client, http_session):
        """Test url built from session host."""
        http_session.request.return_value = make_response(ok(document={}))

        client.get_document(9)

        assert sent(http_session) == [("GET", HOST + "objects/documents/9", None)]

    def test_not_authenticated(self, anonymous_client, http_session):
        """Test not authenticated."""
        with pytest.raises(AuthenticationError) as exc_info:
            anonymous_client.get_document(1)

        assert "get_document" in str(exc_info.value)
        http_session.request.assert_not_called()

    def test_invalid_session_message(self, client, http_session):
        """Test invalid session message."""
        http_session.request.return_value = make_response(failure("Invalid session"))

        with pytest.raises(RemoteOperationError) as exc_info:
            client.get_document(5)

        err = exc_info.value
        assert "Invalid session" in str(err)
        assert "get_document" in str(err)
        assert "document_id = 5" in str(err)
        assert err.method == "get_document"
        assert err.reason == "Invalid session"

    def test_error_list_always_logged(self, client, http_session, caplog):
        """Test error list always logged."""
        errors = [{"type": "INVALID_DATA", "message": "Missing name__v"}]
        http_session.request.return_value = make_response(
            {"responseStatus": "FAILURE", "errors": errors}
        )

        with caplog.at_level(logging.ERROR, logger="vault_client.api._http"):
            with pytest.raises(RemoteOperationError) as exc_info:
                client.update_binder(3, {"name__v": "x"})

        assert "Aborting" in str(exc_info.value)
        assert "Missing name__v" in caplog.text

    def test_empty_error_list_logged(self, client, http_session, caplog):
        """Test that an empty errors list is logged like any other error list."""
        http_session.request.return_value = make_response(
            {"responseStatus": "FAILURE", "errors": []}
        )

        with caplog.at_level(logging.ERROR, logger="vault_client.api._http"):
            with pytest.raises(RemoteOperationError):
                client.delete_binder(3)

        assert "vault.delete_binder(binder_id = 3)" in caplog.text

    def test_unknown_failure(self, client, http_session):
        """Test unknown failure."""
        http_session.request.return_value = make_response({"responseStatus": "FAILURE"})

        with pytest.raises(RemoteOperationError) as exc_info:
            client.delete_document(4)

        assert str(exc_info.value) == "Error in vault.delete_document(document_id = 4): Aborting"

    def test_undecodable_body_is_failure(self, client, http_session):
        """Test undecodable body is failure."""
        http_session.request.return_value = make_response(ValueError("no json"), status_code=502)

        with pytest.raises(RemoteOperationError) as exc_info:
            client.get_document(1)

        assert exc_info.value.status_code == 502
        assert exc_info.value.details == "HTTP 502"

    def test_transport_error_wrapped(self, client, http_session):
        """Test transport error wrapped."""
        http_session.request.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(RemoteOperationError) as exc_info:
            client.get_binder(8)

        assert "get_binder" in str(exc_info.value)
        assert "Request failed" in str(exc_info.value)


class TestVerboseLogging:
    """Tests for success tracing."""

    def test_quiet_by_default(self, client, http_session, caplog):
        """Test quiet by default."""
        http_session.request.return_value = make_response(ok(document={}))

        with caplog.at_level(logging.DEBUG, logger="vault_client.api._http"):
            client.get_document(1)

        assert ": OK" not in caplog.text

    def test_verbose_traces_success(self, config, http_session):
        """Test verbose traces success."""
        sink = logging.getLogger("tests.vault.sink")
        records = []
        handler = logging.Handler()
        handler.emit = records.append
        sink.addHandler(handler)
        sink.setLevel(logging.INFO)

        try:
            http = HTTPClient(config, logger=sink, verbose=True)
            http._session = http_session
            http_session.request.return_value = make_response(ok(sessionId="abc"))
            http.authenticate(config.credentials())
        finally:
            sink.removeHandler(handler)

        messages = [r.getMessage() for r in records]
        assert messages == [
            f"vault.authenticate(host = {HOST}, username = u): OK"
        ]

    def test_verbose_defaults_to_config(self, config):
        """Test verbose defaults to config."""
        config.verbose = True
        assert HTTPClient(config).verbose is True
        assert HTTPClient(config, verbose=False).verbose is False
