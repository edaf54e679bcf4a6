"""
Shared fixtures for Vault client tests.
"""

from unittest.mock import MagicMock

import pytest

from vault_client.api import VaultClient, VaultSession
from vault_client.config import VaultConfig

HOST = "https://x.veevavault.com/api/v13.0/"
SESSION_ID = "test-session-id"


def make_response(body=None, status_code=200):
    """Create a mock HTTP response with a JSON body."""
    response = MagicMock()
    response.status_code = status_code
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def ok(**fields):
    """A successful Vault response body."""
    body = {"responseStatus": "SUCCESS"}
    body.update(fields)
    return body


def failure(message="Something went wrong"):
    return {"responseStatus": "FAILURE", "responseMessage": message}


@pytest.fixture
def config():
    """Create a test configuration."""
    return VaultConfig(
        host="https://x.veevavault.com/api/v13.0",
        username="u",
        password="p",
    )


@pytest.fixture
def http_session():
    """Mock requests.Session; set ``request.side_effect`` per test."""
    return MagicMock()


@pytest.fixture
def client(config, http_session):
    """An authenticated client whose HTTP session is mocked."""
    client = VaultClient(config)
    client._http._session = http_session
    client._http._vault_session = VaultSession(id=SESSION_ID, host=HOST)
    return client


@pytest.fixture
def anonymous_client(config, http_session):
    """A client that has not authenticated yet."""
    client = VaultClient(config)
    client._http._session = http_session
    return client


def sent(http_session):
    """(method, url, data) for every request made on the mock session."""
    return [
        (c.kwargs["method"], c.kwargs["url"], c.kwargs.get("data"))
        for c in http_session.request.call_args_list
    ]
