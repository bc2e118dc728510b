"""Tests for provider authentication setup."""

from unittest.mock import Mock

import pytest
import requests

from nebraska_provider.api.client import NebraskaClient
from nebraska_provider.core.auth import bearer_token_editor, configure_client, cookie_editor
from nebraska_provider.core.config import ProviderConfig
from nebraska_provider.core.errors import ConfigurationError, Severity


def make_response(payload, headers=None, status_code=200):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = payload
    response.headers = headers or {}
    response.text = ""
    return response


def make_client(*responses):
    """Client whose session answers with the given responses in order."""
    session = Mock(spec=requests.Session)
    session.request.side_effect = list(responses)
    return NebraskaClient("http://nebraska.test", session=session), session


def sent_headers(client):
    """Headers a request from client would carry."""
    request = requests.Request("GET", "http://nebraska.test/api/apps").prepare()
    client._auth(request)
    return request.headers


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ["NEBRASKA_ENDPOINT", "NEBRASKA_AUTH_MODE", "NEBRASKA_GH_TOKEN",
                "NEBRASKA_USERNAME", "NEBRASKA_PASSWORD"]:
        monkeypatch.delenv(var, raising=False)


def test_bearer_token_editor():
    assert bearer_token_editor("") is None

    request = requests.Request("GET", "http://nebraska.test").prepare()
    bearer_token_editor("abc")(request)
    cookie_editor("session=1")(request)
    assert request.headers["Authorization"] == "Bearer abc"
    assert request.headers["Cookie"] == "session=1"


def test_noop_mode():
    client, session = make_client(make_response({"auth_mode": "noop"}))

    api = configure_client(ProviderConfig(), client=client)

    assert api.auth_mode == "noop"
    assert api.endpoint == "http://localhost:8000"
    assert api.request_editors == ()
    assert "Authorization" not in sent_headers(api.client)
    assert session.request.call_count == 1
    assert api.warnings == ()


def test_auth_mode_mismatch_fails_before_authenticated_calls():
    client, session = make_client(make_response({"auth_mode": "github"}))

    with pytest.raises(ConfigurationError) as exc_info:
        configure_client(ProviderConfig(endpoint="http://nebraska.test"), client=client)

    assert exc_info.value.summary == "Invalid auth_mode"
    assert exc_info.value.detail == (
        "The Nebraska server http://nebraska.test supports github and doesn't support noop auth_mode"
    )
    session.request.assert_called_once()
    assert session.request.call_args.args[1] == "http://nebraska.test/config"


def test_github_requires_token():
    client, session = make_client()

    with pytest.raises(ConfigurationError, match="Github Token empty"):
        configure_client(ProviderConfig(auth_mode="github"), client=client)

    session.request.assert_not_called()


def test_github_token_sent_with_config_fetch():
    client, session = make_client(make_response({"auth_mode": "github"}))

    api = configure_client(ProviderConfig(auth_mode="github", github_token="gh-123"), client=client)

    auth = session.request.call_args.kwargs["auth"]
    request = requests.Request("GET", "http://nebraska.test/config").prepare()
    auth(request)
    assert request.headers["Authorization"] == "Bearer gh-123"
    assert sent_headers(api.client)["Authorization"] == "Bearer gh-123"


def test_oidc_login():
    """OIDC requests carry the bearer token and the session cookie."""
    client, session = make_client(
        make_response({"auth_mode": "oidc"}),
        make_response({"token": "oidc-token"}, headers={"Set-Cookie": "nebraska_session=xyz"}),
    )
    config = ProviderConfig(auth_mode="oidc", username="alice", password="secret")

    api = configure_client(config, client=client)

    headers = sent_headers(api.client)
    assert headers["Authorization"] == "Bearer oidc-token"
    assert headers["Cookie"] == "nebraska_session=xyz"

    login_call = session.request.call_args_list[1]
    assert login_call.args == ("POST", "http://nebraska.test/login/token")
    assert login_call.kwargs["data"] == {"username": "alice", "password": "secret"}


def test_oidc_login_without_cookie():
    client, _ = make_client(
        make_response({"auth_mode": "oidc"}),
        make_response({"token": "oidc-token"}),
    )
    config = ProviderConfig(auth_mode="oidc", username="alice", password="secret")

    api = configure_client(config, client=client)

    headers = sent_headers(api.client)
    assert headers["Authorization"] == "Bearer oidc-token"
    assert "Cookie" not in headers
    (warning,) = api.warnings
    assert warning.severity == Severity.WARNING
    assert warning.summary == "Session cookie missing"


def test_oidc_requires_credentials():
    client, _ = make_client(make_response({"auth_mode": "oidc"}))

    with pytest.raises(ConfigurationError, match="Username Password empty"):
        configure_client(ProviderConfig(auth_mode="oidc", username="alice"), client=client)


def test_oidc_login_failure():
    client, _ = make_client(
        make_response({"auth_mode": "oidc"}),
        make_response({}, status_code=401),
    )
    config = ProviderConfig(auth_mode="oidc", username="alice", password="wrong")

    with pytest.raises(ConfigurationError, match="Couldn't fetch login token"):
        configure_client(config, client=client)


def test_config_fetch_failure():
    session = Mock(spec=requests.Session)
    session.request.side_effect = requests.ConnectionError("refused")
    client = NebraskaClient("http://nebraska.test", session=session)

    with pytest.raises(ConfigurationError) as exc_info:
        configure_client(ProviderConfig(), client=client)

    assert exc_info.value.summary == "Config fetch"
