from __future__ import annotations

"""
Authentication setup for the Nebraska provider.

Turns a ProviderConfig into an immutable ApiClient whose requests carry the
headers required by the selected auth mode. Configuration always verifies
that the server runs the same auth mode as the one requested; any failure
is fatal and no partially configured client is returned.
"""

import logging
from dataclasses import dataclass

import requests

from nebraska_provider.api.client import NebraskaClient, RequestEditor
from nebraska_provider.core.config import ProviderConfig
from nebraska_provider.core.errors import ConfigurationError, Diagnostic, ProviderError, Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiClient:
    """Authenticated client handle shared by every resource operation."""

    auth_mode: str
    endpoint: str
    client: NebraskaClient
    warnings: tuple[Diagnostic, ...] = ()

    @property
    def request_editors(self) -> tuple[RequestEditor, ...]:
        return self.client.request_editors


def bearer_token_editor(token: str) -> RequestEditor | None:
    """Editor adding ``Authorization: Bearer <token>``, or None for an empty token."""
    if not token:
        return None

    def edit(request: requests.PreparedRequest) -> None:
        request.headers["Authorization"] = f"Bearer {token}"

    return edit


def cookie_editor(cookie: str) -> RequestEditor:
    """Editor replaying a session cookie verbatim."""

    def edit(request: requests.PreparedRequest) -> None:
        request.headers["Cookie"] = cookie

    return edit


def _github_editors(config: ProviderConfig) -> list[RequestEditor]:
    if not config.github_token:
        raise ConfigurationError(
            "Github Token empty", "github_token is required for github auth_mode"
        )
    return [bearer_token_editor(config.github_token)]


def _oidc_editors(
    client: NebraskaClient, config: ProviderConfig
) -> tuple[list[RequestEditor], list[Diagnostic]]:
    if not config.username or not config.password:
        raise ConfigurationError(
            "Username Password empty", "username, password are required for oidc auth_mode"
        )

    logger.debug(f"Requesting OIDC login token for user {config.username}")
    try:
        login = client.login_token(config.username, config.password)
    except ProviderError as e:
        raise ConfigurationError("Couldn't fetch login token", f"Login token error failed: {e}") from e

    if not login.token:
        raise ConfigurationError("Couldn't fetch login token", "Login response did not contain a token")

    editors = [bearer_token_editor(login.token)]
    warnings: list[Diagnostic] = []
    if login.cookie:
        editors.append(cookie_editor(login.cookie))
    else:
        logger.warning("OIDC login response did not set a session cookie")
        warnings.append(
            Diagnostic(
                Severity.WARNING,
                "Session cookie missing",
                "The login response did not set a cookie; requests carry the bearer token only",
            )
        )
    return editors, warnings


def configure_client(
    config: ProviderConfig,
    client: NebraskaClient | None = None,
) -> ApiClient:
    """Build the authenticated client for ``config``.

    Args:
        config: Provider configuration
        client: Unauthenticated client to start from (built from config if omitted)

    Returns:
        ApiClient carrying the request editors for the selected auth mode

    Raises:
        ConfigurationError: On missing credentials, auth mode mismatch or
            a failed server config fetch or login
    """
    if client is None:
        client = NebraskaClient.from_config(config)

    auth_mode = config.auth_mode

    # The github token is needed to read the server config already
    config_editors: list[RequestEditor] = []
    if auth_mode == "github":
        config_editors = _github_editors(config)

    try:
        server_config = client.with_editors(config_editors).get_config()
    except ProviderError as e:
        raise ConfigurationError(
            "Config fetch", f"Couldn't fetch the nebraska server config: {e}"
        ) from e

    if server_config.auth_mode != auth_mode:
        raise ConfigurationError(
            "Invalid auth_mode",
            f"The Nebraska server {config.endpoint} supports {server_config.auth_mode} "
            f"and doesn't support {auth_mode} auth_mode",
        )

    editors: list[RequestEditor] = []
    warnings: list[Diagnostic] = []
    if auth_mode == "github":
        editors = config_editors
    elif auth_mode == "oidc":
        editors, warnings = _oidc_editors(client, config)

    logger.debug(f"Configured Nebraska client for {config.endpoint} (auth_mode={auth_mode})")
    return ApiClient(
        auth_mode=auth_mode,
        endpoint=config.endpoint,
        client=client.with_editors(editors),
        warnings=tuple(warnings),
    )
