from __future__ import annotations

"""
Thin HTTP client for the Nebraska REST API.

Every call goes through a shared requests session. Authentication is not
baked into the session: it is a list of request editors that decorate each
prepared request, so one configured client can be handed to every
operation without being mutated.
"""

import logging
from typing import Any, Callable, Sequence, TypeVar

import requests
from pydantic import BaseModel
from requests.auth import AuthBase

from nebraska_provider.api.models import (
    AppConfig,
    Application,
    Channel,
    ChannelConfig,
    ChannelPage,
    Group,
    GroupConfig,
    GroupPage,
    LoginToken,
    Package,
    PackageConfig,
    PackagePage,
    ServerConfig,
)
from nebraska_provider.core.config import ProviderConfig, SSLConfig
from nebraska_provider.core.errors import ApiRequestError, ApiResponseError

logger = logging.getLogger(__name__)

RequestEditor = Callable[[requests.PreparedRequest], None]

ModelT = TypeVar("ModelT", bound=BaseModel)


class RequestEditorAuth(AuthBase):
    """Applies request editors to every outgoing request."""

    def __init__(self, editors: Sequence[RequestEditor]):
        self.editors = tuple(editors)

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        for editor in self.editors:
            editor(request)
        return request


def setup_session(ssl_config: SSLConfig | None = None) -> requests.Session:
    """Setup requests session with SSL/TLS configuration.

    Args:
        ssl_config: Optional SSL/TLS configuration

    Returns:
        Configured requests session
    """
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})

    if ssl_config:
        if not ssl_config.verify:
            # Disable SSL verification (not recommended)
            session.verify = False
        elif ssl_config.ca_bundle:
            session.verify = ssl_config.ca_bundle

        # Setup client certificate for mTLS if configured
        if ssl_config.client_cert:
            if ssl_config.client_key:
                session.cert = (ssl_config.client_cert, ssl_config.client_key)
            else:
                session.cert = ssl_config.client_cert

    return session


class NebraskaClient:
    """Nebraska REST API client."""

    def __init__(
        self,
        endpoint: str,
        session: requests.Session | None = None,
        request_editors: Sequence[RequestEditor] = (),
        timeout: int | None = None,
    ):
        """Initialize client.

        Args:
            endpoint: Base URL of the Nebraska server
            session: Requests session to use (a plain one is created if omitted)
            request_editors: Editors applied to every request
            timeout: Request timeout in seconds
        """
        self.endpoint = endpoint.rstrip("/")
        self.session = session or requests.Session()
        self.request_editors: tuple[RequestEditor, ...] = tuple(
            editor for editor in request_editors if editor is not None
        )
        self.timeout = timeout
        self._auth = RequestEditorAuth(self.request_editors)

    @classmethod
    def from_config(cls, config: ProviderConfig) -> NebraskaClient:
        """Create an unauthenticated client from the provider configuration."""
        return cls(
            config.endpoint,
            session=setup_session(config.ssl),
            timeout=config.timeout,
        )

    def with_editors(self, editors: Sequence[RequestEditor]) -> NebraskaClient:
        """Return a client sharing this session but using ``editors``."""
        return NebraskaClient(
            self.endpoint,
            session=self.session,
            request_editors=editors,
            timeout=self.timeout,
        )

    def _request(
        self,
        step: str,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> requests.Response:
        """Send a request and fail on transport errors or non-2xx codes.

        Args:
            step: Human readable step used as the error summary
            method: HTTP method
            path: Path relative to the endpoint

        Raises:
            ApiRequestError: If no response was received
            ApiResponseError: If the status code is not 2xx
        """
        url = f"{self.endpoint}{path}"
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(
                method, url, auth=self._auth, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise ApiRequestError(step, f"Got an error when {step.lower()}: {e}") from e

        if not response.ok:
            raise ApiResponseError(step, response.status_code, response.text)
        return response

    def _json(self, step: str, model: type[ModelT], method: str, path: str, **kwargs: Any) -> ModelT:
        response = self._request(step, method, path, **kwargs)
        try:
            return model.model_validate(response.json())
        except ValueError as e:
            raise ApiResponseError(step, response.status_code, f"{response.text} ({e})") from e

    @staticmethod
    def _body(config: BaseModel) -> dict[str, Any]:
        return config.model_dump(mode="json", exclude_none=True)

    @staticmethod
    def _page_params(page: int, per_page: int) -> dict[str, int]:
        return {"page": page, "perpage": per_page}

    # Server

    def get_config(self) -> ServerConfig:
        return self._json("Config fetch", ServerConfig, "GET", "/config")

    def login_token(self, username: str, password: str) -> LoginToken:
        """Exchange OIDC credentials for a bearer token and session cookie."""
        response = self._request(
            "Couldn't fetch login token",
            "POST",
            "/login/token",
            data={"username": username, "password": password},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        try:
            payload = response.json()
        except ValueError as e:
            raise ApiResponseError(
                "Couldn't fetch login token", response.status_code, response.text
            ) from e
        if not isinstance(payload, dict):
            raise ApiResponseError("Couldn't fetch login token", response.status_code, response.text)
        return LoginToken(
            token=payload.get("token", ""),
            cookie=response.headers.get("Set-Cookie"),
        )

    # Applications

    def create_app(self, config: AppConfig) -> Application:
        return self._json("Creating application", Application, "POST", "/api/apps", json=self._body(config))

    def get_app(self, app_id: str) -> Application:
        """Fetch an application by ID or product ID."""
        return self._json("Fetching application", Application, "GET", f"/api/apps/{app_id}")

    def update_app(self, app_id: str, config: AppConfig) -> Application:
        return self._json(
            "Updating application", Application, "PUT", f"/api/apps/{app_id}", json=self._body(config)
        )

    def delete_app(self, app_id: str) -> None:
        self._request("Deleting application", "DELETE", f"/api/apps/{app_id}")

    # Channels

    def create_channel(self, app_id: str, config: ChannelConfig) -> Channel:
        return self._json(
            "Creating channel", Channel, "POST", f"/api/apps/{app_id}/channels", json=self._body(config)
        )

    def update_channel(self, app_id: str, channel_id: str, config: ChannelConfig) -> Channel:
        return self._json(
            "Updating channel",
            Channel,
            "PUT",
            f"/api/apps/{app_id}/channels/{channel_id}",
            json=self._body(config),
        )

    def delete_channel(self, app_id: str, channel_id: str) -> None:
        self._request("Deleting channel", "DELETE", f"/api/apps/{app_id}/channels/{channel_id}")

    def paginate_channels(self, app_id: str, page: int, per_page: int) -> ChannelPage:
        return self._json(
            "Fetching channels",
            ChannelPage,
            "GET",
            f"/api/apps/{app_id}/channels",
            params=self._page_params(page, per_page),
        )

    # Groups

    def create_group(self, app_id: str, config: GroupConfig) -> Group:
        return self._json(
            "Creating group", Group, "POST", f"/api/apps/{app_id}/groups", json=self._body(config)
        )

    def update_group(self, app_id: str, group_id: str, config: GroupConfig) -> Group:
        return self._json(
            "Updating group",
            Group,
            "PUT",
            f"/api/apps/{app_id}/groups/{group_id}",
            json=self._body(config),
        )

    def delete_group(self, app_id: str, group_id: str) -> None:
        self._request("Deleting group", "DELETE", f"/api/apps/{app_id}/groups/{group_id}")

    def paginate_groups(self, app_id: str, page: int, per_page: int) -> GroupPage:
        return self._json(
            "Fetching groups",
            GroupPage,
            "GET",
            f"/api/apps/{app_id}/groups",
            params=self._page_params(page, per_page),
        )

    # Packages

    def create_package(self, app_id: str, config: PackageConfig) -> Package:
        return self._json(
            "Creating package", Package, "POST", f"/api/apps/{app_id}/packages", json=self._body(config)
        )

    def update_package(self, app_id: str, package_id: str, config: PackageConfig) -> Package:
        return self._json(
            "Updating package",
            Package,
            "PUT",
            f"/api/apps/{app_id}/packages/{package_id}",
            json=self._body(config),
        )

    def delete_package(self, app_id: str, package_id: str) -> None:
        self._request("Deleting package", "DELETE", f"/api/apps/{app_id}/packages/{package_id}")

    def paginate_packages(self, app_id: str, page: int, per_page: int) -> PackagePage:
        return self._json(
            "Fetching packages",
            PackagePage,
            "GET",
            f"/api/apps/{app_id}/packages",
            params=self._page_params(page, per_page),
        )
