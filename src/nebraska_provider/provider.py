"""
Nebraska provider entry point.

The Provider ties together the provider configuration schema, the
registry of resources and data sources, and the configure step that
produces the authenticated ApiClient every operation runs against.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Type

from nebraska_provider import __version__
from nebraska_provider.api.client import NebraskaClient
from nebraska_provider.core.auth import ApiClient, configure_client
from nebraska_provider.core.config import ENV_DEFAULTS, ProviderConfig
from nebraska_provider.resources.application import ApplicationDataSource, ApplicationResource
from nebraska_provider.resources.base import DataSource, Resource
from nebraska_provider.resources.channel import ChannelDataSource, ChannelResource
from nebraska_provider.resources.group import GroupDataSource, GroupResource
from nebraska_provider.resources.package import PackageDataSource, PackageResource
from nebraska_provider.resources.schema import Attribute, resource_schema

logger = logging.getLogger(__name__)

RESOURCES: Dict[str, Type[Resource]] = {
    "nebraska_application": ApplicationResource,
    "nebraska_channel": ChannelResource,
    "nebraska_group": GroupResource,
    "nebraska_package": PackageResource,
}

DATA_SOURCES: Dict[str, Type[DataSource]] = {
    "nebraska_application": ApplicationDataSource,
    "nebraska_channel": ChannelDataSource,
    "nebraska_group": GroupDataSource,
    "nebraska_package": PackageDataSource,
}

# Attributes that make up the provider block itself
PROVIDER_ATTRIBUTES = ("endpoint", "auth_mode", "github_token", "username", "password")


def provider_schema() -> Dict[str, Attribute]:
    """Schema of the provider configuration block."""
    schema = resource_schema(ProviderConfig)
    # Defaults come from the environment, so descriptions carry them already
    return {name: replace(schema[name], default=None) for name in PROVIDER_ATTRIBUTES}


class Provider:
    """Nebraska provider."""

    def __init__(self, version: str = __version__):
        self.version = version
        self._api: Optional[ApiClient] = None

    @property
    def api(self) -> ApiClient:
        """Authenticated client; only available after configure()."""
        if self._api is None:
            raise RuntimeError("Provider is not configured")
        return self._api

    def configure(self, config: ProviderConfig, client: Optional[NebraskaClient] = None) -> ApiClient:
        """Authenticate against the server and keep the resulting client.

        Raises:
            ConfigurationError: If the server cannot be used with this configuration
        """
        logger.debug(f"Configuring nebraska provider {self.version} for {config.endpoint}")
        self._api = configure_client(config, client=client)
        return self._api

    def resource(self, type_name: str) -> Resource:
        try:
            return RESOURCES[type_name](self.api)
        except KeyError:
            raise ValueError(f"Unknown resource type: {type_name}") from None

    def data_source(self, type_name: str) -> DataSource:
        try:
            return DATA_SOURCES[type_name](self.api)
        except KeyError:
            raise ValueError(f"Unknown data source type: {type_name}") from None

    @staticmethod
    def schema() -> Dict[str, Any]:
        """Full provider schema: provider block, resources and data sources."""
        return {
            "provider": {
                name: {**attr.to_dict(), "env_var": ENV_DEFAULTS.get(name)}
                for name, attr in provider_schema().items()
            },
            "resources": {
                name: {
                    "description": cls.description,
                    "attributes": {n: a.to_dict() for n, a in cls.schema().items()},
                }
                for name, cls in RESOURCES.items()
            },
            "data_sources": {
                name: {
                    "description": cls.description,
                    "attributes": {n: a.to_dict() for n, a in cls.schema().items()},
                }
                for name, cls in DATA_SOURCES.items()
            },
        }
