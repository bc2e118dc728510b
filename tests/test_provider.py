"""Tests for the provider registry and schema derivation."""

from typing import List, Optional
from unittest.mock import Mock, patch

import pytest
from pydantic import BaseModel, Field

from nebraska_provider.api.client import NebraskaClient
from nebraska_provider.core.auth import ApiClient
from nebraska_provider.core.config import ProviderConfig
from nebraska_provider.provider import DATA_SOURCES, RESOURCES, Provider, provider_schema
from nebraska_provider.resources.channel import ChannelDataSource, ChannelResource
from nebraska_provider.resources.schema import Attribute, attribute_type, data_source_schema, resource_schema


class Item(BaseModel):
    key: str
    value: Optional[int] = Field(None, json_schema_extra={"computed": True, "read_only": True})


class Sample(BaseModel):
    name: str = Field(description="Name.")
    size: int = Field(3, description="Size.", json_schema_extra={"force_new": True})
    enabled: bool | None = None
    token: str = Field("", json_schema_extra={"sensitive": True})
    items: Optional[List[Item]] = Field(None, json_schema_extra={"computed": True, "max_items": 1})


def test_attribute_type():
    assert attribute_type(str) == "string"
    assert attribute_type(Optional[int]) == "int"
    assert attribute_type(bool | None) == "bool"
    assert attribute_type(List[str]) == "list"


def test_resource_schema():
    schema = resource_schema(Sample)

    assert schema["name"] == Attribute(name="name", type="string", description="Name.", required=True)
    assert schema["size"].force_new
    assert schema["size"].optional
    assert schema["size"].full_description == "Size. Defaults to `3`."
    assert schema["enabled"].type == "bool"
    assert schema["token"].sensitive
    assert schema["items"].max_items == 1
    assert schema["items"].computed and schema["items"].optional
    assert schema["items"].elem["key"].required
    assert schema["items"].elem["value"].computed
    assert not schema["items"].elem["value"].optional


def test_data_source_schema():
    schema = data_source_schema(Sample, ["name"])

    assert schema["name"].required and not schema["name"].computed
    assert schema["size"].computed and not schema["size"].force_new
    assert schema["size"].default is None
    assert schema["items"].elem["key"].computed


def test_registry():
    assert set(RESOURCES) == set(DATA_SOURCES)
    for type_name, cls in RESOURCES.items():
        assert cls.type_name == type_name
        assert DATA_SOURCES[type_name].type_name == type_name


def test_provider_schema():
    schema = provider_schema()

    assert list(schema) == ["endpoint", "auth_mode", "github_token", "username", "password"]
    assert schema["github_token"].sensitive
    assert schema["password"].sensitive
    assert not schema["username"].sensitive
    assert "NEBRASKA_ENDPOINT" in schema["endpoint"].description
    assert all(attr.optional for attr in schema.values())


def test_provider_requires_configure():
    provider = Provider()

    with pytest.raises(RuntimeError, match="not configured"):
        provider.resource("nebraska_channel")


def test_provider_configure():
    api = ApiClient(auth_mode="noop", endpoint="http://localhost:8000", client=Mock(spec=NebraskaClient))
    provider = Provider()

    with patch("nebraska_provider.provider.configure_client", return_value=api) as configure:
        assert provider.configure(ProviderConfig()) is api

    configure.assert_called_once()
    assert isinstance(provider.resource("nebraska_channel"), ChannelResource)
    assert isinstance(provider.data_source("nebraska_channel"), ChannelDataSource)

    with pytest.raises(ValueError, match="Unknown resource type"):
        provider.resource("nebraska_instance")
    with pytest.raises(ValueError, match="Unknown data source type"):
        provider.data_source("nebraska_instance")


def test_full_schema():
    schema = Provider.schema()

    assert schema["provider"]["auth_mode"]["env_var"] == "NEBRASKA_AUTH_MODE"
    assert schema["resources"]["nebraska_package"]["attributes"]["flatcar_action"]["max_items"] == 1
    assert schema["data_sources"]["nebraska_application"]["attributes"]["product_id"]["required"]
