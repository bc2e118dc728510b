"""Tests for the application resource and data source."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from nebraska_provider.api.client import NebraskaClient
from nebraska_provider.api.models import AppConfig, Application
from nebraska_provider.core.auth import ApiClient
from nebraska_provider.core.errors import ApiResponseError, InvalidAttributeError
from nebraska_provider.resources.application import (
    ApplicationDataSource,
    ApplicationResource,
    ApplicationState,
    application_config,
    application_state,
)


@pytest.fixture
def client():
    return Mock(spec=NebraskaClient)


@pytest.fixture
def api(client):
    return ApiClient(auth_mode="noop", endpoint="http://nebraska.test", client=client)


@pytest.fixture
def application():
    return Application(
        id="app-1",
        name="Flatcar",
        description="Flatcar Container Linux",
        product_id="io.example.Flatcar",
        created_ts=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


def test_parse_valid_state():
    state = ApplicationResource.parse({"name": "Flatcar", "product_id": "io.example.Flatcar"})
    assert state.name == "Flatcar"
    assert state.id is None
    assert state.description is None


def test_parse_invalid_product_id():
    with pytest.raises(InvalidAttributeError) as exc_info:
        ApplicationResource.parse({"name": "Flatcar", "product_id": "flatcar"})

    assert exc_info.value.summary == "Invalid product_id"
    assert "io.example.App" in exc_info.value.detail


def test_parse_unknown_attribute():
    with pytest.raises(InvalidAttributeError):
        ApplicationResource.parse({"name": "Flatcar", "product_id": "io.example.App", "colour": "red"})


def test_mappers(application):
    state = application_state(application)

    assert state.id == "app-1"
    assert state.product_id == "io.example.Flatcar"
    assert state.created_ts == "2024-01-02 03:04:05+00:00"

    config = application_config(state)
    assert config == AppConfig(
        name="Flatcar", description="Flatcar Container Linux", product_id="io.example.Flatcar"
    )


def test_create(api, client, application):
    client.create_app.return_value = application
    state = ApplicationState(name="Flatcar", product_id="io.example.Flatcar")

    result = ApplicationResource(api).create(state)

    assert result.id == "app-1"
    client.create_app.assert_called_once_with(
        AppConfig(name="Flatcar", description=None, product_id="io.example.Flatcar")
    )


def test_read_uses_product_id(api, client, application):
    client.get_app.return_value = application
    state = application_state(application)

    ApplicationResource(api).read(state)

    client.get_app.assert_called_once_with("io.example.Flatcar")


def test_update_and_delete_use_id(api, client, application):
    client.update_app.return_value = application
    state = application_state(application)
    resource = ApplicationResource(api)

    resource.update(state)
    resource.delete(state)

    assert client.update_app.call_args.args[0] == "app-1"
    client.delete_app.assert_called_once_with("app-1")


def test_update_without_id(api):
    state = ApplicationState(name="Flatcar", product_id="io.example.Flatcar")

    with pytest.raises(InvalidAttributeError, match="Invalid id"):
        ApplicationResource(api).update(state)


def test_delete_error_surfaces(api, client, application):
    client.delete_app.side_effect = ApiResponseError("Deleting application", 500, "boom")

    with pytest.raises(ApiResponseError):
        ApplicationResource(api).delete(application_state(application))


def test_data_source(api, client, application):
    client.get_app.return_value = application
    data_source = ApplicationDataSource(api)

    lookup = ApplicationDataSource.parse_lookup({"product_id": "io.example.Flatcar"})
    state = data_source.read(**lookup)

    assert state.name == "Flatcar"
    client.get_app.assert_called_once_with("io.example.Flatcar")


def test_data_source_missing_lookup_key():
    with pytest.raises(InvalidAttributeError, match="product_id"):
        ApplicationDataSource.parse_lookup({})


def test_schema():
    schema = ApplicationResource.schema()

    assert schema["name"].required
    assert schema["product_id"].required
    assert schema["description"].optional
    assert schema["id"].computed and not schema["id"].optional
    assert schema["created_ts"].computed

    ds_schema = ApplicationDataSource.schema()
    assert ds_schema["product_id"].required
    assert ds_schema["name"].computed and not ds_schema["name"].required
