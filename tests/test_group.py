"""Tests for the group resource and data source."""

from unittest.mock import Mock

import pytest

from nebraska_provider.api.client import NebraskaClient
from nebraska_provider.api.models import Group, GroupPage
from nebraska_provider.core.auth import ApiClient
from nebraska_provider.core.errors import NotFoundError
from nebraska_provider.resources.group import (
    GroupDataSource,
    GroupResource,
    GroupState,
    group_config,
    group_state,
)


@pytest.fixture
def client():
    return Mock(spec=NebraskaClient)


@pytest.fixture
def api(client):
    return ApiClient(auth_mode="noop", endpoint="http://nebraska.test", client=client)


@pytest.fixture
def group():
    return Group(
        id="grp-1",
        name="stable",
        application_id="app-1",
        channel_id="ch-1",
        track="stable",
        rollout_in_progress=True,
        policy_updates_enabled=True,
        policy_timezone="Europe/Berlin",
        policy_period_interval="2 hours",
        policy_max_updates_per_period=5,
        policy_update_timeout="60 minutes",
    )


def test_policy_defaults():
    state = GroupResource.parse({"application_id": "app-1", "name": "stable"})

    assert state.policy_updates_enabled is False
    assert state.policy_safe_mode is False
    assert state.policy_office_hours is False
    assert state.policy_timezone == "Asia/Calcutta"
    assert state.policy_period_interval == "1 hours"
    assert state.policy_max_updates_per_period == 1
    assert state.policy_update_timeout == "1 days"


def test_group_config():
    state = GroupState(application_id="app-1", name="stable", channel_id="ch-1")

    config = group_config(state)

    assert config.name == "stable"
    assert config.channel_id == "ch-1"
    assert config.policy_timezone == "Asia/Calcutta"
    assert config.policy_max_updates_per_period == 1
    assert config.track is None
    assert config.policy_updates_enabled is False


def test_group_state(group):
    state = group_state(group)

    assert state.id == "grp-1"
    assert state.rollout_in_progress is True
    assert state.policy_timezone == "Europe/Berlin"
    assert state.policy_max_updates_per_period == 5


def test_create_and_read(api, client, group):
    client.create_group.return_value = group
    client.paginate_groups.return_value = GroupPage(totalCount=1, groups=[group])
    resource = GroupResource(api)

    created = resource.create(GroupState(application_id="app-1", name="stable"))
    read = resource.read(created)

    assert read.id == created.id == "grp-1"
    assert client.create_group.call_args.args[0] == "app-1"


def test_read_missing(api, client):
    client.paginate_groups.return_value = GroupPage(totalCount=0, groups=[])

    with pytest.raises(NotFoundError) as exc_info:
        GroupResource(api).read(GroupState(application_id="app-1", name="beta"))

    assert exc_info.value.summary == "Group not found"
    assert "app-1" in exc_info.value.detail


def test_update_and_delete(api, client, group):
    client.update_group.return_value = group
    state = group_state(group)
    resource = GroupResource(api)

    resource.update(state)
    resource.delete(state)

    assert client.update_group.call_args.args[:2] == ("app-1", "grp-1")
    client.delete_group.assert_called_once_with("app-1", "grp-1")


def test_data_source(api, client, group):
    client.paginate_groups.return_value = GroupPage(totalCount=1, groups=[group])

    state = GroupDataSource(api).read(application_id="app-1", name="stable")

    assert state.channel_id == "ch-1"


def test_schema_defaults_in_description():
    schema = GroupResource.schema()

    assert schema["policy_timezone"].full_description.endswith("Defaults to `Asia/Calcutta`.")
    assert schema["track"].computed and schema["track"].optional
    assert schema["rollout_in_progress"].computed and not schema["rollout_in_progress"].optional
