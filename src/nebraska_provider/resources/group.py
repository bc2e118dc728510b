"""Nebraska group resource and data source."""

import logging
from typing import Optional

from pydantic import Field, field_validator

from nebraska_provider.api.models import Group, GroupConfig
from nebraska_provider.core.errors import NotFoundError
from nebraska_provider.core.pagination import find_in_pages
from nebraska_provider.resources.base import DataSource, Resource, ResourceState, format_timestamp
from nebraska_provider.resources.validators import validate_not_empty

logger = logging.getLogger(__name__)

COMPUTED = {"computed": True, "read_only": True}


class GroupState(ResourceState):
    """A group provides a release channel to machines and controls its update policy."""

    id: Optional[str] = Field(None, description="ID of the group.", json_schema_extra=COMPUTED)
    application_id: str = Field(
        description="ID of the application this group belongs to.",
        json_schema_extra={"force_new": True},
    )
    name: str = Field(description="Name of the group.")
    description: Optional[str] = Field(None, description="A description of the group.")
    track: Optional[str] = Field(
        None,
        description="Identifier for clients, filled with the group ID if omitted.",
        json_schema_extra={"computed": True},
    )
    channel_id: Optional[str] = Field(None, description="The channel this group provides.")
    created_ts: Optional[str] = Field(None, description="Creation timestamp.", json_schema_extra=COMPUTED)
    rollout_in_progress: Optional[bool] = Field(
        None,
        description="Indicates whether a rollout is currently in progress for this group.",
        json_schema_extra=COMPUTED,
    )
    policy_updates_enabled: bool = Field(False, description="Enable updates.")
    policy_safe_mode: bool = Field(
        False,
        description="Safe mode will only update 1 instance at a time, and stop if an update fails.",
    )
    policy_office_hours: bool = Field(False, description="Only update between 9am and 5pm.")
    policy_timezone: str = Field(
        "Asia/Calcutta", description="Timezone used to inform `policy_office_hours`."
    )
    policy_period_interval: str = Field(
        "1 hours", description="Period used in combination with `policy_max_updates_per_period`."
    )
    policy_max_updates_per_period: int = Field(
        1,
        description=(
            "The maximum number of updates that can be performed within the "
            "`policy_period_interval`."
        ),
    )
    policy_update_timeout: str = Field("1 days", description="Timeout for updates.")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_not_empty(v)


def group_config(state: GroupState) -> GroupConfig:
    return GroupConfig(
        name=state.name,
        policy_max_updates_per_period=state.policy_max_updates_per_period,
        policy_period_interval=state.policy_period_interval,
        policy_timezone=state.policy_timezone,
        policy_update_timeout=state.policy_update_timeout,
        channel_id=state.channel_id,
        description=state.description,
        track=state.track,
        policy_office_hours=state.policy_office_hours,
        policy_safe_mode=state.policy_safe_mode,
        policy_updates_enabled=state.policy_updates_enabled,
    )


def group_state(group: Group) -> GroupState:
    return GroupState.model_construct(
        id=group.id,
        application_id=group.application_id,
        name=group.name,
        description=group.description,
        track=group.track,
        channel_id=group.channel_id,
        created_ts=format_timestamp(group.created_ts),
        rollout_in_progress=group.rollout_in_progress,
        policy_updates_enabled=group.policy_updates_enabled,
        policy_safe_mode=group.policy_safe_mode,
        policy_office_hours=group.policy_office_hours,
        policy_timezone=group.policy_timezone or "",
        policy_period_interval=group.policy_period_interval,
        policy_max_updates_per_period=group.policy_max_updates_per_period,
        policy_update_timeout=group.policy_update_timeout,
    )


def find_group(client, application_id: str, name: str) -> Group:
    """Find a group by name.

    Raises:
        NotFoundError: If no page holds a matching group
    """
    group = find_in_pages(
        lambda page, per_page: client.paginate_groups(application_id, page, per_page),
        lambda g: g.name == name,
    )
    if group is None:
        raise NotFoundError(
            "Group not found", f"Group not found for name: {name!r}, appId: {application_id!r}"
        )
    return group


class GroupResource(Resource[GroupState]):
    type_name = "nebraska_group"
    description = (
        "A group provides a particular release channel to machines and controls "
        "various options that manage the update procedure."
    )
    state_model = GroupState

    def create(self, state: GroupState) -> GroupState:
        group = self.client.create_group(state.application_id, group_config(state))
        logger.info(f"Created group {group.id} ({group.name})")
        return group_state(group)

    def read(self, state: GroupState) -> GroupState:
        return group_state(find_group(self.client, state.application_id, state.name))

    def update(self, state: GroupState) -> GroupState:
        group_id = self._require_id(state)
        group = self.client.update_group(state.application_id, group_id, group_config(state))
        logger.info(f"Updated group {group.id}")
        return group_state(group)

    def delete(self, state: GroupState) -> None:
        group_id = self._require_id(state)
        self.client.delete_group(state.application_id, group_id)
        logger.info(f"Deleted group {group_id}")


class GroupDataSource(DataSource[GroupState]):
    type_name = "nebraska_group"
    description = "A group is used by machines to track releases"
    state_model = GroupState
    lookup_keys = ("application_id", "name")

    def read(self, application_id: str, name: str) -> GroupState:
        return group_state(find_group(self.client, application_id, name))
