"""Nebraska channel resource and data source.

Channels are looked up by (name, arch) within an application by walking
the paginated channel list.
"""

import logging
from typing import Optional

from pydantic import Field, field_validator

from nebraska_provider.api.models import Channel, ChannelConfig
from nebraska_provider.api.types import ARCH_NAMES, VALID_ARCHES, Arch, arch_name
from nebraska_provider.core.errors import NotFoundError
from nebraska_provider.core.pagination import find_in_pages
from nebraska_provider.resources.base import DataSource, Resource, ResourceState, format_timestamp
from nebraska_provider.resources.validators import validate_not_empty

logger = logging.getLogger(__name__)

COMPUTED = {"computed": True, "read_only": True}


class ChannelState(ResourceState):
    """A release channel that provides a particular package version."""

    id: Optional[str] = Field(None, description="ID of the channel.", json_schema_extra=COMPUTED)
    application_id: str = Field(
        description="ID of the application this channel belongs to.",
        json_schema_extra={"force_new": True},
    )
    name: str = Field(
        description="Name of the channel. Can be an existing one as long as the arch is different."
    )
    arch: str = Field(
        description="Arch. Cannot be changed once created.",
        json_schema_extra={"force_new": True},
    )
    color: Optional[str] = Field(
        None,
        description="Hex color code that informs the color of the channel in the UI.",
        json_schema_extra={"computed": True},
    )
    package_id: Optional[str] = Field(None, description="The id of the package this channel provides.")
    created_ts: Optional[str] = Field(None, description="Creation timestamp.", json_schema_extra=COMPUTED)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_not_empty(v)

    @field_validator("arch")
    @classmethod
    def validate_arch(cls, v: str) -> str:
        if v not in VALID_ARCHES:
            raise ValueError(f"Invalid arch: {v}. Must be one of {VALID_ARCHES}")
        return v


def channel_config(state: ChannelState) -> ChannelConfig:
    return ChannelConfig(
        name=state.name,
        color=state.color or "",
        package_id=state.package_id,
        arch=int(Arch.from_string(state.arch)),
        application_id=state.application_id,
    )


def channel_state(channel: Channel) -> ChannelState:
    return ChannelState.model_construct(
        id=channel.id,
        application_id=channel.application_id,
        name=channel.name,
        arch=arch_name(channel.arch),
        color=channel.color,
        package_id=channel.package_id,
        created_ts=format_timestamp(channel.created_ts),
    )


def find_channel(client, application_id: str, name: str, arch: str) -> Channel:
    """Find a channel by name and arch.

    Raises:
        NotFoundError: If no page holds a matching channel
    """
    channel = find_in_pages(
        lambda page, per_page: client.paginate_channels(application_id, page, per_page),
        lambda c: c.name == name and ARCH_NAMES.get(c.arch) == arch,
    )
    if channel is None:
        raise NotFoundError(
            "Channel not found", f"Channel not found for name: {name!r}, arch: {arch!r}"
        )
    return channel


class ChannelResource(Resource[ChannelState]):
    type_name = "nebraska_channel"
    description = "A release channel that provides a particular package version."
    state_model = ChannelState

    def create(self, state: ChannelState) -> ChannelState:
        channel = self.client.create_channel(state.application_id, channel_config(state))
        logger.info(f"Created channel {channel.id} ({channel.name}/{state.arch})")
        return channel_state(channel)

    def read(self, state: ChannelState) -> ChannelState:
        return channel_state(find_channel(self.client, state.application_id, state.name, state.arch))

    def update(self, state: ChannelState) -> ChannelState:
        channel_id = self._require_id(state)
        channel = self.client.update_channel(state.application_id, channel_id, channel_config(state))
        logger.info(f"Updated channel {channel.id}")
        return channel_state(channel)

    def delete(self, state: ChannelState) -> None:
        channel_id = self._require_id(state)
        self.client.delete_channel(state.application_id, channel_id)
        logger.info(f"Deleted channel {channel_id}")


class ChannelDataSource(DataSource[ChannelState]):
    type_name = "nebraska_channel"
    description = "A release channel that provides a particular package version."
    state_model = ChannelState
    lookup_keys = ("application_id", "name", "arch")

    def read(self, application_id: str, name: str, arch: str) -> ChannelState:
        return channel_state(find_channel(self.client, application_id, name, arch))
