from __future__ import annotations

"""Nebraska API request and response models.

These models mirror the JSON bodies of the Nebraska REST API. Responses
tolerate extra fields so newer servers keep working; requests are dumped
with ``exclude_none`` so optional fields stay unset on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Base for response models."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ServerConfig(ApiModel):
    """Subset of ``GET /config``."""

    auth_mode: str
    title: str | None = None
    logo: str | None = None
    access_management_url: str | None = None
    logout_url: str | None = None


class LoginToken(ApiModel):
    """``POST /login/token`` result plus the session cookie it set."""

    token: str
    cookie: str | None = None


# Applications


class AppConfig(BaseModel):
    """Body for creating/updating an application."""

    name: str
    description: str | None = None
    product_id: str | None = None


class Application(ApiModel):
    id: str
    name: str
    description: str | None = None
    product_id: str | None = None
    created_ts: datetime | None = None


# Channels


class ChannelConfig(BaseModel):
    """Body for creating/updating a channel."""

    name: str
    color: str
    arch: int
    application_id: str
    package_id: str | None = None


class Channel(ApiModel):
    id: str
    name: str
    color: str = ""
    arch: int = 0
    application_id: str = ""
    package_id: str | None = None
    created_ts: datetime | None = None


class ChannelPage(ApiModel):
    total_count: int = Field(0, alias="totalCount")
    count: int = 0
    channels: list[Channel] = Field(default_factory=list)

    @property
    def items(self) -> list[Channel]:
        return self.channels


# Groups


class GroupConfig(BaseModel):
    """Body for creating/updating a group."""

    name: str
    policy_max_updates_per_period: int
    policy_period_interval: str
    policy_timezone: str
    policy_update_timeout: str
    channel_id: str | None = None
    description: str | None = None
    track: str | None = None
    policy_office_hours: bool | None = None
    policy_safe_mode: bool | None = None
    policy_updates_enabled: bool | None = None


class Group(ApiModel):
    id: str
    name: str
    description: str | None = None
    application_id: str = ""
    channel_id: str | None = None
    track: str | None = None
    created_ts: datetime | None = None
    rollout_in_progress: bool = False
    policy_updates_enabled: bool = False
    policy_safe_mode: bool = False
    policy_office_hours: bool = False
    policy_timezone: str | None = None
    policy_period_interval: str = ""
    policy_max_updates_per_period: int = 0
    policy_update_timeout: str = ""


class GroupPage(ApiModel):
    total_count: int = Field(0, alias="totalCount")
    count: int = 0
    groups: list[Group] = Field(default_factory=list)

    @property
    def items(self) -> list[Group]:
        return self.groups


# Packages


class FlatcarActionPackage(BaseModel):
    """Writable part of a Flatcar action."""

    sha256: str | None = None


class FlatcarAction(ApiModel):
    """Omaha action attached to a Flatcar package."""

    id: str = ""
    event: str = ""
    chromeos_version: str = ""
    sha256: str = ""
    needs_admin: bool = False
    is_delta: bool = False
    disable_payload_backoff: bool = False
    metadata_signature_rsa: str = ""
    metadata_size: str = ""
    deadline: str = ""
    created_ts: datetime | None = None


class PackageConfig(BaseModel):
    """Body for creating/updating a package."""

    application_id: str
    arch: int
    type: int
    version: str
    url: str
    filename: str
    description: str
    size: str
    hash: str
    channels_blacklist: list[str] = Field(default_factory=list)
    flatcar_action: FlatcarActionPackage | None = None


class Package(ApiModel):
    id: str
    type: int = 0
    version: str
    url: str = ""
    filename: str | None = None
    description: str | None = None
    size: str | None = None
    hash: str | None = None
    arch: int = 0
    application_id: str = ""
    channels_blacklist: list[str] | None = None
    flatcar_action: FlatcarAction | None = None
    created_ts: datetime | None = None


class PackagePage(ApiModel):
    total_count: int = Field(0, alias="totalCount")
    count: int = 0
    packages: list[Package] = Field(default_factory=list)

    @property
    def items(self) -> list[Package]:
        return self.packages
