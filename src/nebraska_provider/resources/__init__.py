"""Resources and data sources managed by the Nebraska provider."""

from nebraska_provider.resources.application import ApplicationDataSource, ApplicationResource
from nebraska_provider.resources.base import DataSource, Resource, ResourceState
from nebraska_provider.resources.channel import ChannelDataSource, ChannelResource
from nebraska_provider.resources.group import GroupDataSource, GroupResource
from nebraska_provider.resources.package import PackageDataSource, PackageResource

__all__ = [
    "ApplicationDataSource",
    "ApplicationResource",
    "ChannelDataSource",
    "ChannelResource",
    "DataSource",
    "GroupDataSource",
    "GroupResource",
    "PackageDataSource",
    "PackageResource",
    "Resource",
    "ResourceState",
]
