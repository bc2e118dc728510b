"""Nebraska package resource and data source.

Packages are looked up by (version, arch) within an application. Besides
the server-side types (flatcar, docker, rkt, other) a package can be of the
client-side "git" type, whose metadata rides along in the package URL.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nebraska_provider.api.models import FlatcarAction, FlatcarActionPackage, Package, PackageConfig
from nebraska_provider.api.types import (
    ARCH_NAMES,
    GIT_PACKAGE_TYPE,
    VALID_ARCHES,
    VALID_PACKAGE_TYPES,
    Arch,
    PackageType,
    arch_name,
)
from nebraska_provider.core.errors import InvalidAttributeError, NotFoundError
from nebraska_provider.core.pagination import find_in_pages
from nebraska_provider.resources.base import DataSource, Resource, ResourceState, format_timestamp
from nebraska_provider.resources.nua import NUA_PARAMS, decode_nua_url, encode_nua_url, is_nua_url
from nebraska_provider.resources.validators import validate_http_url, validate_not_empty

logger = logging.getLogger(__name__)

COMPUTED = {"computed": True, "read_only": True}


class FlatcarActionState(BaseModel):
    """A Flatcar specific Omaha action."""

    model_config = ConfigDict(extra="forbid")

    sha256: str = Field(
        description=(
            "A base64 encoded sha256 hash of the action. Tip: "
            "`cat update.gz | openssl dgst -sha256 -binary | base64`."
        )
    )
    id: Optional[str] = Field(None, json_schema_extra=COMPUTED)
    event: Optional[str] = Field(None, json_schema_extra=COMPUTED)
    chromeos_version: Optional[str] = Field(None, json_schema_extra=COMPUTED)
    needs_admin: Optional[bool] = Field(None, json_schema_extra=COMPUTED)
    is_delta: Optional[bool] = Field(None, json_schema_extra=COMPUTED)
    disable_payload_backoff: Optional[bool] = Field(None, json_schema_extra=COMPUTED)
    metadata_signature_rsa: Optional[str] = Field(None, json_schema_extra=COMPUTED)
    metadata_size: Optional[str] = Field(None, json_schema_extra=COMPUTED)
    deadline: Optional[str] = Field(None, json_schema_extra=COMPUTED)
    created_ts: Optional[str] = Field(None, json_schema_extra=COMPUTED)


class PackageState(ResourceState):
    """A versioned package of the application."""

    id: Optional[str] = Field(None, description="ID of the package.", json_schema_extra=COMPUTED)
    application_id: str = Field(
        description="ID of the application this package belongs to.",
        json_schema_extra={"force_new": True},
    )
    version: str = Field(description="Package version.")
    url: str = Field(description="URL where the package is available.")
    arch: str = Field("all", description="Package arch.", json_schema_extra={"force_new": True})
    type: str = Field("flatcar", description="Type of package.")
    filename: str = Field(description="The filename of the package.")
    description: str = Field(description="A description of the package.")
    size: str = Field(description="The size, in bytes.")
    hash: str = Field(
        description=(
            "A base64 encoded sha1 hash of the package digest. Tip: "
            "`cat update.gz | openssl dgst -sha1 -binary | base64`."
        )
    )
    channels_blacklist: List[str] = Field(
        default_factory=list,
        description="A list of channels (by id) that cannot point to this package.",
    )
    flatcar_action: Optional[List[FlatcarActionState]] = Field(
        None,
        description="A Flatcar specific Omaha action.",
        json_schema_extra={"computed": True, "max_items": 1},
    )
    nua_commit: Optional[str] = Field(None, description="Git commit of a `git` package.")
    nua_namespace: Optional[str] = Field(None, description="Namespace of a `git` package.")
    nua_kustomize_config: Optional[str] = Field(
        None, description="Kustomize configuration of a `git` package."
    )
    created_ts: Optional[str] = Field(None, description="Creation timestamp.", json_schema_extra=COMPUTED)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        return validate_not_empty(v)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return validate_http_url(v)

    @field_validator("arch")
    @classmethod
    def validate_arch(cls, v: str) -> str:
        if v not in VALID_ARCHES:
            raise ValueError(f"Invalid arch: {v}. Must be one of {VALID_ARCHES}")
        return v

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        valid_types = VALID_PACKAGE_TYPES + [GIT_PACKAGE_TYPE]
        if v not in valid_types:
            raise ValueError(f"Invalid package type: {v}. Must be one of {valid_types}")
        return v

    @field_validator("flatcar_action")
    @classmethod
    def validate_flatcar_action(cls, v: Optional[List[FlatcarActionState]]) -> Optional[List[FlatcarActionState]]:
        if v is not None and len(v) > 1:
            raise ValueError("flatcar_action accepts at most one item")
        return v


def flatten_flatcar_action(action: Optional[FlatcarAction]) -> List[FlatcarActionState]:
    """Flatcar action as a list of at most one item."""
    if action is None:
        return []
    return [
        FlatcarActionState(
            id=action.id,
            event=action.event,
            chromeos_version=action.chromeos_version,
            sha256=action.sha256,
            needs_admin=action.needs_admin,
            is_delta=action.is_delta,
            disable_payload_backoff=action.disable_payload_backoff,
            metadata_signature_rsa=action.metadata_signature_rsa,
            metadata_size=action.metadata_size,
            deadline=action.deadline,
            created_ts=format_timestamp(action.created_ts),
        )
    ]


def expand_flatcar_action_sha256(actions: Optional[List[FlatcarActionState]]) -> str:
    """sha256 of the first flatcar action, or an empty string."""
    if not actions:
        return ""
    return actions[0].sha256 or ""


def package_config(state: PackageState) -> PackageConfig:
    """Build the API request for a package.

    Raises:
        InvalidAttributeError: On an unknown arch/type or missing git fields
    """
    url = state.url
    type_name = state.type

    if type_name == GIT_PACKAGE_TYPE:
        for name in NUA_PARAMS:
            if getattr(state, name) is None:
                raise InvalidAttributeError(name, f"{name!r} is required for package type 'git'")
        url = encode_nua_url(state.url, state.nua_commit, state.nua_namespace, state.nua_kustomize_config)
        type_name = str(PackageType.OTHER)
        logger.debug(f"Encoded git metadata into package url for version {state.version}")

    sha256 = expand_flatcar_action_sha256(state.flatcar_action)
    return PackageConfig(
        application_id=state.application_id,
        arch=int(Arch.from_string(state.arch)),
        type=int(PackageType.from_string(type_name)),
        version=state.version,
        url=url,
        filename=state.filename,
        description=state.description,
        size=state.size,
        hash=state.hash,
        channels_blacklist=list(state.channels_blacklist),
        flatcar_action=FlatcarActionPackage(sha256=sha256) if sha256 else None,
    )


def package_state(package: Package) -> PackageState:
    """Map an API package to its state, decoding git metadata from the URL."""
    url = package.url
    type_name = PackageType.name_for_code(package.type)
    nua_commit = nua_namespace = nua_kustomize_config = None

    if is_nua_url(package.url):
        decoded = decode_nua_url(package.url)
        url = decoded.url
        type_name = GIT_PACKAGE_TYPE
        nua_commit = decoded.commit
        nua_namespace = decoded.namespace
        nua_kustomize_config = decoded.kustomize_config

    return PackageState.model_construct(
        id=package.id,
        application_id=package.application_id,
        version=package.version,
        url=url,
        arch=arch_name(package.arch),
        type=type_name,
        filename=package.filename or "",
        description=package.description or "",
        size=package.size or "",
        hash=package.hash or "",
        channels_blacklist=list(package.channels_blacklist or []),
        flatcar_action=flatten_flatcar_action(package.flatcar_action),
        nua_commit=nua_commit,
        nua_namespace=nua_namespace,
        nua_kustomize_config=nua_kustomize_config,
        created_ts=format_timestamp(package.created_ts),
    )


def find_package(client, application_id: str, version: str, arch: str) -> Package:
    """Find a package by version and arch.

    Raises:
        NotFoundError: If no page holds a matching package
    """
    package = find_in_pages(
        lambda page, per_page: client.paginate_packages(application_id, page, per_page),
        lambda p: p.version == version and ARCH_NAMES.get(p.arch) == arch,
    )
    if package is None:
        raise NotFoundError(
            "Package not found", f"Package not found for version: {version!r}, arch: {arch!r}"
        )
    return package


class PackageResource(Resource[PackageState]):
    type_name = "nebraska_package"
    description = "A versioned package of the application."
    state_model = PackageState

    def create(self, state: PackageState) -> PackageState:
        package = self.client.create_package(state.application_id, package_config(state))
        logger.info(f"Created package {package.id} ({package.version}/{state.arch})")
        return package_state(package)

    def read(self, state: PackageState) -> PackageState:
        return package_state(find_package(self.client, state.application_id, state.version, state.arch))

    def update(self, state: PackageState) -> PackageState:
        package_id = self._require_id(state)
        package = self.client.update_package(state.application_id, package_id, package_config(state))
        logger.info(f"Updated package {package.id}")
        return package_state(package)

    def delete(self, state: PackageState) -> None:
        package_id = self._require_id(state)
        self.client.delete_package(state.application_id, package_id)
        logger.info(f"Deleted package {package_id}")


class PackageDataSource(DataSource[PackageState]):
    type_name = "nebraska_package"
    description = "Package of the application"
    state_model = PackageState
    lookup_keys = ("application_id", "version", "arch")

    def read(self, application_id: str, version: str, arch: str) -> PackageState:
        return package_state(find_package(self.client, application_id, version, arch))
