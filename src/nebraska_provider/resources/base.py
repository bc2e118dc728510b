"""
Base classes for Nebraska resources and data sources.

Each entity (application, channel, group, package) implements a Resource
with create/read/update/delete and a DataSource with read. Both operate on
typed state models instead of a dynamic attribute bag and talk to the
server exclusively through the ApiClient built at configure time.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, ClassVar, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from nebraska_provider.core.auth import ApiClient
from nebraska_provider.core.errors import InvalidAttributeError
from nebraska_provider.resources.schema import Attribute, data_source_schema, resource_schema

StateT = TypeVar("StateT", bound="ResourceState")


class ResourceState(BaseModel):
    """Base for resource state models."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    def to_attributes(self) -> Dict[str, Any]:
        """Attribute values as plain data."""
        return self.model_dump(mode="json")


def parse_state(model: Type[StateT], attributes: Mapping[str, Any]) -> StateT:
    """Validate raw attribute values into a state model.

    Raises:
        InvalidAttributeError: On the first invalid attribute
    """
    try:
        return model.model_validate(dict(attributes))
    except ValidationError as e:
        error = e.errors()[0]
        attribute = ".".join(str(part) for part in error["loc"]) or model.__name__
        raise InvalidAttributeError(attribute, error["msg"]) from e


class Resource(ABC, Generic[StateT]):
    """Managed Nebraska object."""

    type_name: ClassVar[str]
    description: ClassVar[str]
    state_model: ClassVar[Type[ResourceState]]

    def __init__(self, api: ApiClient):
        """Initialize resource.

        Args:
            api: Authenticated client produced by provider configuration
        """
        self.api = api

    @property
    def client(self):
        return self.api.client

    @classmethod
    def schema(cls) -> Dict[str, Attribute]:
        return resource_schema(cls.state_model)

    @classmethod
    def parse(cls, attributes: Mapping[str, Any]) -> StateT:
        return parse_state(cls.state_model, attributes)

    @classmethod
    def requires_replace(cls, prior: StateT, planned: StateT) -> List[str]:
        """Names of changed attributes that force recreation."""
        return [
            name
            for name, attr in cls.schema().items()
            if attr.force_new and getattr(prior, name) != getattr(planned, name)
        ]

    @abstractmethod
    def create(self, state: StateT) -> StateT:
        """Create the object and return its state as stored by the server."""
        raise NotImplementedError

    @abstractmethod
    def read(self, state: StateT) -> StateT:
        """Re-fetch the object described by state."""
        raise NotImplementedError

    @abstractmethod
    def update(self, state: StateT) -> StateT:
        """Replace all mutable fields of the object identified by state.id."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, state: StateT) -> None:
        raise NotImplementedError

    @staticmethod
    def _require_id(state: ResourceState) -> str:
        object_id = getattr(state, "id", None)
        if not object_id:
            raise InvalidAttributeError("id", "operation requires the id of an existing object")
        return object_id


class DataSource(ABC, Generic[StateT]):
    """Read-only lookup of an existing Nebraska object."""

    type_name: ClassVar[str]
    description: ClassVar[str]
    state_model: ClassVar[Type[ResourceState]]
    lookup_keys: ClassVar[Tuple[str, ...]]

    def __init__(self, api: ApiClient):
        self.api = api

    @property
    def client(self):
        return self.api.client

    @classmethod
    def schema(cls) -> Dict[str, Attribute]:
        return data_source_schema(cls.state_model, cls.lookup_keys)

    @classmethod
    def parse_lookup(cls, attributes: Mapping[str, Any]) -> Dict[str, Any]:
        """Extract the lookup keys, failing on missing ones."""
        missing = [key for key in cls.lookup_keys if attributes.get(key) in (None, "")]
        if missing:
            raise InvalidAttributeError(missing[0], f"{missing[0]} is required to look up {cls.type_name}")
        return {key: attributes[key] for key in cls.lookup_keys}

    @abstractmethod
    def read(self, **lookup: Any) -> StateT:
        raise NotImplementedError


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a server timestamp in its default string form."""
    return str(value) if value is not None else None
