"""
Attribute schemas for resources and data sources.

Schemas are derived from the typed state models: field descriptions and
defaults come from pydantic, while flags the host needs (computed,
force_new, sensitive, max_items) live in each field's json_schema_extra.
"""

import types
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined


@dataclass(frozen=True)
class Attribute:
    """Schema of a single attribute."""

    name: str
    type: str
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    sensitive: bool = False
    default: Any = None
    max_items: Optional[int] = None
    elem: Optional[Dict[str, "Attribute"]] = None

    @property
    def full_description(self) -> str:
        """Description with the default value appended, if any."""
        desc = self.description
        if self.default is not None:
            desc += f" Defaults to `{self.default}`."
        return desc.strip()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["description"] = self.full_description
        if self.elem is not None:
            data["elem"] = {name: attr.to_dict() for name, attr in self.elem.items()}
        return data


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _nested_model(annotation: Any) -> Optional[Type[BaseModel]]:
    annotation = _unwrap_optional(annotation)
    if get_origin(annotation) is list:
        (inner,) = get_args(annotation) or (None,)
        if isinstance(inner, type) and issubclass(inner, BaseModel):
            return inner
    return None


def attribute_type(annotation: Any) -> str:
    """Map a Python annotation to a schema type name."""
    annotation = _unwrap_optional(annotation)
    origin = get_origin(annotation)
    if origin is list or annotation is list:
        return "list"
    if annotation is bool:
        return "bool"
    if annotation is int:
        return "int"
    return "string"


def _extra(field: FieldInfo) -> Dict[str, Any]:
    extra = field.json_schema_extra
    return extra if isinstance(extra, dict) else {}


def _default(field: FieldInfo) -> Any:
    if field.default is PydanticUndefined or field.default_factory is not None:
        return None
    return field.default


def resource_schema(model: Type[BaseModel]) -> Dict[str, Attribute]:
    """Build the resource schema of a state model."""
    attributes: Dict[str, Attribute] = {}
    for name, field in model.model_fields.items():
        extra = _extra(field)
        computed = bool(extra.get("computed", False))
        required = field.is_required()
        read_only = computed and bool(extra.get("read_only", False))
        nested = _nested_model(field.annotation)
        attributes[name] = Attribute(
            name=name,
            type=attribute_type(field.annotation),
            description=field.description or "",
            required=required,
            optional=not required and not read_only,
            computed=computed,
            force_new=bool(extra.get("force_new", False)),
            sensitive=bool(extra.get("sensitive", False)),
            default=None if computed else _default(field),
            max_items=extra.get("max_items"),
            elem=resource_schema(nested) if nested else None,
        )
    return attributes


def data_source_schema(model: Type[BaseModel], lookup_keys: Iterable[str]) -> Dict[str, Attribute]:
    """Build a data source schema: lookup keys are required, the rest computed."""
    keys = set(lookup_keys)
    attributes: Dict[str, Attribute] = {}
    for name, attr in resource_schema(model).items():
        is_key = name in keys
        elem = attr.elem
        if elem is not None:
            elem = {
                elem_name: Attribute(
                    name=elem_name,
                    type=elem_attr.type,
                    description=elem_attr.description,
                    computed=True,
                )
                for elem_name, elem_attr in elem.items()
            }
        attributes[name] = Attribute(
            name=name,
            type=attr.type,
            description=attr.description,
            required=is_key,
            computed=not is_key,
            sensitive=attr.sensitive,
            elem=elem,
        )
    return attributes
