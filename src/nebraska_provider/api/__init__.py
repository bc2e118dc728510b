"""Typed client for the Nebraska REST API."""

from nebraska_provider.api.client import NebraskaClient, RequestEditor, RequestEditorAuth
from nebraska_provider.api.types import Arch, PackageType

__all__ = [
    "Arch",
    "NebraskaClient",
    "PackageType",
    "RequestEditor",
    "RequestEditorAuth",
]
