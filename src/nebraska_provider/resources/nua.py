"""
URL encoding for "git" packages.

Nebraska has no "git" package type. Such packages are stored as type
"other", with the commit, namespace and kustomize config appended to the
URL as base64-encoded query parameters. Reading a package back strips
those parameters and restores the three values.
"""

import base64
import binascii
from typing import NamedTuple
from urllib.parse import quote, unquote

from nebraska_provider.core.errors import InvalidAttributeError

NUA_COMMIT = "nua_commit"
NUA_NAMESPACE = "nua_namespace"
NUA_KUSTOMIZE_CONFIG = "nua_kustomize_config"

NUA_PARAMS = (NUA_COMMIT, NUA_NAMESPACE, NUA_KUSTOMIZE_CONFIG)


class NuaURL(NamedTuple):
    """A package URL split from its encoded git metadata."""

    url: str
    commit: str
    namespace: str
    kustomize_config: str


def base64_encode(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def base64_decode(value: str) -> str:
    return base64.b64decode(value.encode("ascii"), validate=True).decode("utf-8")


def is_nua_url(url: str) -> bool:
    """Whether url carries git metadata.

    Detection is by substring: an "other" package whose URL merely
    mentions one of the parameter names is treated as git as well.
    """
    return any(name in url for name in NUA_PARAMS)


def encode_nua_url(url: str, commit: str, namespace: str, kustomize_config: str) -> str:
    """Append the git metadata to url as base64 query parameters.

    The URL is split as a raw string; everything outside the appended
    parameters is kept byte for byte, including an empty query or fragment.
    """
    base, hmark, fragment = url.partition("#")
    prefix, qmark, query = base.partition("?")
    encoded = [
        f"{name}={quote(base64_encode(value), safe='')}"
        for name, value in zip(NUA_PARAMS, (commit, namespace, kustomize_config))
    ]
    segments = [query] if qmark else []
    return prefix + "?" + "&".join(segments + encoded) + hmark + fragment


def decode_nua_url(encoded_url: str) -> NuaURL:
    """Split an encoded URL back into the plain URL and git metadata.

    Missing parameters decode to empty strings.

    Raises:
        InvalidAttributeError: If a parameter is not valid base64 text
    """
    base, hmark, fragment = encoded_url.partition("#")
    prefix, qmark, query = base.partition("?")
    values = {name: "" for name in NUA_PARAMS}
    kept = []
    for segment in query.split("&") if qmark else []:
        key, _, value = segment.partition("=")
        if unquote(key) in values:
            values[unquote(key)] = unquote(value)
        else:
            kept.append(segment)

    plain = prefix + ("?" + "&".join(kept) if kept else "") + hmark + fragment

    decoded = {}
    for name, value in values.items():
        try:
            decoded[name] = base64_decode(value)
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise InvalidAttributeError(name, f"Couldn't decode {name} from package url: {e}") from e

    return NuaURL(
        url=plain,
        commit=decoded[NUA_COMMIT],
        namespace=decoded[NUA_NAMESPACE],
        kustomize_config=decoded[NUA_KUSTOMIZE_CONFIG],
    )
