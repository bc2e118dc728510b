"""Attribute validators shared by the resource state models."""

import re
from urllib.parse import urlparse

PRODUCT_ID_MAX_LENGTH = 155

PRODUCT_ID_SEGMENT = r"[a-zA-Z](?:[a-zA-Z0-9\-]*[a-zA-Z0-9])?"

# e.g. io.example.App: letters first, then letters/digits/hyphens, >= 2 segments
PRODUCT_ID_PATTERN = re.compile(rf"{PRODUCT_ID_SEGMENT}(?:\.{PRODUCT_ID_SEGMENT})+")


def validate_product_id(product_id: str) -> str:
    """Validate an application product ID.

    Raises:
        ValueError: If the ID is too long or not a dotted reverse domain
    """
    if len(product_id) > PRODUCT_ID_MAX_LENGTH:
        raise ValueError(
            f"product ID {product_id} is not valid (max length {PRODUCT_ID_MAX_LENGTH})"
        )
    if not PRODUCT_ID_PATTERN.fullmatch(product_id):
        raise ValueError(
            f"product ID {product_id} is not valid (has to be in the form e.g. io.example.App)"
        )
    return product_id


def validate_not_empty(value: str) -> str:
    if value == "":
        raise ValueError("expected a non-empty string")
    return value


def validate_http_url(value: str) -> str:
    """Validate that value is an http or https URL with a host."""
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"expected {value!r} to be an http or https URL")
    return value
