"""jCard (RFC 7095) validation for entity vcardArray values.

Property names, parameter names and value types are case-insensitive; each
property node's name is upper-cased once and shared by all its checks.
"""

import logging
from collections import Counter
from typing import Any
from urllib.parse import urlsplit

from ..constants import (
    ADR_VALUE_LENGTH,
    CONTACT_URI_SCHEMES,
    JCARD_PARAMETERS,
    JCARD_PROPERTY_TYPES,
    JCARD_PROPERTY_VALUES,
    JCARD_VALUE_TYPES,
)
from .context import ValidationContext
from .predicates import is_array, is_object, is_string

logger = logging.getLogger(__name__)

EXTENSION_PREFIX = "X-"


def property_name(prop: Any) -> str | None:
    """Upper-cased name of a jCard property node, or None if it has none."""
    if is_array(prop) and len(prop) > 0 and is_string(prop[0]):
        return prop[0].upper()
    return None


def validate_jcard(ctx: ValidationContext, jcard: Any) -> None:
    """Validate a jCard: a non-empty array of property nodes."""
    ctx.msg("validating jCard object...")

    with ctx.specification("rfc7095"):
        if not ctx.add(is_array(jcard), "jCard MUST be an array.", "section-3.2"):
            return

        if not ctx.add(len(jcard) > 0, "jCard MUST NOT be empty.", "section-3.2"):
            return

        ctx.iterate(jcard, lambda prop: validate_jcard_property(ctx, prop))

    names = Counter(property_name(prop) for prop in jcard)

    with ctx.specification("rfc6350"):
        ctx.add(
            names["VERSION"] == 1,
            f"jCard MUST have exactly one VERSION property (found {names['VERSION']}).",
            "section-6.7.9",
        )
        ctx.add(
            names["FN"] > 0,
            "jCard MUST have at least one FN property.",
            "section-6.2.1",
        )


def validate_jcard_property(ctx: ValidationContext, prop: Any) -> None:
    """Validate a property node: [name, parameters, value type, value, ...]."""
    if not ctx.add(is_array(prop), "jCard property MUST be an array.", "section-3.3"):
        return

    if not ctx.add(
        len(prop) >= 4,
        "jCard property MUST contain at least four (4) elements.",
        "section-3.3",
    ):
        return

    name = property_name(prop)

    with ctx.push_path("[0]"):
        validate_jcard_property_type(ctx, prop[0], name)

    with ctx.push_path("[1]"):
        validate_jcard_property_parameters(ctx, prop[1])

    with ctx.push_path("[2]"):
        validate_jcard_property_value_type(ctx, prop[2])

    for i, value in enumerate(prop[3:], start=3):
        with ctx.push_path(f"[{i}]"):
            validate_jcard_property_value(ctx, name, value)


def validate_jcard_property_type(ctx: ValidationContext, value: Any, name: str | None) -> None:
    if not ctx.add(is_string(value), "Item #1 of jCard property MUST be a string.", "section-3.3"):
        return

    if not name.startswith(EXTENSION_PREFIX):
        ctx.add(
            name in JCARD_PROPERTY_TYPES,
            f"Property type '{value}' MUST be present in the IANA registry.",
            "section-3.3",
        )


def validate_jcard_property_parameters(ctx: ValidationContext, parameters: Any) -> None:
    if not ctx.add(is_object(parameters), "Item #2 of jCard property MUST be an object.", "section-3.4"):
        return

    for key, value in parameters.items():
        with ctx.push_path(f".{key}"):
            if not key.upper().startswith(EXTENSION_PREFIX):
                ctx.add(
                    key.upper() in JCARD_PARAMETERS,
                    f"Parameter name '{key}' MUST be present in the IANA registry.",
                    "section-3.4",
                )

            ctx.add(
                is_string(value) or (is_array(value) and all(is_string(v) for v in value)),
                f"The value of parameter '{key}' MUST be a string or an array of strings.",
                "section-3.4",
            )


def validate_jcard_property_value_type(ctx: ValidationContext, value_type: Any) -> None:
    if ctx.add(is_string(value_type), "Item #3 of jCard property MUST be a string.", "section-3.5"):
        ctx.add(
            value_type.upper() in JCARD_VALUE_TYPES,
            f"Value type '{value_type}' MUST be present in the IANA registry.",
            "section-3.5",
        )


def validate_jcard_property_value(ctx: ValidationContext, name: str | None, value: Any) -> None:
    """Apply the type-specific rules for the value of property ``name``."""
    with ctx.specification("rfc6350"):
        if name in JCARD_PROPERTY_VALUES:
            permitted = JCARD_PROPERTY_VALUES[name]
            ctx.add(
                is_string(value) and value.lower() in permitted,
                f"Value '{value}' MUST be one of: [{'|'.join(sorted(permitted))}].",
                "section-6",
            )

        if name == "ADR" and is_array(value):
            ctx.add(
                len(value) == ADR_VALUE_LENGTH,
                f"Length of the array in an ADR property MUST be exactly {ADR_VALUE_LENGTH}.",
                "section-6.3.1",
            )

        if name == "CONTACT-URI":
            ctx.add(
                is_contact_uri(value),
                f"Value '{value}' of a CONTACT-URI property MUST be a URL with a "
                f"{', '.join(sorted(CONTACT_URI_SCHEMES))} scheme.",
            )


def is_contact_uri(value: Any) -> bool:
    if not is_string(value) or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False

    if parts.scheme.lower() not in CONTACT_URI_SCHEMES:
        return False
    if parts.scheme.lower() == "mailto":
        return "@" in parts.path
    return bool(parts.netloc)
