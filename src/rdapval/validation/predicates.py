"""Type and format predicates over untyped JSON values."""

import re
from datetime import datetime
from enum import Enum
from typing import Any

import idna


class JsonKind(str, Enum):
    """The kind of a decoded JSON value."""
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def json_kind(value: Any) -> JsonKind:
    """Classify a value produced by ``json.loads``."""
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, int):
        return JsonKind.INTEGER
    if isinstance(value, float):
        return JsonKind.INTEGER if value.is_integer() else JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_array(value: Any) -> bool:
    return isinstance(value, list)


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """True for integral numbers; booleans are not integers in JSON."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def is_integer_string(value: Any) -> bool:
    """True for strings holding a decimal integer, e.g. an IANA Registrar ID."""
    return isinstance(value, str) and re.fullmatch(r"\s*[+-]?\d+\s*", value) is not None


def find_key(obj: dict, name: str) -> str | None:
    """Return the first key of ``obj`` equal to ``name`` ignoring case."""
    wanted = name.upper()
    for key in obj:
        if isinstance(key, str) and key.upper() == wanted:
            return key
    return None


_IPV4_PATTERN = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")
_IPV6_PATTERN = re.compile(r"^[0-9a-f:][0-9a-f:.]+$", re.IGNORECASE)


def is_ipv4_like(value: Any) -> bool:
    """Syntactic dotted-quad check, not full address parsing."""
    return isinstance(value, str) and _IPV4_PATTERN.match(value) is not None


def is_ipv6_like(value: Any) -> bool:
    """Syntactic hex-colon check, not full address parsing."""
    return isinstance(value, str) and ":" in value and _IPV6_PATTERN.match(value) is not None


# RFC 3339 profile of ISO 8601, loosely: date, "T", time, optional
# fraction and an optional offset
_DATETIME_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?([Zz]|[+-]\d{2}:?\d{2})?$"
)


def is_iso8601_datetime(value: Any) -> bool:
    """True if ``value`` is an ISO 8601 date-time that also parses."""
    if not isinstance(value, str) or not _DATETIME_PATTERN.match(value):
        return False
    try:
        datetime.fromisoformat(value.replace("z", "Z"))
    except ValueError:
        return False
    return True


def is_country_code_format(value: Any) -> bool:
    """True for two upper-case letters."""
    return isinstance(value, str) and re.fullmatch(r"[A-Z]{2}", value) is not None


def is_ulabel(label: str) -> bool:
    """True if ``label`` contains non-ASCII characters."""
    return any(ord(ch) > 126 for ch in label)


def to_ascii(name: str) -> str | None:
    """IDNA2008 ToASCII of a domain name, or None if it cannot be converted."""
    try:
        return idna.encode(name.rstrip("."), uts46=True).decode("ascii")
    except UnicodeError:
        return None


def to_unicode(name: str) -> str | None:
    """IDNA2008 ToUnicode of a domain name, or None if it cannot be converted."""
    try:
        return idna.decode(name.rstrip("."), uts46=True)
    except UnicodeError:
        return None


def compare_unicode(unicode_name: Any, ldh_name: Any) -> bool:
    """True if ``unicode_name`` and ``ldh_name`` denote the same domain.

    Both directions must agree: ToASCII(unicode) == ldh and
    ToUnicode(ldh) == unicode, compared case-insensitively.
    """
    if not isinstance(unicode_name, str) or not isinstance(ldh_name, str):
        return False

    ascii_form = to_ascii(unicode_name)
    unicode_form = to_unicode(ldh_name)
    if ascii_form is None or unicode_form is None:
        return False

    return (
        ascii_form.lower() == ldh_name.rstrip(".").lower()
        and unicode_form.lower() == unicode_name.rstrip(".").lower()
    )
