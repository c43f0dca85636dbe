import re
from collections.abc import Mapping
from typing import Any
from typing import Final

from logsnag.errors import InvalidMessageError
from logsnag.primitives import ParserKind
from logsnag.primitives import UnixTimestamp

# Tag and property keys: lowercase letters and hyphens only
_KEY_PATTERN: Final[re.Pattern[str]] = re.compile(r"[a-z-]+")


def is_stringable(value: Any) -> bool:
    """Return True if value has a meaningful string form.

    None and scalars always do. Other objects qualify only when their class
    defines its own __str__ rather than inheriting object's.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return True
    return type(value).__str__ is not object.__str__


def stringify(value: Any) -> str:
    """Convert a stringable value to the string sent over the wire.

    None and False become the empty string and True becomes "1".
    """
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    return str(value)


def validate_key_value_map(property_name: str, contents: Mapping[Any, Any]) -> dict[str, str]:
    """Validate a tags/properties mapping and return a copy with string values.

    Fails on the first offending entry; the input mapping is never modified.
    """
    validated: dict[str, str] = {}
    for key, value in contents.items():
        if not isinstance(key, str) or _KEY_PATTERN.fullmatch(key) is None:
            raise InvalidMessageError(
                f'The key [{key}] of the "{property_name}" property is invalid. '
                "Keys must be strings and may only contain lowercase letters and hyphens."
            )
        if not is_stringable(value):
            raise InvalidMessageError(
                f'The value for the key [{key}] of the "{property_name}" property is invalid. '
                f"Values must be stringable, got {type(value).__name__}."
            )
        validated[key] = stringify(value)
    return validated


def validate_parser(parser: str) -> ParserKind:
    try:
        return ParserKind(parser)
    except ValueError as e:
        supported = " and ".join(f'"{kind.value}"' for kind in ParserKind)
        raise InvalidMessageError(f"The parser [{parser}] is not supported. Supported parsers are {supported}.") from e


def validate_timestamp(timestamp: Any) -> UnixTimestamp:
    # bool is an int subclass but never a meaningful timestamp
    if isinstance(timestamp, bool) or not isinstance(timestamp, int) or timestamp < 0:
        raise InvalidMessageError(f"The timestamp [{timestamp}] is not a valid UNIX timestamp.")
    return UnixTimestamp(timestamp)
