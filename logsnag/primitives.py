from enum import StrEnum
from enum import auto
from typing import Any
from typing import Self

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema
from pydantic_core import core_schema


class NonEmptyStr(str):
    """A string that cannot be empty or whitespace-only.

    The value is kept exactly as given, surrounding whitespace included.
    """

    def __new__(cls, value: str) -> Self:
        if not value or not value.strip():
            raise ValueError(f"{cls.__name__} cannot be empty")
        return super().__new__(cls, value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.str_schema(min_length=1),
            serialization=core_schema.to_string_ser_schema(),
        )


class ProjectName(NonEmptyStr):
    """The LogSnag project that entries are recorded under."""


class ChannelName(NonEmptyStr):
    """The channel an event is published to."""


class EventName(NonEmptyStr):
    """The name of a logged event (effectively its message)."""


class InsightTitle(NonEmptyStr):
    """The title identifying an insight."""


class UserId(NonEmptyStr):
    """The id of a user in the caller's system."""


class UnixTimestamp(int):
    """Seconds since the epoch. Zero is valid, negative values are not."""

    def __new__(cls, value: int) -> Self:
        if value < 0:
            raise ValueError(f"{cls.__name__} must be >= 0, got {value}")
        return super().__new__(cls, value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.int_schema(ge=0),
        )


class ParserKind(StrEnum):
    """How LogSnag renders an event description."""

    MARKDOWN = auto()
    TEXT = auto()


class HttpMethod(StrEnum):
    POST = "POST"
    PATCH = "PATCH"


InsightValue = str | int | float
