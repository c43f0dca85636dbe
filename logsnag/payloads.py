"""Request bodies for the LogSnag API and the builders that validate them.

Every builder raises InvalidMessageError for bad input, so no request is
ever made with a payload that LogSnag would reject for its shape.
"""

import math
from collections.abc import Mapping
from typing import Any

from pydantic import Field
from pydantic import ValidationError

from logsnag.errors import InvalidMessageError
from logsnag.frozen_model import FrozenModel
from logsnag.primitives import ChannelName
from logsnag.primitives import EventName
from logsnag.primitives import InsightTitle
from logsnag.primitives import InsightValue
from logsnag.primitives import ParserKind
from logsnag.primitives import ProjectName
from logsnag.primitives import UnixTimestamp
from logsnag.primitives import UserId
from logsnag.validation import validate_key_value_map
from logsnag.validation import validate_parser
from logsnag.validation import validate_timestamp


class LogEventRequest(FrozenModel):
    """Body of POST /v1/log."""

    project: ProjectName = Field(description="Project the event belongs to")
    channel: ChannelName = Field(description="Channel the event is published to")
    event: EventName = Field(description="Name of the event")
    user_id: UserId | None = Field(default=None, description="User to link the event to")
    description: str | None = Field(default=None, description="Longer description of the event")
    icon: str | None = Field(default=None, description="Icon (usually an emoji) shown with the event")
    notify: bool | None = Field(default=None, description="Whether to send a push notification")
    tags: dict[str, str] | None = Field(default=None, description="Validated tags attached to the event")
    parser: ParserKind | None = Field(default=None, description="How the description is rendered")
    timestamp: UnixTimestamp | None = Field(default=None, description="Historical time of the event")


class IdentifyRequest(FrozenModel):
    """Body of POST /v1/identify."""

    project: ProjectName = Field(description="Project the user belongs to")
    user_id: UserId = Field(description="User being identified")
    properties: dict[str, str] = Field(description="Validated user properties")


class InsightRequest(FrozenModel):
    """Body of POST /v1/insight."""

    project: ProjectName = Field(description="Project the insight belongs to")
    title: InsightTitle = Field(description="Title of the insight")
    value: InsightValue = Field(description="New value of the insight")
    icon: str | None = Field(default=None, description="Icon shown with the insight")


class InsightMutations(FrozenModel):
    """The set of mutations applied to an insight's current value."""

    inc: int | None = Field(
        default=None,
        serialization_alias="$inc",
        description="Amount to add to the insight (negative to decrease)",
    )

    def has_mutations(self) -> bool:
        return any(value is not None for value in self.model_dump().values())


class InsightMutationRequest(FrozenModel):
    """Body of PATCH /v1/insight."""

    project: ProjectName = Field(description="Project the insight belongs to")
    title: InsightTitle = Field(description="Title of the insight")
    value: InsightMutations = Field(description="Mutations to apply")
    icon: str | None = Field(default=None, description="Icon shown with the insight")


def to_payload(request: FrozenModel) -> dict[str, Any]:
    """Serialize a request into its JSON body, leaving out every unset field."""
    return request.model_dump(mode="json", by_alias=True, exclude_none=True)


def _describe_validation_error(error: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or 'value'}: {item['msg']}" for item in error.errors()
    )
    return f"Invalid message: {details}"


def build_log_event_request(
    project: str,
    channel: str,
    event: str,
    user_id: str | None = None,
    description: str | None = None,
    icon: str | None = None,
    notify: bool | None = None,
    tags: Mapping[Any, Any] | None = None,
    parser: str | None = None,
    timestamp: int | None = None,
) -> LogEventRequest:
    validated_tags = validate_key_value_map("tags", tags) if tags is not None else None
    validated_parser = validate_parser(parser) if parser is not None else None
    validated_timestamp = validate_timestamp(timestamp) if timestamp is not None else None
    try:
        return LogEventRequest(
            project=project,
            channel=channel,
            event=event,
            user_id=user_id,
            description=description,
            icon=icon,
            notify=notify,
            tags=validated_tags,
            parser=validated_parser,
            timestamp=validated_timestamp,
        )
    except ValidationError as e:
        raise InvalidMessageError(_describe_validation_error(e)) from e


def build_identify_request(project: str, user_id: str, properties: Mapping[Any, Any]) -> IdentifyRequest:
    validated_properties = validate_key_value_map("properties", properties)
    try:
        return IdentifyRequest(project=project, user_id=user_id, properties=validated_properties)
    except ValidationError as e:
        raise InvalidMessageError(_describe_validation_error(e)) from e


def build_insight_request(
    project: str,
    title: str,
    value: InsightValue,
    icon: str | None = None,
) -> InsightRequest:
    # bool would otherwise be accepted as an int
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidMessageError(
            f"The insight value [{value}] is invalid. Values must be a string, an integer or a float."
        )
    # NaN and infinity have no JSON representation
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidMessageError(f"The insight value [{value}] is invalid. Numbers must be finite.")
    try:
        return InsightRequest(project=project, title=title, value=value, icon=icon)
    except ValidationError as e:
        raise InvalidMessageError(_describe_validation_error(e)) from e


def build_insight_mutation_request(
    project: str,
    title: str,
    inc: int | None = None,
    icon: str | None = None,
) -> InsightMutationRequest:
    if inc is not None and (isinstance(inc, bool) or not isinstance(inc, int)):
        raise InvalidMessageError(f"The increment [{inc}] is invalid. Increments must be integers.")
    mutations = InsightMutations(inc=inc)
    if not mutations.has_mutations():
        raise InvalidMessageError("At least one mutation must be provided.")
    try:
        return InsightMutationRequest(project=project, title=title, value=mutations, icon=icon)
    except ValidationError as e:
        raise InvalidMessageError(_describe_validation_error(e)) from e
