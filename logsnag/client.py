from collections.abc import Mapping
from typing import Any
from typing import Final

from loguru import logger
from pydantic import Field

from logsnag.config import LogSnagConfig
from logsnag.errors import InvalidMessageError
from logsnag.frozen_model import FrozenModel
from logsnag.payloads import build_identify_request
from logsnag.payloads import build_insight_mutation_request
from logsnag.payloads import build_insight_request
from logsnag.payloads import build_log_event_request
from logsnag.payloads import to_payload
from logsnag.primitives import HttpMethod
from logsnag.primitives import InsightValue
from logsnag.transport import HttpxTransport
from logsnag.transport import TransportInterface

LOG_PATH: Final[str] = "/v1/log"
IDENTIFY_PATH: Final[str] = "/v1/identify"
INSIGHT_PATH: Final[str] = "/v1/insight"


class LogSnagClient(FrozenModel):
    """Client for the LogSnag event logging API.

    Each call validates its arguments, builds one request and sends it through
    the transport. Validation errors (InvalidMessageError) are raised before
    anything is sent; failed requests raise TransportError.
    """

    config: LogSnagConfig = Field(description="Token, project and defaults used for every request")
    transport: TransportInterface = Field(description="Transport used to send requests")

    @classmethod
    def from_config(cls, config: LogSnagConfig) -> "LogSnagClient":
        """Build a client that talks to the configured LogSnag API over httpx."""
        transport = HttpxTransport(
            token=config.token,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
        )
        return cls(config=config, transport=transport)

    def log(
        self,
        channel: str | None,
        event: str,
        user_id: str | None = None,
        description: str | None = None,
        icon: str | None = None,
        notify: bool | None = None,
        tags: Mapping[str, Any] | None = None,
        parser: str | None = None,
        timestamp: int | None = None,
    ) -> dict[str, Any]:
        """Log an event.

        Pass None as channel to use the configured default channel. tags keys may only
        contain lowercase letters and hyphens, and every value must be stringable.
        parser is "markdown" or "text", and timestamp is a non-negative UNIX timestamp
        for historical events.
        """
        resolved_channel = channel if channel is not None else self.config.default_channel
        if resolved_channel is None:
            raise InvalidMessageError("No channel given and no default channel is configured.")

        request = build_log_event_request(
            project=self.config.project,
            channel=resolved_channel,
            event=event,
            user_id=user_id,
            description=description,
            icon=icon,
            notify=notify,
            tags=tags,
            parser=parser,
            timestamp=timestamp,
        )
        logger.debug("Logging event {!r} to channel {}", request.event, request.channel)
        return self.transport.send(HttpMethod.POST, LOG_PATH, to_payload(request))

    def identify(self, user_id: str, properties: Mapping[str, Any]) -> dict[str, Any]:
        """Attach properties to a user.

        Callers may ignore the returned response.
        """
        request = build_identify_request(project=self.config.project, user_id=user_id, properties=properties)
        logger.debug("Identifying user {} with {} properties", request.user_id, len(request.properties))
        return self.transport.send(HttpMethod.POST, IDENTIFY_PATH, to_payload(request))

    def insight(self, title: str, value: InsightValue, icon: str | None = None) -> dict[str, Any]:
        """Publish the current value of an insight."""
        request = build_insight_request(project=self.config.project, title=title, value=value, icon=icon)
        logger.debug("Publishing insight {!r}", request.title)
        return self.transport.send(HttpMethod.POST, INSIGHT_PATH, to_payload(request))

    def insight_mutate(self, title: str, inc: int | None = None, icon: str | None = None) -> dict[str, Any]:
        """Change an insight relative to its current value.

        At least one mutation must be given. inc increases (or, when negative,
        decreases) the insight's value.
        """
        request = build_insight_mutation_request(project=self.config.project, title=title, inc=inc, icon=icon)
        logger.debug("Mutating insight {!r}", request.title)
        return self.transport.send(HttpMethod.PATCH, INSIGHT_PATH, to_payload(request))
