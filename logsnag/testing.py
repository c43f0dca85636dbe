from collections.abc import Mapping
from typing import Any

from pydantic import Field

from logsnag.frozen_model import FrozenModel
from logsnag.primitives import HttpMethod
from logsnag.transport import TransportInterface


class SentRequest(FrozenModel):
    """A request recorded by RecordingTransport."""

    method: HttpMethod
    path: str
    payload: dict[str, Any]


class RecordingTransport(TransportInterface):
    """Test double that records every request and answers with a canned response."""

    response: dict[str, Any] = Field(default_factory=lambda: {"success": True})
    sent: list[SentRequest] = Field(default_factory=list)

    def send(self, method: HttpMethod, path: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        self.sent.append(SentRequest(method=method, path=path, payload=dict(payload)))
        return dict(self.response)
