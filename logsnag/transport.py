from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping
from typing import Any
from typing import Final

import httpx
from loguru import logger
from pydantic import ConfigDict
from pydantic import Field
from pydantic import SecretStr

from logsnag.errors import TransportError
from logsnag.frozen_model import FrozenModel
from logsnag.logging import log_span
from logsnag.primitives import HttpMethod

DEFAULT_BASE_URL: Final[str] = "https://api.logsnag.com"

DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0

# Longest response body kept on a TransportError
_MAX_ERROR_BODY_LENGTH: Final[int] = 1000


class TransportInterface(FrozenModel, ABC):
    """Sends a single JSON request to the LogSnag API and returns the decoded response."""

    @abstractmethod
    def send(self, method: HttpMethod, path: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Send payload to path and return the decoded JSON object.

        Raises TransportError if the request fails or the server does not answer with a 2xx.
        """
        ...


class HttpxTransport(TransportInterface):
    """Transport backed by httpx.

    Non-2xx responses are raised as TransportError rather than returned.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    token: SecretStr = Field(description="Bearer token for authenticating")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Base URL of the LogSnag API")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, description="Timeout for each request")
    http_transport: httpx.BaseTransport | None = Field(
        default=None,
        description="Underlying httpx transport, mainly for injecting httpx.MockTransport in tests",
    )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token.get_secret_value()}",
            "Content-Type": "application/json",
        }

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    def send(self, method: HttpMethod, path: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        url = self._url(path)
        with log_span("Sending {} {}", method, url):
            try:
                with httpx.Client(timeout=self.timeout_seconds, transport=self.http_transport) as client:
                    response = client.request(method.value, url, headers=self._headers(), json=dict(payload))
            # InvalidURL is not an HTTPError subclass
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.warning("Request {} {} failed: {}", method, url, e)
                raise TransportError(
                    f"Failed to send {method} request to {url}: {e}",
                    method=method,
                    url=url,
                ) from e
            return _decode_response(method, url, response)


def _decode_response(method: HttpMethod, url: str, response: httpx.Response) -> dict[str, Any]:
    if not response.is_success:
        body = response.text[:_MAX_ERROR_BODY_LENGTH]
        logger.warning("LogSnag answered {} {} with HTTP {}: {}", method, url, response.status_code, body)
        raise TransportError(
            f"LogSnag returned HTTP {response.status_code} for {method} {url}: {body}",
            method=method,
            url=url,
            status_code=response.status_code,
            response_body=body,
        )

    if not response.content.strip():
        return {}

    try:
        data = response.json()
    except ValueError as e:
        raise TransportError(
            f"LogSnag returned a response that is not valid JSON for {method} {url}",
            method=method,
            url=url,
            status_code=response.status_code,
            response_body=response.text[:_MAX_ERROR_BODY_LENGTH],
        ) from e

    if not isinstance(data, dict):
        raise TransportError(
            f"LogSnag returned a JSON {type(data).__name__} instead of an object for {method} {url}",
            method=method,
            url=url,
            status_code=response.status_code,
            response_body=response.text[:_MAX_ERROR_BODY_LENGTH],
        )
    return data
