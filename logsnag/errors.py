class BaseLogSnagError(Exception):
    """Base exception for all logsnag errors."""


class InvalidMessageError(BaseLogSnagError, ValueError):
    """Raised when caller-supplied data cannot be sent to LogSnag.

    Always raised before any request is made.
    """


class ConfigError(BaseLogSnagError):
    """Raised when the client configuration is missing or invalid."""


class TransportError(BaseLogSnagError):
    """Raised when a request to the LogSnag API does not complete successfully.

    status_code and response_body are only set when the server answered.
    """

    def __init__(
        self,
        message: str,
        method: str,
        url: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)
