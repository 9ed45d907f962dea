"""Error taxonomy shared by the client, the booking workflow and the gateway"""

from typing import Optional

from clubtable.schemas.notification import ErrorEnvelope, GenericError


class ClubTableError(Exception):
    """Base class for all application errors"""


class ValidationError(ClubTableError):
    """Client-side validation failure; blocks the action that raised it"""


class ApiError(ClubTableError):
    """Upstream REST API call failed"""

    def __init__(self, message: str, method: str = "", path: str = ""):
        self.message = message
        self.method = method
        self.path = path
        super().__init__(message)


class NetworkError(ApiError):
    """No response was received (connection refused, timeout, ...)"""


class HttpError(ApiError):
    """The server responded with a non-success status"""

    def __init__(
        self,
        status: int,
        envelope: Optional[ErrorEnvelope] = None,
        method: str = "",
        path: str = "",
    ):
        self.status = status
        self.envelope = envelope or GenericError(message=f"Error {status}")
        super().__init__(self.envelope.summary, method=method, path=path)

    @property
    def retryable(self) -> bool:
        return self.status >= 500


class UnauthorizedError(HttpError):
    """401 from the upstream API; the session has been logged out"""

    def __init__(self, method: str = "", path: str = ""):
        super().__init__(
            401,
            GenericError(message="Session expired"),
            method=method,
            path=path,
        )
