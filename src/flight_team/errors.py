"""Error types raised while talking to Microsoft Graph."""

from typing import Optional

__all__ = [
    "RemoteCallError",
]


class RemoteCallError(Exception):
    """
    Raised when a Graph call fails and no retry budget remains.

    The backend's status and error body are kept verbatim so the operator can tell which
    request failed and why. ``status_code`` is None when the request never got a response
    (timeout, connection refused).

    Attributes:
        status_code: HTTP status code returned by Graph, if any.
        body: Raw response body (or transport error text).
        method: HTTP method of the failed request.
        path: Path of the failed request, relative to the Graph endpoint.
    """

    def __init__(
        self,
        status_code: Optional[int],
        body: str,
        method: Optional[str] = None,
        path: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path
        super().__init__(self._format())

    def _format(self) -> str:
        target = f"{self.method} {self.path}" if self.method else "Graph request"
        if self.status_code is None:
            return f"{target} failed: {self.body}"
        return f"{target} failed with status {self.status_code}: {self.body}"

    @property
    def is_not_found(self) -> bool:
        """True when Graph reported the referenced resource does not exist."""
        return self.status_code == 404
