from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel

from contracts.probe import FailureKind


class TransportResponse(BaseModel):
    """
    A response that arrived with an accepted (2xx) status.
    """

    status_code: int
    reason: str = ""
    body: Any = None


class TransportError(Exception):
    """
    Raised by a transport when a request produced no acceptable response.
    """

    def __init__(self, kind: FailureKind, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.status_code = status_code

    def __repr__(self):
        return f"TransportError(kind={self.kind.value}, detail={self.detail!r}, status_code={self.status_code})"


class Transport(ABC):
    """
    Abstract base class for sending a single GET request.
    """

    @abstractmethod
    async def send(
        self, url: str, timeout_ms: int, headers: Dict[str, str]
    ) -> TransportResponse:
        """
        Send one GET request and return the decoded response.

        Args:
            url (str): Absolute URL to fetch.
            timeout_ms (int): Request timeout in milliseconds.
            headers (Dict[str, str]): Request headers.

        Returns:
            TransportResponse: Status and decoded body of a 2xx response.

        Raises:
            TransportError: On timeout, non-2xx status, connection failure or
                any other transport problem.
        """
