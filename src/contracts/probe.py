from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

CONTENT_MISMATCH_REASON = "response does not match expectation"


class FailureKind(str, Enum):
    """
    Category of a failed probe.
    """

    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    CONNECTION_FAILURE = "connection_failure"
    CONTENT_MISMATCH = "content_mismatch"
    OTHER = "other"


class ProbeRequest(BaseModel):
    """
    Data model describing one probe against one endpoint.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str
    path: str = "/"
    timeout_ms: int = Field(default=5000, gt=0)
    headers: Dict[str, str] = Field(default_factory=dict)
    expected_body: Any = None

    def url(self, scheme: str = "https") -> str:
        """
        Build the absolute URL for this probe.

        Args:
            scheme (str): URL scheme, https unless told otherwise.

        Returns:
            str: The URL the probe should GET.
        """
        return f"{scheme}://{self.endpoint}{self.path}"


class ProbeOutcome(BaseModel):
    """
    Data model representing the settled result of a single probe.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str
    elapsed_ms: int = Field(ge=0)
    succeeded: bool
    body: Any = None
    failure_reason: Optional[str] = None
    failure_kind: Optional[FailureKind] = None
    status_code: Optional[int] = None

    @model_validator(mode="after")
    def check_reason(self):
        if self.succeeded and (self.failure_reason or self.failure_kind):
            raise ValueError("a successful outcome cannot carry a failure reason")
        if not self.succeeded and not self.failure_reason:
            raise ValueError("a failed outcome needs a failure reason")
        if not self.succeeded and self.body is not None:
            raise ValueError("a failed outcome cannot carry a body")
        return self

    @classmethod
    def success(cls, endpoint: str, elapsed_ms: int, body: Any, status_code=None):
        return cls(
            endpoint=endpoint,
            elapsed_ms=elapsed_ms,
            succeeded=True,
            body=body,
            status_code=status_code,
        )

    @classmethod
    def failure(
        cls,
        endpoint: str,
        elapsed_ms: int,
        kind: FailureKind,
        reason: str,
        status_code=None,
    ):
        return cls(
            endpoint=endpoint,
            elapsed_ms=elapsed_ms,
            succeeded=False,
            failure_reason=reason,
            failure_kind=kind,
            status_code=status_code,
        )

    def __repr__(self):
        state = "ok" if self.succeeded else f"failed: {self.failure_reason}"
        return f"ProbeOutcome(endpoint={self.endpoint}, elapsed_ms={self.elapsed_ms}, {state})"
