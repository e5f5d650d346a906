import logging
from typing import Optional

from abstractions.matcher import ResponseMatcher
from abstractions.transport import Transport, TransportError
from contracts.probe import (
    CONTENT_MISMATCH_REASON,
    FailureKind,
    ProbeOutcome,
    ProbeRequest,
)
from core.profiler import Stopwatch
from core.response_matcher import ExactMatcher

logger = logging.getLogger(__name__)


def describe_failure(error: TransportError) -> str:
    """
    Turn a transport error into the human-readable reason stored on an outcome.
    """
    if error.kind is FailureKind.TIMEOUT:
        return "request timed out"
    if error.kind is FailureKind.HTTP_STATUS:
        return f"HTTP {error.status_code}: {error.detail}"
    if error.kind is FailureKind.CONNECTION_FAILURE:
        return f"connection failure: {error.detail}"
    return error.detail or "unknown error"


class ProbeRunner:
    """
    Runs one timed, validated GET against a single endpoint.
    """

    def __init__(
        self,
        transport: Transport,
        matcher: Optional[ResponseMatcher] = None,
        scheme: str = "https",
    ):
        self.transport = transport
        self.matcher = matcher or ExactMatcher()
        self.scheme = scheme

    async def probe(self, request: ProbeRequest) -> ProbeOutcome:
        """
        Probe one endpoint. Every failure is folded into the returned outcome.

        Args:
            request (ProbeRequest): The endpoint and expectation to check.

        Returns:
            ProbeOutcome: Success with the body, or failure with a reason.
        """
        url = request.url(self.scheme)
        watch = Stopwatch()
        try:
            resp = await self.transport.send(url, request.timeout_ms, dict(request.headers))
        except TransportError as e:
            elapsed = watch.elapsed_ms
            logger.info(f"Probe failed for {request.endpoint} after {elapsed}ms: {e.kind.value}")
            return ProbeOutcome.failure(
                request.endpoint,
                elapsed,
                e.kind,
                describe_failure(e),
                status_code=e.status_code,
            )
        except Exception as e:
            elapsed = watch.elapsed_ms
            logger.error(f"Unexpected probe error for {request.endpoint}: {e!r}")
            return ProbeOutcome.failure(
                request.endpoint, elapsed, FailureKind.OTHER, str(e) or type(e).__name__
            )
        elapsed = watch.elapsed_ms

        try:
            matched = self.matcher.matches(resp.body, request.expected_body)
        except Exception as e:
            logger.error(f"Response matcher failed for {request.endpoint}: {e!r}")
            return ProbeOutcome.failure(
                request.endpoint,
                elapsed,
                FailureKind.OTHER,
                str(e) or type(e).__name__,
                status_code=resp.status_code,
            )

        if not matched:
            logger.info(f"Probe for {request.endpoint} returned unexpected content")
            return ProbeOutcome.failure(
                request.endpoint,
                elapsed,
                FailureKind.CONTENT_MISMATCH,
                CONTENT_MISMATCH_REASON,
                status_code=resp.status_code,
            )
        logger.info(f"Probe success for {request.endpoint}: {elapsed}ms")
        return ProbeOutcome.success(request.endpoint, elapsed, resp.body, status_code=resp.status_code)
