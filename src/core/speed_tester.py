import logging
from typing import Iterable, List, Optional

from abstractions.matcher import ResponseMatcher
from abstractions.observer import RaceObserver
from abstractions.transport import Transport
from contracts.probe import ProbeOutcome, ProbeRequest
from contracts.race import RaceResult
from contracts.tester_config import TesterConfig
from core.http_transport import HttpxTransport
from core.logging_observer import LoggingObserver
from core.probe_runner import ProbeRunner
from core.profiler import Profiler
from core.race_coordinator import FastestCallback, RaceCoordinator

logger = logging.getLogger(__name__)


class ApiSpeedTester:
    """
    Speed test across a set of API domains serving the same content.

    Example:
        tester = ApiSpeedTester(TesterConfig(
            domains=["api1.example.com", "api2.example.com"],
            test_path="/test.json",
            expected_response={"success": True},
        ))
        best = await tester.get_best_route()
    """

    def __init__(
        self,
        config: TesterConfig,
        transport: Optional[Transport] = None,
        observers: Optional[Iterable[RaceObserver]] = None,
        matcher: Optional[ResponseMatcher] = None,
    ):
        """
        Initialize the tester.

        Args:
            config (TesterConfig): Domains, path, expectation, timeout and headers.
            transport (Optional[Transport]): Defaults to an HttpxTransport.
            observers (Optional[Iterable[RaceObserver]]): Defaults to a single
                LoggingObserver. Pass an empty list to run silently.
            matcher (Optional[ResponseMatcher]): Defaults to exact matching.
        """
        self.config = config
        if observers is None:
            observers = [LoggingObserver(config.test_path, config.timeout_ms)]
        runner = ProbeRunner(transport or HttpxTransport(), matcher, scheme=config.scheme)
        self.coordinator = RaceCoordinator(runner, observers)

    @Profiler.profile
    def build_requests(self) -> List[ProbeRequest]:
        return [
            ProbeRequest(
                endpoint=domain,
                path=self.config.test_path,
                timeout_ms=self.config.timeout_ms,
                headers=self.config.headers,
                expected_body=self.config.expected_response,
            )
            for domain in self.config.domains
        ]

    async def test(self) -> List[ProbeOutcome]:
        """Probe every domain and return the ranked outcomes."""
        result = await self.coordinator.race(self.build_requests())
        return result.all_outcomes

    async def test_concurrent_with_fastest(
        self, on_fastest: Optional[FastestCallback] = None
    ) -> RaceResult:
        """
        Probe every domain, calling `on_fastest` as soon as the first route
        succeeds, and return the complete race result.
        """
        return await self.coordinator.race(self.build_requests(), on_fastest)

    async def get_best_route(self) -> Optional[ProbeOutcome]:
        """
        Return the lowest-latency successful route once every probe finished.
        """
        result = await self.coordinator.race(self.build_requests())
        best = result.best
        if best is None:
            logger.warning("No usable API route found")
            return None
        logger.info(f"Best route: {best.endpoint} ({best.elapsed_ms}ms)")
        return best

    async def get_best_route_with_continuous_testing(self):
        """
        Return the fastest route as soon as it is known while the remaining
        routes keep being tested.

        Returns:
            tuple: (fastest outcome or None, awaitable of the ranked outcomes).
        """
        return await self.coordinator.race_for_fastest(self.build_requests())


def create_tester(config, **kwargs) -> ApiSpeedTester:
    """Build an ApiSpeedTester from a TesterConfig or a plain mapping."""
    if not isinstance(config, TesterConfig):
        config = TesterConfig.model_validate(config)
    return ApiSpeedTester(config, **kwargs)
