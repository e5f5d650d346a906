import asyncio
import inspect
import logging
from typing import Callable, Iterable, List, Optional, Sequence

from abstractions.observer import RaceObserver
from contracts.probe import FailureKind, ProbeOutcome, ProbeRequest
from contracts.race import RaceResult, rank_outcomes
from core.errors import RaceConfigurationError
from core.probe_runner import ProbeRunner
from core.profiler import Profiler, Stopwatch

logger = logging.getLogger(__name__)

FastestCallback = Callable[[ProbeOutcome], object]


class _RaceState:
    """
    State shared by the probe tasks of one race. Only touched under `lock`.
    """

    def __init__(self, total: int):
        self.total = total
        self.outcomes: List[ProbeOutcome] = []
        self.fastest: Optional[ProbeOutcome] = None
        self.lock = asyncio.Lock()


class RaceHandle:
    """
    Two views onto one running race: the fastest success, available as soon as
    it is known, and the ranked result, available once every probe settled.
    """

    def __init__(self, state: _RaceState, fastest, result, tasks, driver):
        self._state = state
        self._fastest = fastest
        self._result = result
        self._tasks = tasks
        self._driver = driver

    @property
    def total_count(self) -> int:
        return self._state.total

    @property
    def completed_count(self) -> int:
        return len(self._state.outcomes)

    def done(self) -> bool:
        return self._result.done()

    async def fastest(self) -> Optional[ProbeOutcome]:
        """Wait for the first successful outcome, or None if every probe fails."""
        return await asyncio.shield(self._fastest)

    async def result(self) -> RaceResult:
        """Wait for every probe to settle and return the ranked result."""
        return await asyncio.shield(self._result)

    async def all_outcomes(self) -> List[ProbeOutcome]:
        return (await self.result()).all_outcomes


class RaceCoordinator:
    """
    Probes every endpoint concurrently, latches the first success, and ranks
    all outcomes once the last probe has settled. A found fastest never cancels
    the probes still in flight.
    """

    def __init__(self, runner: ProbeRunner, observers: Optional[Iterable[RaceObserver]] = None):
        self.runner = runner
        self.observers = list(observers or [])

    def start(
        self,
        requests: Sequence[ProbeRequest],
        on_fastest: Optional[FastestCallback] = None,
    ) -> RaceHandle:
        """
        Launch one probe task per request and return immediately.

        Must be called from a running event loop.

        Args:
            requests (Sequence[ProbeRequest]): One request per endpoint.
            on_fastest (Optional[FastestCallback]): Called once with the first
                successful outcome. May be a coroutine function.

        Returns:
            RaceHandle: Awaitable views on the fastest and final results.

        Raises:
            RaceConfigurationError: If no requests were given.
        """
        requests = list(requests)
        if not requests:
            raise RaceConfigurationError("at least one endpoint is required to start a race")

        loop = asyncio.get_running_loop()
        state = _RaceState(len(requests))
        fastest = loop.create_future()
        final = loop.create_future()

        tasks = [
            asyncio.create_task(self._probe_and_record(request, state, fastest, on_fastest))
            for request in requests
        ]
        logger.info(f"Race started across {len(tasks)} endpoints")
        self._notify("on_race_started", len(tasks))
        driver = asyncio.create_task(self._collect(tasks, state, fastest, final))
        return RaceHandle(state, fastest, final, tasks, driver)

    @Profiler.profile
    async def race(
        self,
        requests: Sequence[ProbeRequest],
        on_fastest: Optional[FastestCallback] = None,
    ) -> RaceResult:
        """
        Run a race to completion, signalling the fastest success through
        `on_fastest` as soon as it is known.
        """
        handle = self.start(requests, on_fastest)
        return await handle.result()

    async def race_for_fastest(self, requests: Sequence[ProbeRequest]):
        """
        Return as soon as the fastest success is known, or every probe failed.

        Returns:
            tuple: (fastest outcome or None, awaitable of the ranked outcome list).
                The remaining probes keep running in the background.
        """
        handle = self.start(requests)
        fastest = await handle.fastest()
        return fastest, asyncio.ensure_future(handle.all_outcomes())

    async def _probe_and_record(self, request, state, fastest, on_fastest):
        watch = Stopwatch()
        try:
            outcome = await self.runner.probe(request)
        except Exception as e:
            logger.error(f"Probe runner raised for {request.endpoint}: {e!r}")
            outcome = ProbeOutcome.failure(
                request.endpoint, watch.elapsed_ms, FailureKind.OTHER, str(e) or type(e).__name__
            )

        latched = False
        async with state.lock:
            state.outcomes.append(outcome)
            if outcome.succeeded and state.fastest is None:
                state.fastest = outcome
                latched = True
                if not fastest.done():
                    fastest.set_result(outcome)

        self._notify("on_probe_settled", outcome)
        if latched:
            logger.debug(f"Latched fastest route {outcome.endpoint} ({outcome.elapsed_ms}ms)")
            self._notify("on_fastest", outcome)
            if on_fastest is not None:
                await self._call_fastest_callback(on_fastest, outcome)
        return outcome

    async def _collect(self, tasks, state, fastest, final):
        try:
            await asyncio.gather(*tasks)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            for future in (fastest, final):
                if not future.done():
                    future.cancel()
            raise

        async with state.lock:
            ranked = rank_outcomes(state.outcomes)
            if not fastest.done():
                logger.warning("No endpoint produced the expected response")
                fastest.set_result(None)

        result = RaceResult(
            fastest=state.fastest,
            all_outcomes=ranked,
            completed_count=len(ranked),
            total_count=state.total,
        )
        logger.info(
            f"Race finished: {len(result.successful)}/{result.total_count} endpoints succeeded"
        )
        self._notify("on_race_finished", result)
        final.set_result(result)

    async def _call_fastest_callback(self, on_fastest, outcome):
        try:
            ret = on_fastest(outcome)
            if inspect.isawaitable(ret):
                await ret
        except Exception as e:
            logger.error(f"Fastest-route callback failed: {e!r}", exc_info=e)

    def _notify(self, hook, *args):
        for observer in self.observers:
            try:
                getattr(observer, hook)(*args)
            except Exception as e:
                logger.error(f"Race observer {type(observer).__name__}.{hook} failed: {e!r}", exc_info=e)
