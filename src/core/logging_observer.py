import logging

from abstractions.observer import RaceObserver

logger = logging.getLogger(__name__)

RULE = "=" * 60


def format_outcome_line(index, outcome):
    status = "OK  " if outcome.succeeded else "FAIL"
    elapsed = f"{outcome.elapsed_ms}ms" if outcome.succeeded else "N/A"
    error = f" ({outcome.failure_reason})" if outcome.failure_reason else ""
    return f"{index}. {status} {outcome.endpoint} - {elapsed}{error}"


class LoggingObserver(RaceObserver):
    """
    Reports race progress and the final ranking through the logging module.
    """

    def __init__(self, test_path=None, timeout_ms=None, log=None):
        self.test_path = test_path
        self.timeout_ms = timeout_ms
        self.log = log or logger

    def on_race_started(self, total):
        self.log.info(f"Testing {total} API routes concurrently...")
        if self.test_path is not None:
            self.log.info(f"Test path: {self.test_path}")
        if self.timeout_ms is not None:
            self.log.info(f"Timeout: {self.timeout_ms}ms")

    def on_probe_settled(self, outcome):
        self.log.debug(f"Settled: {outcome!r}")

    def on_fastest(self, outcome):
        self.log.info(f"Fastest route: {outcome.endpoint} ({outcome.elapsed_ms}ms)")

    def on_race_finished(self, result):
        lines = [format_outcome_line(i, o) for i, o in enumerate(result.all_outcomes, start=1)]
        self.log.info("Test results:\n" + "\n".join([RULE, *lines, RULE]))
