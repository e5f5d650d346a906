import logging

from prometheus_client import REGISTRY, Counter, Gauge, Histogram

from abstractions.observer import RaceObserver

logger = logging.getLogger(__name__)


class MetricsObserver(RaceObserver):
    """
    Records probe latencies, failures and race results as Prometheus metrics.
    """

    def __init__(self, registry=REGISTRY):
        """
        Initialize the observer and register its metrics.

        Args:
            registry: Prometheus collector registry. Pass a fresh
                CollectorRegistry to keep instances isolated, e.g. in tests.
        """
        self.registry = registry
        self.PROBE_LATENCY = Histogram(
            "speedtest_probe_latency_seconds",
            "Probe latency in seconds",
            ["endpoint", "outcome"],
            registry=registry,
        )
        self.PROBE_FAILURES = Counter(
            "speedtest_probe_failures_total",
            "Failed probes by failure kind",
            ["kind"],
            registry=registry,
        )
        self.IN_FLIGHT = Gauge(
            "speedtest_probes_in_flight",
            "Probes launched but not yet settled",
            registry=registry,
        )
        self.RACES = Counter(
            "speedtest_races_total",
            "Finished races by whether a fastest route was found",
            ["result"],
            registry=registry,
        )
        logger.info("MetricsObserver initialized.")

    def on_race_started(self, total):
        self.IN_FLIGHT.inc(total)

    def on_probe_settled(self, outcome):
        self.IN_FLIGHT.dec()
        label = "success" if outcome.succeeded else "failure"
        self.PROBE_LATENCY.labels(endpoint=outcome.endpoint, outcome=label).observe(
            outcome.elapsed_ms / 1000.0
        )
        if not outcome.succeeded:
            kind = outcome.failure_kind.value if outcome.failure_kind else "other"
            self.PROBE_FAILURES.labels(kind=kind).inc()

    def on_race_finished(self, result):
        self.RACES.labels(result="found" if result.fastest else "none").inc()
