import unittest

from pydantic import ValidationError

from contracts.probe import FailureKind, ProbeOutcome, ProbeRequest
from contracts.race import RaceResult, rank_outcomes
from contracts.tester_config import TesterConfig


def ok(endpoint, elapsed):
    return ProbeOutcome.success(endpoint, elapsed, body={"ok": True})


def failed(endpoint, elapsed):
    return ProbeOutcome.failure(endpoint, elapsed, FailureKind.OTHER, "boom")


class TestProbeRequestContract(unittest.TestCase):
    def test_url(self):
        r = ProbeRequest(endpoint="api.example.com", path="/v1/ping")
        self.assertEqual(r.url(), "https://api.example.com/v1/ping")
        self.assertEqual(r.url("http"), "http://api.example.com/v1/ping")

    def test_request_is_immutable(self):
        r = ProbeRequest(endpoint="a")
        with self.assertRaises(ValidationError):
            r.endpoint = "b"

    def test_timeout_must_be_positive(self):
        with self.assertRaises(ValidationError):
            ProbeRequest(endpoint="a", timeout_ms=0)


class TestProbeOutcomeContract(unittest.TestCase):
    def test_failed_outcome_needs_reason(self):
        with self.assertRaises(ValidationError):
            ProbeOutcome(endpoint="a", elapsed_ms=1, succeeded=False)

    def test_successful_outcome_rejects_reason(self):
        with self.assertRaises(ValidationError):
            ProbeOutcome(endpoint="a", elapsed_ms=1, succeeded=True, failure_reason="x")

    def test_failed_outcome_rejects_body(self):
        with self.assertRaises(ValidationError):
            ProbeOutcome(endpoint="a", elapsed_ms=1, succeeded=False, failure_reason="x", body={"id": 2})

    def test_elapsed_non_negative(self):
        with self.assertRaises(ValidationError):
            ProbeOutcome(endpoint="a", elapsed_ms=-1, succeeded=True)

    def test_repr(self):
        self.assertIn("failed: boom", repr(failed("a", 3)))
        self.assertIn("ok", repr(ok("a", 3)))


class TestRanking(unittest.TestCase):
    def test_successes_first_then_by_latency(self):
        outcomes = [failed("f1", 5), ok("s1", 40), failed("f2", 1), ok("s2", 10)]
        ranked = rank_outcomes(outcomes)
        self.assertEqual([o.endpoint for o in ranked], ["s2", "s1", "f2", "f1"])

    def test_ties_keep_completion_order(self):
        outcomes = [ok("first", 10), ok("second", 10), failed("x", 10), failed("y", 10)]
        ranked = rank_outcomes(outcomes)
        self.assertEqual([o.endpoint for o in ranked], ["first", "second", "x", "y"])
        self.assertEqual(rank_outcomes(ranked), ranked)

    def test_does_not_mutate_input(self):
        outcomes = [failed("f", 1), ok("s", 2)]
        rank_outcomes(outcomes)
        self.assertEqual(outcomes[0].endpoint, "f")


class TestRaceResult(unittest.TestCase):
    def test_best_and_successful(self):
        result = RaceResult(
            fastest=ok("s2", 12),
            all_outcomes=[ok("s1", 10), ok("s2", 12), failed("f", 1)],
            completed_count=3,
            total_count=3,
        )
        self.assertEqual(result.best.endpoint, "s1")
        self.assertEqual(result.fastest.endpoint, "s2")
        self.assertEqual(len(result.successful), 2)

    def test_best_none_when_all_failed(self):
        result = RaceResult(all_outcomes=[failed("f", 1)], completed_count=1, total_count=1)
        self.assertIsNone(result.best)


class TestTesterConfig(unittest.TestCase):
    def test_defaults(self):
        config = TesterConfig(domains=["a"], test_path="/x", expected_response=[])
        self.assertEqual(config.timeout_ms, 5000)
        self.assertEqual(config.headers, {"Content-Type": "application/json"})
        self.assertEqual(config.scheme, "https")

    def test_headers_default_not_shared(self):
        first = TesterConfig(domains=["a"])
        first.headers["X"] = "1"
        self.assertNotIn("X", TesterConfig(domains=["b"]).headers)

    def test_rejects_unknown_scheme(self):
        with self.assertRaises(ValidationError):
            TesterConfig(domains=["a"], scheme="ftp")


if __name__ == "__main__":
    unittest.main()
