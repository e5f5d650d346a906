import json
import os

from contracts.tester_config import DEFAULT_HEADERS, TesterConfig


def _split_domains(raw):
    return [d.strip() for d in raw.split(",") if d.strip()]


class Config:
    """
    Configuration class for environment variables and default settings.
    """

    DOMAINS = _split_domains(os.environ.get("SPEEDTEST_DOMAINS", ""))
    TEST_PATH = os.environ.get("SPEEDTEST_PATH", "/")
    # JSON document the endpoints are expected to return
    EXPECTED_RESPONSE = json.loads(os.environ.get("SPEEDTEST_EXPECTED_RESPONSE", "null"))
    TIMEOUT_MS = int(os.environ.get("SPEEDTEST_TIMEOUT_MS", "5000"))
    HEADERS = json.loads(
        os.environ.get("SPEEDTEST_HEADERS", json.dumps(DEFAULT_HEADERS))
    )
    SCHEME = os.environ.get("SPEEDTEST_SCHEME", "https")

    @classmethod
    def tester_config(cls, **overrides) -> TesterConfig:
        """
        Build a TesterConfig from the environment, letting explicit values win.

        Args:
            **overrides: TesterConfig fields to use instead of the env values.
                None values are ignored.

        Returns:
            TesterConfig: Validated tester configuration.
        """
        values = {
            "domains": cls.DOMAINS,
            "test_path": cls.TEST_PATH,
            "expected_response": cls.EXPECTED_RESPONSE,
            "timeout_ms": cls.TIMEOUT_MS,
            "headers": cls.HEADERS,
            "scheme": cls.SCHEME,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return TesterConfig(**values)
