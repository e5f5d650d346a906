from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_HEADERS = {"Content-Type": "application/json"}


class TesterConfig(BaseModel):
    """
    Configuration for a speed test across a set of equivalent API domains.
    """

    domains: List[str]
    test_path: str = "/"
    expected_response: Any = None
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    headers: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_HEADERS))
    scheme: Literal["http", "https"] = "https"
