from abc import ABC, abstractmethod
from typing import Any


class ResponseMatcher(ABC):
    """
    Abstract base class deciding whether a response body is acceptable.
    """

    @abstractmethod
    def matches(self, actual: Any, expected: Any) -> bool:
        """
        Compare a received body with the expected one.

        Args:
            actual (Any): Decoded response body.
            expected (Any): Configured expectation.

        Returns:
            bool: True if the endpoint served the expected content.
        """
