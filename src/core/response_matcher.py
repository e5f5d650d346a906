import logging
import math
from typing import Any

import orjson

from abstractions.matcher import ResponseMatcher

logger = logging.getLogger(__name__)


def _normalize(value: Any) -> Any:
    # Integral floats become ints so 1.0 and 1 serialize alike. bool is not
    # a float subclass, so True and 1 stay distinct.
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TypeError(f"non-finite float {value!r} has no JSON form")
        return int(value) if value.is_integer() else value
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise TypeError(f"non-string key {key!r} has no JSON form")
        return {key: _normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    return value


def canonicalize(value: Any) -> bytes:
    """
    Serialize a value with sorted keys so that structurally equal documents
    produce identical bytes.

    Raises:
        TypeError: If the value has no JSON form. This covers non-finite
            floats, non-string keys and anything orjson cannot encode
            (orjson.JSONEncodeError is a TypeError).
    """
    return orjson.dumps(_normalize(value), option=orjson.OPT_SORT_KEYS)


class ExactMatcher(ResponseMatcher):
    """
    Exact structural equality: mapping key order is ignored, sequence order is
    not, and numbers compare by value (1 equals 1.0, True does not equal 1).
    """

    def matches(self, actual: Any, expected: Any) -> bool:
        try:
            return canonicalize(actual) == canonicalize(expected)
        except TypeError as e:
            logger.debug(f"Falling back to plain equality, value not serializable: {e}")
            return actual == expected
