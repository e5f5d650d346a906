import unittest

from core.response_matcher import ExactMatcher, canonicalize


class TestExactMatcher(unittest.TestCase):
    def setUp(self):
        self.matcher = ExactMatcher()

    def test_equal_documents(self):
        self.assertTrue(self.matcher.matches({"id": 1, "tags": ["a"]}, {"id": 1, "tags": ["a"]}))

    def test_key_order_ignored(self):
        self.assertTrue(self.matcher.matches({"b": 2, "a": {"y": 1, "x": 0}}, {"a": {"x": 0, "y": 1}, "b": 2}))
        self.assertEqual(canonicalize({"b": 1, "a": 2}), canonicalize({"a": 2, "b": 1}))

    def test_list_order_significant(self):
        self.assertFalse(self.matcher.matches([1, 2], [2, 1]))

    def test_value_difference(self):
        self.assertFalse(self.matcher.matches({"id": 2}, {"id": 1}))

    def test_extra_key_is_a_difference(self):
        self.assertFalse(self.matcher.matches({"id": 1, "extra": True}, {"id": 1}))

    def test_bool_is_not_int(self):
        self.assertFalse(self.matcher.matches({"ok": True}, {"ok": 1}))

    def test_integral_float_equals_int(self):
        self.assertTrue(self.matcher.matches({"id": 1.0}, {"id": 1}))
        self.assertTrue(self.matcher.matches([2, {"n": 3}], [2.0, {"n": 3.0}]))
        self.assertFalse(self.matcher.matches({"id": 1.5}, {"id": 1}))

    def test_bool_is_not_integral_float(self):
        self.assertFalse(self.matcher.matches({"ok": True}, {"ok": 1.0}))

    def test_nan_does_not_match_null(self):
        self.assertFalse(self.matcher.matches(float("nan"), None))
        self.assertFalse(self.matcher.matches({"v": float("inf")}, {"v": None}))

    def test_int_keys_differ_from_string_keys(self):
        self.assertFalse(self.matcher.matches({1: "a"}, {"1": "a"}))
        self.assertTrue(self.matcher.matches({1: "a"}, {1: "a"}))

    def test_none_and_empty(self):
        self.assertTrue(self.matcher.matches(None, None))
        self.assertFalse(self.matcher.matches([], None))

    def test_text_bodies(self):
        self.assertTrue(self.matcher.matches("pong", "pong"))
        self.assertFalse(self.matcher.matches("pong", "ping"))

    def test_unserializable_falls_back_to_equality(self):
        marker = object()
        self.assertTrue(self.matcher.matches({"v": marker}, {"v": marker}))
        self.assertFalse(self.matcher.matches({"v": marker}, {"v": object()}))


if __name__ == "__main__":
    unittest.main()
