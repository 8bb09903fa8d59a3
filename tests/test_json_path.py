# tests/test_json_path.py

"""Tests for absence-tolerant JSON access helpers."""

import unittest

from price_scout.scrapers.json_path import as_float, dig


class TestDig(unittest.TestCase):
    """dig() never raises on missing structure."""

    def test_full_path(self) -> None:
        self.assertEqual(dig({"a": [{"b": 1}]}, "a", 0, "b"), 1)

    def test_missing_key(self) -> None:
        self.assertIsNone(dig({"a": {}}, "a", "b"))

    def test_index_out_of_range(self) -> None:
        self.assertIsNone(dig({"a": []}, "a", 0))

    def test_type_mismatch(self) -> None:
        """String step on a list and int step on a dict both yield None."""
        self.assertIsNone(dig([1, 2], "a"))
        self.assertIsNone(dig({"0": 1}, 0))

    def test_none_root(self) -> None:
        self.assertIsNone(dig(None, "a"))

    def test_empty_path_returns_root(self) -> None:
        self.assertEqual(dig({"a": 1}), {"a": 1})


class TestAsFloat(unittest.TestCase):
    """as_float() accepts numeric scalars only."""

    def test_numeric_string(self) -> None:
        self.assertEqual(as_float("12.50"), 12.5)

    def test_int(self) -> None:
        self.assertEqual(as_float(3), 3.0)

    def test_rejects_garbage(self) -> None:
        for value in (None, True, "n/a", [], {}, "nan", "inf"):
            with self.subTest(value=value):
                self.assertIsNone(as_float(value))


if __name__ == "__main__":
    unittest.main()
