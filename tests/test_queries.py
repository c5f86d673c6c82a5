"""Tests for the per-screen query cache."""

from __future__ import annotations

import unittest
from unittest import mock

from core.errors import GatewayError
from core.queries import QueryContext, screen_context


class QueryContextTests(unittest.TestCase):
    """Validates lazy fetch, caching and invalidation."""

    def test_fetches_lazily_and_caches(self) -> None:
        fetcher = mock.Mock(return_value=[1, 2])
        queries = QueryContext()
        queries.register("products", fetcher)
        fetcher.assert_not_called()

        self.assertEqual(queries.get("products").data, [1, 2])
        self.assertTrue(queries.get("products").ok)
        fetcher.assert_called_once()

    def test_invalidate_refetches_registered_keys(self) -> None:
        fetcher = mock.Mock(side_effect=[["old"], ["new"]])
        queries = QueryContext()
        queries.register("products", fetcher)
        queries.get("products")

        queries.invalidate("products", "unknown")
        self.assertEqual(fetcher.call_count, 2)
        self.assertEqual(queries.get("products").data, ["new"])
        self.assertEqual(fetcher.call_count, 2)

    def test_error_is_kept_until_invalidated(self) -> None:
        fetcher = mock.Mock(side_effect=[GatewayError("timeout"), ["ok"]])
        queries = QueryContext()
        queries.register("sales", fetcher)

        result = queries.get("sales")
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "timeout")
        self.assertIsNone(queries.get("sales").data)
        self.assertEqual(fetcher.call_count, 1)

        queries.invalidate("sales")
        self.assertEqual(queries.get("sales").data, ["ok"])

    def test_register_keeps_first_fetcher(self) -> None:
        queries = QueryContext()
        queries.register("sales", lambda: "first")
        queries.register("sales", lambda: "second")
        self.assertIn("sales", queries)
        self.assertEqual(queries.get("sales").data, "first")

    def test_unknown_key_raises(self) -> None:
        with self.assertRaises(KeyError):
            QueryContext().get("missing")

    def test_clear_forces_fetch_on_next_get(self) -> None:
        fetcher = mock.Mock(return_value=[])
        queries = QueryContext()
        queries.register("customers", fetcher)
        queries.get("customers")
        queries.clear()
        queries.get("customers")
        self.assertEqual(fetcher.call_count, 2)

    def test_screen_context_is_stored_per_screen(self) -> None:
        state = {}
        first = screen_context(state, "sales")
        self.assertIs(screen_context(state, "sales"), first)
        self.assertIsNot(screen_context(state, "reports"), first)
        self.assertIn("queries:sales", state)


if __name__ == "__main__":
    unittest.main()
