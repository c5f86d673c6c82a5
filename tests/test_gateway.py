"""Tests for table operations over an in-memory SQLite database."""

from __future__ import annotations

import unittest

from core.db_init import connect_sqlite, init_schema
from core.errors import GatewayError
from core.gateway import Filter, Gateway, eq, gt, lte


class GatewayTests(unittest.TestCase):
    """Validates select/insert/update/delete and error wrapping."""

    def setUp(self) -> None:
        self.conn = connect_sqlite(":memory:")
        init_schema(self.conn)
        self.gateway = Gateway(self.conn)
        self.cat_id = self.gateway.insert("categories", {"name": "Celulares"})
        for name, price, stock in [("A", 10.0, 0), ("B", 20.0, 5), ("C", 30.0, 8)]:
            self.gateway.insert(
                "products",
                {
                    "name": name,
                    "category_id": self.cat_id,
                    "price": price,
                    "stock": stock,
                    "width": 1,
                    "height": 1,
                    "weight": 1,
                },
            )

    def tearDown(self) -> None:
        self.conn.close()

    def test_insert_returns_id(self) -> None:
        new_id = self.gateway.insert("categories", {"name": "Tablets"})
        self.assertNotEqual(new_id, self.cat_id)
        df = self.gateway.select("categories", filters=[eq("id", new_id)])
        self.assertEqual(df["name"].tolist(), ["Tablets"])

    def test_select_projection_filters_and_order(self) -> None:
        df = self.gateway.select(
            "products", columns=["name", "stock"], filters=[gt("stock", 0)], order_by="price", descending=True
        )
        self.assertEqual(list(df.columns), ["name", "stock"])
        self.assertEqual(df["name"].tolist(), ["C", "B"])

        df = self.gateway.select("products", columns="name", filters=[lte("stock", 5)], order_by="name")
        self.assertEqual(df["name"].tolist(), ["A", "B"])

    def test_update_and_delete(self) -> None:
        row = self.gateway.select("products", filters=[eq("name", "A")]).iloc[0]
        self.assertEqual(self.gateway.update("products", row["id"], {"stock": 3}), row["id"])
        updated = self.gateway.select("products", filters=[eq("id", row["id"])])
        self.assertEqual(int(updated["stock"].iloc[0]), 3)

        self.gateway.delete("products", row["id"])
        self.assertTrue(self.gateway.select("products", filters=[eq("id", row["id"])]).empty)

    def test_update_missing_row_raises(self) -> None:
        with self.assertRaises(GatewayError):
            self.gateway.update("products", 9999, {"stock": 1})

    def test_constraint_violation_is_wrapped_and_rolled_back(self) -> None:
        with self.assertRaises(GatewayError):
            self.gateway.insert("categories", {"name": "Celulares"})
        with self.assertRaises(GatewayError):
            self.gateway.insert(
                "products",
                {"name": "X", "category_id": self.cat_id, "price": 1, "stock": -1},
            )
        self.assertEqual(len(self.gateway.select("products")), 3)

    def test_rejects_unknown_tables_columns_and_operators(self) -> None:
        with self.assertRaises(GatewayError):
            self.gateway.select("users")
        with self.assertRaises(GatewayError):
            self.gateway.select("products", columns=["name; DROP TABLE products"])
        with self.assertRaises(GatewayError):
            self.gateway.select("products", filters=[Filter("stock", "like", 1)])
        with self.assertRaises(GatewayError):
            self.gateway.select("products", order_by="missing_column")


if __name__ == "__main__":
    unittest.main()
