"""Tests for the domain operations behind the pages."""

from __future__ import annotations

import unittest
from unittest import mock

from core.db_init import connect_sqlite, init_schema
from core.errors import GatewayError, ValidationError
from core.gateway import Gateway, eq
from core.queries import QueryContext
from core.services import (
    CATEGORIES,
    PRODUCTS,
    PRODUCTS_IN_STOCK,
    SALES,
    SETTINGS,
    create_category,
    create_product,
    create_sale,
    delete_category,
    delete_product,
    get_products,
    load_settings,
    register_queries,
    save_settings,
    update_product,
)
from core.validators import CategoryForm, ProductForm, SaleForm


def product_form(category_id, **overrides) -> ProductForm:
    values = dict(
        name="Mouse",
        category_id=str(category_id),
        price="R$ 50,00",
        stock="10",
        width="5",
        height="3",
        weight="0.2",
    )
    values.update(overrides)
    return ProductForm(**values)


class ServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = connect_sqlite(":memory:")
        init_schema(self.conn)
        self.gateway = Gateway(self.conn)
        self.category_id = create_category(self.gateway, CategoryForm("Periféricos"))

    def tearDown(self) -> None:
        self.conn.close()


class ProductServiceTests(ServiceTestCase):
    """Validates product mutations and cache invalidation."""

    def test_create_product_inserts_parsed_values_and_refetches(self) -> None:
        fetcher = mock.Mock(side_effect=lambda: get_products(self.gateway))
        queries = QueryContext()
        queries.register(PRODUCTS, fetcher)
        self.assertTrue(queries.get(PRODUCTS).data.empty)

        with mock.patch.object(self.gateway, "insert", wraps=self.gateway.insert) as insert:
            create_product(self.gateway, product_form(self.category_id), queries=queries)

        table, values = insert.call_args.args
        self.assertEqual(table, "products")
        self.assertEqual(values["price"], 50.0)
        self.assertEqual(values["stock"], 10)
        self.assertEqual(fetcher.call_count, 2)

        products = queries.get(PRODUCTS).data
        self.assertEqual(products["name"].tolist(), ["Mouse"])
        self.assertEqual(products["category"].tolist(), ["Periféricos"])

    def test_typed_price_digits_are_stored_as_cents(self) -> None:
        product_id = create_product(self.gateway, product_form(self.category_id, price="5000").masked())
        row = self.gateway.select("products", filters=[eq("id", product_id)]).iloc[0]
        self.assertEqual(float(row["price"]), 50.0)

    def test_invalid_form_never_reaches_gateway(self) -> None:
        queries = mock.Mock(spec=QueryContext)
        with mock.patch.object(self.gateway, "insert") as insert:
            with self.assertRaises(ValidationError) as ctx:
                create_product(self.gateway, product_form(self.category_id, stock="-1"), queries=queries)
        insert.assert_not_called()
        queries.invalidate.assert_not_called()
        self.assertEqual(ctx.exception.error.description, "Estoque deve ser um número não negativo.")

    def test_gateway_failure_skips_invalidation(self) -> None:
        queries = mock.Mock(spec=QueryContext)
        with self.assertRaises(GatewayError):
            create_product(self.gateway, product_form(9999), queries=queries)
        queries.invalidate.assert_not_called()

    def test_update_and_delete_invalidate_product_lists(self) -> None:
        product_id = create_product(self.gateway, product_form(self.category_id))
        queries = mock.Mock(spec=QueryContext)

        update_product(self.gateway, product_id, product_form(self.category_id, stock="0"), queries=queries)
        queries.invalidate.assert_called_with(PRODUCTS, PRODUCTS_IN_STOCK)
        row = get_products(self.gateway).iloc[0]
        self.assertEqual(int(row["stock"]), 0)
        self.assertTrue(row["updated_at"])

        delete_product(self.gateway, product_id, queries=queries)
        self.assertTrue(get_products(self.gateway).empty)

    def test_in_stock_query_excludes_empty_stock(self) -> None:
        create_product(self.gateway, product_form(self.category_id, name="Teclado", stock="0"))
        create_product(self.gateway, product_form(self.category_id, name="Mouse", stock="3"))
        queries = register_queries(QueryContext(), self.gateway)
        self.assertEqual(queries.get(PRODUCTS_IN_STOCK).data["name"].tolist(), ["Mouse"])


class CategoryServiceTests(ServiceTestCase):
    """Validates category creation and guarded deletion."""

    def test_duplicate_category_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            create_category(self.gateway, CategoryForm("periféricos"), existing_names=["Periféricos"])

    def test_category_in_use_cannot_be_deleted(self) -> None:
        create_product(self.gateway, product_form(self.category_id))
        with self.assertRaises(ValidationError) as ctx:
            delete_category(self.gateway, self.category_id)
        self.assertEqual(ctx.exception.error.title, "Categoria em uso")

    def test_unused_category_is_deleted(self) -> None:
        queries = mock.Mock(spec=QueryContext)
        delete_category(self.gateway, self.category_id, queries=queries)
        queries.invalidate.assert_called_once_with(CATEGORIES)
        self.assertTrue(self.gateway.select("categories").empty)


class SaleServiceTests(ServiceTestCase):
    """Validates that sales are stored with ISO dates."""

    def test_create_sale_stores_iso_date(self) -> None:
        queries = mock.Mock(spec=QueryContext)
        form = SaleForm(
            customer="João Silva",
            date="20/05/2023",
            products="Mouse",
            status="enviado",
            payment="Pix",
            total="R$ 150,00",
        )
        create_sale(self.gateway, form, queries=queries)
        queries.invalidate.assert_called_once_with(SALES)
        row = self.gateway.select("sales").iloc[0]
        self.assertEqual(row["date"], "2023-05-20")
        self.assertEqual(float(row["total"]), 150.0)


class SettingsServiceTests(ServiceTestCase):
    """Validates the single settings row."""

    def test_defaults_without_stored_row(self) -> None:
        settings = load_settings(self.gateway)
        self.assertNotIn("id", settings)
        self.assertTrue(settings["notify_low_stock"])
        self.assertFalse(settings["notify_product_updates"])

    def test_save_inserts_then_updates_same_row(self) -> None:
        queries = mock.Mock(spec=QueryContext)
        save_settings(self.gateway, {"store_name": " Loja Centro ", "notify_new_order": False}, queries=queries)
        queries.invalidate.assert_called_once_with(SETTINGS)

        settings = load_settings(self.gateway)
        self.assertEqual(settings["store_name"], "Loja Centro")
        self.assertFalse(settings["notify_new_order"])

        save_settings(self.gateway, {**settings, "notify_product_updates": True})
        self.assertEqual(len(self.gateway.select("settings")), 1)
        self.assertTrue(load_settings(self.gateway)["notify_product_updates"])


if __name__ == "__main__":
    unittest.main()
