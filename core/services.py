# ---------- services.py ----------
"""Domain operations used by the Streamlit pages.

Mutations validate first (raising ``ValidationError`` before anything is
sent), call the gateway, and on success invalidate the affected queries so
the screen refetches them.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from core.errors import ValidationError
from core.gateway import Gateway, eq, gt
from core.queries import QueryContext
from core.validators import (
    CategoryForm,
    CustomerForm,
    FormError,
    Invalid,
    ProductForm,
    SaleForm,
    parse_category_form,
    parse_customer_form,
    parse_product_form,
    parse_sale_form,
)

logger = logging.getLogger(__name__)

PRODUCTS = "products"
PRODUCTS_IN_STOCK = "products_in_stock"
CATEGORIES = "categories"
SALES = "sales"
CUSTOMERS = "customers"
SETTINGS = "settings"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "store_name": "",
    "store_email": "",
    "store_phone": "",
    "store_address": "",
    "notify_low_stock": True,
    "notify_new_order": True,
    "notify_sales_report": True,
    "notify_product_updates": False,
}


def _invalidate(queries: Optional[QueryContext], *keys: str) -> None:
    if queries is not None:
        queries.invalidate(*keys)


def _checked(result) -> Dict[str, Any]:
    if isinstance(result, Invalid):
        raise ValidationError(result.error)
    return result.value


def register_queries(queries: QueryContext, gateway: Gateway) -> QueryContext:
    """Register the standard table queries on a screen context."""
    queries.register(PRODUCTS, lambda: get_products(gateway))
    queries.register(PRODUCTS_IN_STOCK, lambda: get_products_in_stock(gateway))
    queries.register(CATEGORIES, lambda: get_categories(gateway))
    queries.register(SALES, lambda: get_sales(gateway))
    queries.register(CUSTOMERS, lambda: get_customers(gateway))
    queries.register(SETTINGS, lambda: load_settings(gateway))
    return queries


# ---------- products ----------

def get_products(gateway: Gateway) -> pd.DataFrame:
    """Return products joined with their category name, newest first."""
    products = gateway.select(PRODUCTS, order_by="created_at", descending=True)
    categories = gateway.select(CATEGORIES, columns=["id", "name"])
    if products.empty:
        products["category"] = pd.Series(dtype=str)
        return products
    names = dict(zip(categories["id"], categories["name"])) if not categories.empty else {}
    products["category"] = products["category_id"].map(names).fillna("")
    return products


def get_products_in_stock(gateway: Gateway) -> pd.DataFrame:
    return gateway.select(
        PRODUCTS, columns=["id", "name", "stock"], filters=[gt("stock", 0)], order_by="name"
    )


def create_product(gateway: Gateway, form: ProductForm, queries: Optional[QueryContext] = None) -> Any:
    values = _checked(parse_product_form(form))
    product_id = gateway.insert(PRODUCTS, values)
    _invalidate(queries, PRODUCTS, PRODUCTS_IN_STOCK)
    return product_id


def update_product(
    gateway: Gateway, product_id: Any, form: ProductForm, queries: Optional[QueryContext] = None
) -> Any:
    values = _checked(parse_product_form(form))
    values["updated_at"] = datetime.now(timezone.utc).isoformat()
    gateway.update(PRODUCTS, product_id, values)
    _invalidate(queries, PRODUCTS, PRODUCTS_IN_STOCK)
    return product_id


def delete_product(gateway: Gateway, product_id: Any, queries: Optional[QueryContext] = None) -> None:
    gateway.delete(PRODUCTS, product_id)
    _invalidate(queries, PRODUCTS, PRODUCTS_IN_STOCK)


# ---------- categories ----------

def get_categories(gateway: Gateway) -> pd.DataFrame:
    return gateway.select(CATEGORIES, columns=["id", "name"], order_by="name")


def create_category(
    gateway: Gateway,
    form: CategoryForm,
    existing_names: Iterable[str] = (),
    queries: Optional[QueryContext] = None,
) -> Any:
    values = _checked(parse_category_form(form, existing_names))
    category_id = gateway.insert(CATEGORIES, values)
    _invalidate(queries, CATEGORIES)
    return category_id


def delete_category(gateway: Gateway, category_id: Any, queries: Optional[QueryContext] = None) -> None:
    """Delete a category; refused while products still reference it."""
    in_use = gateway.select(PRODUCTS, columns=["id"], filters=[eq("category_id", category_id)])
    if not in_use.empty:
        raise ValidationError(
            FormError(
                "Categoria em uso",
                f"Existem {len(in_use)} produto(s) nesta categoria. Mova-os antes de excluir.",
            )
        )
    gateway.delete(CATEGORIES, category_id)
    _invalidate(queries, CATEGORIES)


# ---------- sales ----------

def get_sales(gateway: Gateway) -> pd.DataFrame:
    return gateway.select(SALES, order_by="created_at", descending=True)


def create_sale(gateway: Gateway, form: SaleForm, queries: Optional[QueryContext] = None) -> Any:
    values = _checked(parse_sale_form(form))
    sale_id = gateway.insert(SALES, values)
    _invalidate(queries, SALES)
    return sale_id


def update_sale(gateway: Gateway, sale_id: Any, form: SaleForm, queries: Optional[QueryContext] = None) -> Any:
    values = _checked(parse_sale_form(form))
    gateway.update(SALES, sale_id, values)
    _invalidate(queries, SALES)
    return sale_id


def delete_sale(gateway: Gateway, sale_id: Any, queries: Optional[QueryContext] = None) -> None:
    gateway.delete(SALES, sale_id)
    _invalidate(queries, SALES)


# ---------- customers ----------

def get_customers(gateway: Gateway) -> pd.DataFrame:
    return gateway.select(CUSTOMERS, order_by="name")


def create_customer(gateway: Gateway, form: CustomerForm, queries: Optional[QueryContext] = None) -> Any:
    values = _checked(parse_customer_form(form))
    customer_id = gateway.insert(CUSTOMERS, values)
    _invalidate(queries, CUSTOMERS)
    return customer_id


def update_customer(
    gateway: Gateway, customer_id: Any, form: CustomerForm, queries: Optional[QueryContext] = None
) -> Any:
    values = _checked(parse_customer_form(form))
    gateway.update(CUSTOMERS, customer_id, values)
    _invalidate(queries, CUSTOMERS)
    return customer_id


def delete_customer(gateway: Gateway, customer_id: Any, queries: Optional[QueryContext] = None) -> None:
    gateway.delete(CUSTOMERS, customer_id)
    _invalidate(queries, CUSTOMERS)


# ---------- settings ----------

def load_settings(gateway: Gateway) -> Dict[str, Any]:
    """Return the stored settings row merged over the defaults."""
    df = gateway.select(SETTINGS, order_by="id")
    settings = dict(DEFAULT_SETTINGS)
    if df.empty:
        return settings
    row = df.iloc[0].to_dict()
    for key, default in DEFAULT_SETTINGS.items():
        value = row.get(key)
        if value is None or (isinstance(value, float) and pd.isna(value)):
            continue
        settings[key] = bool(value) if isinstance(default, bool) else str(value)
    settings["id"] = row["id"]
    return settings


def save_settings(gateway: Gateway, values: Dict[str, Any], queries: Optional[QueryContext] = None) -> Any:
    """Insert or update the single settings row."""
    payload = {
        key: (int(bool(values.get(key, default))) if isinstance(default, bool) else str(values.get(key, default)).strip())
        for key, default in DEFAULT_SETTINGS.items()
    }
    existing = gateway.select(SETTINGS, columns=["id"], order_by="id")
    if existing.empty:
        settings_id = gateway.insert(SETTINGS, payload)
    else:
        settings_id = gateway.update(SETTINGS, existing["id"].iloc[0].item(), payload)
    _invalidate(queries, SETTINGS)
    return settings_id
