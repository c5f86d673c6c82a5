"""Form records and their validation.

Each form is a record of the raw strings typed by the user. ``validate_*``
returns the first violated rule (or None); ``parse_*`` returns a tagged
``Valid``/``Invalid`` result whose value is ready to send to the gateway.
Rules are checked in a fixed order and stop at the first failure.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Optional, Union

from core.constants import CUSTOMER_STATUSES, SALE_STATUSES
from core.errors import ParseError
from core.formatters import (
    format_amount,
    format_currency_input,
    format_weight,
    parse_currency,
    parse_decimal,
    parse_int,
    parse_sale_date,
    to_iso_date,
)

ERROR_TITLE = "Erro de validação"

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class FormError:
    title: str
    description: str


@dataclass(frozen=True)
class Valid:
    value: Dict[str, Any]


@dataclass(frozen=True)
class Invalid:
    error: FormError


FormResult = Union[Valid, Invalid]


def _invalid(description: str) -> Invalid:
    return Invalid(FormError(ERROR_TITLE, description))


def _text(value: Any) -> str:
    """Stored value as form text; NULL and NaN become an empty field."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _positive(parse, text: str) -> Optional[float]:
    try:
        value = parse(text)
    except ParseError:
        return None
    return value if value > 0 else None


# ---------- product ----------

@dataclass
class ProductForm:
    name: str = ""
    category_id: str = ""
    price: str = ""
    stock: str = ""
    width: str = ""
    height: str = ""
    weight: str = ""
    description: str = ""

    @classmethod
    def from_row(cls, row) -> "ProductForm":
        """Prefill the form from a product row (dict or pandas Series)."""
        return cls(
            name=_text(row["name"]),
            category_id=_text(row["category_id"]),
            price=format_amount(row["price"], missing=""),
            stock=_text(row["stock"]),
            width=_text(row["width"]),
            height=_text(row["height"]),
            weight=_text(row["weight"]),
            description=_text(row.get("description")),
        )

    def masked(self) -> "ProductForm":
        """Apply the input masks: price digits read as cents, weight to two decimals."""
        return replace(self, price=format_currency_input(self.price), weight=format_weight(self.weight))


def parse_product_form(form: ProductForm) -> FormResult:
    if not form.name.strip():
        return _invalid("Nome do produto é obrigatório.")
    if not str(form.category_id).strip():
        return _invalid("Categoria é obrigatória.")

    price = _positive(parse_currency, form.price)
    if price is None:
        return _invalid("Preço deve ser um número positivo.")

    try:
        stock = parse_int(form.stock)
    except ParseError:
        stock = -1
    if stock < 0:
        return _invalid("Estoque deve ser um número não negativo.")

    dimensions = [_positive(parse_decimal, v) for v in (form.width, form.height, form.weight)]
    if any(v is None for v in dimensions):
        return _invalid("Dimensões e peso devem ser números positivos.")
    width, height, weight = dimensions

    return Valid({
        "name": form.name.strip(),
        "category_id": str(form.category_id).strip(),
        "price": round(price, 2),
        "stock": stock,
        "width": width,
        "height": height,
        "weight": weight,
        "description": form.description.strip() or None,
    })


def validate_product_form(form: ProductForm) -> Optional[FormError]:
    result = parse_product_form(form)
    return result.error if isinstance(result, Invalid) else None


# ---------- sale ----------

@dataclass
class SaleForm:
    customer: str = ""
    date: str = ""
    products: str = ""
    status: str = "pendente"
    payment: str = ""
    total: str = ""

    def masked(self) -> "SaleForm":
        return replace(self, total=format_currency_input(self.total))


def parse_sale_form(form: SaleForm) -> FormResult:
    if not form.customer.strip():
        return _invalid("Cliente é obrigatório.")
    sale_date = parse_sale_date(form.date)
    if sale_date is None:
        return _invalid("Data inválida. Use o formato dd/MM/aaaa.")
    if not form.products.strip():
        return _invalid("Selecione ao menos um produto.")
    if form.status not in SALE_STATUSES:
        return _invalid("Status da venda inválido.")
    total = _positive(parse_currency, form.total)
    if total is None:
        return _invalid("Total deve ser um valor positivo.")
    if not form.payment.strip():
        return _invalid("Forma de pagamento é obrigatória.")
    return Valid({
        "customer": form.customer.strip(),
        "date": to_iso_date(form.date),
        "products": form.products.strip(),
        "status": form.status,
        "payment": form.payment.strip(),
        "total": round(total, 2),
    })


def validate_sale_form(form: SaleForm) -> Optional[FormError]:
    result = parse_sale_form(form)
    return result.error if isinstance(result, Invalid) else None


# ---------- customer ----------

@dataclass
class CustomerForm:
    name: str = ""
    email: str = ""
    phone: str = ""
    total_purchases: str = ""
    last_purchase: str = ""
    status: str = "ativo"


def parse_customer_form(form: CustomerForm) -> FormResult:
    if not form.name.strip():
        return _invalid("Nome do cliente é obrigatório.")
    if not _EMAIL.match(form.email.strip()):
        return _invalid("E-mail inválido.")
    if form.status not in CUSTOMER_STATUSES:
        return _invalid("Status do cliente inválido.")

    total = 0.0
    if form.total_purchases.strip():
        try:
            total = parse_currency(form.total_purchases)
        except ParseError:
            total = -1.0
        if total < 0:
            return _invalid("Total de compras deve ser um número não negativo.")

    last_purchase = None
    if form.last_purchase.strip():
        parsed = parse_sale_date(form.last_purchase)
        if parsed is None:
            return _invalid("Data da última compra inválida.")
        last_purchase = parsed.isoformat()

    return Valid({
        "name": form.name.strip(),
        "email": form.email.strip(),
        "phone": form.phone.strip(),
        "total_purchases": round(total, 2),
        "last_purchase": last_purchase,
        "status": form.status,
    })


def validate_customer_form(form: CustomerForm) -> Optional[FormError]:
    result = parse_customer_form(form)
    return result.error if isinstance(result, Invalid) else None


# ---------- category ----------

@dataclass
class CategoryForm:
    name: str = ""


def parse_category_form(form: CategoryForm, existing_names: Iterable[str] = ()) -> FormResult:
    name = form.name.strip()
    if not name:
        return _invalid("Nome da categoria é obrigatório.")
    if name.casefold() in {str(n).strip().casefold() for n in existing_names}:
        return _invalid(f'A categoria "{name}" já existe.')
    return Valid({"name": name})


def validate_category_form(form: CategoryForm, existing_names: Iterable[str] = ()) -> Optional[FormError]:
    result = parse_category_form(form, existing_names)
    return result.error if isinstance(result, Invalid) else None
