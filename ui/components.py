"""Reusable UI components."""
from typing import Callable, Dict, Iterable, Optional

import pandas as pd
import streamlit as st

from core.errors import GatewayError, ValidationError
from core.formatters import (
    customer_status_label,
    format_amount,
    format_currency,
    format_date,
    sale_status_color,
    sale_status_label,
    stock_status,
)
from core.queries import QueryResult


def query_data(result: QueryResult, label: str) -> Optional[pd.DataFrame]:
    """Show a fetch error as is, or return the fetched data."""
    if not result.ok:
        st.error(f"Erro ao carregar {label}: {result.error}")
        return None
    return result.data


def run_mutation(action: Callable[[], object], success: str, icon: str = "✅") -> bool:
    """Run a create/update/delete call and report the outcome to the user.

    Errors are terminal for the action: nothing is retried.
    """
    try:
        action()
    except ValidationError as e:
        st.error(f"**{e.error.title}**: {e.error.description}")
        return False
    except GatewayError as e:
        st.error(f"⚠️ {e}")
        return False
    st.session_state["flash_message"] = (success, icon)
    return True


def show_flash():
    """Show the toast queued by a mutation before the last rerun."""
    flash = st.session_state.pop("flash_message", None)
    if flash:
        message, icon = flash
        st.toast(message, icon=icon)


def search_filter(df: pd.DataFrame, term: str, columns: Iterable[str]) -> pd.DataFrame:
    """Case-insensitive partial search across ``columns``."""
    if df.empty or not term:
        return df
    mask = None
    for col in columns:
        if col not in df.columns:
            continue
        col_mask = df[col].astype(str).str.contains(term, case=False, na=False, regex=False)
        mask = col_mask if mask is None else (mask | col_mask)
    return df if mask is None else df[mask]


def status_badge(status: str) -> str:
    """Small HTML badge for a sale status."""
    color = sale_status_color(status)
    return (
        f"<span style='background:{color}22;color:{color};padding:2px 8px;"
        f"border-radius:9999px;font-size:0.8rem'>{sale_status_label(status)}</span>"
    )


def render_table(df: pd.DataFrame, columns: Dict[str, str], empty: str = "Nenhum registro encontrado"):
    """Render ``df`` restricted to ``columns`` (raw name -> header)."""
    if df is None or df.empty:
        st.info(empty)
        return
    display_df = df.copy()
    for c in columns:
        if c not in display_df.columns:
            display_df[c] = ""
    display_df = display_df[list(columns)].rename(columns=columns)
    st.dataframe(display_df, use_container_width=True, hide_index=True)


def render_products_table(df: pd.DataFrame):
    if df is None or df.empty:
        st.info("Nenhum produto cadastrado")
        return
    display_df = df.copy()
    display_df["price"] = display_df["price"].map(format_amount)
    display_df["status"] = display_df["stock"].map(lambda s: stock_status(int(s)))
    render_table(
        display_df,
        {
            "id": "SKU",
            "name": "Nome",
            "category": "Categoria",
            "price": "Preço",
            "stock": "Estoque",
            "status": "Status",
        },
    )


def render_sales_table(df: pd.DataFrame):
    if df is None or df.empty:
        st.info("Nenhuma venda encontrada")
        return
    display_df = df.copy()
    display_df["date"] = display_df["date"].map(format_date)
    display_df["status"] = display_df["status"].map(sale_status_label)
    display_df["total"] = display_df["total"].map(format_amount)
    render_table(
        display_df,
        {
            "id": "ID",
            "customer": "Cliente",
            "date": "Data",
            "products": "Produtos",
            "status": "Status",
            "payment": "Pagamento",
            "total": "Total",
        },
    )


def render_customers_table(df: pd.DataFrame):
    if df is None or df.empty:
        st.info("Nenhum cliente encontrado")
        return
    display_df = df.copy()
    display_df["total_purchases"] = display_df["total_purchases"].map(
        lambda v: format_currency(float(v) if pd.notna(v) else 0.0)
    )
    display_df["last_purchase"] = display_df["last_purchase"].map(
        lambda v: format_date(v) if pd.notna(v) and v else "-"
    )
    display_df["status"] = display_df["status"].map(customer_status_label)
    render_table(
        display_df,
        {
            "id": "ID",
            "name": "Nome",
            "email": "E-mail",
            "phone": "Telefone",
            "total_purchases": "Total de Compras",
            "last_purchase": "Última Compra",
            "status": "Status",
        },
    )


def row_label(row, *fields: str) -> str:
    """Label used in select boxes, e.g. ``#3 | Mouse | Acessórios``."""
    parts = [f"#{row['id']}"] + [str(row.get(f, "") or "").strip() for f in fields]
    return " | ".join(p for p in parts if p)
