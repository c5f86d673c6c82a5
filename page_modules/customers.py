"""Customers page."""
import pandas as pd
import streamlit as st

from core.constants import CUSTOMER_STATUSES
from core.formatters import customer_status_label, format_currency, format_date
from core.services import CUSTOMERS, create_customer, delete_customer, update_customer
from core.validators import CustomerForm
from ui.components import query_data, render_customers_table, row_label, run_mutation, search_filter

STATUS_OPTIONS = list(CUSTOMER_STATUSES)


def _customer_fields(prefix: str, initial: CustomerForm) -> CustomerForm:
    name = st.text_input("Nome", value=initial.name, key=f"{prefix}_name")
    col1, col2 = st.columns(2)
    email = col1.text_input("E-mail", value=initial.email, key=f"{prefix}_email")
    phone = col2.text_input("Telefone", value=initial.phone, placeholder="(11) 98765-4321", key=f"{prefix}_phone")
    col1, col2, col3 = st.columns(3)
    total = col1.text_input("Total de Compras", value=initial.total_purchases, key=f"{prefix}_total")
    last = col2.text_input("Última Compra (dd/MM/yyyy)", value=initial.last_purchase, key=f"{prefix}_last")
    status = col3.selectbox(
        "Status",
        STATUS_OPTIONS,
        index=STATUS_OPTIONS.index(initial.status) if initial.status in STATUS_OPTIONS else 0,
        format_func=customer_status_label,
        key=f"{prefix}_status",
    )
    return CustomerForm(
        name=name,
        email=email,
        phone=phone,
        total_purchases=total,
        last_purchase=last,
        status=status,
    )


def _initial(row) -> CustomerForm:
    total = row.get("total_purchases")
    last = row.get("last_purchase")
    return CustomerForm(
        name=str(row["name"]),
        email=str(row.get("email") or ""),
        phone=str(row.get("phone") or ""),
        total_purchases=format_currency(float(total)) if pd.notna(total) else "",
        last_purchase=format_date(last) if isinstance(last, str) and last else "",
        status=str(row.get("status") or "ativo"),
    )


def render(gateway, queries):
    """Render the customers page."""
    st.header("\U0001F465 Clientes")
    df = query_data(queries.get(CUSTOMERS), "clientes")
    if df is None:
        return

    search = st.text_input("Buscar clientes...", placeholder="Nome, e-mail ou ID")
    filtered = search_filter(df, search, ["name", "email", "id"])
    render_customers_table(filtered)

    tab_new, tab_edit = st.tabs(["Novo Cliente", "Editar / Excluir"])
    with tab_new:
        with st.form("new_customer_form", clear_on_submit=True):
            form = _customer_fields("new_customer", CustomerForm())
            submitted = st.form_submit_button("➕ Adicionar Cliente")
        if submitted and run_mutation(
            lambda: create_customer(gateway, form, queries=queries),
            f"Cliente {form.name.strip()} cadastrado.",
        ):
            st.rerun()

    with tab_edit:
        if df.empty:
            st.info("Nenhum cliente para editar")
            return
        labels = {row_label(row, "name", "email"): row for _, row in df.iterrows()}
        selected = st.selectbox("Selecionar cliente", list(labels), index=None, placeholder="Busque ou selecione")
        if not selected:
            return
        row = labels[selected]
        with st.form(f"edit_customer_form_{row['id']}"):
            form = _customer_fields(f"edit_customer_{row['id']}", _initial(row))
            col_save, col_delete = st.columns([3, 1])
            saved = col_save.form_submit_button("\U0001F4BE Salvar")
            confirm = col_delete.checkbox("Confirmar exclusão", key=f"confirm_customer_{row['id']}")
            deleted = col_delete.form_submit_button("\U0001F5D1️ Excluir")
        if saved and run_mutation(
            lambda: update_customer(gateway, row["id"], form, queries=queries),
            "Cliente atualizado",
            icon="\U0001F4BE",
        ):
            st.rerun()
        if deleted:
            if not confirm:
                st.warning(f"Marque 'Confirmar exclusão' para remover '{row['name']}'.")
            elif run_mutation(
                lambda: delete_customer(gateway, row["id"], queries=queries),
                "Cliente excluído",
                icon="\U0001F5D1️",
            ):
                st.rerun()
