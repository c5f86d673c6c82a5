"""Sales history page: search, new/edit/delete sale and exports."""
from datetime import date

import streamlit as st

from core.constants import PAYMENT_METHODS, SALE_STATUSES
from core.export import sales_csv, sales_excel, sales_pdf
from core.formatters import (
    format_amount,
    format_date,
    parse_sale_date,
    product_option_label,
    sale_status_label,
)
from core.services import PRODUCTS_IN_STOCK, SALES, create_sale, delete_sale, update_sale
from core.validators import SaleForm
from ui.components import query_data, render_sales_table, row_label, run_mutation, search_filter

STATUS_OPTIONS = list(SALE_STATUSES)


def _sale_fields(prefix: str, initial: SaleForm, stock_by_name) -> SaleForm:
    customer = st.text_input("Cliente", value=initial.customer, key=f"{prefix}_customer")
    sale_date = st.text_input("Data (dd/MM/yyyy)", value=initial.date, key=f"{prefix}_date")
    options = list(stock_by_name)
    if initial.products and initial.products not in options:
        options.insert(0, initial.products)
    products = st.selectbox(
        "Produtos",
        options,
        index=options.index(initial.products) if initial.products in options else None,
        format_func=lambda n: product_option_label(n, stock_by_name[n]) if n in stock_by_name else n,
        placeholder="Selecione um produto",
        key=f"{prefix}_products",
    )
    col1, col2 = st.columns(2)
    status = col1.selectbox(
        "Status",
        STATUS_OPTIONS,
        index=STATUS_OPTIONS.index(initial.status) if initial.status in STATUS_OPTIONS else 0,
        format_func=sale_status_label,
        key=f"{prefix}_status",
    )
    payment = col2.selectbox(
        "Forma de Pagamento",
        PAYMENT_METHODS,
        index=PAYMENT_METHODS.index(initial.payment) if initial.payment in PAYMENT_METHODS else None,
        placeholder="Selecione a forma de pagamento",
        key=f"{prefix}_payment",
    )
    total = st.text_input(
        "Total",
        value=initial.total,
        placeholder="ex: R$ 1.899,00",
        help="Os dígitos são lidos como centavos.",
        key=f"{prefix}_total",
    )
    return SaleForm(
        customer=customer,
        date=sale_date,
        products=products or "",
        status=status,
        payment=payment or "",
        total=total,
    )


def _filtered_sales(sales_df):
    col_search, col_date = st.columns([3, 1])
    search = col_search.text_input("Buscar vendas...", placeholder="ID, cliente ou produto")
    day = col_date.date_input("Filtrar por data", value=None, format="DD/MM/YYYY")
    df = search_filter(sales_df, search, ["id", "customer", "products"])
    if day is not None and not df.empty:
        df = df[df["date"].map(parse_sale_date) == day]
    return df


def _exports(df):
    if df.empty:
        return
    stamp = date.today().strftime("%Y%m%d")
    col1, col2, col3 = st.columns(3)
    col1.download_button(
        "\U0001F4C4 Exportar PDF",
        data=sales_pdf(df),
        file_name=f"vendas_{stamp}.pdf",
        mime="application/pdf",
    )
    col2.download_button(
        "Exportar CSV",
        data=sales_csv(df),
        file_name=f"vendas_{stamp}.csv",
        mime="text/csv",
    )
    col3.download_button(
        "Exportar Excel",
        data=sales_excel(df),
        file_name=f"vendas_{stamp}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


def render(gateway, queries):
    """Render the sales page."""
    st.header("\U0001F6D2 Histórico de Vendas")
    sales_df = query_data(queries.get(SALES), "vendas")
    in_stock = query_data(queries.get(PRODUCTS_IN_STOCK), "produtos em estoque")
    if sales_df is None:
        return
    stock_by_name = {} if in_stock is None else dict(zip(in_stock["name"], in_stock["stock"]))

    filtered = _filtered_sales(sales_df)
    render_sales_table(filtered)
    _exports(filtered)

    tab_new, tab_edit = st.tabs(["Nova Venda", "Editar / Excluir"])
    with tab_new:
        with st.form("new_sale_form", clear_on_submit=True):
            form = _sale_fields("new_sale", SaleForm(date=date.today().strftime("%d/%m/%Y")), stock_by_name)
            submitted = st.form_submit_button("Salvar")
        if submitted and run_mutation(
            lambda: create_sale(gateway, form.masked(), queries=queries),
            f"Venda para {form.customer.strip()} registrada.",
        ):
            st.rerun()

    with tab_edit:
        if sales_df.empty:
            st.info("Nenhuma venda para editar")
            return
        labels = {row_label(row, "customer", "products"): row for _, row in sales_df.iterrows()}
        selected = st.selectbox("Selecionar venda", list(labels), index=None, placeholder="Busque ou selecione")
        if not selected:
            return
        row = labels[selected]
        st.caption(
            f"{format_date(row['date'])} · {sale_status_label(row['status'])} · "
            f"{format_amount(row['total'])}"
        )
        initial = SaleForm(
            customer=str(row["customer"]),
            date=format_date(row["date"]),
            products=str(row["products"] or ""),
            status=str(row["status"]),
            payment=str(row["payment"] or ""),
            total=format_amount(row["total"], missing=""),
        )
        with st.form(f"edit_sale_form_{row['id']}"):
            form = _sale_fields(f"edit_sale_{row['id']}", initial, stock_by_name)
            col_save, col_delete = st.columns([3, 1])
            saved = col_save.form_submit_button("\U0001F4BE Salvar")
            confirm = col_delete.checkbox("Confirmar exclusão", key=f"confirm_sale_{row['id']}")
            deleted = col_delete.form_submit_button("\U0001F5D1️ Excluir")
        if saved and run_mutation(
            lambda: update_sale(gateway, row["id"], form.masked(), queries=queries),
            "Venda atualizada",
            icon="\U0001F4BE",
        ):
            st.rerun()
        if deleted:
            if not confirm:
                st.warning("Marque 'Confirmar exclusão' para remover a venda.")
            elif run_mutation(
                lambda: delete_sale(gateway, row["id"], queries=queries),
                "Venda excluída",
                icon="\U0001F5D1️",
            ):
                st.rerun()
