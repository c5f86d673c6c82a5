"""Dashboard page with sales and inventory overview."""
from datetime import date, datetime

import pandas as pd
import plotly.express as px
import streamlit as st

from core.constants import CHART_COLORS, LOW_STOCK_THRESHOLD_DEFAULT
from core.formatters import format_amount, format_currency, format_date, low_stock_level
from core.reports import category_counts, monthly_sales_totals, points_frame
from core.services import CATEGORIES, CUSTOMERS, PRODUCTS, SALES
from ui.components import query_data, render_table, status_badge


def render(gateway, queries):
    """Render the dashboard page."""
    col_title, col_updated = st.columns([3, 1])
    col_title.header("\U0001F4C8 Dashboard")
    col_updated.caption(f"Última atualização: {datetime.now():%d/%m/%Y - %H:%M}")

    sales_df = query_data(queries.get(SALES), "vendas")
    products_df = query_data(queries.get(PRODUCTS), "produtos")
    categories_df = query_data(queries.get(CATEGORIES), "categorias")
    customers_df = query_data(queries.get(CUSTOMERS), "clientes")
    if sales_df is None or products_df is None or categories_df is None or customers_df is None:
        return

    # Row 1: core metrics
    if sales_df.empty:
        gross = revenue = 0.0
    else:
        totals = pd.to_numeric(sales_df["total"], errors="coerce").fillna(0)
        gross = float(totals[sales_df["status"] != "cancelado"].sum())
        revenue = float(totals[sales_df["status"] == "entregue"].sum())
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total de Vendas", format_currency(gross))
    col2.metric("Receita", format_currency(revenue))
    col3.metric("Produtos", len(products_df))
    col4.metric("Clientes", len(customers_df))

    st.markdown("---")
    col_sales, col_inventory = st.columns([2, 1])

    with col_sales:
        year = date.today().year
        st.subheader(f"Visão Geral de Vendas ({year})")
        monthly = points_frame(monthly_sales_totals(sales_df, year))
        fig = px.area(
            monthly,
            x="label",
            y="value",
            labels={"label": "", "value": "Vendas (R$)"},
            color_discrete_sequence=[CHART_COLORS[0]],
        )
        st.plotly_chart(fig, use_container_width=True)

    with col_inventory:
        st.subheader("Distribuição do Inventário")
        by_category = category_counts(categories_df, products_df)
        if by_category:
            fig = px.pie(
                points_frame(by_category),
                values="value",
                names="label",
                color_discrete_sequence=CHART_COLORS,
            )
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("Nenhum produto cadastrado")

    col_orders, col_low = st.columns([2, 1])

    with col_orders:
        st.subheader("Pedidos Recentes")
        if sales_df.empty:
            st.info("Nenhuma venda registrada")
        else:
            for _, sale in sales_df.head(5).iterrows():
                st.markdown(
                    f"**#{sale['id']}** · {sale['customer']} · {sale['products']} · "
                    f"{format_amount(sale['total'])} · {format_date(sale['date'])} "
                    f"{status_badge(sale['status'])}",
                    unsafe_allow_html=True,
                )

    with col_low:
        st.subheader("Produtos com Estoque Baixo")
        low = products_df[products_df["stock"] <= LOW_STOCK_THRESHOLD_DEFAULT] if not products_df.empty else products_df
        if not low.empty:
            low = low.sort_values("stock").copy()
            low["level"] = low["stock"].map(lambda s: low_stock_level(int(s)))
        render_table(
            low,
            {"id": "SKU", "name": "Produto", "category": "Categoria", "stock": "Estoque", "level": "Status"},
            empty="Nenhum produto com estoque baixo",
        )
