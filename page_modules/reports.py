"""Reports page: monthly sales and category distribution."""
from datetime import date

import plotly.express as px
import streamlit as st

from core.constants import CHART_COLORS
from core.errors import GatewayError
from core.export import sales_pdf
from core.formatters import parse_sale_date
from core.reports import build_sales_report, category_shares, points_frame
from core.services import CATEGORIES, PRODUCTS, SALES


def _fetch(queries, key):
    """Adapt a cached query to the report's fetch contract (raise on error)."""
    def fetch():
        result = queries.get(key)
        if not result.ok:
            raise GatewayError(result.error)
        return result.data
    return fetch


def render(gateway, queries):
    """Render the reports page."""
    st.header("\U0001F4CA Relatórios")

    current_year = date.today().year
    col_type, col_year = st.columns([2, 1])
    report_type = col_type.selectbox("Tipo de Relatório", ["Vendas", "Inventário"])
    year = col_year.selectbox("Ano", list(range(current_year, current_year - 6, -1)))

    report = build_sales_report(
        _fetch(queries, SALES),
        _fetch(queries, PRODUCTS),
        _fetch(queries, CATEGORIES),
        year=year,
    )
    if report.error:
        st.error(report.error)
        return

    if report_type == "Vendas":
        monthly = points_frame(report.monthly.points)
        fig = px.bar(
            monthly,
            x="label",
            y="value",
            title=f"Vendas por mês ({year})",
            labels={"label": "Mês", "value": "Vendas"},
            color_discrete_sequence=[CHART_COLORS[0]],
        )
        st.plotly_chart(fig, use_container_width=True)

        totals = points_frame(report.monthly_totals)
        fig = px.line(
            totals,
            x="label",
            y="value",
            title=f"Faturamento por mês ({year})",
            labels={"label": "Mês", "value": "Total (R$)"},
            markers=True,
        )
        st.plotly_chart(fig, use_container_width=True)

        if report.monthly.skipped:
            st.caption(f"⚠️ {report.monthly.skipped} venda(s) com data inválida foram ignoradas.")
        if report.monthly.ambiguous:
            st.caption(
                f"ℹ️ {report.monthly.ambiguous} venda(s) com data ambígua "
                "(dia e mês ≤ 12) foram lidas como dd/MM/aaaa."
            )

        year_sales = queries.get(SALES).data
        year_sales = year_sales[year_sales["date"].map(lambda d: getattr(parse_sale_date(d), "year", None) == year)]
        if not year_sales.empty:
            st.download_button(
                "\U0001F4C4 Exportar PDF",
                data=sales_pdf(year_sales, title=f"Relatório de Vendas {year}"),
                file_name=f"relatorio_vendas_{year}.pdf",
                mime="application/pdf",
            )
    else:
        st.subheader("Produtos por Categoria")
        if report.categories:
            fig = px.pie(
                points_frame(category_shares(report.categories)),
                values="value",
                names="label",
                color_discrete_sequence=CHART_COLORS,
            )
            st.plotly_chart(fig, use_container_width=True)
            st.dataframe(
                points_frame(report.categories).rename(columns={"label": "Categoria", "value": "Produtos"}),
                use_container_width=True,
                hide_index=True,
            )
        else:
            st.info("Nenhum produto cadastrado")
