"""Serialize sale rows to PDF, CSV and Excel."""
from __future__ import annotations

from io import BytesIO
from typing import Iterable, List, Union

import pandas as pd
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table as XlTable, TableStyleInfo as XlTableStyleInfo
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.constants import SALE_EXPORT_COLUMNS
from core.formatters import format_currency, format_date, sale_status_label

Rows = Union[pd.DataFrame, Iterable[dict]]


def sales_export_frame(rows: Rows) -> pd.DataFrame:
    """Return the export columns in input order with display formatting."""
    df = rows.copy() if isinstance(rows, pd.DataFrame) else pd.DataFrame(list(rows))
    columns = [col for col, _ in SALE_EXPORT_COLUMNS]
    for col in columns:
        if col not in df.columns:
            df[col] = ""
    df = df[columns].reset_index(drop=True)
    if not df.empty:
        df["date"] = df["date"].map(format_date)
        df["status"] = df["status"].map(lambda s: sale_status_label(str(s)))
        df["total"] = df["total"].map(
            lambda v: format_currency(float(v)) if pd.notna(v) and v != "" else ""
        )
    return df.rename(columns=dict(SALE_EXPORT_COLUMNS))


def sales_table_rows(rows: Rows) -> List[List[str]]:
    """Header row followed by one row per sale, all as strings."""
    df = sales_export_frame(rows)
    return [list(df.columns)] + df.fillna("").astype(str).values.tolist()


def sales_pdf(rows: Rows, title: str = "Relatório de Vendas") -> bytes:
    """Render sales as a one-table PDF document."""
    buf = BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=landscape(A4), title=title)
    table = Table(sales_table_rows(rows), repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("ALIGN", (-1, 1), (-1, -1), "RIGHT"),
            ]
        )
    )
    styles = getSampleStyleSheet()
    doc.build([Paragraph(title, styles["Heading2"]), Spacer(1, 12), table])
    return buf.getvalue()


def sales_csv(rows: Rows) -> bytes:
    # utf-8-sig so Excel opens accented names correctly
    return sales_export_frame(rows).to_csv(index=False).encode("utf-8-sig")


def sales_excel(rows: Rows) -> bytes:
    export_df = sales_export_frame(rows)
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name="vendas")
        ws = writer.sheets["vendas"]
        max_col = len(export_df.columns)
        max_row = len(export_df) + 1
        if max_row > 1:
            last_col = get_column_letter(max_col)
            table = XlTable(displayName="SalesExport", ref=f"A1:{last_col}{max_row}")
            table.tableStyleInfo = XlTableStyleInfo(
                name="TableStyleMedium9",
                showFirstColumn=False,
                showLastColumn=False,
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(table)
        for idx, col_name in enumerate(export_df.columns, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = max(12, len(str(col_name)) + 2)
    return buf.getvalue()
