"""Report aggregation: sales per month and products per category.

Outputs are ordered ``ChartPoint`` sequences that feed Plotly charts and the
export routines directly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, List, Optional, Union

import pandas as pd

from core.constants import MONTH_LABELS
from core.errors import GatewayError
from core.formatters import format_percent, is_ambiguous_date, parse_sale_date

logger = logging.getLogger(__name__)

Rows = Union[pd.DataFrame, Iterable[dict]]


@dataclass(frozen=True)
class ChartPoint:
    label: str
    value: float


@dataclass
class MonthlyCounts:
    year: int
    points: List[ChartPoint]
    skipped: int = 0
    ambiguous: int = 0


@dataclass
class SalesReport:
    year: int
    monthly: Optional[MonthlyCounts] = None
    monthly_totals: List[ChartPoint] = field(default_factory=list)
    categories: List[ChartPoint] = field(default_factory=list)
    error: Optional[str] = None


def _frame(rows: Rows) -> pd.DataFrame:
    return rows if isinstance(rows, pd.DataFrame) else pd.DataFrame(list(rows))


def _dated_sales(sales: Rows, year: int) -> tuple:
    """Return (sales of ``year`` with a ``month`` column, skipped, ambiguous)."""
    df = _frame(sales)
    if df.empty or "date" not in df.columns:
        return df.iloc[0:0].assign(month=pd.Series(dtype=int)), len(df), 0
    parsed = df["date"].map(parse_sale_date)
    skipped = int(parsed.isna().sum())
    if skipped:
        logger.debug("Skipped %d sales with unparsable dates", skipped)
    df = df.assign(parsed=parsed)[parsed.notna()]
    df = df[df["parsed"].map(lambda d: d.year) == year]
    ambiguous = int(df["date"].map(is_ambiguous_date).sum())
    return df.assign(month=df["parsed"].map(lambda d: d.month)), skipped, ambiguous


def _month_points(series: pd.Series) -> List[ChartPoint]:
    series = series.reindex(range(1, 13), fill_value=0)
    return [ChartPoint(MONTH_LABELS[m - 1], series[m]) for m in range(1, 13)]


def monthly_sales_counts(sales: Rows, year: Optional[int] = None) -> MonthlyCounts:
    """Count sales per month of ``year`` (defaults to the current year).

    Always returns 12 buckets. Sales whose date cannot be parsed are left
    out and reported in ``skipped``.
    """
    year = year or date.today().year
    df, skipped, ambiguous = _dated_sales(sales, year)
    counts = df.groupby("month").size() if not df.empty else pd.Series(dtype=int)
    points = [ChartPoint(p.label, int(p.value)) for p in _month_points(counts)]
    return MonthlyCounts(year=year, points=points, skipped=skipped, ambiguous=ambiguous)


def monthly_sales_totals(sales: Rows, year: Optional[int] = None) -> List[ChartPoint]:
    """Sum sale totals per month of ``year``; same buckets as the counts."""
    year = year or date.today().year
    df, _, _ = _dated_sales(sales, year)
    if df.empty or "total" not in df.columns:
        totals = pd.Series(dtype=float)
    else:
        totals = pd.to_numeric(df["total"], errors="coerce").fillna(0).groupby(df["month"]).sum()
    return [ChartPoint(p.label, round(float(p.value), 2)) for p in _month_points(totals)]


def _id_key(value) -> str:
    # ids read next to NULLs come back as floats (3.0)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def category_counts(categories: Rows, products: Rows) -> List[ChartPoint]:
    """Count products per category, in category order.

    Categories without products are omitted, not zero-filled.
    """
    cats = _frame(categories)
    prods = _frame(products)
    if cats.empty or prods.empty or "category_id" not in prods.columns:
        return []
    counts = prods["category_id"].dropna().map(_id_key).value_counts()
    points = []
    for _, row in cats.iterrows():
        count = int(counts.get(_id_key(row["id"]), 0))
        if count:
            points.append(ChartPoint(str(row["name"]), count))
    return points


def category_shares(points: List[ChartPoint]) -> List[ChartPoint]:
    """Relabel category points with their share of the total, e.g. ``A 67%``."""
    total = sum(p.value for p in points)
    if not total:
        return list(points)
    return [ChartPoint(f"{p.label} {format_percent(p.value / total)}", p.value) for p in points]


def points_frame(points: List[ChartPoint]) -> pd.DataFrame:
    return pd.DataFrame(
        {"label": [p.label for p in points], "value": [p.value for p in points]}
    )


def build_sales_report(
    fetch_sales: Callable[[], Rows],
    fetch_products: Callable[[], Rows],
    fetch_categories: Callable[[], Rows],
    year: Optional[int] = None,
) -> SalesReport:
    """Fetch the source tables and aggregate them.

    If a fetch fails the aggregation is skipped and the error message is
    returned as is. No retry.
    """
    year = year or date.today().year
    try:
        sales = fetch_sales()
        products = fetch_products()
        categories = fetch_categories()
    except GatewayError as exc:
        return SalesReport(year=year, error=str(exc))
    return SalesReport(
        year=year,
        monthly=monthly_sales_counts(sales, year),
        monthly_totals=monthly_sales_totals(sales, year),
        categories=category_counts(categories, products),
    )
