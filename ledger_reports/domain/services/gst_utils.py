# ledger_reports/domain/services/gst_utils.py

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, NamedTuple

from ledger_reports.domain.constants import GstType, ZERO
from ledger_reports.domain.models.gst_reports import GSTSummary, ReportPeriod, TaxHeadAmounts
from ledger_reports.domain.models.transaction import (
    GstDetails,
    parse_gst_details,
    to_datetime,
    unwrap_timestamp,
)


class GstSplit(NamedTuple):
    cgst: Decimal
    sgst: Decimal
    igst: Decimal


def create_empty_gst_summary() -> GSTSummary:
    """Fresh zeroed accumulator; never shared between callers."""
    return GSTSummary()


def calculate_gst_from_line_items(gst_details: GstDetails | Mapping[str, Any] | None) -> GstSplit:
    """
    Split a transaction's GST into (cgst, sgst, igst).

    The ``gst_type`` tag decides which branch applies; the amounts of the
    other branch are ignored even if present.
    """
    details = parse_gst_details(gst_details)
    if details is None:
        return GstSplit(ZERO, ZERO, ZERO)
    if details.gst_type == GstType.CGST_SGST:
        return GstSplit(details.cgst_amount, details.sgst_amount, ZERO)
    return GstSplit(ZERO, ZERO, details.igst_amount)


def fold_into_summary(summary: GSTSummary, taxable_value: Decimal, split: GstSplit) -> None:
    """Add one transaction to a running summary (total == cgst+sgst+igst+cess)."""
    summary.taxable_value += taxable_value
    summary.cgst += split.cgst
    summary.sgst += split.sgst
    summary.igst += split.igst
    summary.total += split.cgst + split.sgst + split.igst
    summary.transaction_count += 1


def add_gst_summaries(a: GSTSummary, b: GSTSummary) -> GSTSummary:
    return GSTSummary(
        taxable_value=a.taxable_value + b.taxable_value,
        cgst=a.cgst + b.cgst,
        sgst=a.sgst + b.sgst,
        igst=a.igst + b.igst,
        cess=a.cess + b.cess,
        total=a.total + b.total,
        transaction_count=a.transaction_count + b.transaction_count,
    )


def tax_heads_from_summary(summary: GSTSummary) -> TaxHeadAmounts:
    return TaxHeadAmounts(
        cgst=summary.cgst,
        sgst=summary.sgst,
        igst=summary.igst,
        cess=summary.cess,
        total=summary.total,
    )


def period_from_start(start: Any) -> ReportPeriod:
    """Report period (month/year) of the window's start boundary."""
    start_dt = to_datetime(start)
    if start_dt is None:
        raise ValueError(f"Cannot derive a report period from {start!r}")
    return ReportPeriod(month=start_dt.month, year=start_dt.year)


def format_iso_date(value: Any) -> str:
    """
    Render a timestamp wrapper, a date/datetime or a pre-formatted string
    as YYYY-MM-DD. Unparseable strings pass through unchanged; any other
    value renders as "".
    """
    if value is None:
        return ""
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10]).isoformat()
        except ValueError:
            return text
    value = unwrap_timestamp(value)
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return ""


def add_tax_heads(a: TaxHeadAmounts, b: TaxHeadAmounts) -> TaxHeadAmounts:
    return TaxHeadAmounts(
        cgst=a.cgst + b.cgst,
        sgst=a.sgst + b.sgst,
        igst=a.igst + b.igst,
        cess=a.cess + b.cess,
        total=a.total + b.total,
    )


def subtract_tax_heads(a: TaxHeadAmounts, b: TaxHeadAmounts) -> TaxHeadAmounts:
    return TaxHeadAmounts(
        cgst=a.cgst - b.cgst,
        sgst=a.sgst - b.sgst,
        igst=a.igst - b.igst,
        cess=a.cess - b.cess,
        total=a.total - b.total,
    )
