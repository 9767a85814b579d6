# ledger_reports/domain/models/transaction.py
"""
Typed transaction records parsed from raw document-store snapshots.

All defaulting rules for invoices and bills live here: missing or garbled
amounts become 0, missing strings become '', an unknown GST type means
"no GST details". Parsing never raises on data-shape anomalies.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

from ledger_reports.domain.constants import GstType, TransactionType, ZERO


class GstDetails(BaseModel):
    gst_type: GstType
    cgst_amount: Decimal = Field(default=ZERO)
    sgst_amount: Decimal = Field(default=ZERO)
    igst_amount: Decimal = Field(default=ZERO)


class LineItem(BaseModel):
    hsn_code: str = ""
    description: str = ""
    quantity: Decimal = Field(default=ZERO)
    amount: Decimal = Field(default=ZERO)
    gst_rate: Decimal = Field(default=ZERO)


class TransactionRecord(BaseModel):
    id: str
    type: str = ""
    status: str = ""
    date: Optional[datetime] = None
    transaction_number: str = ""
    entity_name: str = ""
    counterparty_gstin: str = ""
    total_amount: Decimal = Field(default=ZERO)
    subtotal: Decimal = Field(default=ZERO)
    gst_details: Optional[GstDetails] = None
    line_items: list[LineItem] = Field(default_factory=list)

    @property
    def has_gstin(self) -> bool:
        return len(self.counterparty_gstin) > 0


# ---------- field coercion helpers ----------


def to_decimal(value: Any) -> Decimal:
    """Safely convert float/int/str/Decimal/None to Decimal (0 on failure)."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        result = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def unwrap_timestamp(value: Any) -> Any:
    """
    Return the native value behind a store timestamp wrapper.

    Store clients expose the conversion as ``toDate()`` or ``to_date()``;
    anything else is returned unchanged.
    """
    for attr in ("toDate", "to_date"):
        method = getattr(value, attr, None)
        if callable(method):
            return method()
    return value


def to_datetime(value: Any) -> datetime | None:
    """
    Normalise a timestamp wrapper (see ``unwrap_timestamp``), a ``datetime``,
    a ``date`` or an ISO string into a ``datetime``.
    """
    if value is None:
        return None
    value = unwrap_timestamp(value)
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def parse_gst_details(raw: Any) -> GstDetails | None:
    if isinstance(raw, GstDetails):
        return raw
    if not isinstance(raw, Mapping):
        return None
    try:
        gst_type = GstType(raw.get("gstType"))
    except ValueError:
        return None
    return GstDetails(
        gst_type=gst_type,
        cgst_amount=to_decimal(raw.get("cgstAmount")),
        sgst_amount=to_decimal(raw.get("sgstAmount")),
        igst_amount=to_decimal(raw.get("igstAmount")),
    )


def parse_line_item(raw: Any) -> LineItem:
    if not isinstance(raw, Mapping):
        return LineItem()
    return LineItem(
        hsn_code=to_str(raw.get("hsnCode")),
        description=to_str(raw.get("description")),
        quantity=to_decimal(raw.get("quantity")),
        amount=to_decimal(raw.get("amount")),
        gst_rate=to_decimal(raw.get("gstRate")),
    )


# ---------- record parsers (one per record type) ----------


def _parse_transaction(doc_id: str, data: Mapping[str, Any], gstin_field: str) -> TransactionRecord:
    raw_items = data.get("lineItems")
    if not isinstance(raw_items, (list, tuple)):
        raw_items = []

    # Not stripped: any non-empty GSTIN value classifies the record as B2B
    gstin = data.get(gstin_field)

    return TransactionRecord(
        id=doc_id,
        type=to_str(data.get("type")),
        status=to_str(data.get("status")),
        date=to_datetime(data.get("date")),
        transaction_number=to_str(data.get("transactionNumber")),
        entity_name=to_str(data.get("entityName")),
        counterparty_gstin="" if gstin is None else str(gstin),
        total_amount=to_decimal(data.get("totalAmount")),
        subtotal=to_decimal(data.get("subtotal")),
        gst_details=parse_gst_details(data.get("gstDetails")),
        line_items=[parse_line_item(item) for item in raw_items],
    )


def parse_invoice(doc_id: str, data: Mapping[str, Any]) -> TransactionRecord:
    """Customer invoice: the counterparty GSTIN is ``customerGSTIN``."""
    return _parse_transaction(doc_id, data, "customerGSTIN")


def parse_bill(doc_id: str, data: Mapping[str, Any]) -> TransactionRecord:
    """Vendor bill: the counterparty GSTIN is ``vendorGSTIN``."""
    return _parse_transaction(doc_id, data, "vendorGSTIN")


PARSERS = {
    TransactionType.CUSTOMER_INVOICE: parse_invoice,
    TransactionType.VENDOR_BILL: parse_bill,
}
