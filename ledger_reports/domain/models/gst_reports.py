# ledger_reports/domain/models/gst_reports.py
"""
Report structures produced by the GSTR-1 / GSTR-2 / GSTR-3B generators.

Amounts are Decimal; the exporters convert to float at the JSON boundary.
Row dates keep whatever the source supplied (datetime, timestamp-like
wrapper or ISO string); the exporters normalise them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ledger_reports.domain.constants import DEFAULT_UQC, ZERO


@dataclass
class GSTSummary:
    taxable_value: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO
    total: Decimal = ZERO
    transaction_count: int = 0


@dataclass
class TaxHeadAmounts:
    """Per tax-head amounts without a taxable value (ITC, interest, payable)."""
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO
    total: Decimal = ZERO


@dataclass
class ReportPeriod:
    month: int
    year: int

    @property
    def fp(self) -> str:
        """Filing period in MMYYYY format (e.g. 012024)."""
        return f"{self.month:02d}{self.year}"


# ---------- per-transaction rows ----------


@dataclass
class B2BInvoice:
    id: str
    invoice_number: str
    invoice_date: Any
    customer_name: str
    customer_gstin: str
    place_of_supply: str
    reverse_charge: bool
    invoice_value: Decimal
    taxable_value: Decimal
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO


@dataclass
class B2CInvoice:
    id: str
    invoice_number: str
    invoice_date: Any
    place_of_supply: str
    invoice_value: Decimal
    taxable_value: Decimal
    gst_rate: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO


@dataclass
class PurchaseDetail:
    id: str
    bill_number: str
    bill_date: Any
    vendor_name: str
    vendor_gstin: str
    reverse_charge: bool
    invoice_value: Decimal
    taxable_value: Decimal
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO


@dataclass
class HSNSummary:
    hsn_code: str
    description: str = ""
    uqc: str = DEFAULT_UQC
    total_quantity: Decimal = ZERO
    total_value: Decimal = ZERO
    taxable_value: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO


# ---------- classified buckets ----------


@dataclass
class B2BSection:
    invoices: list[B2BInvoice] = field(default_factory=list)
    summary: GSTSummary = field(default_factory=GSTSummary)


@dataclass
class B2CSection:
    invoices: list[B2CInvoice] = field(default_factory=list)
    summary: GSTSummary = field(default_factory=GSTSummary)


@dataclass
class PurchaseSection:
    bills: list[PurchaseDetail] = field(default_factory=list)
    summary: GSTSummary = field(default_factory=GSTSummary)


# ---------- top-level reports ----------


@dataclass
class GSTR1Data:
    period: ReportPeriod
    gstin: str = ""
    legal_name: str = ""
    b2b: B2BSection = field(default_factory=B2BSection)
    b2c: B2CSection = field(default_factory=B2CSection)
    hsn_summary: list[HSNSummary] = field(default_factory=list)
    total: GSTSummary = field(default_factory=GSTSummary)


@dataclass
class GSTR2Data:
    period: ReportPeriod
    gstin: str = ""
    legal_name: str = ""
    purchases: PurchaseSection = field(default_factory=PurchaseSection)
    reverse_charge: PurchaseSection = field(default_factory=PurchaseSection)
    hsn_summary: list[HSNSummary] = field(default_factory=list)
    total: GSTSummary = field(default_factory=GSTSummary)


@dataclass
class GSTR3BData:
    period: ReportPeriod
    gstin: str = ""
    legal_name: str = ""
    outward_supplies: GSTSummary = field(default_factory=GSTSummary)
    inward_supplies: GSTSummary = field(default_factory=GSTSummary)
    itc_available: TaxHeadAmounts = field(default_factory=TaxHeadAmounts)
    # Placeholder: ITC reversal rules are not modelled yet
    itc_reversed: TaxHeadAmounts = field(default_factory=TaxHeadAmounts)
    net_itc: TaxHeadAmounts = field(default_factory=TaxHeadAmounts)
    # Placeholder: late-payment interest is not computed yet
    interest_late_payment: TaxHeadAmounts = field(default_factory=TaxHeadAmounts)
    gst_payable: TaxHeadAmounts = field(default_factory=TaxHeadAmounts)
