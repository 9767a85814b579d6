# ledger_reports/domain/constants.py
"""
Fixed lookup tables and statutory placeholders used by the report engine.

The placeholder values stand in for business rules that are not modelled
upstream yet (reverse-charge detection, late-payment interest, per-invoice
place of supply). They are kept as named constants so a future schema field
can replace each one without restructuring the generators.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum


class TransactionType(str, Enum):
    CUSTOMER_INVOICE = "CUSTOMER_INVOICE"
    VENDOR_BILL = "VENDOR_BILL"
    CUSTOMER_PAYMENT = "CUSTOMER_PAYMENT"
    VENDOR_PAYMENT = "VENDOR_PAYMENT"
    JOURNAL_ENTRY = "JOURNAL_ENTRY"


class TransactionStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    POSTED = "POSTED"
    VOID = "VOID"


class GstType(str, Enum):
    CGST_SGST = "CGST_SGST"
    IGST = "IGST"


# Only these statuses make a transaction reportable
REPORTABLE_STATUSES: tuple[str, ...] = (
    TransactionStatus.POSTED.value,
    TransactionStatus.APPROVED.value,
)

ZERO = Decimal("0")

# ---------------------------------------------------------------------------
# HSN
# ---------------------------------------------------------------------------

UNCLASSIFIED_HSN = "UNCLASSIFIED"
DEFAULT_UQC = "NOS"

# ---------------------------------------------------------------------------
# Placeholders for unmodelled business rules
# ---------------------------------------------------------------------------

# No schema field marks a bill as reverse charge yet.
REVERSE_CHARGE_DEFAULT = False

# Per-invoice place of supply is not captured for B2C sales.
PLACEHOLDER_PLACE_OF_SUPPLY = "27"

# B2CS rows are reported at a single rate until per-rate grouping exists.
PLACEHOLDER_B2CS_RATE = 18

# Preceding financial year's aggregate turnover is not tracked.
PLACEHOLDER_GROSS_TURNOVER = 0

# ---------------------------------------------------------------------------
# Portal conventions
# ---------------------------------------------------------------------------

# B2C invoices above this value are reported individually as B2CL.
B2CL_INVOICE_THRESHOLD = Decimal("250000")

ITC_AVAILABLE_TYPE = "IMPG"
ITC_REVERSED_TYPE = "RUL"

# ---------------------------------------------------------------------------
# Balance sheet
# ---------------------------------------------------------------------------

BALANCE_TOLERANCE = Decimal("0.01")
