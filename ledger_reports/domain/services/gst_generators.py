# ledger_reports/domain/services/gst_generators.py
"""
GSTR-1 / GSTR-2 / GSTR-3B report generators.

Each generator queries posted/approved transactions in a date window,
classifies every record into exactly one bucket and folds it into fresh
accumulators. Store errors are not caught here: they reach the caller
unchanged. An empty window is a normal result with zero totals.
"""

from __future__ import annotations

import logging
from typing import Any

from ledger_reports.domain.constants import (
    PLACEHOLDER_PLACE_OF_SUPPLY,
    REVERSE_CHARGE_DEFAULT,
    UNCLASSIFIED_HSN,
    GstType,
    TransactionType,
    ZERO,
)
from ledger_reports.domain.models.gst_reports import (
    B2BInvoice,
    B2CInvoice,
    GSTR1Data,
    GSTR2Data,
    GSTR3BData,
    HSNSummary,
    PurchaseDetail,
    TaxHeadAmounts,
)
from ledger_reports.domain.models.transaction import TransactionRecord
from ledger_reports.domain.services.gst_utils import (
    GstSplit,
    add_gst_summaries,
    add_tax_heads,
    calculate_gst_from_line_items,
    fold_into_summary,
    period_from_start,
    subtract_tax_heads,
    tax_heads_from_summary,
)
from ledger_reports.infrastructure.db.document_store import DocumentStore
from ledger_reports.infrastructure.db.repositories import TransactionRepository

logger = logging.getLogger("gst_generators")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _place_of_supply(gstin: str) -> str:
    """State code from the first two digits of a GSTIN."""
    if len(gstin) >= 2 and gstin[:2].isdigit():
        return gstin[:2]
    return PLACEHOLDER_PLACE_OF_SUPPLY


def _is_reverse_charge(txn: TransactionRecord) -> bool:
    # TODO: read a reverse-charge flag once bills carry one
    return REVERSE_CHARGE_DEFAULT


def _fold_hsn(hsn_map: dict[str, HSNSummary], txn: TransactionRecord, split: GstSplit) -> None:
    """
    Fold the line items of one transaction into the HSN map.

    A code seen for the first time is seeded with the transaction's whole GST
    split; later items with the same code add their own amount * rate / 100,
    halved into CGST/SGST or entirely to IGST according to the parent's type.
    """
    gst_type = txn.gst_details.gst_type if txn.gst_details else None

    for item in txn.line_items:
        code = item.hsn_code or UNCLASSIFIED_HSN
        entry = hsn_map.get(code)
        if entry is None:
            hsn_map[code] = HSNSummary(
                hsn_code=code,
                description=item.description,
                total_quantity=item.quantity,
                total_value=item.amount,
                taxable_value=item.amount,
                cgst=split.cgst,
                sgst=split.sgst,
                igst=split.igst,
            )
            continue

        entry.total_quantity += item.quantity
        entry.total_value += item.amount
        entry.taxable_value += item.amount

        item_tax = item.amount * item.gst_rate / 100
        if gst_type == GstType.CGST_SGST:
            entry.cgst += item_tax / 2
            entry.sgst += item_tax / 2
        elif gst_type == GstType.IGST:
            entry.igst += item_tax


# ---------------------------------------------------------------------------
# GSTR-1 (outward supplies)
# ---------------------------------------------------------------------------

async def generate_gstr1(
    db: DocumentStore,
    start: Any,
    end: Any,
    gstin: str | None = None,
    legal_name: str | None = None,
) -> GSTR1Data:
    """
    Build GSTR-1 from customer invoices dated within [start, end].

    Rules:
    - Non-empty customer GSTIN -> B2B, else B2C.
    - Every line item is folded into the HSN summary.
    - The period is taken from ``start``.
    """
    report = GSTR1Data(
        period=period_from_start(start),
        gstin=gstin or "",
        legal_name=legal_name or "",
    )

    repo = TransactionRepository(db)
    invoices = await repo.list_posted(TransactionType.CUSTOMER_INVOICE, start, end)

    hsn_map: dict[str, HSNSummary] = {}

    for txn in invoices:
        split = calculate_gst_from_line_items(txn.gst_details)

        if txn.has_gstin:
            report.b2b.invoices.append(
                B2BInvoice(
                    id=txn.id,
                    invoice_number=txn.transaction_number,
                    invoice_date=txn.date,
                    customer_name=txn.entity_name,
                    customer_gstin=txn.counterparty_gstin,
                    place_of_supply=_place_of_supply(txn.counterparty_gstin),
                    reverse_charge=REVERSE_CHARGE_DEFAULT,
                    invoice_value=txn.total_amount,
                    taxable_value=txn.subtotal,
                    cgst=split.cgst,
                    sgst=split.sgst,
                    igst=split.igst,
                )
            )
            fold_into_summary(report.b2b.summary, txn.subtotal, split)
        else:
            gst_rate = txn.line_items[0].gst_rate if txn.line_items else ZERO
            report.b2c.invoices.append(
                B2CInvoice(
                    id=txn.id,
                    invoice_number=txn.transaction_number,
                    invoice_date=txn.date,
                    place_of_supply=PLACEHOLDER_PLACE_OF_SUPPLY,
                    invoice_value=txn.total_amount,
                    taxable_value=txn.subtotal,
                    gst_rate=gst_rate,
                    cgst=split.cgst,
                    sgst=split.sgst,
                    igst=split.igst,
                )
            )
            fold_into_summary(report.b2c.summary, txn.subtotal, split)

        _fold_hsn(hsn_map, txn, split)

    report.hsn_summary = list(hsn_map.values())
    report.total = add_gst_summaries(report.b2b.summary, report.b2c.summary)

    logger.info(
        "GSTR-1 generated: period=%s, b2b=%d, b2c=%d, hsn=%d, taxable=%s, tax=%s",
        report.period.fp,
        report.b2b.summary.transaction_count,
        report.b2c.summary.transaction_count,
        len(report.hsn_summary),
        report.total.taxable_value,
        report.total.total,
    )
    return report


# ---------------------------------------------------------------------------
# GSTR-2 (inward supplies)
# ---------------------------------------------------------------------------

async def generate_gstr2(
    db: DocumentStore,
    start: Any,
    end: Any,
    gstin: str | None = None,
    legal_name: str | None = None,
) -> GSTR2Data:
    """
    Build GSTR-2 from vendor bills dated within [start, end].

    Bills are split into regular purchases and reverse-charge purchases;
    the reverse-charge bucket stays empty until bills carry that flag.
    """
    report = GSTR2Data(
        period=period_from_start(start),
        gstin=gstin or "",
        legal_name=legal_name or "",
    )

    repo = TransactionRepository(db)
    bills = await repo.list_posted(TransactionType.VENDOR_BILL, start, end)

    hsn_map: dict[str, HSNSummary] = {}

    for txn in bills:
        split = calculate_gst_from_line_items(txn.gst_details)
        reverse_charge = _is_reverse_charge(txn)

        detail = PurchaseDetail(
            id=txn.id,
            bill_number=txn.transaction_number,
            bill_date=txn.date,
            vendor_name=txn.entity_name,
            vendor_gstin=txn.counterparty_gstin,
            reverse_charge=reverse_charge,
            invoice_value=txn.total_amount,
            taxable_value=txn.subtotal,
            cgst=split.cgst,
            sgst=split.sgst,
            igst=split.igst,
        )

        section = report.reverse_charge if reverse_charge else report.purchases
        section.bills.append(detail)
        fold_into_summary(section.summary, txn.subtotal, split)

        _fold_hsn(hsn_map, txn, split)

    report.hsn_summary = list(hsn_map.values())
    report.total = add_gst_summaries(report.purchases.summary, report.reverse_charge.summary)

    logger.info(
        "GSTR-2 generated: period=%s, purchases=%d, reverse_charge=%d, taxable=%s, tax=%s",
        report.period.fp,
        report.purchases.summary.transaction_count,
        report.reverse_charge.summary.transaction_count,
        report.total.taxable_value,
        report.total.total,
    )
    return report


# ---------------------------------------------------------------------------
# GSTR-3B (monthly summary)
# ---------------------------------------------------------------------------

async def generate_gstr3b(
    db: DocumentStore,
    start: Any,
    end: Any,
    gstin: str | None = None,
    legal_name: str | None = None,
) -> GSTR3BData:
    """
    Combine GSTR-1 and GSTR-2 for the same window into a GSTR-3B summary.

    Per tax head:
      net_itc     = itc_available - itc_reversed
      gst_payable = outward_supplies - net_itc + interest_late_payment

    ITC reversal and late-payment interest are zero placeholders.
    """
    gstr1 = await generate_gstr1(db, start, end, gstin, legal_name)
    gstr2 = await generate_gstr2(db, start, end, gstin, legal_name)

    itc_available = tax_heads_from_summary(gstr2.total)
    itc_reversed = TaxHeadAmounts()
    net_itc = subtract_tax_heads(itc_available, itc_reversed)
    interest_late_payment = TaxHeadAmounts()

    gst_payable = add_tax_heads(
        subtract_tax_heads(tax_heads_from_summary(gstr1.total), net_itc),
        interest_late_payment,
    )

    report = GSTR3BData(
        period=gstr1.period,
        gstin=gstr1.gstin,
        legal_name=gstr1.legal_name,
        outward_supplies=gstr1.total,
        inward_supplies=gstr2.total,
        itc_available=itc_available,
        itc_reversed=itc_reversed,
        net_itc=net_itc,
        interest_late_payment=interest_late_payment,
        gst_payable=gst_payable,
    )

    logger.info(
        "GSTR-3B generated: period=%s, payable=%s (IGST=%s, CGST=%s, SGST=%s)",
        report.period.fp,
        gst_payable.total,
        gst_payable.igst,
        gst_payable.cgst,
        gst_payable.sgst,
    )
    return report
