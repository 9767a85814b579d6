# ledger_reports/domain/services/gst_export.py
"""
Build GST-portal JSON from the generated reports.

GSTR-1:  From GSTR1Data (B2B / B2CL / B2CS / HSN sections)
GSTR-3B: From GSTR3BData (supplies, ITC and interest heads)

Key names follow the portal's abbreviated schema and must not change.
Known simplifications:
- B2B: one ``ctin`` entry per invoice; invoices of the same recipient are
  not nested together.
- B2CS: all B2C volume goes into a single row at a placeholder place of
  supply and rate.
"""

from __future__ import annotations

import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict

from ledger_reports.domain.constants import (
    B2CL_INVOICE_THRESHOLD,
    ITC_AVAILABLE_TYPE,
    ITC_REVERSED_TYPE,
    PLACEHOLDER_B2CS_RATE,
    PLACEHOLDER_GROSS_TURNOVER,
    PLACEHOLDER_PLACE_OF_SUPPLY,
    ZERO,
)
from ledger_reports.domain.models.gst_reports import (
    B2BInvoice,
    GSTR1Data,
    GSTR3BData,
    TaxHeadAmounts,
)
from ledger_reports.domain.models.transaction import to_decimal
from ledger_reports.domain.services.gst_utils import format_iso_date


def _d(val: Decimal | None) -> float:
    """Convert Decimal to float for JSON serialization."""
    if val is None:
        return 0.0
    return float(val)


def _sum(values) -> Decimal:
    return sum((to_decimal(v) for v in values), ZERO)


def _effective_rate(inv: B2BInvoice) -> float:
    """Rate implied by tax / taxable, rounded to 2 places."""
    taxable = to_decimal(inv.taxable_value)
    if taxable <= ZERO:
        return 0.0
    tax = _sum((inv.cgst, inv.sgst, inv.igst))
    rate = (tax * Decimal("100") / taxable).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    return _d(rate)


def _heads(amounts: TaxHeadAmounts) -> Dict[str, float]:
    return {
        "iamt": _d(amounts.igst),
        "camt": _d(amounts.cgst),
        "samt": _d(amounts.sgst),
        "csamt": _d(amounts.cess),
    }


# ---------------------------------------------------------------------------
# GSTR-1
# ---------------------------------------------------------------------------

def make_gstr1_json(data: GSTR1Data) -> Dict[str, Any]:
    """
    Build the GSTR-1 payload as a dict.

    Returns:
        Dict matching the portal GSTR-1 schema (b2b, b2cl, b2cs, hsn).
    """
    b2b_list = []
    for inv in data.b2b.invoices:
        b2b_list.append({
            "ctin": inv.customer_gstin,
            "inv": [
                {
                    "inum": inv.invoice_number,
                    "idt": format_iso_date(inv.invoice_date),
                    "val": _d(inv.invoice_value),
                    "pos": inv.place_of_supply,
                    "rchrg": "Y" if inv.reverse_charge else "N",
                    "inv_typ": "R",
                    "itms": [
                        {
                            "num": 1,
                            "itm_det": {
                                "txval": _d(inv.taxable_value),
                                "rt": _effective_rate(inv),
                                "iamt": _d(inv.igst),
                                "camt": _d(inv.cgst),
                                "samt": _d(inv.sgst),
                                "csamt": _d(inv.cess),
                            },
                        }
                    ],
                }
            ],
        })

    # Large B2C invoices are reported one by one
    b2cl_list = []
    for inv in data.b2c.invoices:
        if to_decimal(inv.invoice_value) <= B2CL_INVOICE_THRESHOLD:
            continue
        b2cl_list.append({
            "pos": inv.place_of_supply,
            "inv": [
                {
                    "inum": inv.invoice_number,
                    "idt": format_iso_date(inv.invoice_date),
                    "val": _d(inv.invoice_value),
                    "itms": [
                        {
                            "num": 1,
                            "itm_det": {
                                "txval": _d(inv.taxable_value),
                                "rt": _d(inv.gst_rate),
                                "iamt": _d(inv.igst),
                                "csamt": _d(inv.cess),
                            },
                        }
                    ],
                }
            ],
        })

    # Every B2C invoice (large ones included) is summarised into one row
    b2cs_list = []
    if data.b2c.invoices:
        txval = _sum(inv.taxable_value for inv in data.b2c.invoices)
        igst = _sum(inv.igst for inv in data.b2c.invoices)
        cgst = _sum(inv.cgst for inv in data.b2c.invoices)
        sgst = _sum(inv.sgst for inv in data.b2c.invoices)
        cess = _sum(inv.cess for inv in data.b2c.invoices)
        b2cs_list.append({
            "sply_ty": "INTER" if igst > ZERO else "INTRA",
            "pos": PLACEHOLDER_PLACE_OF_SUPPLY,
            "typ": "OE",
            "txval": _d(txval),
            "rt": PLACEHOLDER_B2CS_RATE,
            "iamt": _d(igst),
            "camt": _d(cgst),
            "samt": _d(sgst),
            "csamt": _d(cess),
        })

    hsn_rows = []
    for num, hsn in enumerate(data.hsn_summary, start=1):
        hsn_rows.append({
            "num": num,
            "hsn_sc": hsn.hsn_code,
            "desc": hsn.description,
            "uqc": hsn.uqc,
            "qty": _d(hsn.total_quantity),
            "val": _d(hsn.total_value),
            "txval": _d(hsn.taxable_value),
            "iamt": _d(hsn.igst),
            "camt": _d(hsn.cgst),
            "samt": _d(hsn.sgst),
            "csamt": 0,
        })

    return {
        "gstin": data.gstin,
        "fp": data.period.fp,
        "gt": PLACEHOLDER_GROSS_TURNOVER,
        "b2b": b2b_list,
        "b2cl": b2cl_list,
        "b2cs": b2cs_list,
        "hsn": {"data": hsn_rows},
    }


def export_gstr1_to_json(data: GSTR1Data) -> str:
    """GSTR-1 as a portal-ready JSON string. Pure: ``data`` is not modified."""
    return json.dumps(make_gstr1_json(data), indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# GSTR-3B
# ---------------------------------------------------------------------------

def make_gstr3b_json(data: GSTR3BData) -> Dict[str, Any]:
    """
    Build the GSTR-3B payload as a dict.

    ``inter_sup`` is always empty; ``itc_avl`` and ``itc_rev`` carry a
    single row tagged with the portal's fixed type codes.
    """
    out = data.outward_supplies

    return {
        "gstin": data.gstin,
        "ret_period": data.period.fp,
        "sup_details": {
            "osup_det": {
                "txval": _d(out.taxable_value),
                "iamt": _d(out.igst),
                "camt": _d(out.cgst),
                "samt": _d(out.sgst),
                "csamt": _d(out.cess),
            },
            "osup_zero": {"txval": 0, "iamt": 0, "csamt": 0},
            "osup_nil_exmp": {"txval": 0},
            "isup_rev": {"txval": 0, "iamt": 0, "camt": 0, "samt": 0, "csamt": 0},
            "osup_nongst": {"txval": 0},
        },
        "inter_sup": {
            "unreg_details": [],
            "comp_details": [],
            "uin_details": [],
        },
        "itc_elg": {
            "itc_avl": [{"ty": ITC_AVAILABLE_TYPE, **_heads(data.itc_available)}],
            "itc_rev": [{"ty": ITC_REVERSED_TYPE, **_heads(data.itc_reversed)}],
            "itc_net": _heads(data.net_itc),
            "itc_inelg": [],
        },
        "inward_sup": {
            "isup_details": [
                {"ty": "GST", "inter": 0, "intra": 0},
                {"ty": "NONGST", "inter": 0, "intra": 0},
            ]
        },
        "intr_ltfee": {
            "intr_details": _heads(data.interest_late_payment),
        },
    }


def export_gstr3b_to_json(data: GSTR3BData) -> str:
    """GSTR-3B as a portal-ready JSON string. Pure: ``data`` is not modified."""
    return json.dumps(make_gstr3b_json(data), indent=2, ensure_ascii=False)
