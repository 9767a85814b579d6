# ledger_reports/domain/services/gst_preview.py

from __future__ import annotations

from ledger_reports.domain.models.gst_reports import GSTR1Data, GSTR3BData


def summarize_gstr1(data: GSTR1Data) -> dict:
    """
    Build a small aggregate form from a GSTR-1 report, the input of
    ``render_gstr1_text``.
    """
    return {
        "gstin": data.gstin,
        "fp": data.period.fp,
        "b2b_parties": len({inv.customer_gstin for inv in data.b2b.invoices}),
        "b2b_invoices": len(data.b2b.invoices),
        "b2c_invoices": len(data.b2c.invoices),
        "hsn_codes": len(data.hsn_summary),
        "total_txval": float(data.total.taxable_value),
        "total_tax": float(data.total.total),
    }


def _fmt(v) -> str:
    try:
        return f"₹{float(v):,.2f}"
    except (TypeError, ValueError):
        return "₹0.00"


def _period_str(fp: str) -> str:
    # MMYYYY -> YYYY-MM
    if len(fp) == 6:
        return f"{fp[2:]}-{fp[0:2]}"
    return fp or "-"


def render_gstr1_text(form: dict, lang: str = "en") -> str:
    """
    Plain-text version of the GSTR-1 summary form.
    """
    period_str = _period_str(form.get("fp", ""))

    if lang == "hi":
        lines = [
            f"अवधि {period_str} के लिए GSTR-1 पूर्वावलोकन",
            f"GSTIN: {form.get('gstin') or '-'}",
            "",
            f"B2B पार्टियाँ (GSTIN): {form.get('b2b_parties', 0)}",
            f"B2B इनवॉइस: {form.get('b2b_invoices', 0)}",
            f"B2C इनवॉइस: {form.get('b2c_invoices', 0)}",
            f"HSN कोड: {form.get('hsn_codes', 0)}",
            f"कुल टैक्सेबल वैल्यू: {_fmt(form.get('total_txval', 0))}",
            f"कुल टैक्स: {_fmt(form.get('total_tax', 0))}",
        ]
    else:
        lines = [
            f"GSTR-1 preview for period {period_str}",
            f"GSTIN: {form.get('gstin') or '-'}",
            "",
            f"B2B parties (GSTINs): {form.get('b2b_parties', 0)}",
            f"B2B invoices: {form.get('b2b_invoices', 0)}",
            f"B2C invoices: {form.get('b2c_invoices', 0)}",
            f"HSN codes: {form.get('hsn_codes', 0)}",
            f"Total taxable value: {_fmt(form.get('total_txval', 0))}",
            f"Total tax: {_fmt(form.get('total_tax', 0))}",
        ]

    return "\n".join(lines)


def render_gstr3b_text(data: GSTR3BData, lang: str = "en") -> str:
    """
    Plain-text payable breakdown for a GSTR-3B report.
    """
    period_str = _period_str(data.period.fp)
    pay = data.gst_payable

    if lang == "hi":
        header = [
            f"अवधि {period_str} के लिए GSTR-3B सारांश",
            f"बिक्री पर टैक्स: {_fmt(data.outward_supplies.total)}",
            f"नेट ITC: {_fmt(data.net_itc.total)}",
            "",
            "देय GST:",
        ]
    else:
        header = [
            f"GSTR-3B summary for period {period_str}",
            f"Output tax: {_fmt(data.outward_supplies.total)}",
            f"Net ITC: {_fmt(data.net_itc.total)}",
            "",
            "GST payable:",
        ]

    lines = header + [
        f"  IGST: {_fmt(pay.igst)}",
        f"  CGST: {_fmt(pay.cgst)}",
        f"  SGST: {_fmt(pay.sgst)}",
        f"  Cess: {_fmt(pay.cess)}",
        f"  Total: {_fmt(pay.total)}",
    ]
    return "\n".join(lines)
