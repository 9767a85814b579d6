"""Tests for the GSTR-1 / GSTR-2 / GSTR-3B generators against an in-memory store."""

import asyncio
import json
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from conftest import CamelTimestamp, FakeTimestamp, bill_doc, invoice_doc
from ledger_reports.domain.services import gst_generators
from ledger_reports.domain.services.gst_export import export_gstr1_to_json
from ledger_reports.domain.services.gst_generators import (
    generate_gstr1,
    generate_gstr2,
    generate_gstr3b,
)
from ledger_reports.infrastructure.db.document_store import InMemoryDocumentStore

START = FakeTimestamp(datetime(2024, 1, 1))
END = FakeTimestamp(datetime(2024, 1, 31, 23, 59, 59))


def _summary_is_zero(summary) -> bool:
    return (
        summary.taxable_value == 0
        and summary.cgst == 0
        and summary.sgst == 0
        and summary.igst == 0
        and summary.cess == 0
        and summary.total == 0
        and summary.transaction_count == 0
    )


# ---------------------------------------------------------------------------
# GSTR-1
# ---------------------------------------------------------------------------

class TestGenerateGSTR1:

    def test_empty_range(self, event_loop, store):
        result = event_loop.run_until_complete(
            generate_gstr1(store, START, END, "GSTIN123", "Test Company")
        )

        assert (result.period.month, result.period.year) == (1, 2024)
        assert result.gstin == "GSTIN123"
        assert result.legal_name == "Test Company"
        assert result.b2b.invoices == []
        assert result.b2c.invoices == []
        assert result.hsn_summary == []
        assert _summary_is_zero(result.total)

    def test_b2b_classification(self, event_loop, store):
        store.add("transactions", "inv-1", invoice_doc())

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert len(result.b2b.invoices) == 1
        assert len(result.b2c.invoices) == 0
        row = result.b2b.invoices[0]
        assert row.customer_gstin == "27AABCU9603R1ZM"
        assert row.place_of_supply == "27"
        assert row.reverse_charge is False
        assert result.b2b.summary.cgst == 900
        assert result.b2b.summary.sgst == 900
        assert result.b2b.summary.total == 1800
        assert result.total.taxable_value == 10000

    def test_b2c_classification_takes_rate_from_first_line(self, event_loop, store):
        store.add("transactions", "inv-2", invoice_doc(
            customerGSTIN="",
            totalAmount=5900,
            subtotal=5000,
            gstDetails={"gstType": "CGST_SGST", "cgstAmount": 450, "sgstAmount": 450},
            lineItems=[{"gstRate": 18}],
        ))

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert len(result.b2b.invoices) == 0
        assert len(result.b2c.invoices) == 1
        assert result.b2c.invoices[0].gst_rate == 18
        assert result.b2c.invoices[0].place_of_supply == "27"
        assert result.b2c.summary.taxable_value == 5000

    def test_missing_gstin_field_is_b2c(self, event_loop, store):
        doc = invoice_doc()
        del doc["customerGSTIN"]
        store.add("transactions", "inv-3", doc)

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert len(result.b2c.invoices) == 1

    def test_hsn_aggregation(self, event_loop, store):
        store.add("transactions", "inv-3", invoice_doc(
            totalAmount=23600,
            subtotal=20000,
            gstDetails={"gstType": "CGST_SGST", "cgstAmount": 1800, "sgstAmount": 1800},
            lineItems=[
                {"hsnCode": "84212100", "description": "Water Filters",
                 "amount": 10000, "quantity": 5, "gstRate": 18},
                {"hsnCode": "84212100", "description": "Water Filters",
                 "amount": 10000, "quantity": 5, "gstRate": 18},
            ],
        ))

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert len(result.hsn_summary) == 1
        hsn = result.hsn_summary[0]
        assert hsn.hsn_code == "84212100"
        assert hsn.description == "Water Filters"
        assert hsn.total_quantity == 10
        assert hsn.total_value == 20000
        assert hsn.taxable_value == 20000
        # seeded with the invoice split, then half of 10000 * 18% per head
        assert hsn.cgst == 2700
        assert hsn.sgst == 2700
        assert hsn.igst == 0

    def test_hsn_igst_parent_and_unclassified_fallback(self, event_loop, store):
        store.add("transactions", "inv-4", invoice_doc(
            gstDetails={"gstType": "IGST", "igstAmount": 1200},
            lineItems=[
                {"description": "Service", "amount": 5000, "quantity": 1, "gstRate": 12},
                {"amount": 5000, "quantity": 2, "gstRate": 12},
            ],
        ))

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert [h.hsn_code for h in result.hsn_summary] == ["UNCLASSIFIED"]
        hsn = result.hsn_summary[0]
        assert hsn.igst == 1800
        assert hsn.cgst == 0
        assert hsn.total_quantity == 3

    def test_hsn_map_spans_transactions(self, event_loop, store):
        items = [{"hsnCode": "9983", "amount": 1000, "quantity": 1, "gstRate": 18}]
        store.add("transactions", "a", invoice_doc(lineItems=items))
        store.add("transactions", "b", invoice_doc(customerGSTIN="", lineItems=items))

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert len(result.hsn_summary) == 1
        assert result.hsn_summary[0].total_value == 2000

    def test_only_posted_or_approved_in_window(self, event_loop, store):
        store.add("transactions", "posted", invoice_doc())
        store.add("transactions", "approved", invoice_doc(status="APPROVED"))
        store.add("transactions", "draft", invoice_doc(status="DRAFT"))
        store.add("transactions", "void", invoice_doc(status="VOID"))
        store.add("transactions", "bill", bill_doc())
        store.add("transactions", "feb", invoice_doc(date=FakeTimestamp(datetime(2024, 2, 1))))
        store.add("transactions", "dec", invoice_doc(date=datetime(2023, 12, 31, 23, 0)))

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert sorted(inv.id for inv in result.b2b.invoices) == ["approved", "posted"]

    def test_date_end_covers_whole_day(self, event_loop, store):
        store.add("transactions", "late", invoice_doc(date=datetime(2024, 1, 31, 22, 15)))

        result = event_loop.run_until_complete(
            generate_gstr1(store, date(2024, 1, 1), date(2024, 1, 31))
        )

        assert result.total.transaction_count == 1

    def test_period_comes_from_start_only(self, event_loop, store):
        result = event_loop.run_until_complete(
            generate_gstr1(store, date(2024, 3, 1), date(2024, 5, 31))
        )
        assert result.period.fp == "032024"

    def test_query_failure_propagates_unchanged(self, event_loop):
        db = MagicMock()
        db.query = AsyncMock(side_effect=ConnectionError("store unreachable"))

        with pytest.raises(ConnectionError, match="store unreachable"):
            event_loop.run_until_complete(generate_gstr1(db, START, END))

    def test_garbled_amounts_default_to_zero(self, event_loop, store):
        store.add("transactions", "bad", invoice_doc(
            subtotal="n/a",
            totalAmount=None,
            gstDetails={"gstType": "CGST_SGST", "cgstAmount": "oops"},
        ))

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert result.total.transaction_count == 1
        assert result.total.taxable_value == 0
        assert result.total.total == 0

    def test_whitespace_gstin_counts_as_b2b(self, event_loop, store):
        store.add("transactions", "inv-1", invoice_doc(customerGSTIN="  "))

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert len(result.b2b.invoices) == 1
        assert result.b2c.invoices == []
        assert result.b2b.invoices[0].place_of_supply == "27"

    def test_b2b_reverse_charge_uses_default_flag(self, event_loop, store, monkeypatch):
        store.add("transactions", "inv-1", invoice_doc())
        monkeypatch.setattr(gst_generators, "REVERSE_CHARGE_DEFAULT", True)

        result = event_loop.run_until_complete(generate_gstr1(store, START, END))

        assert result.b2b.invoices[0].reverse_charge is True

    def test_camel_case_timestamps_reach_export(self, event_loop, store):
        store.add("transactions", "inv-1", invoice_doc(
            date=CamelTimestamp(datetime(2024, 1, 15, 10, 30)),
        ))

        result = event_loop.run_until_complete(generate_gstr1(
            store,
            CamelTimestamp(datetime(2024, 1, 1)),
            CamelTimestamp(datetime(2024, 1, 31, 23, 59, 59)),
            "27AAAAA0000A1Z5",
        ))
        payload = json.loads(export_gstr1_to_json(result))

        assert payload["fp"] == "012024"
        assert payload["b2b"][0]["inv"][0]["idt"] == "2024-01-15"


# ---------------------------------------------------------------------------
# GSTR-2
# ---------------------------------------------------------------------------

class TestGenerateGSTR2:

    def test_empty_range(self, event_loop, store):
        result = event_loop.run_until_complete(generate_gstr2(store, START, END))

        assert (result.period.month, result.period.year) == (1, 2024)
        assert result.purchases.bills == []
        assert result.reverse_charge.bills == []
        assert _summary_is_zero(result.total)

    def test_vendor_bills(self, event_loop, store):
        store.add("transactions", "bill-1", bill_doc(
            totalAmount=59000,
            subtotal=50000,
            gstDetails={"gstType": "CGST_SGST", "cgstAmount": 4500, "sgstAmount": 4500},
        ))
        store.add("transactions", "inv-1", invoice_doc())

        result = event_loop.run_until_complete(generate_gstr2(store, START, END))

        assert len(result.purchases.bills) == 1
        bill = result.purchases.bills[0]
        assert bill.vendor_gstin == "27AABCU9603R1ZM"
        assert bill.bill_number == "BILL/2024/001"
        assert result.purchases.summary.cgst == 4500
        assert result.purchases.summary.sgst == 4500
        assert result.total.taxable_value == 50000

    def test_reverse_charge_bucket_stays_empty(self, event_loop, store):
        store.add("transactions", "b1", bill_doc())
        store.add("transactions", "b2", bill_doc(vendorGSTIN=""))

        result = event_loop.run_until_complete(generate_gstr2(store, START, END))

        assert len(result.purchases.bills) == 2
        assert result.reverse_charge.bills == []
        assert result.reverse_charge.summary.transaction_count == 0

    def test_hsn_summary_igst_parent(self, event_loop, store):
        store.add("transactions", "bill-1", bill_doc(
            vendorGSTIN="29AAGCB7383J1Z4",
            subtotal=5000,
            gstDetails={"gstType": "IGST", "igstAmount": 900},
            lineItems=[
                {"hsnCode": "8471", "description": "Laptop", "quantity": 2, "amount": 4000, "gstRate": 18},
                {"hsnCode": "8471", "description": "Laptop", "quantity": 1, "amount": 1000, "gstRate": 18},
            ],
        ))

        result = event_loop.run_until_complete(generate_gstr2(store, START, END))

        assert result.purchases.summary.igst == 900
        assert len(result.hsn_summary) == 1
        hsn = result.hsn_summary[0]
        assert hsn.hsn_code == "8471"
        # seeded with the bill's 900, then 1000 * 18% for the second line
        assert hsn.igst == 1080
        assert hsn.cgst == 0
        assert hsn.sgst == 0
        assert hsn.total_quantity == 3
        assert hsn.total_value == 5000
        assert hsn.taxable_value == 5000


# ---------------------------------------------------------------------------
# GSTR-3B
# ---------------------------------------------------------------------------

class TestGenerateGSTR3B:

    def test_netting(self, event_loop, store):
        store.add("transactions", "inv-1", invoice_doc())
        store.add("transactions", "bill-1", bill_doc())

        result = event_loop.run_until_complete(
            generate_gstr3b(store, START, END, "GSTIN123", "Test Company")
        )

        assert result.gstin == "GSTIN123"
        assert result.legal_name == "Test Company"
        assert result.outward_supplies.cgst == 900
        assert result.inward_supplies.cgst == 450
        assert result.itc_available.cgst == 450
        assert result.net_itc.cgst == 450
        assert result.gst_payable.cgst == 450
        assert result.gst_payable.sgst == 450
        assert result.gst_payable.total == 900

    def test_placeholders_are_zero(self, event_loop, store):
        store.add("transactions", "bill-1", bill_doc())

        result = event_loop.run_until_complete(generate_gstr3b(store, START, END))

        for heads in (result.itc_reversed, result.interest_late_payment):
            assert (heads.cgst, heads.sgst, heads.igst, heads.cess, heads.total) == (0, 0, 0, 0, 0)
        assert result.net_itc == result.itc_available

    def test_payable_per_head_can_go_negative(self, event_loop, store):
        store.add("transactions", "inv-1", invoice_doc(
            gstDetails={"gstType": "IGST", "igstAmount": 1800},
        ))
        store.add("transactions", "bill-1", bill_doc())

        result = event_loop.run_until_complete(generate_gstr3b(store, START, END))

        assert result.gst_payable.igst == 1800
        assert result.gst_payable.cgst == -450
        assert result.gst_payable.sgst == -450
        assert result.gst_payable.total == 900

    def test_queries_run_in_sequence(self, event_loop):
        calls = []

        async def query(collection, filters=()):
            calls.append([f.value for f in filters if f.field == "type"][0])
            return []

        db = MagicMock()
        db.query = query

        event_loop.run_until_complete(generate_gstr3b(db, START, END))

        assert calls == ["CUSTOMER_INVOICE", "VENDOR_BILL"]


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

_amount = st.decimals(min_value=0, max_value=1_000_000, places=2)


@st.composite
def _transactions(draw):
    count = draw(st.integers(min_value=0, max_value=12))
    docs = []
    for i in range(count):
        kind = draw(st.sampled_from(["CUSTOMER_INVOICE", "VENDOR_BILL"]))
        intra = draw(st.booleans())
        gst = (
            {"gstType": "CGST_SGST", "cgstAmount": draw(_amount), "sgstAmount": draw(_amount)}
            if intra
            else {"gstType": "IGST", "igstAmount": draw(_amount)}
        )
        gstin = draw(st.sampled_from(["", " ", "27AABCU9603R1ZM", "29AAGCB7383J1Z4"]))
        doc = {
            "type": kind,
            "status": draw(st.sampled_from(["POSTED", "APPROVED", "DRAFT"])),
            "date": datetime(2024, 1, draw(st.integers(min_value=1, max_value=31)), 12, 0),
            "transactionNumber": f"T-{i}",
            "subtotal": draw(_amount),
            "totalAmount": draw(_amount),
            "gstDetails": gst,
            "lineItems": [
                {"hsnCode": draw(st.sampled_from(["", "8421", "9983"])),
                 "amount": draw(_amount), "quantity": 1, "gstRate": 18}
            ],
        }
        doc["customerGSTIN" if kind == "CUSTOMER_INVOICE" else "vendorGSTIN"] = gstin
        docs.append((f"doc-{i}", doc))
    return docs


def _store(docs) -> InMemoryDocumentStore:
    return InMemoryDocumentStore({"transactions": docs})


def _reportable(docs, kind):
    return [d for _, d in docs if d["type"] == kind and d["status"] in ("POSTED", "APPROVED")]


@settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
@given(docs=_transactions())
def test_generators_are_idempotent(docs):
    db = _store(docs)

    first = asyncio.run(generate_gstr3b(db, date(2024, 1, 1), date(2024, 1, 31)))
    second = asyncio.run(generate_gstr3b(db, date(2024, 1, 1), date(2024, 1, 31)))

    assert first == second


@settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
@given(docs=_transactions(), split_day=st.integers(min_value=1, max_value=30))
def test_totals_are_additive_over_windows(docs, split_day):
    db = _store(docs)

    for generate in (generate_gstr1, generate_gstr2):
        full = asyncio.run(generate(db, date(2024, 1, 1), date(2024, 1, 31))).total
        left = asyncio.run(generate(db, date(2024, 1, 1), date(2024, 1, split_day))).total
        right = asyncio.run(generate(db, date(2024, 1, split_day + 1), date(2024, 1, 31))).total

        assert left.taxable_value + right.taxable_value == full.taxable_value
        assert left.cgst + right.cgst == full.cgst
        assert left.sgst + right.sgst == full.sgst
        assert left.igst + right.igst == full.igst
        assert left.total + right.total == full.total
        assert left.transaction_count + right.transaction_count == full.transaction_count


@settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
@given(docs=_transactions())
def test_every_record_lands_in_exactly_one_bucket(docs):
    db = _store(docs)

    gstr1 = asyncio.run(generate_gstr1(db, date(2024, 1, 1), date(2024, 1, 31)))
    gstr2 = asyncio.run(generate_gstr2(db, date(2024, 1, 1), date(2024, 1, 31)))

    invoices = _reportable(docs, "CUSTOMER_INVOICE")
    bills = _reportable(docs, "VENDOR_BILL")

    assert gstr1.b2b.summary.transaction_count + gstr1.b2c.summary.transaction_count == len(invoices)
    assert len(gstr1.b2b.invoices) + len(gstr1.b2c.invoices) == len(invoices)
    assert len(gstr1.b2b.invoices) == sum(1 for d in invoices if d["customerGSTIN"])
    assert (
        gstr2.purchases.summary.transaction_count + gstr2.reverse_charge.summary.transaction_count
        == len(bills)
    )
    assert gstr1.total.total == gstr1.total.cgst + gstr1.total.sgst + gstr1.total.igst + gstr1.total.cess
