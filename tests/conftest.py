"""Shared test fixtures for the ledger report test suite."""

import asyncio
from datetime import datetime

import pytest

from ledger_reports.infrastructure.db.document_store import InMemoryDocumentStore


class FakeTimestamp:
    """Timestamp wrapper with a snake_case ``to_date()`` accessor."""

    def __init__(self, dt: datetime):
        self._dt = dt

    def to_date(self) -> datetime:
        return self._dt


class CamelTimestamp:
    """Timestamp wrapper with a camelCase ``toDate()`` accessor."""

    def __init__(self, dt: datetime):
        self._dt = dt

    def toDate(self) -> datetime:
        return self._dt


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


def invoice_doc(**overrides) -> dict:
    """A posted customer invoice document as the store would hold it."""
    doc = {
        "type": "CUSTOMER_INVOICE",
        "status": "POSTED",
        "date": FakeTimestamp(datetime(2024, 1, 15, 10, 30)),
        "transactionNumber": "INV/2024/001",
        "entityName": "Customer",
        "customerGSTIN": "27AABCU9603R1ZM",
        "totalAmount": 11800,
        "subtotal": 10000,
        "gstDetails": {"gstType": "CGST_SGST", "cgstAmount": 900, "sgstAmount": 900},
        "lineItems": [],
    }
    doc.update(overrides)
    return doc


def bill_doc(**overrides) -> dict:
    """A posted vendor bill document as the store would hold it."""
    doc = {
        "type": "VENDOR_BILL",
        "status": "POSTED",
        "date": FakeTimestamp(datetime(2024, 1, 10, 9, 0)),
        "transactionNumber": "BILL/2024/001",
        "entityName": "Vendor",
        "vendorGSTIN": "27AABCU9603R1ZM",
        "totalAmount": 5900,
        "subtotal": 5000,
        "gstDetails": {"gstType": "CGST_SGST", "cgstAmount": 450, "sgstAmount": 450},
        "lineItems": [],
    }
    doc.update(overrides)
    return doc


def account_doc(code: str, name: str, debit=0, credit=0) -> dict:
    return {"code": code, "name": name, "debit": debit, "credit": credit, "balance": 0}
