# ledger_reports/domain/models/account.py

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

from pydantic import BaseModel, Field

from ledger_reports.domain.constants import ZERO
from ledger_reports.domain.models.transaction import to_decimal, to_str


class AccountRecord(BaseModel):
    """One chart-of-accounts row with its live balance fields."""

    id: str
    code: str = ""
    name: str = ""
    balance: Decimal = Field(default=ZERO)
    debit: Decimal = Field(default=ZERO)
    credit: Decimal = Field(default=ZERO)


def parse_account(doc_id: str, data: Mapping[str, Any]) -> AccountRecord:
    return AccountRecord(
        id=doc_id,
        code=to_str(data.get("code")),
        name=to_str(data.get("name")),
        balance=to_decimal(data.get("balance")),
        debit=to_decimal(data.get("debit")),
        credit=to_decimal(data.get("credit")),
    )
