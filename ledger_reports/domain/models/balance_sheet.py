# ledger_reports/domain/models/balance_sheet.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from ledger_reports.domain.constants import ZERO


@dataclass
class BalanceSheetLine:
    id: str
    code: str
    name: str
    balance: Decimal


@dataclass
class AssetSection:
    current_assets: list[BalanceSheetLine] = field(default_factory=list)
    fixed_assets: list[BalanceSheetLine] = field(default_factory=list)
    other_assets: list[BalanceSheetLine] = field(default_factory=list)
    total_current_assets: Decimal = ZERO
    total_fixed_assets: Decimal = ZERO
    total_other_assets: Decimal = ZERO
    total_assets: Decimal = ZERO


@dataclass
class LiabilitySection:
    current_liabilities: list[BalanceSheetLine] = field(default_factory=list)
    long_term_liabilities: list[BalanceSheetLine] = field(default_factory=list)
    total_current_liabilities: Decimal = ZERO
    total_long_term_liabilities: Decimal = ZERO
    total_liabilities: Decimal = ZERO


@dataclass
class EquitySection:
    capital: Decimal = ZERO
    retained_earnings: Decimal = ZERO
    current_year_profit: Decimal = ZERO
    # Equity accounts matching neither the capital nor the retained keywords
    other_equity: Decimal = ZERO
    total_equity: Decimal = ZERO


@dataclass
class BalanceSheetReport:
    as_of_date: date | datetime
    assets: AssetSection = field(default_factory=AssetSection)
    liabilities: LiabilitySection = field(default_factory=LiabilitySection)
    equity: EquitySection = field(default_factory=EquitySection)
    balanced: bool = True
    difference: Decimal = ZERO


@dataclass(frozen=True)
class EquationCheck:
    valid: bool
    message: str
