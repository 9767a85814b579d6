# ledger_reports/domain/services/balance_sheet.py
"""
Balance Sheet generation from chart-of-accounts balances.

Reads the stored debit/credit of every account (no ledger recomputation:
posting and closing must already have happened), classifies by the first
digit of the account code and checks Assets = Liabilities + Equity.

Unlike the GST generators, any failure here is logged and re-raised as a
single BalanceSheetError so callers get one stable error contract.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from ledger_reports.domain.constants import BALANCE_TOLERANCE, ZERO
from ledger_reports.domain.models.account import AccountRecord
from ledger_reports.domain.models.balance_sheet import (
    BalanceSheetLine,
    BalanceSheetReport,
    EquationCheck,
)
from ledger_reports.infrastructure.db.document_store import DocumentStore
from ledger_reports.infrastructure.db.repositories import AccountRepository

logger = logging.getLogger("balance_sheet")

CURRENT_ASSET_KEYWORDS = ("cash", "bank", "receivable", "inventory", "prepaid", "current")
FIXED_ASSET_KEYWORDS = ("fixed", "equipment", "building", "vehicle")
CURRENT_LIABILITY_KEYWORDS = ("payable", "accrued", "current", "short-term", "gst", "tds")
CAPITAL_KEYWORDS = ("capital", "equity")
RETAINED_KEYWORDS = ("retained",)

EXPENSE_PREFIXES = ("5", "6", "7")


class BalanceSheetError(Exception):
    """Raised when the Balance Sheet cannot be generated."""

    def __init__(self, message: str = "Failed to generate Balance Sheet"):
        super().__init__(message)


def _has_keyword(name: str, keywords: tuple[str, ...]) -> bool:
    lowered = name.lower()
    return any(k in lowered for k in keywords)


def _line(account: AccountRecord, balance) -> BalanceSheetLine:
    return BalanceSheetLine(
        id=account.id,
        code=account.code,
        name=account.name,
        balance=balance,
    )


def _build_report(accounts: list[AccountRecord], as_of_date: date | datetime) -> BalanceSheetReport:
    report = BalanceSheetReport(as_of_date=as_of_date)
    assets, liabilities, equity = report.assets, report.liabilities, report.equity

    revenue = ZERO
    expenses = ZERO

    for account in accounts:
        code = account.code
        prefix = code[:1]

        if prefix == "1":
            balance = account.debit - account.credit
            if balance == ZERO:
                continue
            if "1000" <= code < "2000" or _has_keyword(account.name, CURRENT_ASSET_KEYWORDS):
                assets.current_assets.append(_line(account, balance))
                assets.total_current_assets += balance
            elif _has_keyword(account.name, FIXED_ASSET_KEYWORDS):
                assets.fixed_assets.append(_line(account, balance))
                assets.total_fixed_assets += balance
            else:
                assets.other_assets.append(_line(account, balance))
                assets.total_other_assets += balance

        elif prefix == "2":
            balance = account.credit - account.debit
            if balance == ZERO:
                continue
            if "2000" <= code < "3000" or _has_keyword(account.name, CURRENT_LIABILITY_KEYWORDS):
                liabilities.current_liabilities.append(_line(account, balance))
                liabilities.total_current_liabilities += balance
            else:
                liabilities.long_term_liabilities.append(_line(account, balance))
                liabilities.total_long_term_liabilities += balance

        elif prefix == "3":
            balance = account.credit - account.debit
            if _has_keyword(account.name, CAPITAL_KEYWORDS):
                equity.capital += balance
            elif _has_keyword(account.name, RETAINED_KEYWORDS):
                equity.retained_earnings += balance
            else:
                equity.other_equity += balance

        elif prefix == "4":
            revenue += account.credit - account.debit

        elif prefix in EXPENSE_PREFIXES:
            expenses += account.debit - account.credit

    # Live P&L, never read from a stored equity account
    equity.current_year_profit = revenue - expenses

    assets.total_assets = (
        assets.total_current_assets + assets.total_fixed_assets + assets.total_other_assets
    )
    liabilities.total_liabilities = (
        liabilities.total_current_liabilities + liabilities.total_long_term_liabilities
    )
    equity.total_equity = (
        equity.capital + equity.retained_earnings + equity.current_year_profit + equity.other_equity
    )

    report.difference = assets.total_assets - (liabilities.total_liabilities + equity.total_equity)
    report.balanced = abs(report.difference) < BALANCE_TOLERANCE
    return report


async def generate_balance_sheet(db: DocumentStore, as_of_date: date | datetime) -> BalanceSheetReport:
    """
    Generate the Balance Sheet as of ``as_of_date``.

    The date labels the report only; balances are the ones currently stored
    on each account. An unbalanced result is reported through ``balanced``
    and ``difference``, not raised.
    """
    try:
        accounts = await AccountRepository(db).list_accounts()
        report = _build_report(accounts, as_of_date)
    except Exception as exc:
        logger.exception("Balance Sheet generation failed as of %s", as_of_date)
        raise BalanceSheetError() from exc

    if report.balanced:
        logger.info(
            "Balance Sheet generated as of %s: assets=%s, liabilities=%s, equity=%s",
            as_of_date,
            report.assets.total_assets,
            report.liabilities.total_liabilities,
            report.equity.total_equity,
        )
    else:
        logger.warning(
            "Balance Sheet as of %s is out of balance by %s",
            as_of_date,
            report.difference,
        )
    return report


def validate_accounting_equation(report: BalanceSheetReport) -> EquationCheck:
    """Describe whether Assets = Liabilities + Equity holds for ``report``."""
    if report.balanced:
        return EquationCheck(
            valid=True,
            message="Balance Sheet is balanced: Assets = Liabilities + Equity",
        )

    gap = f"{abs(report.difference):,.2f}"
    if report.difference > 0:
        message = f"Balance Sheet is not balanced: Assets exceed Liabilities + Equity by {gap}"
    else:
        message = f"Balance Sheet is not balanced: Liabilities + Equity exceed Assets by {gap}"
    return EquationCheck(valid=False, message=message)
