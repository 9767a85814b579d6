from ledger_reports.infrastructure.db.repositories.account_repository import AccountRepository
from ledger_reports.infrastructure.db.repositories.transaction_repository import TransactionRepository

__all__ = ["AccountRepository", "TransactionRepository"]
