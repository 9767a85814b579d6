from __future__ import annotations

from ledger_reports.config.settings import settings
from ledger_reports.domain.models.account import AccountRecord, parse_account
from ledger_reports.infrastructure.db.document_store import DocumentStore


class AccountRepository:
    def __init__(self, db: DocumentStore, collection: str | None = None) -> None:
        self.db = db
        self.collection = collection or settings.ACCOUNTS_COLLECTION

    async def list_accounts(self) -> list[AccountRecord]:
        """Whole chart of accounts with balances as currently stored."""
        snapshots = await self.db.query(self.collection)
        return [parse_account(snap.id, snap.data()) for snap in snapshots]
