from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from ledger_reports.config.settings import settings
from ledger_reports.domain.constants import REPORTABLE_STATUSES, TransactionType
from ledger_reports.domain.models.transaction import PARSERS, TransactionRecord, to_datetime
from ledger_reports.infrastructure.db.document_store import DocumentStore, FieldFilter


class TransactionRepository:
    def __init__(self, db: DocumentStore, collection: str | None = None) -> None:
        self.db = db
        self.collection = collection or settings.TRANSACTIONS_COLLECTION

    # ---------- small helpers ----------

    @staticmethod
    def _window_start(value: Any) -> datetime | None:
        return to_datetime(value)

    @staticmethod
    def _window_end(value: Any) -> datetime | None:
        """
        A bare ``date`` end boundary covers that whole calendar day.
        """
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.max)
        return to_datetime(value)

    # ---------- main methods ----------

    async def list_posted(
        self,
        transaction_type: TransactionType,
        start: Any,
        end: Any,
    ) -> list[TransactionRecord]:
        """
        Posted/approved transactions of one type whose date falls in
        [start, end], both ends inclusive. Store errors propagate unchanged.
        """
        filters = [
            FieldFilter("type", "==", transaction_type.value),
            FieldFilter("status", "in", list(REPORTABLE_STATUSES)),
            FieldFilter("date", ">=", self._window_start(start)),
            FieldFilter("date", "<=", self._window_end(end)),
        ]
        snapshots = await self.db.query(self.collection, filters)

        parse = PARSERS[transaction_type]
        return [parse(snap.id, snap.data()) for snap in snapshots]
