# ledger_reports/infrastructure/db/document_store.py
"""
Document-store boundary used by the report repositories.

Any client that can run an AND-combined query of ``==``, ``in``, ``>=`` and
``<=`` filters against a named collection, and return snapshots exposing
``id`` and ``data()``, satisfies ``DocumentStore``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Iterable, Protocol, Sequence

from ledger_reports.domain.models.transaction import unwrap_timestamp

SUPPORTED_OPS = ("==", "in", ">=", "<=")


@dataclass(frozen=True)
class FieldFilter:
    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in SUPPORTED_OPS:
            raise ValueError(f"Unsupported filter operator: {self.op!r}")


class DocumentSnapshot(Protocol):
    id: str

    def data(self) -> dict[str, Any]: ...


class DocumentStore(Protocol):
    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
    ) -> list[DocumentSnapshot]: ...


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


@dataclass
class MemorySnapshot:
    id: str
    _data: dict[str, Any]

    def data(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


def _comparable(value: Any) -> Any:
    """Map date-like values onto naive UTC datetimes so they compare."""
    value = unwrap_timestamp(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return value


def _matches(data: dict[str, Any], flt: FieldFilter) -> bool:
    if flt.field not in data:
        return False
    actual = data[flt.field]

    if flt.op == "==":
        return _comparable(actual) == _comparable(flt.value)
    if flt.op == "in":
        return any(_comparable(actual) == _comparable(v) for v in flt.value)

    left, right = _comparable(actual), _comparable(flt.value)
    try:
        if flt.op == ">=":
            return left >= right
        return left <= right
    except TypeError:
        # Mismatched types never satisfy a range filter
        return False


class InMemoryDocumentStore:
    """Dict-backed ``DocumentStore`` for tests and local runs."""

    def __init__(self, collections: dict[str, Iterable[tuple[str, dict[str, Any]]]] | None = None) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        for name, docs in (collections or {}).items():
            for doc_id, data in docs:
                self.add(name, doc_id, data)

    def add(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[doc_id] = dict(data)

    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
    ) -> list[MemorySnapshot]:
        docs = self._collections.get(collection, {})
        return [
            MemorySnapshot(doc_id, data)
            for doc_id, data in docs.items()
            if all(_matches(data, flt) for flt in filters)
        ]
