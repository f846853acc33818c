"""
Persistence gateway contract and the in-memory implementation.

The pipeline only ever needs two operations on the store: insert rows into a
named table (getting the created rows back, ids included) and delete rows
matching a predicate. There are no transactions across tables. Every failure
surfaces as a GatewayError.

MemoryGateway backs `--dry-run` and the test-suite. It behaves like an
insert-only relational store: ids are generated when absent, a duplicate id is
rejected the way a primary key would reject it, and unknown tables report
"does not exist".
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from orgmigrate.domain.tables import CREATION_ORDER, Table
from orgmigrate.errors import GatewayError

Record = Dict[str, Any]
RowPredicate = Callable[[Record], bool]


@dataclass(frozen=True)
class NotEqual:
    """``column <> value``; the clearing step deletes ``id <> NIL_UUID``."""

    column: str
    value: Any

    def matches(self, row: Record) -> bool:
        return row.get(self.column) != self.value


@runtime_checkable
class PersistenceGateway(Protocol):
    """
    Store interface consumed by the migrator and orchestrator.
    """

    def insert(self, table: str, rows: Sequence[Record]) -> List[Record]:
        """
        Insert ``rows`` into ``table`` and return the created rows in order.

        Raises
        ------
        GatewayError
            If the store rejects the insert.
        """
        ...

    def delete_where(self, table: str, predicate: NotEqual) -> None:
        """
        Delete rows of ``table`` matching ``predicate``.

        Raises
        ------
        GatewayError
            If the table is missing or the delete fails.
        """
        ...


class MemoryGateway:
    """In-process insert-only store."""

    def __init__(self, tables: Optional[Iterable[str]] = None) -> None:
        names = tables if tables is not None else [str(t) for t in Table]
        self._tables: Dict[str, List[Record]] = {str(name): [] for name in names}
        self._faults: List[tuple[str, Optional[RowPredicate], str]] = []
        self.operations: List[tuple[str, str]] = []

    def fail_on(
        self,
        table: str,
        predicate: Optional[RowPredicate] = None,
        message: str = "simulated gateway failure",
    ) -> None:
        """Make inserts into ``table`` fail (for rows matching ``predicate``, if given)."""
        self._faults.append((str(table), predicate, message))

    def rows(self, table: str) -> List[Record]:
        return [dict(row) for row in self._tables[str(table)]]

    def _require_table(self, table: str) -> List[Record]:
        if table not in self._tables:
            raise GatewayError(f'relation "{table}" does not exist', table)
        return self._tables[table]

    def insert(self, table: str, rows: Sequence[Record]) -> List[Record]:
        table = str(table)
        self.operations.append(("insert", table))
        stored = self._require_table(table)
        if not rows:
            return []

        pending = [dict(row) for row in rows]
        for fault_table, predicate, message in self._faults:
            if fault_table == table and (predicate is None or any(predicate(r) for r in pending)):
                raise GatewayError(message, table)

        # The whole statement succeeds or fails, like a single INSERT.
        taken = {row["id"] for row in stored}
        for row in pending:
            row_id = row.get("id") or str(uuid.uuid4())
            if row_id in taken:
                raise GatewayError(
                    f'duplicate key value violates unique constraint "{table}_pkey"', table
                )
            taken.add(row_id)
            row["id"] = row_id

        stored.extend(pending)
        return [dict(row) for row in pending]

    def delete_where(self, table: str, predicate: NotEqual) -> None:
        table = str(table)
        self.operations.append(("delete", table))
        stored = self._require_table(table)
        stored[:] = [row for row in stored if not predicate.matches(row)]

    def counts(self) -> Dict[str, int]:
        """Row count per table, in creation order."""
        ordered = [str(t) for t in CREATION_ORDER if str(t) in self._tables]
        ordered += [name for name in self._tables if name not in ordered]
        return {name: len(self._tables[name]) for name in ordered}


__all__ = ["MemoryGateway", "NotEqual", "PersistenceGateway", "Record"]
