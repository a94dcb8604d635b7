from __future__ import annotations

import logging
import math
import uuid
from dataclasses import asdict, dataclass, replace
from typing import Any, Iterable, Mapping

from util.tables.breakdown import parse_breakdown
from util.tables.table_engine import NUMBER, ColumnSpec, TableSpec, materialize_all

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("date", "code", "product", "breakdown", "price")


@dataclass(frozen=True)
class LedgerEntry:
	id: str
	date: str
	code: str
	product: str = ""
	breakdown: str = ""
	price: float = 0.0

	@property
	def volume(self) -> float:
		return parse_breakdown(self.breakdown)

	@property
	def amount(self) -> float:
		return self.volume * self.price

	def as_record(self) -> dict[str, Any]:
		return asdict(self)


def _volume(record: Mapping[str, Any]) -> float:
	return parse_breakdown(record.get("breakdown"))


def _amount(record: Mapping[str, Any]) -> float:
	price = record.get("price") or 0
	try:
		return _volume(record) * float(price)
	except (TypeError, ValueError):
		return 0.0


LEDGER_TABLE_SPEC = TableSpec(
	columns=(
		ColumnSpec("date"),
		ColumnSpec("code"),
		ColumnSpec("product"),
		ColumnSpec("breakdown"),
		ColumnSpec("price", NUMBER),
	),
	derived={"volume": _volume, "amount": _amount},
)

FILTERABLE_COLUMNS = ("date", "code", "product")


def _clean_text(value: Any) -> str:
	if value is None:
		return ""
	return str(value).strip()


def _clean_price(value: Any) -> float:
	if value is None or value == "":
		return 0.0
	try:
		price = float(value)
	except (TypeError, ValueError):
		raise ValueError(f"Invalid price: {value!r}") from None
	if not math.isfinite(price):
		raise ValueError(f"Invalid price: {value!r}")
	return price


class PendingBook:
	"""
	Suspense ledger: fuel volumes booked as '+'-joined breakdowns per product code.
	The book is the only writer of its entry list; readers get snapshots.
	"""

	def __init__(self, entries: Iterable[LedgerEntry] = ()):
		self._entries: list[LedgerEntry] = list(entries)

	@classmethod
	def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "PendingBook":
		"""Load stored rows, skipping (and logging) rows that `add` would reject."""
		entries = []
		for record in records:
			try:
				entry = LedgerEntry(
					id=str(record.get("id") or uuid.uuid4().hex),
					date=_clean_text(record.get("date")),
					code=_clean_text(record.get("code")),
					product=_clean_text(record.get("product")),
					breakdown=_clean_text(record.get("breakdown")),
					price=_clean_price(record.get("price")),
				)
			except ValueError as e:
				logger.warning("Skipping ledger record %r: %s", record.get("id"), e)
				continue
			if not entry.date or not entry.code:
				logger.warning("Skipping ledger record %r: missing date or code", record.get("id"))
				continue
			entries.append(entry)
		return cls(entries)

	def entries(self) -> list[LedgerEntry]:
		return list(self._entries)

	def records(self) -> list[dict[str, Any]]:
		return [entry.as_record() for entry in self._entries]

	def rows(self) -> list[dict[str, Any]]:
		return materialize_all(self.records(), LEDGER_TABLE_SPEC)

	def get(self, entry_id: str) -> LedgerEntry:
		for entry in self._entries:
			if entry.id == entry_id:
				return entry
		raise KeyError(f"Ledger entry '{entry_id}' not found")

	def add(self, date: str = "", code: str = "", product: str = "", breakdown: str = "", price: Any = 0.0) -> LedgerEntry:
		date = _clean_text(date)
		code = _clean_text(code)
		if not date or not code:
			raise ValueError("Both 'date' and 'code' are required.")
		entry = LedgerEntry(
			id=uuid.uuid4().hex,
			date=date,
			code=code,
			product=_clean_text(product),
			breakdown=_clean_text(breakdown),
			price=_clean_price(price),
		)
		self._entries = [*self._entries, entry]
		logger.info("Added ledger entry %s (%s / %s)", entry.id, entry.date, entry.code)
		return entry

	def update(self, entry_id: str, **fields: Any) -> LedgerEntry:
		unknown = set(fields) - set(EDITABLE_FIELDS)
		if unknown:
			raise ValueError(f"Unknown ledger fields: {sorted(unknown)}")
		current = self.get(entry_id)

		changes: dict[str, Any] = {}
		for name, value in fields.items():
			if name == "price":
				changes[name] = _clean_price(value)
			else:
				changes[name] = _clean_text(value)
		updated = replace(current, **changes)
		if not updated.date or not updated.code:
			raise ValueError("Both 'date' and 'code' are required.")

		self._entries = [updated if e.id == entry_id else e for e in self._entries]
		logger.info("Updated ledger entry %s: %s", entry_id, sorted(changes))
		return updated

	def delete(self, entry_id: str) -> LedgerEntry:
		removed = self.get(entry_id)
		self._entries = [e for e in self._entries if e.id != entry_id]
		logger.info("Deleted ledger entry %s", entry_id)
		return removed


def group_by_date(rows: Iterable[Mapping[str, Any]]) -> dict[str, list[Mapping[str, Any]]]:
	groups: dict[str, list[Mapping[str, Any]]] = {}
	for row in rows:
		groups.setdefault(str(row.get("date", "")), []).append(row)
	return groups
