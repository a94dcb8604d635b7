from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Sequence

from util.tables.collation import collation_key

logger = logging.getLogger(__name__)

ALL = "ALL"
ASC = "asc"
DESC = "desc"
SORT_DIRECTIONS = (ASC, DESC)

STRING = "string"
NUMBER = "number"

Record = Mapping[str, Any]


@dataclass(frozen=True)
class SortState:
	key: str | None = None
	direction: str | None = None

	@property
	def active(self) -> bool:
		return self.key is not None and self.direction in SORT_DIRECTIONS

	def to_dict(self) -> dict:
		return {"key": self.key, "direction": self.direction}


@dataclass(frozen=True)
class ColumnSpec:
	key: str
	kind: str = STRING
	searchable: bool = True


@dataclass(frozen=True)
class TableSpec:
	"""
	Describes one report table: its stored columns, the derived columns
	computed from them, and any non-equality filter options per column.

	Derived columns are numeric, searchable, sortable and summed.
	special_filters maps column -> option label -> predicate over the cell value.
	"""
	columns: tuple[ColumnSpec, ...] = ()
	derived: Mapping[str, Callable[[Record], Any]] = field(default_factory=dict)
	special_filters: Mapping[str, Mapping[str, Callable[[Any], bool]]] = field(default_factory=dict)

	def column(self, key: str) -> ColumnSpec | None:
		if key in self.derived:
			return ColumnSpec(key, NUMBER)
		for col in self.columns:
			if col.key == key:
				return col
		return None

	@property
	def searchable_keys(self) -> list[str]:
		return [c.key for c in self.columns if c.searchable] + list(self.derived)

	@property
	def numeric_keys(self) -> list[str]:
		return [c.key for c in self.columns if c.kind == NUMBER] + list(self.derived)


def _is_number(value: Any) -> bool:
	return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(value: Any) -> float:
	number = 0.0
	if _is_number(value):
		number = float(value)
	elif isinstance(value, str):
		try:
			number = float(value.strip())
		except ValueError:
			return 0.0
	# NaN and infinities count as non-numeric.
	return number if math.isfinite(number) else 0.0


def normalize_cell(value: Any) -> str:
	if value is None:
		return ""
	if isinstance(value, float) and value.is_integer():
		return str(int(value))
	if isinstance(value, str):
		return value.strip()
	return str(value)


def materialize(record: Record, spec: TableSpec | None = None) -> dict[str, Any]:
	# Derived values are always recomputed; source fields may have been edited.
	row = dict(record)
	if spec is not None:
		for name, fn in spec.derived.items():
			row[name] = fn(record)
	return row


def materialize_all(records: Iterable[Record], spec: TableSpec | None = None) -> list[dict[str, Any]]:
	return [materialize(record, spec) for record in records]


def _matches_search(row: Mapping[str, Any], term: str, keys: Iterable[str]) -> bool:
	for key in keys:
		if term in normalize_cell(row.get(key)).lower():
			return True
	return False


def _matches_column_filters(row: Mapping[str, Any], column_filters: Mapping[str, Any], spec: TableSpec | None) -> bool:
	for column, wanted in column_filters.items():
		if wanted is None or wanted == ALL:
			continue
		special = spec.special_filters.get(column, {}).get(wanted) if spec is not None else None
		if special is not None:
			if not special(row.get(column)):
				return False
			continue
		if normalize_cell(row.get(column)) != normalize_cell(wanted):
			return False
	return True


def apply_filters(
	records: Iterable[Record],
	search_term: str | None = "",
	column_filters: Mapping[str, Any] | None = None,
	spec: TableSpec | None = None,
) -> list[Record]:
	"""
	Return the records (the caller's own objects, in input order) that pass every
	active column filter and the free-text search.
	"""
	term = (search_term or "").strip().lower()
	filters = column_filters or {}

	passed: list[Record] = []
	for record in records:
		row = materialize(record, spec)
		if not _matches_column_filters(row, filters, spec):
			continue
		if term:
			keys = spec.searchable_keys if spec is not None else list(row.keys())
			if not _matches_search(row, term, keys):
				continue
		passed.append(record)
	return passed


def _infer_kind(rows: Sequence[Mapping[str, Any]], key: str) -> str | None:
	present = [row[key] for row in rows if key in row]
	if not present:
		return None
	values = [v for v in present if v is not None]
	if values and all(_is_number(v) for v in values):
		return NUMBER
	return STRING


def apply_sort(
	records: Iterable[Record],
	sort_state: SortState | None,
	spec: TableSpec | None = None,
) -> list[Record]:
	records = list(records)
	if sort_state is None or not sort_state.active:
		return records

	key = sort_state.key
	rows = [materialize(record, spec) for record in records]
	column = spec.column(key) if spec is not None else None
	kind = column.kind if column is not None else _infer_kind(rows, key)
	if kind is None:
		logger.debug("Sort key %r not found; leaving order unchanged", key)
		return records

	if kind == NUMBER:
		sort_keys = [_to_number(row.get(key)) for row in rows]
	else:
		sort_keys = [collation_key(normalize_cell(row.get(key))) for row in rows]

	order = sorted(range(len(records)), key=lambda i: sort_keys[i], reverse=sort_state.direction == DESC)
	return [records[i] for i in order]


def _numeric_keys(rows: Sequence[Mapping[str, Any]], spec: TableSpec | None) -> list[str]:
	if spec is not None:
		return spec.numeric_keys
	keys: list[str] = []
	for row in rows:
		for key in row:
			if key not in keys:
				keys.append(key)
	return [key for key in keys if _infer_kind(rows, key) == NUMBER]


def compute_aggregates(records: Iterable[Record], spec: TableSpec | None = None) -> dict[str, Any]:
	rows = materialize_all(records, spec)
	sums = {
		key: math.fsum(_to_number(row.get(key)) for row in rows)
		for key in _numeric_keys(rows, spec)
	}
	return {"count": len(rows), "sums": sums}


def next_sort_state(current: SortState | None, key: str) -> SortState:
	if current is None or current.key != key or current.direction is None:
		return SortState(key, ASC)
	if current.direction == ASC:
		return SortState(key, DESC)
	return SortState(key, None)


def filter_options(records: Iterable[Record], column: str, spec: TableSpec | None = None) -> list[Any]:
	options: list[Any] = [ALL]
	if spec is not None:
		options.extend(spec.special_filters.get(column, {}).keys())
	seen: set[str] = set()
	for record in records:
		value = materialize(record, spec).get(column)
		normalized = normalize_cell(value)
		if not normalized or normalized in seen:
			continue
		seen.add(normalized)
		options.append(value)
	return options


def is_any_filter_active(search_term: str | None, column_filters: Mapping[str, Any] | None) -> bool:
	if (search_term or "").strip():
		return True
	return any(v is not None and v != ALL for v in (column_filters or {}).values())


@dataclass
class TableView:
	"""
	Search, filter and sort state for one report table.

	The view never holds on to sorted output; every call works from the base
	collection passed in, so clearing the sort restores the base order.
	"""
	spec: TableSpec | None = None
	search_term: str = ""
	column_filters: dict[str, Any] = field(default_factory=dict)
	sort: SortState = field(default_factory=SortState)

	def set_search(self, term: str | None) -> None:
		self.search_term = term or ""

	def set_filter(self, column: str, value: Any) -> None:
		self.column_filters = {**self.column_filters, column: value}

	def reset_filters(self) -> None:
		self.search_term = ""
		self.column_filters = {column: ALL for column in self.column_filters}

	def click_sort(self, key: str) -> SortState:
		self.sort = next_sort_state(self.sort, key)
		return self.sort

	@property
	def filtering(self) -> bool:
		return is_any_filter_active(self.search_term, self.column_filters)

	def records(self, base: Iterable[Record]) -> list[Record]:
		filtered = apply_filters(base, self.search_term, self.column_filters, self.spec)
		return apply_sort(filtered, self.sort, self.spec)

	def rows(self, base: Iterable[Record]) -> list[dict[str, Any]]:
		return materialize_all(self.records(base), self.spec)

	def summary(self, base: Iterable[Record]) -> dict[str, Any]:
		return compute_aggregates(self.records(base), self.spec)
