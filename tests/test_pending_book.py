from __future__ import annotations

import pytest

from util.ledger.pending_book import LEDGER_TABLE_SPEC, PendingBook, group_by_date
from util.tables.table_engine import SortState, TableView


def _book() -> PendingBook:
	return PendingBook.from_records([
		{"id": "1", "date": "7/7/68", "code": "34", "product": "HSD", "breakdown": "16000+8000+3000", "price": 32.49},
		{"id": "2", "date": "7/7/68", "code": "59", "product": "6SH91", "breakdown": "3000+4000+4000", "price": 33.03},
		{"id": "3", "date": "8/7/68", "code": "91", "product": "E 85", "breakdown": "", "price": "25"},
	])


def test_entry_volume_and_amount():
	entry = _book().get("1")
	assert entry.volume == 27000
	assert entry.amount == pytest.approx(27000 * 32.49)


def test_rows_include_derived_columns():
	rows = _book().rows()
	assert rows[1]["volume"] == 11000
	assert rows[2]["volume"] == 0
	assert rows[2]["amount"] == 0
	assert rows[2]["price"] == 25.0


def test_add_requires_date_and_code():
	book = PendingBook()
	with pytest.raises(ValueError):
		book.add(date="7/7/68", code="")
	with pytest.raises(ValueError):
		book.add(date=" ", code="34")
	entry = book.add(date="7/7/68", code=34, breakdown="1000+2000", price="32.5")
	assert entry.code == "34"
	assert entry.price == 32.5
	assert book.entries() == [entry]


def test_add_rejects_non_numeric_price():
	with pytest.raises(ValueError):
		PendingBook().add(date="7/7/68", code="34", price="abc")


@pytest.mark.parametrize("price", ["nan", "inf", "-inf", float("nan"), float("inf")])
def test_add_and_update_reject_non_finite_price(price):
	book = _book()
	with pytest.raises(ValueError):
		book.add(date="7/7/68", code="34", price=price)
	with pytest.raises(ValueError):
		book.update("1", price=price)
	assert book.get("1").price == 32.49
	assert len(book.entries()) == 3


def test_from_records_skips_rows_add_would_reject():
	book = PendingBook.from_records([
		{"id": "ok", "date": "7/7/68", "code": "34", "price": 30},
		{"id": "no-date", "date": " ", "code": "34"},
		{"id": "no-code", "date": "7/7/68"},
		{"id": "bad-price", "date": "7/7/68", "code": "59", "price": "nan"},
	])
	assert [e.id for e in book.entries()] == ["ok"]


def test_update_changes_fields_and_recomputes_volume():
	book = _book()
	updated = book.update("2", breakdown="4000")
	assert updated.volume == 4000
	assert book.get("2").breakdown == "4000"
	assert book.rows()[1]["volume"] == 4000


def test_update_rejects_unknown_ids_and_fields():
	book = _book()
	with pytest.raises(KeyError):
		book.update("missing", code="1")
	with pytest.raises(ValueError):
		book.update("1", id="other")
	with pytest.raises(ValueError):
		book.update("1", code="")


def test_delete_removes_entry():
	book = _book()
	removed = book.delete("1")
	assert removed.id == "1"
	assert [e.id for e in book.entries()] == ["2", "3"]
	with pytest.raises(KeyError):
		book.delete("1")


def test_entries_are_snapshots():
	book = _book()
	snapshot = book.entries()
	book.add(date="9/7/68", code="18")
	assert len(snapshot) == 3
	assert len(book.entries()) == 4


def test_group_by_date_keeps_first_seen_order():
	groups = group_by_date(_book().rows())
	assert list(groups) == ["7/7/68", "8/7/68"]
	assert [r["id"] for r in groups["7/7/68"]] == ["1", "2"]


def test_ledger_view_sorts_by_volume_and_sums():
	book = _book()
	view = TableView(LEDGER_TABLE_SPEC, sort=SortState("volume", "asc"))
	rows = view.rows(book.records())
	assert [r["id"] for r in rows] == ["3", "2", "1"]
	summary = view.summary(book.records())
	assert summary["count"] == 3
	assert summary["sums"]["volume"] == 38000
