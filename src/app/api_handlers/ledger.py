from __future__ import annotations

import logging

import flask

from app.api_common import error_response, parse_table_query
from app.api_context import ApiContext
from util.ledger.pending_book import (
	EDITABLE_FIELDS,
	FILTERABLE_COLUMNS,
	LEDGER_TABLE_SPEC,
	group_by_date,
)
from util.tables.table_engine import (
	TableView,
	compute_aggregates,
	filter_options,
	materialize,
	materialize_all,
	next_sort_state,
)

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("date", "code", "product", "price", "volume", "amount")


def _entry_payload(entry) -> dict:
	return materialize(entry.as_record(), LEDGER_TABLE_SPEC)


def _request_fields() -> dict | None:
	data = flask.request.get_json(silent=True)
	if not isinstance(data, dict):
		return None
	return {k: v for k, v in data.items() if k in EDITABLE_FIELDS}


def register(api: flask.Blueprint, ctx: ApiContext) -> None:
	@api.route("/api/ledger/pending", methods=["GET"])
	def api_ledger_pending():
		search, column_filters, sort, error = parse_table_query(flask.request.args)
		if error:
			return error_response(error, 400)

		view = TableView(LEDGER_TABLE_SPEC, search, column_filters, sort)
		with ctx.pending_book_lock:
			base = ctx.pending_book.records()

		records = view.records(base)
		rows = materialize_all(records, LEDGER_TABLE_SPEC)
		return flask.jsonify({
			"ok": True,
			"rows": rows,
			"groups": [{"date": date, "rows": grouped} for date, grouped in group_by_date(rows).items()],
			"summary": compute_aggregates(records, LEDGER_TABLE_SPEC),
			"total_entries": len(base),
			"filtering": view.filtering,
			"sort": sort.to_dict(),
			"next_sort": {col: next_sort_state(sort, col).to_dict() for col in SORTABLE_COLUMNS},
		})

	@api.route("/api/ledger/pending/options", methods=["GET"])
	def api_ledger_pending_options():
		with ctx.pending_book_lock:
			base = ctx.pending_book.records()
		return flask.jsonify({
			"ok": True,
			"options": {col: filter_options(base, col, LEDGER_TABLE_SPEC) for col in FILTERABLE_COLUMNS},
		})

	@api.route("/api/ledger/pending", methods=["POST"])
	def api_ledger_pending_add():
		fields = _request_fields()
		if fields is None:
			return error_response("Expected a JSON object.", 400)
		try:
			with ctx.pending_book_lock:
				entry = ctx.pending_book.add(**fields)
		except ValueError as e:
			return error_response(str(e), 400)
		return flask.jsonify({"ok": True, "entry": _entry_payload(entry)}), 201

	@api.route("/api/ledger/pending/<entry_id>", methods=["PUT"])
	def api_ledger_pending_update(entry_id):
		fields = _request_fields()
		if fields is None:
			return error_response("Expected a JSON object.", 400)
		try:
			with ctx.pending_book_lock:
				entry = ctx.pending_book.update(entry_id, **fields)
		except KeyError:
			return error_response("Ledger entry not found.", 404)
		except ValueError as e:
			return error_response(str(e), 400)
		return flask.jsonify({"ok": True, "entry": _entry_payload(entry)})

	@api.route("/api/ledger/pending/<entry_id>", methods=["DELETE"])
	def api_ledger_pending_delete(entry_id):
		try:
			with ctx.pending_book_lock:
				entry = ctx.pending_book.delete(entry_id)
		except KeyError:
			return error_response("Ledger entry not found.", 404)
		return flask.jsonify({"ok": True, "deleted": entry.id})
