from __future__ import annotations

import logging
from typing import Any, Mapping

import flask

from app.api_context import ApiContext
from util.tables.table_engine import ALL, SORT_DIRECTIONS, SortState

logger = logging.getLogger(__name__)

FILTER_ARG_PREFIX = "filter."


def error_response(message: str, status: int) -> tuple[Any, int]:
	return flask.jsonify({"ok": False, "message": message}), status


def parse_csv_arg(raw: str | None) -> list[str]:
	if not raw:
		return []
	return [part.strip() for part in raw.split(",") if part.strip()]


def get_request_role(ctx: ApiContext) -> str:
	role = (flask.request.args.get("role") or "").strip()
	return role or ctx.default_role


def get_request_branch_ids(ctx: ApiContext) -> list[str] | None:
	"""
	Selected branches from '?branches=1,2' (repeatable). None when absent,
	which the visibility filter treats the same as an empty selection.
	"""
	raw_values = flask.request.args.getlist("branches")
	if not raw_values:
		return None
	selected: list[str] = []
	for raw in raw_values:
		for branch_id in parse_csv_arg(raw):
			if branch_id not in selected:
				selected.append(branch_id)
	unknown = [b for b in selected if b not in ctx.branches]
	if unknown:
		logger.debug("Request selected unknown branch ids: %s", unknown)
	return selected


def parse_table_query(args: Mapping[str, str]) -> tuple[str, dict[str, str], SortState, str | None]:
	search = (args.get("search") or "").strip()

	column_filters: dict[str, str] = {}
	for key, value in args.items():
		if not key.startswith(FILTER_ARG_PREFIX):
			continue
		column = key[len(FILTER_ARG_PREFIX):].strip()
		if column:
			column_filters[column] = value if value != "" else ALL

	sort_key = (args.get("sort") or "").strip() or None
	direction = (args.get("direction") or "").strip().lower() or None
	if direction is not None and direction not in SORT_DIRECTIONS:
		return search, column_filters, SortState(), "Invalid sort direction. Use 'asc' or 'desc'."
	if sort_key is None:
		direction = None
	elif direction is None:
		direction = SORT_DIRECTIONS[0]

	return search, column_filters, SortState(sort_key, direction), None
