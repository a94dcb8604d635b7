from __future__ import annotations

import logging

import flask

from app.api_context import ApiContext
from app.api_handlers import register_all
from util.branches import BranchRegistry
from util.config_reader import ConfigReader
from util.ledger.pending_book import PendingBook
from util.navbars.nav_config import parse_navigation

logger = logging.getLogger(__name__)


def build_api_context(reader: ConfigReader | None = None) -> ApiContext:
	reader = reader or ConfigReader()
	settings = reader.config_dir.get_kv_config("app.config")

	navigation = parse_navigation(reader.config_dir.get_json(settings.get("navigation_file", "navigation.json")))
	branches = BranchRegistry.from_config(reader.config_dir.get_json(settings.get("branches_file", "branches.json")))

	pending_book = PendingBook()
	seed_file = settings.get("pending_book_seed")
	if seed_file:
		seed = reader.config_dir.get_json(seed_file)
		pending_book = PendingBook.from_records(seed.get("entries", []) if isinstance(seed, dict) else seed)
		logger.info("Seeded pending book with %d entries from %s", len(pending_book.entries()), seed_file)

	ctx = ApiContext(
		navigation=navigation,
		branches=branches,
		pending_book=pending_book,
		default_role=settings.get("default_role") or "employee",
		bypass_roles=frozenset(ConfigReader.split_list(settings.get("bypass_roles"))),
	)
	logger.debug(
		"API context ready: %d branches, default role %s, bypass roles %s",
		len(branches.branches), ctx.default_role, sorted(ctx.bypass_roles),
	)
	return ctx


def build_api_blueprint(ctx: ApiContext) -> flask.Blueprint:
	api = flask.Blueprint("api", __name__)
	register_all(api, ctx)
	return api
