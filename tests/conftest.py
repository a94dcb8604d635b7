from __future__ import annotations

import sys
from pathlib import Path

import flask
import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
	sys.path.insert(0, str(SRC_ROOT))


from app.api_context import ApiContext  # noqa: E402
from util.branches import BranchRegistry  # noqa: E402
from util.ledger.pending_book import PendingBook  # noqa: E402
from util.navbars.nav_config import parse_navigation  # noqa: E402


NAVIGATION = {
	"modules": [
		{"to": "/app/documents", "label": "Documents"},
		{"to": "/app/accounting", "label": "Accounting", "roles": ["admin", "accountant"]},
		{"to": "/app/gas-station", "label": "Gas station", "roles": ["manager"], "branch_ids": ["1"]},
	],
	"sidebars": {
		"delivery": {
			"module_name": "Delivery",
			"module_icon": "Truck",
			"items": [
				{"to": "/app/delivery/help", "label": "Help"},
			],
			"groups": [
				{
					"id": "overview",
					"label": "Overview",
					"roles": ["manager"],
					"items": [{"to": "/app/delivery", "label": "Dashboard", "end": True}],
				},
				{
					"id": "transport",
					"label": "Transport",
					"roles": ["manager"],
					"items": [
						{"to": "/app/delivery/truck-orders", "label": "Truck orders", "branch_ids": ["1"]},
						{"to": "/app/delivery/manage-trips", "label": "Manage trips"},
					],
				},
				{
					"id": "driver",
					"label": "Driver",
					"roles": ["employee"],
					"items": [{"to": "/app/delivery/driver-app", "label": "Driver app"}],
				},
			],
		},
	},
}

BRANCHES = {"branches": [{"id": "1", "name": "ปั๊มสาขา 1"}, {"id": "2", "name": "สาขา 2"}]}


@pytest.fixture
def app_factory():
	def _build(register_fn, ctx):
		app = flask.Flask(__name__)
		bp = flask.Blueprint("api", __name__)
		register_fn(bp, ctx)
		app.register_blueprint(bp)
		app.config["TESTING"] = True
		return app

	return _build


@pytest.fixture
def simple_ctx():
	return ApiContext(
		navigation=parse_navigation(NAVIGATION),
		branches=BranchRegistry.from_config(BRANCHES),
		pending_book=PendingBook(),
		default_role="employee",
		bypass_roles=frozenset({"admin"}),
	)
