from __future__ import annotations

import logging

import flask

from app.api_common import error_response, get_request_branch_ids, get_request_role, parse_csv_arg
from app.api_context import ApiContext
from util.navbars.sidebar_state import SidebarState, is_item_active
from util.navbars.visibility import filter_nav_items, filter_sidebar

logger = logging.getLogger(__name__)


def register(api: flask.Blueprint, ctx: ApiContext) -> None:
	@api.route("/api/navigation/modules")
	def api_navigation_modules():
		role = get_request_role(ctx)
		branch_ids = get_request_branch_ids(ctx)
		modules = filter_nav_items(ctx.navigation.modules, role, branch_ids, bypass_roles=ctx.bypass_roles)
		return flask.jsonify({
			"ok": True,
			"role": role,
			"modules": [module.to_dict() for module in modules],
		})

	@api.route("/api/navigation/branches")
	def api_navigation_branches():
		branch_ids = get_request_branch_ids(ctx)
		selected = branch_ids if branch_ids is not None else ctx.branches.ids
		return flask.jsonify({
			"ok": True,
			"branches": ctx.branches.to_list(),
			"selected": selected,
			"all_selected": ctx.branches.all_selected(selected),
			"selected_names": sorted(ctx.branches.selected_name_set(selected)),
		})

	@api.route("/api/navigation/<sidebar_key>")
	def api_navigation_sidebar(sidebar_key):
		try:
			config = ctx.navigation.sidebar(sidebar_key)
		except KeyError:
			return error_response("Unknown sidebar.", 404)

		role = get_request_role(ctx)
		branch_ids = get_request_branch_ids(ctx)
		visible = filter_sidebar(config, role, branch_ids, bypass_roles=ctx.bypass_roles)

		path = (flask.request.args.get("path") or "").strip()
		state = SidebarState(expanded=parse_csv_arg(flask.request.args.get("expanded")))
		state.expand_for_path(visible.groups, path)

		active = None
		for item in [*visible.items, *(child for group in visible.groups for child in group.children)]:
			if is_item_active(item, path):
				active = item.destination
				break

		payload = visible.to_dict()
		payload.update({
			"ok": True,
			"role": role,
			"expanded": state.expanded,
			"active": active,
		})
		return flask.jsonify(payload)
