from __future__ import annotations

from util.navbars import visibility
from util.navbars.nav_config import NavGroup, NavItem, SidebarConfig


def _item(to: str, roles=(), branch_ids=(), **kwargs) -> NavItem:
	return NavItem(
		destination=to,
		label=to.rsplit("/", 1)[-1],
		allowed_roles=frozenset(roles),
		allowed_branch_ids=frozenset(branch_ids),
		**kwargs,
	)


def test_nav_entry_visible_default_true():
	assert visibility.nav_entry_visible(_item("/home"), "employee") is True


def test_nav_entry_visible_role_tokens():
	entry = _item("/settings", roles=["admin"])
	assert visibility.nav_entry_visible(entry, "employee") is False
	assert visibility.nav_entry_visible(entry, "admin") is True


def test_nav_entry_visible_bypass_role_skips_role_check():
	entry = _item("/trial-balance", roles=["accountant"])
	assert visibility.nav_entry_visible(entry, "admin") is False
	assert visibility.nav_entry_visible(entry, "admin", bypass_roles={"admin"}) is True


def test_bypass_role_still_respects_branch_scope():
	entry = _item("/truck-orders", branch_ids=["1"])
	assert visibility.nav_entry_visible(entry, "admin", ["2"], bypass_roles={"admin"}) is False


def test_filter_nav_items_keeps_only_unrestricted_for_employee():
	admin_only = _item("/admin", roles=["admin"])
	everyone = _item("/public")
	assert visibility.filter_nav_items([admin_only, everyone], "employee", []) == [everyone]


def test_filter_nav_items_branch_intersection():
	main_branch = _item("/purchase-orders", branch_ids=["1"])
	two_branches = _item("/transfers", branch_ids=["2", "3"])
	anywhere = _item("/stock")
	items = [main_branch, two_branches, anywhere]

	assert visibility.filter_nav_items(items, "manager", ["1"]) == [main_branch, anywhere]
	assert visibility.filter_nav_items(items, "manager", ["3", "4"]) == [two_branches, anywhere]
	assert visibility.filter_nav_items(items, "manager", ["1", "2"]) == items


def test_filter_nav_items_empty_selection_disables_branch_check():
	items = [_item("/purchase-orders", branch_ids=["1"]), _item("/stock")]
	assert visibility.filter_nav_items(items, "manager", []) == items
	assert visibility.filter_nav_items(items, "manager", []) == visibility.filter_nav_items(items, "manager", None)


def test_filter_nav_items_is_idempotent_and_order_preserving():
	items = [
		_item("/a", roles=["manager"]),
		_item("/b"),
		_item("/c", branch_ids=["2"]),
		_item("/d", roles=["employee"], branch_ids=["1"]),
		_item("/e"),
	]
	once = visibility.filter_nav_items(items, "employee", ["1"])
	assert [i.destination for i in once] == ["/b", "/d", "/e"]
	assert visibility.filter_nav_items(once, "employee", ["1"]) == once


def test_filter_nav_items_does_not_mutate_input():
	items = [_item("/admin", roles=["admin"]), _item("/public")]
	snapshot = list(items)
	visibility.filter_nav_items(items, "employee")
	assert items == snapshot


def test_filter_nav_groups_drops_group_when_all_children_hidden():
	group = NavGroup(
		id="reports",
		label="Reports",
		children=(_item("/r1", roles=["manager"]), _item("/r2", roles=["manager"])),
	)
	assert visibility.filter_nav_groups([group], "employee", []) == []


def test_filter_nav_groups_filters_children_and_keeps_order():
	visible_a = _item("/a")
	hidden = _item("/b", roles=["manager"])
	visible_c = _item("/c")
	group = NavGroup(id="g", label="G", children=(visible_a, hidden, visible_c))

	result = visibility.filter_nav_groups([group], "employee")
	assert len(result) == 1
	assert result[0].children == (visible_a, visible_c)
	# input group untouched
	assert group.children == (visible_a, hidden, visible_c)


def test_filter_nav_groups_applies_group_level_restrictions():
	children = (_item("/x"),)
	groups = [
		NavGroup(id="managers", label="M", children=children, allowed_roles=frozenset({"manager"})),
		NavGroup(id="branch-2", label="B", children=children, allowed_branch_ids=frozenset({"2"})),
		NavGroup(id="open", label="O", children=children),
	]
	result = visibility.filter_nav_groups(groups, "employee", ["1"])
	assert [g.id for g in result] == ["open"]
	assert all(len(g.children) > 0 for g in result)


def test_filter_nav_groups_header_only_group_is_dropped():
	group = NavGroup(
		id="g",
		label="G",
		children=(_item("/heading", is_header=True), _item("/hidden", roles=["manager"])),
	)
	assert visibility.filter_nav_groups([group], "employee") == []


def test_filter_sidebar_returns_new_config():
	config = SidebarConfig(
		key="accounting",
		module_name="Accounting",
		items=(_item("/dashboard"), _item("/settings", roles=["admin"])),
		groups=(NavGroup(id="g", label="G", children=(_item("/tax", roles=["tax"]),)),),
	)
	visible = visibility.filter_sidebar(config, "tax")
	assert [i.destination for i in visible.items] == ["/dashboard"]
	assert [g.id for g in visible.groups] == ["g"]
	assert len(config.items) == 2
