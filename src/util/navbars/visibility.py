from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from util.navbars.nav_config import NavGroup, NavItem, SidebarConfig

logger = logging.getLogger(__name__)


def _branch_scope(selected_branch_ids: Iterable[str] | None) -> frozenset[str]:
	if not selected_branch_ids:
		return frozenset()
	return frozenset(str(b) for b in selected_branch_ids)


def nav_entry_visible(
	entry: NavItem | NavGroup,
	role: str,
	selected_branch_ids: Iterable[str] | None = None,
	*,
	bypass_roles: Iterable[str] = (),
) -> bool:
	allowed_roles = getattr(entry, "allowed_roles", None) or frozenset()
	if allowed_roles and role not in allowed_roles and role not in set(bypass_roles):
		return False

	scope = _branch_scope(selected_branch_ids)
	if not scope:
		return True
	allowed_branches = getattr(entry, "allowed_branch_ids", None) or frozenset()
	if not allowed_branches:
		return True
	return not scope.isdisjoint(allowed_branches)


def filter_nav_items(
	items: Iterable[NavItem],
	role: str,
	selected_branch_ids: Iterable[str] | None = None,
	*,
	bypass_roles: Iterable[str] = (),
) -> list[NavItem]:
	scope = _branch_scope(selected_branch_ids)
	bypass = frozenset(bypass_roles)
	return [
		item for item in items
		if isinstance(item, NavItem) and nav_entry_visible(item, role, scope, bypass_roles=bypass)
	]


def filter_nav_groups(
	groups: Iterable[NavGroup],
	role: str,
	selected_branch_ids: Iterable[str] | None = None,
	*,
	bypass_roles: Iterable[str] = (),
) -> list[NavGroup]:
	scope = _branch_scope(selected_branch_ids)
	bypass = frozenset(bypass_roles)
	filtered: list[NavGroup] = []
	for group in groups:
		if not isinstance(group, NavGroup):
			continue
		if not nav_entry_visible(group, role, scope, bypass_roles=bypass):
			continue

		children = filter_nav_items(group.children, role, scope, bypass_roles=bypass)
		# Headers alone don't make a group worth rendering.
		if not any(not child.is_header for child in children):
			continue
		filtered.append(replace(group, children=tuple(children)))
	return filtered


def filter_sidebar(
	config: SidebarConfig,
	role: str,
	selected_branch_ids: Iterable[str] | None = None,
	*,
	bypass_roles: Iterable[str] = (),
) -> SidebarConfig:
	items = filter_nav_items(config.items, role, selected_branch_ids, bypass_roles=bypass_roles)
	groups = filter_nav_groups(config.groups, role, selected_branch_ids, bypass_roles=bypass_roles)
	logger.debug(
		"Sidebar %s for role=%s branches=%s: %d/%d items, %d/%d groups",
		config.key, role, sorted(_branch_scope(selected_branch_ids)),
		len(items), len(config.items), len(groups), len(config.groups),
	)
	return replace(config, items=tuple(items), groups=tuple(groups))
