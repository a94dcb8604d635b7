from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from util.navbars.nav_config import NavGroup, NavItem


def is_item_active(item: NavItem, path: str) -> bool:
	if not path or item.is_header:
		return False
	if path == item.destination:
		return True
	if item.is_terminal_match:
		return False
	return path.startswith(item.destination.rstrip("/") + "/")


def find_active_group(groups: Iterable[NavGroup], path: str) -> NavGroup | None:
	for group in groups:
		if any(is_item_active(child, path) for child in group.children):
			return group
	return None


@dataclass
class SidebarState:
	"""
	Expanded-group tracking for one rendered sidebar.
	Each page owns its own instance; ids are group ids from the sidebar config.
	"""
	expanded: list[str] = field(default_factory=list)

	def is_expanded(self, group_id: str) -> bool:
		return group_id in self.expanded

	def toggle(self, group_id: str) -> bool:
		if group_id in self.expanded:
			self.expanded = [g for g in self.expanded if g != group_id]
			return False
		self.expanded = [*self.expanded, group_id]
		return True

	def expand_for_path(self, groups: Iterable[NavGroup], path: str) -> str | None:
		active = find_active_group(groups, path)
		if active is None:
			return None
		if active.id not in self.expanded:
			self.expanded = [*self.expanded, active.id]
		return active.id
