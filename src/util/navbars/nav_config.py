from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

logger = logging.getLogger(__name__)

ITEM_KIND = "item"
GROUP_KIND = "group"


@dataclass(frozen=True)
class NavItem:
	destination: str
	label: str
	icon: str | None = None
	is_terminal_match: bool = False
	allowed_roles: frozenset[str] = frozenset()
	allowed_branch_ids: frozenset[str] = frozenset()
	is_header: bool = False
	kind: str = field(default=ITEM_KIND, init=False)

	def to_dict(self) -> dict:
		return {
			"kind": self.kind,
			"to": self.destination,
			"label": self.label,
			"icon": self.icon,
			"end": self.is_terminal_match,
			"roles": sorted(self.allowed_roles),
			"branch_ids": sorted(self.allowed_branch_ids),
			"is_header": self.is_header,
		}


@dataclass(frozen=True)
class NavGroup:
	id: str
	label: str
	children: tuple[NavItem, ...] = ()
	icon: str | None = None
	allowed_roles: frozenset[str] = frozenset()
	allowed_branch_ids: frozenset[str] = frozenset()
	kind: str = field(default=GROUP_KIND, init=False)

	def to_dict(self) -> dict:
		return {
			"kind": self.kind,
			"id": self.id,
			"label": self.label,
			"icon": self.icon,
			"items": [child.to_dict() for child in self.children],
			"roles": sorted(self.allowed_roles),
			"branch_ids": sorted(self.allowed_branch_ids),
		}


NavEntry = NavItem | NavGroup


@dataclass(frozen=True)
class SidebarConfig:
	key: str
	module_name: str
	module_description: str = ""
	module_icon: str | None = None
	items: tuple[NavItem, ...] = ()
	groups: tuple[NavGroup, ...] = ()

	def to_dict(self) -> dict:
		return {
			"key": self.key,
			"module_name": self.module_name,
			"module_description": self.module_description,
			"module_icon": self.module_icon,
			"items": [item.to_dict() for item in self.items],
			"groups": [group.to_dict() for group in self.groups],
		}


@dataclass(frozen=True)
class NavigationConfig:
	modules: tuple[NavItem, ...] = ()
	sidebars: Mapping[str, SidebarConfig] = field(default_factory=dict)

	def sidebar(self, key: str) -> SidebarConfig:
		try:
			return self.sidebars[key]
		except KeyError:
			raise KeyError(f"Unknown sidebar '{key}'") from None


def _token_set(raw: Any) -> frozenset[str]:
	# Anything that isn't a list of tokens counts as "unrestricted".
	if raw is None:
		return frozenset()
	if isinstance(raw, str):
		raw = [raw]
	if not isinstance(raw, (list, tuple, set, frozenset)):
		return frozenset()
	return frozenset(str(v).strip() for v in raw if v is not None and str(v).strip())


def _required_str(raw: Mapping[str, Any], key: str, what: str) -> str:
	value = raw.get(key)
	if not isinstance(value, str) or not value.strip():
		raise ValueError(f"{what} entry is missing '{key}': {dict(raw)!r}")
	return value


def parse_nav_item(raw: Mapping[str, Any]) -> NavItem:
	if not isinstance(raw, Mapping):
		raise ValueError(f"Navigation item must be a mapping, got {type(raw).__name__}")
	kind = raw.get("kind", ITEM_KIND)
	if kind != ITEM_KIND:
		raise ValueError(f"Expected kind '{ITEM_KIND}', got '{kind}'")
	return NavItem(
		destination=_required_str(raw, "to", "Navigation item"),
		label=_required_str(raw, "label", "Navigation item"),
		icon=raw.get("icon"),
		is_terminal_match=bool(raw.get("end", False)),
		allowed_roles=_token_set(raw.get("roles")),
		allowed_branch_ids=_token_set(raw.get("branch_ids")),
		is_header=bool(raw.get("is_header", False)),
	)


def parse_nav_group(raw: Mapping[str, Any]) -> NavGroup:
	if not isinstance(raw, Mapping):
		raise ValueError(f"Navigation group must be a mapping, got {type(raw).__name__}")
	kind = raw.get("kind", GROUP_KIND)
	if kind != GROUP_KIND:
		raise ValueError(f"Expected kind '{GROUP_KIND}', got '{kind}'")
	children = raw.get("items", [])
	if not isinstance(children, list):
		raise ValueError(f"Group '{raw.get('id')}' items must be a list")
	return NavGroup(
		id=_required_str(raw, "id", "Navigation group"),
		label=_required_str(raw, "label", "Navigation group"),
		children=tuple(parse_nav_item(child) for child in children),
		icon=raw.get("icon"),
		allowed_roles=_token_set(raw.get("roles")),
		allowed_branch_ids=_token_set(raw.get("branch_ids")),
	)


def parse_nav_entry(raw: Mapping[str, Any]) -> NavEntry:
	"""
	Build an item or group from a raw mapping using its 'kind' discriminant.
	Mappings without a 'kind' are treated as groups when they carry 'items'.
	"""
	if not isinstance(raw, Mapping):
		raise ValueError(f"Navigation entry must be a mapping, got {type(raw).__name__}")
	kind = raw.get("kind")
	if kind is None:
		kind = GROUP_KIND if "items" in raw else ITEM_KIND
	if kind == ITEM_KIND:
		return parse_nav_item(raw)
	if kind == GROUP_KIND:
		return parse_nav_group(raw)
	raise ValueError(f"Unknown navigation entry kind '{kind}'")


def parse_sidebar(key: str, raw: Mapping[str, Any]) -> SidebarConfig:
	if not isinstance(raw, Mapping):
		raise ValueError(f"Sidebar '{key}' must be a mapping")
	items = raw.get("items", [])
	groups = raw.get("groups", [])
	if not isinstance(items, list) or not isinstance(groups, list):
		raise ValueError(f"Sidebar '{key}' items and groups must be lists")
	return SidebarConfig(
		key=key,
		module_name=_required_str(raw, "module_name", f"Sidebar '{key}'"),
		module_description=raw.get("module_description", ""),
		module_icon=raw.get("module_icon"),
		items=tuple(parse_nav_item(item) for item in items),
		groups=tuple(parse_nav_group(group) for group in groups),
	)


def parse_navigation(raw: Mapping[str, Any]) -> NavigationConfig:
	modules = raw.get("modules", [])
	sidebars = raw.get("sidebars", {})
	if not isinstance(modules, list):
		raise ValueError("'modules' must be a list")
	if not isinstance(sidebars, Mapping):
		raise ValueError("'sidebars' must be a mapping")

	parsed = NavigationConfig(
		modules=tuple(parse_nav_item(module) for module in modules),
		sidebars={key: parse_sidebar(key, value) for key, value in sidebars.items()},
	)
	logger.debug("Loaded navigation config: %d modules, sidebars %s", len(parsed.modules), list(parsed.sidebars))
	return parsed
