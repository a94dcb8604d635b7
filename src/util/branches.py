from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

# "pump" prefix on station names, written with either tone mark.
_STATION_PREFIX = re.compile(r"^(?:\u0e1b\u0e31[\u0e49\u0e4a]\u0e21)+")


@dataclass(frozen=True)
class Branch:
	id: str
	name: str


def normalize_branch_name(name: str) -> str:
	if not name:
		return ""
	return _STATION_PREFIX.sub("", name.strip()).strip()


def row_in_selected_branches(row_branch_name: str, selected_names: set[str] | frozenset[str]) -> bool:
	return normalize_branch_name(row_branch_name) in selected_names


class BranchRegistry:
	def __init__(self, branches: Iterable[Branch]):
		self.branches: tuple[Branch, ...] = tuple(branches)
		self._by_id = {b.id: b for b in self.branches}

	@classmethod
	def from_config(cls, raw: Any) -> "BranchRegistry":
		entries = raw.get("branches", []) if isinstance(raw, Mapping) else raw
		if not isinstance(entries, list):
			raise ValueError("Branch config must be a list of {id, name} entries")
		branches = []
		for entry in entries:
			if not isinstance(entry, Mapping) or entry.get("id") is None or not entry.get("name"):
				raise ValueError(f"Invalid branch entry: {entry!r}")
			branches.append(Branch(id=str(entry["id"]), name=str(entry["name"])))
		return cls(branches)

	@property
	def ids(self) -> list[str]:
		return [b.id for b in self.branches]

	def __contains__(self, branch_id: object) -> bool:
		return branch_id in self._by_id

	def name_for(self, branch_id: str) -> str:
		branch = self._by_id.get(branch_id)
		return branch.name if branch else branch_id

	def selected_name_set(self, selected_ids: Iterable[str]) -> set[str]:
		return {normalize_branch_name(self.name_for(branch_id)) for branch_id in selected_ids}

	def all_selected(self, selected_ids: Iterable[str]) -> bool:
		return set(self.ids).issubset(set(selected_ids))

	def to_list(self) -> list[dict]:
		return [{"id": b.id, "name": b.name} for b in self.branches]


@dataclass
class BranchSelection:
	selected: list[str] = field(default_factory=list)

	@classmethod
	def everything(cls, registry: BranchRegistry) -> "BranchSelection":
		return cls(selected=registry.ids)

	def toggle(self, branch_id: str) -> None:
		if branch_id in self.selected:
			self.selected = [b for b in self.selected if b != branch_id]
		else:
			self.selected = [*self.selected, branch_id]

	def select_all(self, registry: BranchRegistry) -> None:
		self.selected = registry.ids

	def clear_all(self) -> None:
		self.selected = []
