import json
from pathlib import Path
from typing import Dict, Any


class _DirNS:
	"""
	A directory namespace with a uniform API:
	- get_raw(filename)
	- get_json(filename)
	- get_kv_config(filename)     # key=value lines
	- resolve(filename)           # path in this namespace
	"""
	def __init__(self, base: Path):
		self.base = base

	def _resolve(self, filename: str) -> Path:
		# exact path first
		p = self.base / filename
		if p.exists():
			return p
		# fallback: match by stem if no suffix was given
		if not Path(filename).suffix and self.base.is_dir():
			candidates = [f for f in self.base.iterdir() if f.stem == filename]
			if len(candidates) == 1:
				return candidates[0]
			if not candidates:
				raise FileNotFoundError(f"No file matching '{filename}' in {self.base}")
			raise FileNotFoundError(f"Multiple files match stem '{filename}' in {self.base}")
		raise FileNotFoundError(f"File '{filename}' not found in {self.base}")

	def get_raw(self, filename: str) -> str:
		return self._resolve(filename).read_text(encoding="utf-8")

	def get_json(self, filename: str) -> Dict[str, Any]:
		return json.loads(self.get_raw(filename))

	def get_kv_config(self, filename: str) -> Dict[str, str]:
		raw = self.get_raw(filename)
		out: Dict[str, str] = {}
		for line in raw.splitlines():
			s = line.strip()
			if not s or s.startswith("#"):
				continue
			if "=" not in s:
				raise ValueError(f"Invalid config line: '{line}'")
			k, v = s.split("=", 1)
			out[k.strip()] = v.strip()
		return out

	def resolve(self, filename: str) -> Path:
		return self._resolve(filename)


class ConfigReader:
	"""
	Directory-agnostic config reader with named namespaces.
	Usage:
		ConfigReader().config_dir.get_kv_config("app.config")
		ConfigReader().config_dir.get_json("navigation.json")
	"""
	# ---- base & namespace registry ----
	@staticmethod
	def _base_dir() -> Path:
		return Path(__file__).resolve().parent.parent

	@classmethod
	def _ns_root(cls) -> Path:
		return cls._base_dir()

	# default namespaces
	_NAMESPACES = {
		"config_dir": "config",
	}

	@classmethod
	def _ns(cls, name: str) -> _DirNS:
		sub = cls._NAMESPACES.get(name)
		if sub is None:
			raise KeyError(f"Unknown namespace '{name}'")
		return _DirNS(cls._ns_root() / sub)

	@property
	def config_dir(self) -> _DirNS:  return self._ns("config_dir")  # type: ignore[attr-defined]

	@staticmethod
	def split_list(value: str | None) -> list[str]:
		"""Split a comma-separated config value, dropping blanks."""
		if not value:
			return []
		return [part.strip() for part in value.split(",") if part.strip()]
