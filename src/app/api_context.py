from __future__ import annotations

from dataclasses import dataclass, field
import threading

from util.branches import BranchRegistry
from util.ledger.pending_book import PendingBook
from util.navbars.nav_config import NavigationConfig


@dataclass
class ApiContext:
	navigation: NavigationConfig
	branches: BranchRegistry
	pending_book: PendingBook = field(default_factory=PendingBook)
	default_role: str = "employee"
	bypass_roles: frozenset[str] = frozenset()
	pending_book_lock: threading.Lock = field(default_factory=threading.Lock)
