from __future__ import annotations

from app.api_context import ApiContext


def register_all(api, ctx: ApiContext) -> None:
	from app.api_handlers import (
		ledger,
		navigation,
	)

	navigation.register(api, ctx)
	ledger.register(api, ctx)
