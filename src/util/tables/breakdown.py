from __future__ import annotations

import re

# Leading decimal number of a token, the way a lenient float parse reads "12abc" as 12.
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_token(token: str) -> float:
	match = _LEADING_NUMBER.match(token.strip())
	if not match:
		return 0.0
	return float(match.group(0))


def parse_breakdown(expr: str | None) -> float:
	"""
	Sum a '+'-joined breakdown expression, e.g. "16000+8000+3000" -> 27000.
	Empty or non-numeric tokens count as 0.
	"""
	if not expr or not isinstance(expr, str):
		return 0.0
	return sum(parse_token(token) for token in expr.split("+"))
