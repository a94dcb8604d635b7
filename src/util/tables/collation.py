from __future__ import annotations

import re

# Thai and Lao vowels written before the consonant they follow in speech.
_LEADING_VOWEL = re.compile(r"([\u0e40-\u0e44\u0ec0-\u0ec4])(.)", re.DOTALL)

# Tone marks and other signs that only break ties between otherwise equal words.
_SECONDARY_MARKS = re.compile(r"[\u0e47-\u0e4e\u0ec8-\u0ecd]")


def collation_key(text: str) -> tuple[str, str, str]:
	"""
	Sort key for display strings, Thai text included.

	Leading vowels are moved behind their consonant so words sort by
	consonant first ("เกลือ" files under "ก"). Tone marks only matter when
	the remaining letters tie. Case is ignored until the raw value breaks
	the final tie.
	"""
	folded = _LEADING_VOWEL.sub(r"\2\1", text.casefold())
	return _SECONDARY_MARKS.sub("", folded), folded, text
