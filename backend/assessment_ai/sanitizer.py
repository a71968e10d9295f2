"""
Input sanitization for free text forwarded to the model.

The pattern list is a hand-curated blacklist of common prompt-injection
phrasings. It lowers the chance that student text rewrites the template's
instructions, but adaptive phrasing can still get through: treat this as one
layer among several, never as a security boundary.
"""

from __future__ import annotations

import re
from typing import Any, List, Pattern

FILTERED_MARKER = "[FILTERED]"

_INJECTION_PATTERNS: List[Pattern[str]] = [
	# Instruction override ("ignore all previous instructions", "disregard the above")
	re.compile(r"ignore\s*(?:all\s*|the\s*|any\s*|of\s*|your\s*)*(?:previous|above|prior)\s*(?:instructions|prompts|context)", re.IGNORECASE),
	re.compile(r"disregard\s*(?:all\s*|the\s*|any\s*|of\s*|your\s*)*(?:previous|above|prior)", re.IGNORECASE),
	# Role impersonation markers
	re.compile(r"system\s*:", re.IGNORECASE),
	re.compile(r"assistant\s*:", re.IGNORECASE),
	re.compile(r"human\s*:", re.IGNORECASE),
	# Model control tokens
	re.compile(r"\[/?INST\]", re.IGNORECASE),
	re.compile(r"<\|.*?\|>"),
]

_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def sanitize_input(text: Any, max_length: int = 3000) -> str:
	"""Neutralise injection phrasing, normalise spacing and clamp the length.

	Non-string input yields an empty string. The steps run in a fixed order:
	pattern replacement, newline collapsing, trimming, truncation.
	"""
	if not isinstance(text, str):
		return ""
	cleaned = text
	for pattern in _INJECTION_PATTERNS:
		cleaned = pattern.sub(FILTERED_MARKER, cleaned)
	cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
	# Truncation can expose trailing whitespace; strip again so the result is stable
	return cleaned.strip()[:max_length].rstrip()
