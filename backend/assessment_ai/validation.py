from __future__ import annotations
from typing import Any, List, Mapping, Sequence

from .settings import ALLOWED_LEVELS, ALLOWED_TYPES


def validate_request(
	data: Any,
	*,
	max_input_length: int = 3000,
	allowed_types: Sequence[str] = ALLOWED_TYPES,
	allowed_levels: Sequence[str] = ALLOWED_LEVELS,
) -> List[str]:
	"""Return every problem found with an assessment request, in check order.

	An empty list means the request may proceed. Length is measured on the
	original content, before any sanitization.
	"""
	if not isinstance(data, Mapping):
		data = {}
	errors: List[str] = []

	req_type = data.get("type")
	if not req_type or req_type not in allowed_types:
		errors.append(f"Invalid type. Allowed: {', '.join(allowed_types)}")

	level = data.get("level")
	if not level or level not in allowed_levels:
		errors.append(f"Invalid level. Allowed: {', '.join(allowed_levels)}")

	content = data.get("content")
	if not isinstance(content, str) or not content.strip():
		errors.append("Content is required")

	if isinstance(content, str) and len(content) > max_input_length:
		errors.append(f"Content exceeds {max_input_length} characters")

	return errors
