from __future__ import annotations
import json
import re
from typing import Any

_LEADING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")


class ResponseParseError(ValueError):
	pass


def parse_model_response(text: str) -> Any:
	"""Extract the JSON value from a model reply.

	Handles replies wrapped in a markdown code fence (optionally
	language-tagged) and replies with prose around a single object. Only the
	first-"{"-to-last-"}" span is tried as a fallback; no field-level guessing.

	Raises:
		ResponseParseError: If no JSON can be decoded from the text
	"""
	if not isinstance(text, str):
		raise ResponseParseError("Model response is not text")
	cleaned = _LEADING_FENCE.sub("", text.strip())
	cleaned = _TRAILING_FENCE.sub("", cleaned).strip()
	try:
		return json.loads(cleaned)
	# Very deep nesting exhausts the decoder recursion limit
	except (ValueError, RecursionError):
		pass
	first = cleaned.find("{")
	last = cleaned.rfind("}")
	if first == -1 or last <= first:
		raise ResponseParseError("No JSON object found in model response")
	try:
		return json.loads(cleaned[first : last + 1])
	except (ValueError, RecursionError) as err:
		raise ResponseParseError(f"Model response is not valid JSON: {err}") from err
