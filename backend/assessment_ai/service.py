"""
Assessment request orchestration.

``AssessmentService.assess`` runs one request through validation, rate
limiting, sanitization, prompt building, the model call and response parsing,
and returns a ``ResponseEnvelope``. Failures surface as ``AssessmentError``
subclasses with caller-safe messages; upstream detail is only logged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import (
	FailedPreconditionError,
	InternalError,
	InvalidArgumentError,
	ResourceExhaustedError,
)
from .gemini_client import GeminiClient, ModelClient
from .parser import ResponseParseError, parse_model_response
from .prompts import build_prompt
from .rate_limiter import SlidingWindowRateLimiter
from .sanitizer import sanitize_input
from .schemas import RateLimitInfo, ResponseEnvelope
from .settings import Settings
from .validation import validate_request

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 3600
RAW_TEXT_LIMIT = 1000
PARSE_WARNING = "Response format was unexpected"

ModelClientFactory = Callable[[Settings], ModelClient]


def _default_client_factory(settings: Settings) -> ModelClient:
	return GeminiClient(settings=settings)


def _now_ms() -> float:
	return time.time() * 1000


class AssessmentService:
	def __init__(
		self,
		settings: Settings,
		rate_limiter: SlidingWindowRateLimiter,
		*,
		client_factory: Optional[ModelClientFactory] = None,
		clock: Optional[Callable[[], float]] = None,
	) -> None:
		self.settings = settings
		self.rate_limiter = rate_limiter
		self._client_factory = client_factory or _default_client_factory
		self._clock = clock or _now_ms

	async def assess(self, data: Any, identity: Optional[str]) -> ResponseEnvelope:
		start = self._clock()
		errors = validate_request(data, max_input_length=self.settings.max_input_length)
		if errors:
			raise InvalidArgumentError("; ".join(errors), details={"errors": errors})

		rate = self.rate_limiter.check(identity)
		if not rate.allowed:
			logger.warning("Rate limit exceeded for identity %s", identity or "unknown")
			raise ResourceExhaustedError(
				"Rate limit exceeded. Please wait before making more requests.",
				details={"retryAfter": RETRY_AFTER_SECONDS},
			)

		req_type: str = data["type"]
		level: str = data["level"]
		content = sanitize_input(data["content"], self.settings.max_input_length)
		additional_context = sanitize_input(data.get("additionalContext") or "", self.settings.max_input_length)
		scores = data.get("scores") if isinstance(data.get("scores"), Mapping) else {}

		if not self.settings.gemini_api_key:
			logger.error("GEMINI_API_KEY not configured")
			raise FailedPreconditionError("AI service not configured. Please contact administrator.")

		prompt = build_prompt(req_type, level, content, additional_context, scores)

		raw = await self._call_model(prompt)

		warning: Optional[str] = None
		feedback: Dict[str, Any]
		try:
			parsed = parse_model_response(raw)
			if not isinstance(parsed, dict):
				raise ResponseParseError("Model response is not a JSON object")
			feedback = parsed
		except ResponseParseError as err:
			logger.warning("JSON parse failed: %s", err)
			warning = PARSE_WARNING
			feedback = {"rawText": raw[:RAW_TEXT_LIMIT]}

		duration = self._clock() - start
		logger.info(
			"Gemini call: type=%s, level=%s, duration=%dms, inputLen=%d",
			req_type, level, duration, len(content),
		)
		return ResponseEnvelope(
			success=True,
			type=req_type,
			level=level,
			feedback=feedback,
			warning=warning,
			rate_limit=RateLimitInfo(remaining=rate.remaining),
			timestamp=int(self._clock()),
		)

	async def _call_model(self, prompt: str) -> str:
		client = self._client_factory(self.settings)
		try:
			return await asyncio.wait_for(client.generate(prompt), timeout=self.settings.model_timeout_seconds)
		except asyncio.TimeoutError:
			logger.error("Gemini API error: timed out after %ss", self.settings.model_timeout_seconds)
			raise InternalError("AI service temporarily unavailable. Please try again.") from None
		except Exception as err:
			logger.error("Gemini API error: %s", err)
			raise classify_model_error(err) from None
		finally:
			await client.aclose()


def classify_model_error(err: BaseException) -> InternalError | ResourceExhaustedError | InvalidArgumentError:
	"""Map an upstream failure onto a caller-safe error without leaking its text."""
	message = str(err).lower()
	if "quota" in message:
		return ResourceExhaustedError("AI service quota exceeded. Please try again later.")
	if "safety" in message:
		return InvalidArgumentError("Content could not be processed. Please revise and try again.")
	return InternalError("AI service temporarily unavailable. Please try again.")
