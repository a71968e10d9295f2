from __future__ import annotations
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class AssessmentError(Exception):
	"""Caller-facing failure with a stable code and a safe message."""

	code = "internal"
	status_code = 500

	def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
		super().__init__(message)
		self.message = message
		self.details = details

	def to_dict(self) -> Dict[str, Any]:
		body: Dict[str, Any] = {"code": self.code, "message": self.message}
		if self.details:
			body["details"] = self.details
		return body


class InvalidArgumentError(AssessmentError):
	code = "invalid-argument"
	status_code = 400


class ResourceExhaustedError(AssessmentError):
	code = "resource-exhausted"
	status_code = 429


class FailedPreconditionError(AssessmentError):
	code = "failed-precondition"
	status_code = 503


class InternalError(AssessmentError):
	code = "internal"
	status_code = 500


class GeminiError(RuntimeError):
	"""Raised by the model client; the message may carry upstream detail and stays server-side."""


async def assessment_error_handler(request: Request, exc: AssessmentError) -> JSONResponse:
	headers: Dict[str, str] = {}
	retry_after = (exc.details or {}).get("retryAfter")
	if retry_after is not None:
		headers["Retry-After"] = str(retry_after)
	return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers or None)
