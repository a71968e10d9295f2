from __future__ import annotations
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class AssessmentRequest(BaseModel):
	"""Documented request shape; the assess route validates raw bodies itself so every violation is reported."""
	model_config = ConfigDict(populate_by_name=True)

	type: str = Field(description="writing, speaking or recommendations")
	level: str = Field(description="A0, B1/B2 or IELTS")
	content: str = Field(description="Student response, teacher notes, or weak areas")
	additional_context: Optional[str] = Field(default=None, alias="additionalContext")
	scores: Optional[Dict[str, float]] = None


class RateLimitInfo(BaseModel):
	remaining: int


class ResponseEnvelope(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	success: bool = True
	type: str
	level: str
	feedback: Dict[str, Any]
	warning: Optional[str] = None
	rate_limit: RateLimitInfo = Field(alias="rateLimit")
	timestamp: int


class ErrorResponse(BaseModel):
	code: str
	message: str
	details: Optional[Dict[str, Any]] = None


class HealthLimits(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	max_input_length: int = Field(alias="maxInputLength")
	max_requests_per_hour: int = Field(alias="maxRequestsPerHour")


class HealthResponse(BaseModel):
	status: str
	service: str
	model: str
	limits: HealthLimits
	timestamp: str
