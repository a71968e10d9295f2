from __future__ import annotations
from typing import Any

from fastapi import APIRouter, Depends, Request

from ..errors import InvalidArgumentError
from ..rate_limiter import identity_from_request
from ..schemas import AssessmentRequest, ErrorResponse, ResponseEnvelope
from ..service import AssessmentService

router = APIRouter(tags=["assessment"])


def get_service(request: Request) -> AssessmentService:
	return request.app.state.assessment_service


@router.post(
	"/assess",
	response_model=ResponseEnvelope,
	responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
	openapi_extra={"requestBody": {"content": {"application/json": {"schema": AssessmentRequest.model_json_schema()}}, "required": True}},
)
async def assess(request: Request, service: AssessmentService = Depends(get_service)):
	# Read the body ourselves so the validator can report every problem at once
	try:
		data: Any = await request.json()
	except ValueError:
		raise InvalidArgumentError("Request body must be a JSON object")
	return await service.assess(data, identity_from_request(request))
