from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..schemas import HealthLimits, HealthResponse
from ..settings import Settings, get_settings

router = APIRouter(tags=["health"])

SERVICE_NAME = "Language Assessment AI"


@router.get("/health", response_model=HealthResponse)
def health(settings: Settings = Depends(get_settings)):
	return HealthResponse(
		status="ok",
		service=SERVICE_NAME,
		model=settings.gemini_model,
		limits=HealthLimits(
			max_input_length=settings.max_input_length,
			max_requests_per_hour=settings.max_requests_per_hour,
		),
		timestamp=datetime.now(timezone.utc).isoformat(),
	)


@router.get("/info")
def info(settings: Settings = Depends(get_settings)):
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key)}
