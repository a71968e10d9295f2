from __future__ import annotations
import logging
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .errors import AssessmentError, assessment_error_handler
from .rate_limiter import SlidingWindowRateLimiter
from .routers import assess, health
from .service import AssessmentService, ModelClientFactory
from .settings import Settings, get_settings, settings as default_settings


def _configure_logging(level: str) -> None:
	logging.basicConfig(
		level=getattr(logging, level.upper(), logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	# httpx logs full request URLs, which include the AI Studio key as a query param
	logging.getLogger("httpx").setLevel(logging.WARNING)


def create_app(
	settings: Optional[Settings] = None,
	*,
	client_factory: Optional[ModelClientFactory] = None,
	clock: Optional[Callable[[], float]] = None,
) -> FastAPI:
	cfg = settings or default_settings
	_configure_logging(cfg.log_level)

	app = FastAPI(title="Language Assessment AI")
	app.add_middleware(
		CORSMiddleware,
		allow_origins=cfg.cors_allow_origins,
		allow_methods=["GET", "POST", "OPTIONS"],
		allow_headers=["*"],
	)
	app.add_exception_handler(AssessmentError, assessment_error_handler)

	rate_limiter = SlidingWindowRateLimiter(cfg.max_requests_per_hour, clock=clock)
	app.state.settings = cfg
	app.state.rate_limiter = rate_limiter
	app.state.assessment_service = AssessmentService(cfg, rate_limiter, client_factory=client_factory, clock=clock)
	app.dependency_overrides[get_settings] = lambda: cfg

	app.include_router(assess.router)
	app.include_router(health.router)
	return app


app = create_app()
