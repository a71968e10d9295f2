from __future__ import annotations
import httpx
from typing import Any, Dict, Optional, Protocol

from .errors import GeminiError
from .settings import Settings, settings as default_settings


class ModelClient(Protocol):
	async def generate(self, prompt: str) -> str: ...

	async def aclose(self) -> None: ...


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		model: Optional[str] = None,
		settings: Optional[Settings] = None,
		base_url: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		cfg = settings or default_settings
		self.api_key = api_key or cfg.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or cfg.gemini_model
		self.provider = cfg.gemini_provider
		self.generation_config: Dict[str, Any] = cfg.generation_config
		if self.provider == "vertex":
			region = cfg.vertex_region
			project = cfg.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = httpx.AsyncClient(timeout=cfg.model_timeout_seconds, transport=transport)

	async def __aenter__(self) -> "GeminiClient":
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()

	async def generate(self, prompt: str) -> str:
		payload: Dict[str, Any] = {
			"contents": [{"role": "user", "parts": [{"text": prompt}]}],
			"generationConfig": self.generation_config,
		}
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
		except httpx.TimeoutException as err:
			raise GeminiError("Gemini request timed out") from err
		except httpx.RequestError as err:
			raise GeminiError(f"Gemini request failed: {err.__class__.__name__}") from err
		if r.status_code >= 400:
			raise GeminiError(_describe_http_error(r))
		try:
			data = r.json()
		except ValueError as err:
			raise GeminiError("Unexpected Gemini response: body is not JSON") from err
		return _extract_text(data)

	async def aclose(self) -> None:
		await self._client.aclose()


def _describe_http_error(r: httpx.Response) -> str:
	# Upstream bodies look like {"error": {"code": 429, "status": "RESOURCE_EXHAUSTED", "message": "..."}}
	status = ""
	message = ""
	try:
		err = r.json().get("error") or {}
		status = str(err.get("status") or "")
		message = str(err.get("message") or "")
	except (ValueError, AttributeError):
		pass
	text = f"Gemini HTTP {r.status_code} {status}: {message}".strip()
	if r.status_code == 429 or status == "RESOURCE_EXHAUSTED":
		text += " (quota exceeded)"
	return text


def _extract_text(data: Dict[str, Any]) -> str:
	feedback = data.get("promptFeedback") or {}
	block_reason = feedback.get("blockReason")
	if block_reason:
		raise GeminiError(f"Prompt blocked by safety filters ({block_reason})")
	candidates = data.get("candidates") or []
	if not candidates:
		raise GeminiError("Unexpected Gemini response: no candidates")
	candidate = candidates[0]
	if candidate.get("finishReason") == "SAFETY":
		raise GeminiError("Response blocked by safety filters")
	try:
		parts = candidate["content"]["parts"]
	except (KeyError, TypeError) as err:
		raise GeminiError("Unexpected Gemini response: missing content") from err
	return "".join(str(p.get("text", "")) for p in parts if isinstance(p, dict))
