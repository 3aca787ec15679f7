"""
mathcoach/core/llm.py
Gemini generateContent client over plain HTTPS.

One POST per call, no retry. Every failure is raised as UpstreamError
so callers only ever see the pipeline's error taxonomy.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from mathcoach.core.config import get_api_base, get_api_key, get_model, get_timeout
from mathcoach.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def generate_text(
        self,
        prompt: str,
        generation_config: Optional[Dict[str, Any]] = None,
        safety_settings: Optional[list] = None,
    ) -> str:
        """
        Send one prompt and return candidates[0].content.parts[0].text.
        """
        body: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if generation_config:
            body["generationConfig"] = generation_config
        if safety_settings:
            body["safetySettings"] = safety_settings

        logger.info(f"Gemini request: model={self.model} prompt_chars={len(prompt)}")
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.post(
                    self.url,
                    params={"key": self.api_key},
                    headers={"Content-Type": "application/json"},
                    json=body,
                )
        except httpx.HTTPError as exc:
            logger.error(f"Gemini transport failed: {exc}")
            raise UpstreamError(f"Could not reach generation service: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.is_error:
            message = _error_message(data) or f"Generation service returned HTTP {resp.status_code}"
            logger.error(f"Gemini error {resp.status_code}: {message}")
            raise UpstreamError(message, status_code=resp.status_code)

        text = _candidate_text(data)
        if text is None:
            logger.error(f"Gemini envelope malformed: {str(data)[:300]}")
            raise UpstreamError("Invalid response format from API", status_code=resp.status_code)
        return text


def _error_message(data: Any) -> Optional[str]:
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return None


def _candidate_text(data: Any) -> Optional[str]:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text else None


def get_client() -> GeminiClient:
    return GeminiClient(
        api_key=get_api_key(),
        model=get_model(),
        api_base=get_api_base(),
        timeout=get_timeout(),
    )
