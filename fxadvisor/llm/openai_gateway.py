"""Language-model gateway — OpenAI-compatible chat-completions client.

Sends a system prompt plus one user turn (optionally with a chart image)
and returns the generated text.  Calls carry a timeout and are not
retried; failures map onto the ``GatewayFailure`` family.
"""

import base64
import logging
from typing import Optional

import httpx

from fxadvisor.config import Config
from fxadvisor.errors import (
    GatewayAuthFailure,
    GatewayBadRequest,
    GatewayFailure,
    GatewayRateLimited,
    GatewayTimeout,
)

logger = logging.getLogger("fxadvisor")

NO_RESPONSE_TEXT = "No response from AI."


class OpenAIGateway:
    """Async client for ``POST /chat/completions``."""

    def __init__(self, config: Config) -> None:
        self._url = f"{config.openai_base_url}/chat/completions"
        self._model = config.openai_model
        self._vision_model = config.openai_vision_model
        self._timeout = config.request_timeout_seconds
        self._headers = {
            "Authorization": f"Bearer {config.openai_api_key}",
            "Content-Type": "application/json",
        }

    async def _post(self, body: dict) -> dict:
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    self._url,
                    headers=self._headers,
                    json=body,
                    timeout=self._timeout,
                )
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            raise _map_status_error(exc) from exc
        except httpx.TimeoutException as exc:
            logger.warning("Language model call timed out after %.0fs", self._timeout)
            raise GatewayTimeout("Language model request timed out") from exc
        except httpx.TransportError as exc:
            logger.warning("Language model transport error (%s)", exc)
            raise GatewayFailure("Language model service unreachable") from exc
        except ValueError as exc:
            raise GatewayFailure("Language model returned malformed JSON") from exc

    @staticmethod
    def _extract_text(data: dict) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return NO_RESPONSE_TEXT
        return content or NO_RESPONSE_TEXT

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
    ) -> str:
        """Return the model's reply to *user_prompt* under *system_prompt*."""
        body: dict = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if temperature is not None:
            body["temperature"] = temperature
        logger.debug("LLM request model=%s prompt=%r", self._model, user_prompt)
        return self._extract_text(await self._post(body))

    async def complete_with_image(
        self,
        system_prompt: str,
        user_prompt: str,
        image: bytes,
        mime_type: str,
    ) -> str:
        """Return the vision model's reply about *image*."""
        encoded = base64.b64encode(image).decode("ascii")
        body = {
            "model": self._vision_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": user_prompt},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                        },
                    ],
                },
            ],
            "temperature": 0.7,
            "max_tokens": 1000,
        }
        logger.debug(
            "LLM vision request model=%s image_bytes=%d", self._vision_model, len(image),
        )
        return self._extract_text(await self._post(body))


def _map_status_error(exc: httpx.HTTPStatusError) -> GatewayFailure:
    status = exc.response.status_code
    logger.warning("Language model call returned %d", status)
    if status == 429:
        return GatewayRateLimited("Language model rate limit exceeded")
    if status in (401, 403):
        return GatewayAuthFailure("Language model rejected the API credentials")
    if 400 <= status < 500:
        return GatewayBadRequest(f"Language model rejected the request ({status})")
    return GatewayFailure(f"Language model request failed ({status})")
