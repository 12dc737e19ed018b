"""Ollama ``/api/generate`` provider (single non-streaming call per prompt).

Transport failures are folded into a ``GenerationResult`` with an error
type instead of leaking httpx exceptions to the HTTP layer:

    connection refused      -> backend-unavailable
    HTTP 404 from backend   -> model-not-found
    anything else           -> provider-error
"""
from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from chat_core import metrics
from chat_core.config.schemas.ollama import DEFAULT_API_URL

from .provider import ModelInfo, ModelProvider
from .types import GenerationResult

logger = logging.getLogger("chat_core.llm")


class OllamaProvider(ModelProvider):
    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        model: str = "gemma",
        temperature: float = 0.7,
        timeout_s: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self.model = model
        self.temperature = temperature
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout_s),
            transport=transport,
        )

    def payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "temperature": self.temperature,
        }

    def generate(self, prompt: str) -> GenerationResult:
        t0 = time.time()
        err_type: str | None = None
        message: str | None = None
        text = ""
        try:
            resp = self._client.post(self.api_url, json=self.payload(prompt))
            resp.raise_for_status()
            body = resp.json()
            text = str(body["response"]).strip()
        except httpx.ConnectError as e:
            err_type, message = "backend-unavailable", str(e)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            err_type = "model-not-found" if status == 404 else "provider-error"
            message = f"HTTP {status}: {e.response.text[:200]}"
        except httpx.HTTPError as e:
            err_type, message = "provider-error", f"{e.__class__.__name__}: {e}"
        except (ValueError, KeyError, TypeError) as e:
            # body not JSON or missing the "response" field
            err_type, message = "provider-error", f"bad response body: {e!r}"
        total_ms = int((time.time() - t0) * 1000)
        metrics.observe("inference_latency_ms", total_ms, {"model": self.model})
        if err_type is None:
            metrics.inc(
                "inference_request_total", {"model": self.model, "status": "ok"}
            )
            return GenerationResult.ok(
                text=text, total_ms=total_ms, model_id=self.model
            )
        metrics.inc(
            "inference_request_total", {"model": self.model, "status": err_type}
        )
        logger.warning(
            "inference failed model=%s url=%s type=%s: %s",
            self.model,
            self.api_url,
            err_type,
            message,
        )
        return GenerationResult.failure(
            err_type, message, total_ms=total_ms, model_id=self.model
        )

    def info(self) -> ModelInfo:
        return ModelInfo(
            id=self.model,
            backend="ollama",
            endpoint=self.api_url,
            metadata={"temperature": self.temperature, "stream": False},
        )

    def close(self) -> None:
        self._client.close()


__all__ = ["OllamaProvider"]
