# src/awaken/providers/openrouter.py
from typing import Dict, Any
import logging

import openai
from openai import AsyncOpenAI

from .base import BaseGatewayProvider
from ..core.types import CompletionRequest, CompletionResponse
from ..core.exceptions import (
    LLMProviderError,
    LLMAuthenticationError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMConnectionError,
)


logger = logging.getLogger(__name__)


class OpenRouterProvider(BaseGatewayProvider):
    """OpenRouter gateway, spoken to through the OpenAI-compatible API"""

    name = "openrouter"

    async def _initialize_provider(self):
        """Initialize the OpenAI SDK client pointed at OpenRouter"""
        # Fallback across models is our job; the SDK must not retry 429s itself.
        self.client = AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            max_retries=0,
            default_headers=self._headers(),
        )
        logger.info(f"OpenRouter client initialized for {self.config.base_url}")

    def _headers(self) -> Dict[str, str]:
        headers = {"X-Title": self.config.app_title}
        if self.config.app_url:
            headers["HTTP-Referer"] = self.config.app_url
        headers.update(self.config.extra_headers)
        return headers

    def _build_params(self, request: CompletionRequest, model: str) -> Dict[str, Any]:
        temperature = request.temperature if request.temperature is not None else self.config.temperature
        params: Dict[str, Any] = {
            "model": model,
            "messages": [msg.to_dict() for msg in request.messages],
            "temperature": temperature,
            **request.extra_params,
        }
        max_tokens = request.max_tokens if request.max_tokens is not None else self.config.max_tokens
        if max_tokens:
            params["max_tokens"] = max_tokens
        return params

    async def _do_complete(self, request: CompletionRequest, model: str) -> CompletionResponse:
        """Generate a completion using OpenRouter"""
        if self.client is None:
            await self.initialize()

        params = self._build_params(request, model)

        try:
            response = await self.client.chat.completions.create(**params)
        except openai.RateLimitError as e:
            raise LLMRateLimitError(f"OpenRouter rate limit exceeded for {model}: {e}", details=e.body) from e
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise LLMAuthenticationError(
                f"OpenRouter authentication failed: {e}", status_code=e.status_code, details=e.body
            ) from e
        except openai.APIStatusError as e:
            raise LLMProviderError(
                f"OpenRouter API error {e.status_code} for {model}: {e}",
                status_code=e.status_code,
                details=e.body,
            ) from e
        except openai.APITimeoutError as e:
            raise LLMTimeoutError(f"OpenRouter request timed out for {model}: {e}") from e
        except openai.APIConnectionError as e:
            raise LLMConnectionError(f"Could not reach OpenRouter: {e}") from e
        except openai.OpenAIError as e:
            raise LLMProviderError(f"OpenRouter completion failed for {model}: {e}") from e

        content = ""
        finish_reason = None
        if response.choices:
            content = response.choices[0].message.content or ""
            finish_reason = response.choices[0].finish_reason

        return CompletionResponse(
            content=content,
            model=response.model or model,
            provider=self.name,
            usage={
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            } if response.usage else {},
            metadata={
                "finish_reason": finish_reason,
                "id": response.id,
                "requested_model": model,
            },
            raw=response.model_dump(),
        )

    async def _close_provider(self):
        """Close the SDK client"""
        if self.client:
            await self.client.close()
            self.client = None
            logger.info("OpenRouter client closed")
