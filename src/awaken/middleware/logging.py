"""
Logging middleware for request/response tracking.
"""

import time
import json
import uuid
import logging
from datetime import datetime

from .base import Middleware
from ..core.types import CompletionRequest, CompletionResponse
from ..core.exceptions import status_code_of

logger = logging.getLogger(__name__)


class LoggingMiddleware(Middleware):
    """
    Middleware that logs requests, responses, and errors per model attempt.
    """

    def __init__(
        self,
        log_requests: bool = True,
        log_responses: bool = True,
        log_errors: bool = True,
        include_content: bool = False,
        max_content_length: int = 500
    ):
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.log_errors = log_errors
        self.include_content = include_content
        self.max_content_length = max_content_length

    async def process_request(
        self,
        request: CompletionRequest,
        context: dict
    ) -> CompletionRequest:
        """Log outgoing request."""
        context['request_start_time'] = time.time()
        context['request_id'] = self._generate_request_id()

        if self.log_requests:
            log_data = {
                'request_id': context['request_id'],
                'timestamp': datetime.now().isoformat(),
                'model': context.get('model'),
                'messages_count': len(request.messages),
                'temperature': request.temperature,
                'max_tokens': request.max_tokens,
            }

            if self.include_content and request.messages:
                log_data['messages_preview'] = [
                    {'role': msg.role.value, 'content': self._truncate(msg.content)}
                    for msg in request.messages[:3]
                ]

            logger.debug(f"LLM Request: {json.dumps(log_data, ensure_ascii=False)}")

        return request

    async def process_response(
        self,
        response: CompletionResponse,
        context: dict
    ) -> CompletionResponse:
        """Log response and timing."""
        if self.log_responses:
            duration = time.time() - context.get('request_start_time', time.time())

            log_data = {
                'request_id': context.get('request_id', 'unknown'),
                'duration_seconds': round(duration, 3),
                'model': response.model,
                'provider': response.provider,
            }

            if response.usage:
                log_data['usage'] = response.usage

            if self.include_content:
                log_data['content_preview'] = self._truncate(response.content)

            logger.info(f"LLM Response: {json.dumps(log_data, ensure_ascii=False)}")

        return response

    async def process_error(
        self,
        error: Exception,
        context: dict
    ) -> Exception:
        """Log errors."""
        if self.log_errors:
            duration = time.time() - context.get('request_start_time', time.time())

            log_data = {
                'request_id': context.get('request_id', 'unknown'),
                'duration_seconds': round(duration, 3),
                'model': context.get('model'),
                'error_type': type(error).__name__,
                'status_code': status_code_of(error),
                'error_message': str(error),
            }

            logger.warning(f"LLM Error: {json.dumps(log_data, ensure_ascii=False)}")

        return error

    def _truncate(self, content: str) -> str:
        if len(content) > self.max_content_length:
            return content[:self.max_content_length] + "..."
        return content

    def _generate_request_id(self) -> str:
        """Generate a unique request ID."""
        return f"req_{uuid.uuid4().hex[:12]}"
