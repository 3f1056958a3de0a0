"""
Retry executor for Decade Restyle
Bounded retry with linear backoff around a single Gemini generation call
"""

import asyncio
import time
from typing import Optional, Callable, Awaitable

from google.genai import types

from .errors import (
    ErrorClass,
    ExhaustedRetries,
    MissingCredential,
    TerminalRemoteError,
    UnclassifiedRemoteError,
    classify_remote_error,
    describe_remote_error,
    remote_error_fields,
)
from .gemini_client import GeminiClient
from .logger import RunLogger
from .models import GenerationRequest, ImagePayload

MISSING_KEY_MESSAGE = "API Key is missing. Please check your environment configuration."


class RetryExecutor:
    """Runs generation calls, retrying transient failures only"""

    def __init__(
        self,
        client: GeminiClient,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None
    ):
        self.client = client
        self.sleep = sleep or asyncio.sleep

    @property
    def max_attempts(self) -> int:
        return max(1, self.client.settings.max_attempts)

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after a transient failure on the given attempt"""
        return self.client.settings.backoff_ms * attempt / 1000.0

    async def execute(
        self,
        image: ImagePayload,
        prompt_text: str,
        logger: Optional[RunLogger] = None,
        phase: str = "primary"
    ) -> types.GenerateContentResponse:
        """
        Call the model until it answers, a terminal error occurs, or attempts run out

        Args:
            image: Validated input payload
            prompt_text: Prompt for this cycle (primary or fallback)
            logger: Run logger for the enclosing orchestration call
            phase: Label used in log entries

        Returns:
            The raw model reply of the first successful attempt

        Raises:
            MissingCredential: No credential could be resolved
            TerminalRemoteError: Quota, billing, auth or not-found failure
            UnclassifiedRemoteError: Failure that is neither terminal nor transient
            ExhaustedRetries: Every attempt hit a transient failure
        """
        logger = logger or RunLogger()

        if not self.client.resolve_api_key():
            raise MissingCredential(MISSING_KEY_MESSAGE)

        request = GenerationRequest(image=image, prompt_text=prompt_text)
        max_attempts = self.max_attempts

        for attempt in range(1, max_attempts + 1):
            api_key = self.client.resolve_api_key()
            if not api_key:
                raise MissingCredential(MISSING_KEY_MESSAGE)

            start_time = time.time()
            try:
                reply = await self.client.generate_content(request, api_key)
            except Exception as e:
                latency = time.time() - start_time
                error_class = classify_remote_error(e)
                detail = describe_remote_error(e)
                code, status = remote_error_fields(e)
                logger.record_attempt(
                    phase, attempt, self.client.model, latency,
                    success=False, error_class=error_class.value, error=detail
                )

                if error_class is ErrorClass.TERMINAL:
                    raise TerminalRemoteError(detail, code=code, status=status) from e

                if error_class is ErrorClass.UNCLASSIFIED:
                    raise UnclassifiedRemoteError(detail, code=code, status=status) from e

                if attempt < max_attempts:
                    delay = self.backoff_delay(attempt)
                    logger.record_backoff(attempt, delay)
                    await self.sleep(delay)
                    continue

                raise ExhaustedRetries(
                    f"Maximum retries reached for Gemini API: {detail}",
                    code=code,
                    status=status
                ) from e

            logger.record_attempt(
                phase, attempt, self.client.model, time.time() - start_time, success=True
            )
            return reply

        raise ExhaustedRetries("Maximum retries reached for Gemini API.")
