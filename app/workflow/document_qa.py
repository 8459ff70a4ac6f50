# app/workflow/document_qa.py
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from app.config import MIN_API_KEY_LENGTH, PLACEHOLDER_API_KEY, Settings
from app.errors import ConfigurationError, DocumentQAError
from app.llm.client import GeminiClient
from app.llm.rate_limiter import RateLimiter
from app.observability.logger import (
    log_request_complete,
    log_request_error,
    log_request_start,
)
from app.prompts.prompt_builder import build_document_prompt
from app.prompts.system_prompts import DEMO_RESPONSE_TEMPLATE

logger = logging.getLogger(__name__)


def check_credential(api_key: Optional[str]) -> None:
    """Reject a missing or placeholder key before any other work."""

    if not api_key or api_key == PLACEHOLDER_API_KEY:
        raise ConfigurationError(ConfigurationError.MISSING)


def validate_credential_shape(api_key: str) -> None:

    if "your_" in api_key or len(api_key) < MIN_API_KEY_LENGTH:
        raise ConfigurationError(ConfigurationError.INVALID)


class QueryDispatcher:
    """
    One question-and-answer round trip to the model endpoint.

    Per call: credential check → demo short-circuit → credential shape →
    rate-limit wait → prompt → network call → response validation.
    Failures surface as DocumentQAError subclasses; nothing is retried.
    """

    def __init__(
        self,
        settings: Settings,
        rate_limiter: Optional[RateLimiter] = None,
        llm_client: Optional[GeminiClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings
        self.rate_limiter = rate_limiter or RateLimiter(settings.min_request_interval)
        self.llm_client = llm_client or GeminiClient(settings)
        self._sleep = sleep

    @property
    def demo_mode(self) -> bool:
        return self.settings.demo_mode

    async def demo_response(self, question: str) -> str:

        await self._sleep(self.settings.demo_delay)

        return DEMO_RESPONSE_TEMPLATE.format(question=question)

    async def ask(
        self,
        question: str,
        document_text: Optional[str] = None,
        document_name: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> str:

        api_key = self.settings.api_key

        check_credential(api_key)

        if self.demo_mode:
            logger.info("Demo mode response", extra={"question_length": len(question)})
            return await self.demo_response(question)

        validate_credential_shape(api_key)

        await self.rate_limiter.wait_if_needed()

        prompt = build_document_prompt(
            question,
            document_text=document_text,
            document_name=document_name,
            max_chars=self.settings.max_prompt_document_chars,
        )

        start = time.time()

        log_request_start(
            logger,
            request_id=request_id,
            endpoint="dispatch",
            prompt_length=len(prompt),
            document_length=len(document_text or ""),
        )

        try:

            answer = await self.llm_client.generate(prompt)

        except DocumentQAError as e:

            log_request_error(
                logger,
                request_id=request_id,
                endpoint="dispatch",
                error=e,
                expected=True,
                kind=e.kind,
                status_code=e.status_code,
            )

            raise

        log_request_complete(
            logger,
            request_id=request_id,
            endpoint="dispatch",
            latency_seconds=time.time() - start,
            answer_length=len(answer),
        )

        return answer
