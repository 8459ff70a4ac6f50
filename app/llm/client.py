# app/llm/client.py
import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError

from app.config import GENERATION_CONFIG, Settings
from app.errors import (
    AuthError,
    RateLimitError,
    UnknownError,
    UpstreamError,
)
from app.models import GeminiResponse

logger = logging.getLogger(__name__)


class GeminiClient:
    """
    Client for the Gemini generateContent REST endpoint.

    Sends one request per call and turns every failure into a
    classified DocumentQAError. Never retries.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: endpoint, model, key and timeout
            http_client: shared AsyncClient (tests pass one with a MockTransport)
        """
        self.settings = settings
        self._http_client = http_client

    def _client(self) -> httpx.AsyncClient:

        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.settings.request_timeout
            )

        return self._http_client

    async def aclose(self):

        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    @staticmethod
    def build_payload(prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": dict(GENERATION_CONFIG),
        }

    async def generate(self, prompt: str) -> str:
        """
        Send the prompt and return the first candidate's text verbatim.

        Raises:
            AuthError: 401/403
            RateLimitError: 429
            UpstreamError: error object in the body, or no candidates
            UnknownError: transport failure or anything unrecognized
        """

        start = time.time()

        try:

            response = await self._client().post(
                self.settings.endpoint_url,
                params={"key": self.settings.api_key},
                json=self.build_payload(prompt),
                headers={"Content-Type": "application/json"},
                timeout=self.settings.request_timeout,
            )

        except httpx.TimeoutException as e:
            raise UnknownError(f"Request timed out ({type(e).__name__})")

        except httpx.HTTPError as e:
            raise UnknownError(str(e) or type(e).__name__)

        latency = time.time() - start

        logger.info(
            "LLM provider responded",
            extra={
                "provider": "gemini",
                "model": self.settings.model,
                "status_code": response.status_code,
                "latency_seconds": round(latency, 3),
            },
        )

        if response.is_error:
            raise classify_error_response(response)

        return parse_response(response)


def _parse_body(response: httpx.Response) -> Optional[GeminiResponse]:

    try:
        return GeminiResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return None


def classify_error_response(response: httpx.Response) -> Exception:

    status = response.status_code

    body = _parse_body(response)

    upstream_message = body.error.message if body and body.error else None

    if status in (401, 403):
        return AuthError(status, upstream_message)

    if status == 429:
        return RateLimitError(status, upstream_message)

    if upstream_message:
        return UpstreamError(
            upstream_message,
            status_code=status,
            upstream_status=body.error.status,
        )

    return UnknownError(
        f"Request failed with status code {status}",
        status_code=status,
    )


def parse_response(response: httpx.Response) -> str:

    body = _parse_body(response)

    if body is None:
        raise UnknownError(
            "Unreadable response body",
            status_code=response.status_code,
        )

    if body.error is not None:
        raise UpstreamError(
            body.error.message or "Unknown upstream error",
            status_code=response.status_code,
            upstream_status=body.error.status,
        )

    text = body.first_text()

    if text is None:
        raise UpstreamError(status_code=response.status_code)

    return text
