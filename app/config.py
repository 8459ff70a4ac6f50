# app/config.py
"""
Configuration for the Document Q&A service.

This file centralizes all tunable parameters for ingestion and dispatch.
Module constants are the defaults; get_settings() applies environment
overrides on top of them.
"""

import os
from typing import List

from pydantic import BaseModel, Field


# ========== DOCUMENT INGESTION ==========

# File upload limits
MAX_FILE_SIZE_MB = 10

SUPPORTED_FILE_TYPES = [
    "application/pdf",
    "text/plain",
    "text/markdown",
    "text/html",
]
ALLOWED_FILE_EXTENSIONS = [".pdf", ".txt", ".md", ".html"]

# Segmentation budget (characters per segment)
MAX_SEGMENT_CHARS = 2000


# ========== LLM CONFIGURATION ==========

GEMINI_MODEL = "gemini-1.5-flash"
GEMINI_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "{model}:generateContent"
)

# Sentinel credentials
PLACEHOLDER_API_KEY = "your_google_ai_api_key_here"
DEMO_API_KEY = "demo-mode"
MIN_API_KEY_LENGTH = 20

# Generation parameters (static, not tunable per call)
GENERATION_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 1000,
    "topP": 0.8,
    "topK": 10,
}


# ========== DISPATCH CONSTRAINTS ==========

# Minimum wall-clock spacing between two dispatches
MIN_REQUEST_INTERVAL_SECONDS = 2.0

# Document characters embedded in a single prompt
MAX_PROMPT_DOCUMENT_CHARS = 8000

# Network timeout for one model call
REQUEST_TIMEOUT_SECONDS = 60.0

# Synthetic latency of the demo response
DEMO_RESPONSE_DELAY_SECONDS = 1.0


# ========== OBSERVABILITY ==========

LOG_LEVEL = "INFO"
LOG_FILE = None


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    """Runtime configuration consumed by the ingestion and dispatch layers."""

    api_key: str = ""
    endpoint: str = GEMINI_ENDPOINT
    model: str = GEMINI_MODEL
    max_file_size: int = Field(MAX_FILE_SIZE_MB * 1024 * 1024, gt=0)
    supported_file_types: List[str] = Field(
        default_factory=lambda: list(SUPPORTED_FILE_TYPES)
    )
    allowed_file_extensions: List[str] = Field(
        default_factory=lambda: list(ALLOWED_FILE_EXTENSIONS)
    )
    min_request_interval: float = Field(MIN_REQUEST_INTERVAL_SECONDS, ge=0)
    max_prompt_document_chars: int = Field(MAX_PROMPT_DOCUMENT_CHARS, gt=0)
    request_timeout: float = Field(REQUEST_TIMEOUT_SECONDS, gt=0)
    demo_delay: float = Field(DEMO_RESPONSE_DELAY_SECONDS, ge=0)

    @property
    def endpoint_url(self) -> str:
        return self.endpoint.format(model=self.model)

    @property
    def demo_mode(self) -> bool:
        return self.api_key == DEMO_API_KEY


def get_settings() -> Settings:
    """
    Build Settings from environment variables.

    Unset variables keep the module defaults above.
    """

    overrides = {"api_key": os.getenv("GEMINI_API_KEY", "")}

    if os.getenv("GEMINI_ENDPOINT"):
        overrides["endpoint"] = os.getenv("GEMINI_ENDPOINT")

    if os.getenv("GEMINI_MODEL"):
        overrides["model"] = os.getenv("GEMINI_MODEL")

    if os.getenv("MAX_FILE_SIZE_MB"):
        overrides["max_file_size"] = int(
            float(os.getenv("MAX_FILE_SIZE_MB")) * 1024 * 1024
        )

    if os.getenv("SUPPORTED_FILE_TYPES"):
        overrides["supported_file_types"] = _split_list(
            os.getenv("SUPPORTED_FILE_TYPES")
        )

    if os.getenv("ALLOWED_FILE_EXTENSIONS"):
        overrides["allowed_file_extensions"] = _split_list(
            os.getenv("ALLOWED_FILE_EXTENSIONS")
        )

    if os.getenv("MIN_REQUEST_INTERVAL_SECONDS"):
        overrides["min_request_interval"] = float(
            os.getenv("MIN_REQUEST_INTERVAL_SECONDS")
        )

    if os.getenv("MAX_PROMPT_DOCUMENT_CHARS"):
        overrides["max_prompt_document_chars"] = int(
            os.getenv("MAX_PROMPT_DOCUMENT_CHARS")
        )

    if os.getenv("REQUEST_TIMEOUT_SECONDS"):
        overrides["request_timeout"] = float(os.getenv("REQUEST_TIMEOUT_SECONDS"))

    return Settings(**overrides)


# ========== DESIGN TRADE-OFFS (DOCUMENTED) ==========

"""
TRADE-OFF DECISIONS:

1. MAX_PROMPT_DOCUMENT_CHARS = 8000:
   - Whole document goes into one prompt, no retrieval
   - Larger budgets hit upstream token and rate limits sooner
   - Truncation is always marked in the prompt

2. MIN_REQUEST_INTERVAL_SECONDS = 2.0:
   - Client-side spacing only, upstream 429s can still happen
   - Spacing is measured between sends, not completions

3. REQUEST_TIMEOUT_SECONDS = 60:
   - Long documents can take a while to answer
   - A hung call would otherwise keep the session loading forever
"""
