# app/prompts/prompt_builder.py

from typing import Optional

from app.config import MAX_PROMPT_DOCUMENT_CHARS
from app.prompts.system_prompts import (
    DEFAULT_DOCUMENT_NAME,
    DOCUMENT_INSTRUCTIONS,
    DOCUMENT_QA_SYSTEM_PROMPT,
    NO_DOCUMENT_INSTRUCTIONS,
    TRUNCATION_MARKER,
)


def truncate_document(
    document_text: str,
    max_chars: int = MAX_PROMPT_DOCUMENT_CHARS,
) -> str:
    """Cut to max_chars and mark the cut; shorter text is returned as-is."""

    if len(document_text) <= max_chars:
        return document_text

    return document_text[:max_chars] + TRUNCATION_MARKER


def build_document_prompt(
    question: str,
    document_text: Optional[str] = None,
    document_name: Optional[str] = None,
    max_chars: int = MAX_PROMPT_DOCUMENT_CHARS,
) -> str:
    """
    Build the single instruction block sent to the model.

    Order: preamble, document (bounded), instructions, question last.
    """

    prompt = DOCUMENT_QA_SYSTEM_PROMPT

    if document_text:

        content = truncate_document(document_text, max_chars)

        prompt += (
            f"\n\nDocument Content (from file: "
            f"{document_name or DEFAULT_DOCUMENT_NAME}):\n{content}\n\n"
        )
        prompt += DOCUMENT_INSTRUCTIONS

    else:

        prompt += NO_DOCUMENT_INSTRUCTIONS

    return f"{prompt}\n\nUser Question: {question}"
