# app/memory/chunker.py

import logging
import re
from typing import List

from app.config import MAX_SEGMENT_CHARS

logger = logging.getLogger(__name__)

_SENTENCE_END_RE = re.compile(r"[.!?]+")
_JOINER = ". "


def chunk_text(text: str, max_chunk_size: int = MAX_SEGMENT_CHARS) -> List[str]:
    """
    Split text into bounded segments along sentence boundaries.

    Sentences (split on runs of . ! ?) are accumulated, joined with ". ",
    until the next one would push the segment past max_chunk_size. A single
    sentence longer than the budget becomes its own oversized segment.

    Not used by the prompt path: the upload surface only reports how many
    segments a document would produce.

    Guarantees:
    • deterministic segment generation
    • no empty segments
    """

    if max_chunk_size <= 0:
        raise ValueError(f"Invalid chunk size: {max_chunk_size}")

    if not text or not text.strip():
        logger.warning("Chunking skipped: empty text")
        return []

    chunks: List[str] = []

    current = ""

    for sentence in _SENTENCE_END_RE.split(text):

        sentence = sentence.strip()

        if not sentence:
            continue

        if current and len(current) + len(_JOINER) + len(sentence) > max_chunk_size:

            chunks.append(current)

            current = sentence

        else:

            current += (_JOINER if current else "") + sentence

    if current:
        chunks.append(current)

    logger.info(
        "Chunking completed",
        extra={
            "total_characters": len(text),
            "chunk_size": max_chunk_size,
            "chunks_created": len(chunks),
        },
    )

    return chunks
