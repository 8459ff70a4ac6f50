# app/models.py
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ========== SESSION STATE ==========

class DocumentRecord(BaseModel):
    """A normalized upload held in memory for the session."""
    id: str
    name: str
    media_type: str
    size: int = Field(..., ge=0)
    content: str = Field(..., min_length=1)
    uploaded_at: datetime = Field(default_factory=_utcnow)


class ChatMessage(BaseModel):
    """One entry of the append-only message log."""
    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)
    error_kind: Optional[str] = None


# ========== API PAYLOADS ==========

class UploadResponse(BaseModel):
    """Response after uploading a document."""
    document_id: str
    filename: str
    media_type: str
    size: int
    characters: int
    segments_created: int
    message: str = "Document processed successfully and ready for Q&A"


class AskRequest(BaseModel):
    """Request to ask a question about the current document."""
    question: str = Field(..., min_length=1, max_length=4000)

    @field_validator("question")
    @classmethod
    def validate_question(cls, v):
        """Ensure question is not just whitespace."""
        if not v.strip():
            raise ValueError("Question cannot be empty or only whitespace")
        return v.strip()


class AskResponse(BaseModel):
    """Response after asking a question."""
    answer: str
    document_id: str
    error: bool = False
    error_kind: Optional[str] = None


class DocumentInfo(BaseModel):
    """Metadata of the document currently loaded."""
    document_id: str
    filename: str
    media_type: str
    size: int
    characters: int
    upload_timestamp: datetime


class MessagesResponse(BaseModel):
    messages: List[ChatMessage]
    total_messages: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    document_loaded: bool
    total_messages: int
    demo_mode: bool
    is_loading: bool


# ========== GEMINI WIRE FORMAT ==========

class GeminiPart(BaseModel):
    text: Optional[str] = None


class GeminiContent(BaseModel):
    parts: List[GeminiPart] = []

    @field_validator("parts", mode="before")
    @classmethod
    def null_parts_as_empty(cls, v):
        return [] if v is None else v


class GeminiCandidate(BaseModel):
    content: Optional[GeminiContent] = None


class GeminiErrorBody(BaseModel):
    message: Optional[str] = None
    status: Optional[str] = None
    code: Optional[int] = None


class GeminiResponse(BaseModel):
    """generateContent response body; unknown fields are ignored."""
    candidates: List[GeminiCandidate] = []
    error: Optional[GeminiErrorBody] = None

    @field_validator("candidates", mode="before")
    @classmethod
    def null_candidates_as_empty(cls, v):
        """The API may send `"candidates": null` when nothing was generated."""
        return [] if v is None else v

    def first_text(self) -> Optional[str]:
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text
