from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
import logging
import time

from app.config import get_settings
from app.errors import EmptyContentError, UnsupportedInputError
from app.llm.rate_limiter import RateLimiter
from app.memory.chunker import chunk_text
from app.memory.loader import ingest, validate_file_size
from app.memory.store import ChatSession, NoDocumentLoaded, RequestInFlight
from app.models import (
    AskRequest,
    AskResponse,
    DocumentInfo,
    HealthResponse,
    MessagesResponse,
    UploadResponse,
)
from app.observability.logger import log_request_complete, log_request_start
from app.workflow.document_qa import QueryDispatcher


# ============================================================
# LOGGER
# ============================================================

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================
# SESSION (single user, in memory)
# ============================================================

settings = get_settings()

chat_session = ChatSession(
    dispatcher=QueryDispatcher(
        settings=settings,
        rate_limiter=RateLimiter(settings.min_request_interval),
    )
)


def get_session() -> ChatSession:
    return chat_session


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


# ============================================================
# HEALTH
# ============================================================

@router.get("/health", response_model=HealthResponse)
def health_check(session: ChatSession = Depends(get_session)):

    return HealthResponse(
        status="healthy",
        document_loaded=session.document is not None,
        total_messages=len(session.messages),
        demo_mode=session.dispatcher.demo_mode,
        is_loading=session.is_loading,
    )


# ============================================================
# UPLOAD DOCUMENT
# ============================================================

@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    request: Request,
    file: UploadFile = File(...),
    session: ChatSession = Depends(get_session),
):

    start_time = time.time()

    request_id = _request_id(request)

    log_request_start(logger, request_id, "upload", file_name=file.filename)

    upload_settings = session.dispatcher.settings

    try:

        # reject on the declared size before reading the body
        if file.size is not None:
            validate_file_size(file.size, upload_settings)

        file_bytes = await file.read()

        record = ingest(
            file_bytes,
            filename=file.filename or "uploaded file",
            media_type=file.content_type,
            settings=upload_settings,
        )

    except UnsupportedInputError as e:

        status_code = 413 if e.reason == UnsupportedInputError.SIZE else 415

        raise HTTPException(status_code=status_code, detail=e.message)

    except EmptyContentError as e:

        raise HTTPException(status_code=422, detail=e.message)

    session.load_document(record)

    segments = chunk_text(record.content)

    log_request_complete(
        logger,
        request_id,
        "upload",
        time.time() - start_time,
        doc_id=record.id,
        segments_created=len(segments),
    )

    return UploadResponse(
        document_id=record.id,
        filename=record.name,
        media_type=record.media_type,
        size=record.size,
        characters=len(record.content),
        segments_created=len(segments),
    )


# ============================================================
# ASK QUESTION
# ============================================================

@router.post("/ask", response_model=AskResponse)
async def ask_question(
    payload: AskRequest,
    request: Request,
    session: ChatSession = Depends(get_session),
):

    document_id = session.document.id if session.document else None

    try:

        message = await session.ask(payload.question, request_id=_request_id(request))

    except NoDocumentLoaded as e:

        raise HTTPException(status_code=400, detail=str(e))

    except RequestInFlight as e:

        raise HTTPException(status_code=409, detail=str(e))

    return AskResponse(
        answer=message.content,
        document_id=document_id,
        error=message.error_kind is not None,
        error_kind=message.error_kind,
    )


# ============================================================
# CURRENT DOCUMENT
# ============================================================

@router.get("/document", response_model=DocumentInfo)
def get_document(session: ChatSession = Depends(get_session)):

    record = session.document

    if record is None:

        raise HTTPException(
            status_code=404,
            detail="No document loaded",
        )

    return DocumentInfo(
        document_id=record.id,
        filename=record.name,
        media_type=record.media_type,
        size=record.size,
        characters=len(record.content),
        upload_timestamp=record.uploaded_at,
    )


# ============================================================
# MESSAGE LOG
# ============================================================

@router.get("/messages", response_model=MessagesResponse)
def list_messages(session: ChatSession = Depends(get_session)):

    messages = session.messages

    return MessagesResponse(
        messages=messages,
        total_messages=len(messages),
    )
