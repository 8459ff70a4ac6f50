# app/memory/store.py

"""
In-memory session state.

Holds the current DocumentRecord, the append-only message log and the
loading flag. Nothing here is persisted; a restart starts empty.

This is also the dispatch boundary: every failure raised by the
QueryDispatcher is converted here into one user-visible assistant
message, and the loading flag is released on every exit path.
"""

import logging
import uuid
from typing import List, Optional

from app.errors import DocumentQAError, UnknownError
from app.models import ChatMessage, DocumentRecord
from app.prompts.system_prompts import ERROR_MESSAGE_PREFIX, WELCOME_MESSAGE_TEMPLATE
from app.workflow.document_qa import QueryDispatcher

logger = logging.getLogger(__name__)


class NoDocumentLoaded(RuntimeError):
    """Question asked before any upload."""


class RequestInFlight(RuntimeError):
    """Question asked while the previous one is still loading."""


def _message_id() -> str:
    return uuid.uuid4().hex


class ChatSession:
    """
    Single-user Q&A session.

    Invariants:
    • messages only ever grow, in insertion order
    • is_loading is False whenever ask() has returned or raised
    • a new upload replaces the document wholesale
    """

    def __init__(self, dispatcher: QueryDispatcher):

        self.dispatcher = dispatcher
        self.document: Optional[DocumentRecord] = None
        self._messages: List[ChatMessage] = []
        self.is_loading = False

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    def _append(self, role: str, content: str, error_kind: Optional[str] = None) -> ChatMessage:

        message = ChatMessage(
            id=_message_id(),
            role=role,
            content=content,
            error_kind=error_kind,
        )

        self._messages.append(message)

        return message

    def load_document(self, record: DocumentRecord) -> ChatMessage:

        previous = self.document.id if self.document else None

        self.document = record

        logger.info(
            "Document loaded into session",
            extra={"doc_id": record.id, "replaced_doc_id": previous},
        )

        return self._append(
            "assistant",
            WELCOME_MESSAGE_TEMPLATE.format(name=record.name, size_kb=record.size / 1024),
        )

    async def ask(self, question: str, request_id: Optional[str] = None) -> ChatMessage:
        """
        Append the question, dispatch it, append and return the reply.

        Dispatch failures never escape: they become an assistant message
        with error_kind set.

        Raises:
            NoDocumentLoaded: no upload yet
            RequestInFlight: previous question still loading
            ValueError: blank question
        """

        question = question.strip()

        if not question:
            raise ValueError("Question cannot be empty")

        if self.document is None:
            raise NoDocumentLoaded("Upload a document before asking questions")

        if self.is_loading:
            raise RequestInFlight("A question is already being answered")

        document = self.document

        self._append("user", question)

        self.is_loading = True

        try:

            answer = await self.dispatcher.ask(
                question,
                document_text=document.content,
                document_name=document.name,
                request_id=request_id,
            )

            return self._append("assistant", answer)

        except DocumentQAError as e:

            return self._append(
                "assistant",
                ERROR_MESSAGE_PREFIX + e.user_message,
                error_kind=e.kind,
            )

        except Exception as e:

            logger.error(
                "Unexpected dispatch failure",
                extra={"request_id": request_id, "error_type": type(e).__name__},
                exc_info=True,
            )

            wrapped = UnknownError(str(e))

            return self._append(
                "assistant",
                ERROR_MESSAGE_PREFIX + wrapped.user_message,
                error_kind=wrapped.kind,
            )

        finally:

            self.is_loading = False
