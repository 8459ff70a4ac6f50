# tests/test_loader.py
import pytest

from app.config import Settings
from app.errors import EmptyContentError, UnsupportedInputError
from app.memory.chunker import chunk_text
from app.memory.loader import (
    KIND_HTML,
    KIND_MARKDOWN,
    KIND_PDF,
    KIND_TEXT,
    ingest,
    normalize,
    resolve_kind,
)


@pytest.fixture
def small_settings():
    """Settings with a 1KB upload ceiling."""
    return Settings(max_file_size=1024)


class TestFileValidation:
    """Size and type checks run before any cleanup."""

    def test_oversized_file_rejected_with_size_reason(self, small_settings):
        """Anything over the ceiling fails, whatever its type."""
        for media_type, name in [
            ("text/plain", "a.txt"),
            ("application/pdf", "a.pdf"),
            ("application/octet-stream", "a.exe"),
        ]:
            with pytest.raises(UnsupportedInputError) as exc:
                normalize(b"x" * 1025, media_type, small_settings, filename=name)

            assert exc.value.reason == UnsupportedInputError.SIZE
            assert exc.value.kind == "unsupported_input"

    def test_file_at_exact_ceiling_accepted(self, small_settings):
        assert normalize(b"a" * 1024, "text/plain", small_settings) == "a" * 1024

    def test_size_counts_utf8_bytes_for_text_input(self, small_settings):
        """A str is measured by its encoded size, not its length."""
        with pytest.raises(UnsupportedInputError):
            normalize("é" * 600, "text/plain", small_settings)

    def test_executable_rejected_with_type_reason(self, settings):
        with pytest.raises(UnsupportedInputError) as exc:
            normalize(b"MZ\x90\x00", "application/octet-stream", settings, filename="setup.exe")

        assert exc.value.reason == UnsupportedInputError.TYPE
        assert "Unsupported file type" in exc.value.message

    def test_extension_accepted_when_mime_type_unknown(self, settings):
        """Browsers often send no type for .md files."""
        assert normalize(b"# Title\n\nBody", "", settings, filename="README.MD") == "# Title\n\nBody"

    def test_mime_type_accepted_without_extension(self, settings):
        assert normalize(b"hello", "text/plain", settings, filename="notes") == "hello"

    def test_mime_type_parameters_ignored(self, settings):
        assert normalize(b"hello  world", "text/plain; charset=utf-8", settings) == "hello world"


class TestCleanup:
    """Type-specific cleanup rules."""

    def test_html_tags_stripped_and_whitespace_collapsed(self, settings):
        html = b"<html><body><h1>Title</h1>\n<p>First   para</p></body></html>"

        assert normalize(html, "text/html", settings) == "Title First para"

    def test_plain_text_whitespace_collapsed(self, settings, sample_text_content):
        result = normalize(sample_text_content, "text/plain", settings)

        assert result == "Quarterly report. Revenue grew by 12%. Costs fell."

    def test_pdf_noise_removed(self, settings):
        raw = b"%PDF-1.4 Hello, world! \xff\xfe <<obj>> (ok)"

        result = normalize(raw, "application/pdf", settings)

        assert "Hello, world!" in result
        assert "(ok)" in result
        assert "%" not in result
        assert "<" not in result
        assert "�" not in result

    def test_pdf_noise_keeps_only_ascii_word_characters(self, settings):
        result = normalize("Café menu".encode("utf-8"), "application/pdf", settings)

        assert result == "Caf  menu"

    @pytest.mark.parametrize("raw,media_type,expected", [
        ("\ufeffHello   world.".encode("utf-8"), "text/plain", "Hello world."),
        ("\ufeff# Notes".encode("utf-8"), "text/markdown", "# Notes"),
        ("\ufeff\n  Hello", "text/plain", "Hello"),
    ])
    def test_byte_order_mark_dropped(self, settings, raw, media_type, expected):
        assert normalize(raw, media_type, settings) == expected

    def test_markdown_formatting_preserved(self, settings):
        md = b"  # Heading\n\n- item one\n- item   two\n  "

        assert normalize(md, "text/markdown", settings) == "# Heading\n\n- item one\n- item   two"

    def test_resolve_kind_prefers_media_type(self):
        assert resolve_kind("text/html", "page.txt") == KIND_HTML
        assert resolve_kind("", "page.txt") == KIND_TEXT
        assert resolve_kind(None, "scan.PDF") == KIND_PDF
        assert resolve_kind("application/octet-stream", "notes.md") == KIND_MARKDOWN


class TestEmptyContent:
    """Normalization never returns blank content."""

    @pytest.mark.parametrize("raw,media_type", [
        (b"", "text/plain"),
        (b"   \n\t  ", "text/plain"),
        (b"<div>  </div>", "text/html"),
        (b"\xff\xfe%%@@", "application/pdf"),
        (b"\n\n", "text/markdown"),
        ("\ufeff\n\n".encode("utf-8"), "text/markdown"),
        (b"\xef\xbb\xbf   ", "text/plain"),
    ])
    def test_blank_after_cleanup_raises(self, settings, raw, media_type):
        with pytest.raises(EmptyContentError):
            normalize(raw, media_type, settings)


class TestIngest:
    """DocumentRecord creation."""

    def test_plain_text_record(self, settings):
        raw = b"  The   quick brown fox\njumps over the lazy dog.  Again!  "

        record = ingest(raw, "fox.txt", "text/plain", settings)

        assert record.content == "The quick brown fox jumps over the lazy dog. Again!"
        assert record.name == "fox.txt"
        assert record.media_type == "text/plain"
        assert record.size == len(raw)
        assert record.id.startswith("doc_")
        assert record.uploaded_at.tzinfo is not None

    def test_each_upload_gets_unique_id(self, settings):
        ids = {ingest(b"text", "a.txt", "text/plain", settings).id for _ in range(20)}

        assert len(ids) == 20

    def test_rejected_upload_creates_no_record(self, settings):
        with pytest.raises(UnsupportedInputError):
            ingest(b"binary", "virus.exe", "application/x-msdownload", settings)


class TestChunker:
    """Sentence-based segmentation."""

    def test_short_text_single_segment(self):
        assert chunk_text("One. Two. Three.") == ["One. Two. Three"]

    def test_segments_respect_budget(self):
        text = ". ".join(f"Sentence number {i} here" for i in range(50)) + "."

        chunks = chunk_text(text, max_chunk_size=100)

        assert len(chunks) > 1
        assert all(len(chunk) <= 100 for chunk in chunks)
        assert all(chunk for chunk in chunks)

    def test_oversized_sentence_kept_whole(self):
        long_sentence = "word " * 100

        chunks = chunk_text(f"Short. {long_sentence}. Tail", max_chunk_size=50)

        assert chunks[0] == "Short"
        assert chunks[1] == long_sentence.strip()

    def test_mixed_terminators(self):
        chunks = chunk_text("Really?! Yes. Great!", max_chunk_size=8)

        assert chunks == ["Really", "Yes", "Great"]

    def test_empty_text(self):
        assert chunk_text("") == []
        assert chunk_text("   ") == []

    def test_invalid_budget(self):
        with pytest.raises(ValueError):
            chunk_text("text", max_chunk_size=0)
