import io
import logging

from pypdf import PdfReader

from ..errors import TextExtractionError

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
TEXT_MEDIA_TYPE = "text/plain"
SUPPORTED_MEDIA_TYPES = (PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE)


def extract_text_from_pdf(content: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(content))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        logger.error("Error parsing PDF: %s", e)
        raise TextExtractionError("Failed to parse PDF file") from e
    return "\n".join(pages)


def extract_text_from_txt(content: bytes) -> str:
    # invalid bytes (e.g. a Latin-1 file) become U+FFFD instead of failing the job
    return content.decode("utf-8", errors="replace")


def parse_resume(content: bytes, content_type: str) -> str:
    """Return the plain text of an uploaded resume, chosen by its media type."""
    if content_type == PDF_MEDIA_TYPE:
        return extract_text_from_pdf(content)
    if content_type == TEXT_MEDIA_TYPE:
        return extract_text_from_txt(content)
    raise TextExtractionError(f"Unsupported media type: {content_type}")
