"""Read source documents and prepare their text for card generation."""

import logging
import re
from pathlib import Path

import ebooklib
import pymupdf as fitz
from bs4 import BeautifulSoup
from ebooklib import epub

from ..exceptions import DocumentParseError, TextValidationError, UnsupportedDocumentError

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 20
MAX_TEXT_LENGTH = 50_000

# PDFs yielding less text than this were most likely scanned images
MIN_PDF_TEXT_LENGTH = 50

SUPPORTED_EXTENSIONS = (".txt", ".md", ".pdf", ".epub")

CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def validate_text(text: str) -> None:
    """
    Check that text is usable as generation input.

    Raises:
        TextValidationError: If the text is empty, too short or too long
    """
    if not isinstance(text, str) or not text:
        raise TextValidationError("Please provide some text to generate cards from")

    length = len(text.strip())
    if length == 0:
        raise TextValidationError("The text is empty")
    if length < MIN_TEXT_LENGTH:
        raise TextValidationError(
            f"The text is too short, at least {MIN_TEXT_LENGTH} characters are needed"
        )
    if length > MAX_TEXT_LENGTH:
        raise TextValidationError(
            f"The text is too long, at most {MAX_TEXT_LENGTH:,} characters are supported"
        )


def preprocess_text(text: str) -> str:
    """Trim, unify line endings, collapse blank runs and expand tabs."""
    text = text.strip()
    text = text.replace("\r\n", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.replace("\t", "  ")


def clean_html_to_text(html_content: str) -> str:
    """Convert HTML to clean plain text."""
    soup = BeautifulSoup(html_content, "html.parser")

    # Remove script and style elements
    for element in soup(["script", "style", "nav", "header", "footer"]):
        element.decompose()

    text = soup.get_text(separator="\n")

    lines = (line.strip() for line in text.splitlines())
    text = "\n".join(line for line in lines if line)

    return re.sub(r"\n{3,}", "\n\n", text).strip()


def read_text_file(file_path: Path) -> str:
    try:
        return file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DocumentParseError(f"'{file_path.name}' is not valid UTF-8 text") from e


def read_pdf(file_path: Path) -> str:
    """Extract the text of every page of a PDF."""
    try:
        with fitz.open(str(file_path)) as doc:
            text = "\n".join(page.get_text() for page in doc)
    except (RuntimeError, ValueError) as e:
        raise DocumentParseError(f"Could not read PDF '{file_path.name}': {e}") from e

    text = CONTROL_CHARS_RE.sub("", text)
    text = re.sub(r"\s+", " ", text).strip()

    if len(text) < MIN_PDF_TEXT_LENGTH:
        raise DocumentParseError(
            f"Could not extract text from '{file_path.name}'. "
            "Convert it to a TXT or MD file and try again."
        )
    return text


def read_epub(file_path: Path) -> str:
    """Extract the text of every document section of an EPUB, in book order."""
    try:
        epub_book = epub.read_epub(str(file_path))
    except (epub.EpubException, KeyError, OSError) as e:
        raise DocumentParseError(f"Could not read EPUB '{file_path.name}': {e}") from e

    sections: list[str] = []
    for item in epub_book.get_items():
        if item.get_type() == ebooklib.ITEM_DOCUMENT:
            html_content = item.get_content().decode("utf-8", errors="ignore")
            text = clean_html_to_text(html_content)
            if text:
                sections.append(text)

    if not sections:
        raise DocumentParseError(f"No text found in '{file_path.name}'")
    return "\n\n".join(sections)


def read_document(file_path: str | Path) -> str:
    """
    Read a source document as plain text.

    Args:
        file_path: Path to a .txt, .md, .pdf or .epub file

    Returns:
        The document's text (not yet validated or preprocessed)

    Raises:
        FileNotFoundError: If the file does not exist
        UnsupportedDocumentError: If the file type is not supported
        DocumentParseError: If no usable text could be extracted
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Document not found: {file_path}")

    extension = file_path.suffix.lower()
    logger.debug("Reading %s document %s", extension or "untyped", file_path)

    if extension in (".txt", ".md"):
        return read_text_file(file_path)
    if extension == ".pdf":
        return read_pdf(file_path)
    if extension == ".epub":
        return read_epub(file_path)

    supported = ", ".join(SUPPORTED_EXTENSIONS)
    raise UnsupportedDocumentError(
        f"Unsupported file format: {extension or file_path.name}. Supported: {supported}"
    )
