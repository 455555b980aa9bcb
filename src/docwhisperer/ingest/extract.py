"""Text extraction for uploaded documents: PDF, DOCX, HTML, Markdown, plain text.

Format dispatch uses the declared content type first, then the file
extension:

  application/pdf   / .pdf              → pypdf, page by page
  ...wordprocessingml.document / .docx  → zipfile + bs4 over word/document.xml
  text/html         / .html .htm        → bs4 + html2text
  text/* and .txt .md .markdown .csv .json .log .rst → UTF-8 decode

Any parser failure is re-raised as ExtractionFailed with the cause chained.
"""

from __future__ import annotations

import io
import logging
import warnings
import zipfile
from dataclasses import dataclass
from pathlib import PurePath

import html2text
import pypdf
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from docwhisperer.errors import ExtractionFailed

# html.parser is used for the DOCX XML parts as well; lxml is not a dependency.
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

logger = logging.getLogger(__name__)

_h2t = html2text.HTML2Text()
_h2t.ignore_links = True
_h2t.ignore_images = True
_h2t.body_width = 0  # no line wrapping

_DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_CONTENT_TYPES: dict[str, str] = {
    "application/pdf": "pdf",
    _DOCX_TYPE: "docx",
    "text/html": "html",
    "application/xhtml+xml": "html",
    "text/markdown": "text",
    "application/json": "text",
}

_EXTENSIONS: dict[str, str] = {
    ".pdf": "pdf",
    ".docx": "docx",
    ".html": "html",
    ".htm": "html",
    ".txt": "text",
    ".text": "text",
    ".md": "text",
    ".markdown": "text",
    ".rst": "text",
    ".csv": "text",
    ".json": "text",
    ".log": "text",
}

_MEDIA_TYPES: dict[str, str] = {
    "pdf": "application/pdf",
    "docx": _DOCX_TYPE,
    "html": "text/html",
    "text": "text/plain",
}


@dataclass(frozen=True)
class ExtractedText:
    text: str
    page_count: int = 1


def detect_format(name: str, content_type: str | None = None) -> str:
    """Return 'pdf', 'docx', 'html', 'text', or 'unknown'."""
    if content_type:
        ct = content_type.split(";")[0].strip().lower()
        if ct in _CONTENT_TYPES:
            return _CONTENT_TYPES[ct]
        if ct.startswith("text/"):
            return "text"
    return _EXTENSIONS.get(PurePath(name).suffix.lower(), "unknown")


def guess_content_type(name: str) -> str:
    """Best-effort MIME type for *name* based on its extension."""
    fmt = _EXTENSIONS.get(PurePath(name).suffix.lower())
    return _MEDIA_TYPES.get(fmt or "", "application/octet-stream")


def extract(raw: bytes, name: str, content_type: str | None = None) -> ExtractedText:
    """Extract plain text from *raw* document bytes.

    Args:
        raw: Uploaded file contents.
        name: Original file name (used for format detection and messages).
        content_type: Declared MIME type, if known.

    Raises:
        ExtractionFailed: Unsupported format or a parser error.
    """
    fmt = detect_format(name, content_type)
    try:
        if fmt == "pdf":
            result = _extract_pdf(raw)
        elif fmt == "docx":
            result = _extract_docx(raw)
        elif fmt == "html":
            result = ExtractedText(text=html_to_text(raw.decode("utf-8", errors="replace")))
        elif fmt == "text":
            result = ExtractedText(text=raw.decode("utf-8", errors="replace"))
        else:
            raise ExtractionFailed(name, f"unsupported format ({content_type or 'unknown type'})")
    except ExtractionFailed:
        raise
    except Exception as exc:
        raise ExtractionFailed(name, str(exc)) from exc

    logger.info(
        "Extracted %d chars (%d pages) from %s", len(result.text), result.page_count, name
    )
    return result


def html_to_text(html: str) -> str:
    """Strip HTML markup and return plain text via html2text."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(["script", "style", "nav", "footer", "head"]):
        tag.decompose()
    return _h2t.handle(str(soup)).strip()


def _extract_pdf(raw: bytes) -> ExtractedText:
    """Extract all page text; pages with no text layer are skipped."""
    reader = pypdf.PdfReader(io.BytesIO(raw))
    parts: list[str] = []
    for page in reader.pages:
        page_text = (page.extract_text() or "").strip()
        if page_text:
            parts.append(page_text)
    return ExtractedText(text="\n\n".join(parts), page_count=max(1, len(reader.pages)))


def _extract_docx(raw: bytes) -> ExtractedText:
    """Read paragraph text from word/document.xml, one line per paragraph."""
    with zipfile.ZipFile(io.BytesIO(raw), "r") as zf:
        names = set(zf.namelist())
        if "word/document.xml" not in names:
            raise ValueError("not a Word document (word/document.xml missing)")
        xml = zf.read("word/document.xml").decode("utf-8", errors="replace")
        app_xml = (
            zf.read("docProps/app.xml").decode("utf-8", errors="replace")
            if "docProps/app.xml" in names
            else ""
        )

    soup = BeautifulSoup(xml, "html.parser")
    paragraphs = [
        "".join(t.get_text() for t in p.find_all("w:t")) for p in soup.find_all("w:p")
    ]
    text = "\n".join(p for p in paragraphs if p.strip())
    return ExtractedText(text=text, page_count=_docx_page_count(app_xml))


def _docx_page_count(app_xml: str) -> int:
    if not app_xml:
        return 1
    pages = BeautifulSoup(app_xml, "html.parser").find("pages")
    try:
        return max(1, int(pages.get_text())) if pages else 1
    except ValueError:
        return 1
