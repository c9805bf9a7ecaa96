# app/documents/extract.py
"""
Best-effort plain-text extraction from uploaded business documents.

Unsupported formats and unreadable files yield "" rather than raising;
the caller decides what an all-empty batch means.
"""
from __future__ import annotations

import html
import io
import logging
import re
import zipfile
from dataclasses import dataclass
from typing import Iterable, List

from docx import Document
from openpyxl import load_workbook
from pypdf import PdfReader

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".pdf", ".docx", ".xlsx", ".pptx"}

_SLIDE_NAME = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
_XML_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


@dataclass
class ExtractedDocument:
    name: str
    text: str

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())


def _suffix(file_name: str) -> str:
    name = (file_name or "").lower()
    dot = name.rfind(".")
    return name[dot:] if dot != -1 else ""


def _pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n\n".join(page.extract_text() or "" for page in reader.pages)


def _docx_text(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n\n".join(p.text for p in doc.paragraphs if p.text.strip())


def _xlsx_text(data: bytes) -> str:
    wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        out: List[str] = []
        for ws in wb.worksheets:
            out.append(f"[Sheet: {ws.title}]")
            for row in ws.iter_rows(values_only=True):
                line = ",".join("" if v is None else str(v) for v in row)
                if line.strip(","):
                    out.append(line)
        return "\n".join(out)
    finally:
        wb.close()


def _pptx_text(data: bytes) -> str:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        slides = [n for n in zf.namelist() if _SLIDE_NAME.match(n)]
        slides.sort(key=lambda n: int(_SLIDE_NAME.match(n).group(1)))
        out: List[str] = []
        for name in slides:
            xml = zf.read(name).decode("utf-8", errors="replace")
            text = html.unescape(_WHITESPACE.sub(" ", _XML_TAG.sub(" ", xml)).strip())
            out.append(f"[Slide: {name.rsplit('/', 1)[-1]}]\n{text}")
        return "\n".join(out)


_EXTRACTORS = {
    ".pdf": _pdf_text,
    ".docx": _docx_text,
    ".xlsx": _xlsx_text,
    ".pptx": _pptx_text,
}


def extract_text(file_bytes: bytes, file_name: str) -> str:
    """Return the plain text of one file, or "" if it cannot be read."""
    extractor = _EXTRACTORS.get(_suffix(file_name))
    if extractor is None:
        logger.info("Unsupported document type: %s", file_name)
        return ""
    try:
        text = extractor(file_bytes)
    except Exception as e:
        logger.warning("Could not extract text from %s: %s", file_name, e)
        return ""

    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"[ \t]{2,}", " ", text)
    return text.strip()


def combine_documents(documents: Iterable[ExtractedDocument]) -> str:
    return "\n\n".join(f"--- FILE: {d.name} ---\n{d.text}" for d in documents)
