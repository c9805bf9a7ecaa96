# app/documents/__init__.py
from .extract import ExtractedDocument, combine_documents, extract_text

__all__ = ["ExtractedDocument", "combine_documents", "extract_text"]
