"""PDF text extraction module."""
from extraction.pdf_parser import PdfPageSource, extract_pages, page_to_text, word_to_fragment

__all__ = ["PdfPageSource", "extract_pages", "page_to_text", "word_to_fragment"]
