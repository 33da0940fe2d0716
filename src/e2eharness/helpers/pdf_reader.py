from pathlib import Path
from typing import Any, Dict, Union

from pypdf import PdfReader


def read_pdf(file_path: Union[str, Path]) -> str:
    """Extracts the text of every page, joined with newlines."""
    reader = PdfReader(str(file_path))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def read_pdf_details(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Reads text plus document details.

    Returns:
        A dict with "text", "num_pages", "info" (document information
        dictionary as plain str values), "metadata" (XMP metadata or None) and
        "version" (e.g. "1.7").
    """
    reader = PdfReader(str(file_path))
    text = "\n".join(page.extract_text() or "" for page in reader.pages)
    info = {key.lstrip("/"): str(value) for key, value in (reader.metadata or {}).items()}
    return {
        "text": text,
        "num_pages": len(reader.pages),
        "info": info,
        "metadata": reader.xmp_metadata,
        "version": reader.pdf_header.replace("%PDF-", ""),
    }


def search_in_pdf(file_path: Union[str, Path], search_text: str) -> bool:
    return search_text in read_pdf(file_path)


def read_pdf_page(file_path: Union[str, Path], page_number: int) -> str:
    """
    Extracts the text of one page.

    Args:
        page_number: 1-indexed page number.

    Raises:
        ValueError: If the page does not exist.
    """
    reader = PdfReader(str(file_path))
    if not 1 <= page_number <= len(reader.pages):
        raise ValueError(f"Page {page_number} out of range (document has {len(reader.pages)} pages)")
    return reader.pages[page_number - 1].extract_text() or ""
