"""
PDF Text Extraction

Pulls header text (top ~20% of each page) and a truncated full-page text
from a PDF's embedded text layer, so digital PDFs can be segmented without
vision OCR. Scanned PDFs come back with empty headers and a low coverage.

- Per-page failures are logged and recorded as an empty PageHeader; the
  batch always covers every processed page.
- A document PyMuPDF cannot open at all yields an empty result
  (total_pages=0, no text layer) instead of raising.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import fitz

from infra.config.schemas import SplitSettings
from .schemas import PageHeader, PdfTextExtractionResult

logger = logging.getLogger(__name__)


def _read_page(page: "fitz.Page", settings: SplitSettings) -> Tuple[str, str]:
    """Return (header_text, full_text) for one page."""
    header_cutoff = page.rect.height * settings.header_height_fraction + settings.header_margin_points

    # (x0, y0, x1, y1, word, block_no, line_no, word_no); y grows downward from the top
    words = page.get_text("words", sort=True)

    header_parts = []
    all_parts = []
    for x0, y0, x1, y1, word, *_ in words:
        text = word.strip()
        if not text:
            continue
        all_parts.append(text)
        if y1 <= header_cutoff:
            header_parts.append(text)

    full_text = " ".join(all_parts)[:settings.max_full_text_chars]
    return " ".join(header_parts), full_text


def extract_pdf_page_headers(
    pdf_bytes: bytes,
    max_pages: Optional[int] = None,
    settings: Optional[SplitSettings] = None,
) -> PdfTextExtractionResult:
    """
    Extract header text from every page of a PDF.

    Args:
        pdf_bytes: Raw PDF bytes
        max_pages: Only process the first N pages (default: settings.max_pages, then all)
        settings: Extraction thresholds (default: SplitSettings())

    Returns:
        PdfTextExtractionResult with one PageHeader per processed page
    """
    settings = settings or SplitSettings()
    max_pages = max_pages or settings.max_pages

    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        logger.error(f"Could not open PDF for text extraction: {e}")
        return PdfTextExtractionResult()

    with doc:
        if doc.needs_pass:
            logger.error("Could not extract text: PDF is password protected")
            return PdfTextExtractionResult()

        total_pages = doc.page_count
        pages_to_process = min(total_pages, max_pages) if max_pages else total_pages

        page_headers: List[PageHeader] = []
        pages_with_text = 0

        for page_index in range(pages_to_process):
            try:
                page = doc.load_page(page_index)
                header_text, full_text = _read_page(page, settings)
            except Exception as e:
                logger.warning(f"Failed to extract text from page {page_index}: {e}")
                page_headers.append(PageHeader(page_index=page_index))
                continue

            has_text = len(full_text) >= settings.min_text_chars
            if has_text:
                pages_with_text += 1

            page_headers.append(PageHeader(
                page_index=page_index,
                header_text=header_text,
                full_text=full_text,
                has_text=has_text,
            ))

    coverage = pages_with_text / pages_to_process if pages_to_process > 0 else 0.0
    has_text_layer = coverage >= settings.text_layer_threshold

    logger.info(
        f"PDF text extraction complete: {pages_with_text}/{pages_to_process} pages with text "
        f"({round(coverage * 100)}%), {total_pages} total, text layer: {has_text_layer}"
    )

    return PdfTextExtractionResult(
        page_headers=page_headers,
        total_pages=total_pages,
        has_text_layer=has_text_layer,
        text_layer_coverage=coverage,
    )


def headers_from_strings(header_texts: Sequence[Optional[str]]) -> List[PageHeader]:
    """Build PageHeaders from per-page header strings (e.g. vision OCR output)."""
    headers = []
    for page_index, text in enumerate(header_texts):
        text = (text or "").strip()
        headers.append(PageHeader(
            page_index=page_index,
            header_text=text,
            full_text=text,
            has_text=bool(text),
        ))
    return headers
