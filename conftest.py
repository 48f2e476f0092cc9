"""
Pytest configuration for project root.

Ensures project modules can be imported in tests.
Provides global fixtures for building small sheet-music PDFs in memory.
"""

import sys
import pytest
from pathlib import Path

import fitz

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


# ============================================================================
# PDF FIXTURES - built with PyMuPDF, nothing committed
# ============================================================================

PAGE_WIDTH = 612
PAGE_HEIGHT = 792

BODY_TEXT = "Allegro moderato  mf  cresc.  rehearsal 12"


def build_pdf(headers, body=BODY_TEXT):
    """Build a PDF with one page per header.

    A header of None produces a page with no text at all (a "scanned" page).
    Headers are written near the top of the page, the body well below the
    header region.
    """
    doc = fitz.open()
    for header in headers:
        page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        if header is None:
            continue
        page.insert_text((72, 60), header, fontsize=16)
        if body:
            page.insert_text((72, 420), body, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def make_pdf():
    """Factory fixture: make_pdf(["Flute", "Flute", None, ...]) -> PDF bytes."""
    return build_pdf


@pytest.fixture
def band_pdf():
    """Eight-page concert band set: flute, clarinet, trumpet, tuba (two pages each)."""
    return build_pdf([
        "Flute", "Flute",
        "1st Clarinet", "1st Clarinet",
        "Trumpet in Bb", "Trumpet in Bb",
        "Tuba", "Tuba",
    ])


@pytest.fixture
def scanned_pdf():
    """Four pages with no text layer."""
    return build_pdf([None, None, None, None])
