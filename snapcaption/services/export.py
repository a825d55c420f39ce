"""
Purpose:
- Serialize every item into a paginated PDF "caption sheet" (reportlab).
- One section per item: file name, caption (or the selected-language translation),
  hashtags, style, faces and alt-text, each wrapped to the page width.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, List, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..core.errors import NothingToExport
from ..store.models import ItemRecord, NOT_AVAILABLE

logger = logging.getLogger(__name__)

TITLE = "AI Image Captions Sheet"
FILENAME = "image_captions_sheet.pdf"

MARGIN = 10 * mm
LINE = 10 * mm          # heading line height; wrapped body lines use 0.8 of it
FONT = "Helvetica"
BODY_SIZE = 10
HEADING_SIZE = 14

@dataclass(frozen=True)
class PdfExport:
    data: bytes
    pages: int
    filename: str = FILENAME

def section_lines(rec: ItemRecord, index: int, language: str = "") -> Tuple[str, List[str]]:
    """Heading plus the body entries for one item (unwrapped)."""
    caption = rec.caption or "No caption generated."
    translated = rec.translation_for(language)
    if translated:
        caption = f"[{language}] {translated}"

    body = [f"Caption: {caption}"]
    if rec.hashtags:
        body.append(f"Hashtags: {rec.hashtags}")
    if rec.style:
        body.append(f"Style: {rec.style}")
    if rec.face_emotion and rec.face_emotion != NOT_AVAILABLE:
        body.append(f"Faces: {rec.face_emotion}")
    if rec.alt_text and rec.alt_text != NOT_AVAILABLE:
        body.append(f"Alt-text: {rec.alt_text}")
    return f"Image {index}: {rec.filename}", body

def wrap(text: str, width: float, size: int = BODY_SIZE) -> List[str]:
    """Word-wrap to width; a single token wider than the page (long file names) is cut by character."""
    out: List[str] = []
    for line in simpleSplit(text, FONT, size, width) or [""]:
        while len(line) > 1 and stringWidth(line, FONT, size) > width:
            cut = len(line) - 1
            while cut > 1 and stringWidth(line[:cut], FONT, size) > width:
                cut -= 1
            out.append(line[:cut])
            line = line[cut:]
        out.append(line)
    return out

def export_pdf(items: Iterable[ItemRecord], language: str = "") -> PdfExport:
    items = list(items)
    if not items:
        raise NothingToExport("Please generate captions or other content first!")

    buf = BytesIO()
    page_w, page_h = A4
    max_width = page_w - 2 * MARGIN
    pdf = canvas.Canvas(buf, pagesize=A4)
    pdf.setTitle(TITLE)

    def new_page() -> float:
        pdf.showPage()
        return MARGIN

    def draw(text: str, y: float) -> None:
        # reportlab's origin is bottom-left; y is measured from the top
        pdf.drawString(MARGIN, page_h - y, text)

    y = MARGIN
    pdf.setFont(FONT, 18)
    draw(TITLE, y + 18)
    y += LINE * 2

    for i, rec in enumerate(items, start=1):
        if y + LINE * 5 > page_h - MARGIN:
            y = new_page()

        heading, body = section_lines(rec, i, language)
        pdf.setFont(FONT, HEADING_SIZE)
        pdf.setFillColorRGB(0, 0, 0)
        for line in wrap(heading, max_width, HEADING_SIZE):
            if y + LINE > page_h - MARGIN:
                y = new_page()
                pdf.setFont(FONT, HEADING_SIZE)
            draw(line, y + HEADING_SIZE)
            y += LINE

        pdf.setFont(FONT, BODY_SIZE)
        pdf.setFillColorRGB(50 / 255, 50 / 255, 50 / 255)
        for entry in body:
            for line in wrap(entry, max_width):
                if y + LINE * 0.8 > page_h - MARGIN:
                    y = new_page()
                    pdf.setFont(FONT, BODY_SIZE)
                    pdf.setFillColorRGB(50 / 255, 50 / 255, 50 / 255)
                draw(line, y + BODY_SIZE)
                y += LINE * 0.8
        y += LINE

    pages = pdf.getPageNumber()
    pdf.save()
    logger.info("Exported %d item(s) over %d page(s)", len(items), pages)
    return PdfExport(data=buf.getvalue(), pages=pages)
