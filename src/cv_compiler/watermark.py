# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Stamps a diagonal text watermark onto every page of an exported PDF.

Each page gets an overlay drawn with reportlab at the page's own size, which
pypdf merges on top of the existing content. Nothing is removed or reflowed,
and the result is checked for the same page count and page sizes before it
is returned.
"""

import io
import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import List

from pypdf import PdfReader, PdfWriter, Transformation
from pypdf.errors import PyPdfError
from reportlab.pdfgen import canvas

from cv_compiler.errors import WatermarkError

logger = logging.getLogger(__name__)

FONT_NAME = "Helvetica-Bold"
FILL_GRAY = (0.85, 0.85, 0.85)
FILL_ALPHA = 0.5
ANGLE = 45
# Relative (x, y) anchor points: centre, upper quarter, lower three-quarter.
POSITIONS = ((0.5, 0.5), (0.25, 0.75), (0.75, 0.25))
SIZE_TOLERANCE = 0.01


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    left: float = 0.0
    bottom: float = 0.0

    def same_size(self, other: "PageGeometry") -> bool:
        return (abs(self.width - other.width) <= SIZE_TOLERANCE
                and abs(self.height - other.height) <= SIZE_TOLERANCE)


def _read(pdf_bytes: bytes) -> PdfReader:
    if not pdf_bytes:
        raise WatermarkError("Cannot watermark an empty document")
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes), strict=False)
        if reader.is_encrypted:
            raise WatermarkError("Cannot watermark an encrypted PDF")
        if len(reader.pages) == 0:
            raise WatermarkError("PDF has no pages")
    except (PyPdfError, ValueError, KeyError) as e:
        raise WatermarkError(f"Unreadable PDF: {e}") from e
    return reader


def _geometry(page) -> PageGeometry:
    box = page.mediabox
    return PageGeometry(width=float(box.width), height=float(box.height),
                        left=float(box.left), bottom=float(box.bottom))


def page_geometry(pdf_bytes: bytes) -> List[PageGeometry]:
    """Width, height and origin of every page's media box, in points."""
    reader = _read(pdf_bytes)
    try:
        return [_geometry(page) for page in reader.pages]
    except (PyPdfError, ValueError, KeyError) as e:
        raise WatermarkError(f"Unreadable page geometry: {e}") from e


def _overlay(width: float, height: float, text: str):
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=(width, height), invariant=1)
    font_size = min(width, height) / 8
    c.setFont(FONT_NAME, font_size)
    c.setFillColorRGB(*FILL_GRAY)
    c.setFillAlpha(FILL_ALPHA)
    for rx, ry in POSITIONS:
        c.saveState()
        c.translate(width * rx, height * ry)
        c.rotate(ANGLE)
        # Baseline sits a third of the cap height below the anchor so the
        # text is visually centred on it.
        c.drawCentredString(0, -font_size / 3, text)
        c.restoreState()
    c.showPage()
    c.save()
    return PdfReader(io.BytesIO(buffer.getvalue())).pages[0]


def watermark_pdf(pdf_bytes: bytes, text: str) -> bytes:
    """
    Returns a copy of the PDF with ``text`` drawn three times per page,
    rotated 45 degrees counter-clockwise in light grey at half opacity.

    Raises:
        WatermarkError: for empty text, unreadable or encrypted input, or if
            the output would not have the same pages and page sizes.
    """
    if not text or not text.strip():
        raise WatermarkError("Watermark text must not be empty")
    text = text.strip()

    reader = _read(pdf_bytes)
    try:
        before = [_geometry(page) for page in reader.pages]
        # Pages are merged once they belong to the writer, never on the reader.
        writer = PdfWriter(clone_from=reader)
        for page, geometry in zip(writer.pages, before):
            overlay = _overlay(geometry.width, geometry.height, text)
            page.merge_transformed_page(
                overlay, Transformation().translate(geometry.left, geometry.bottom), over=True)
        output = io.BytesIO()
        writer.write(output)
        result = output.getvalue()
    except (PyPdfError, ValueError, KeyError) as e:
        raise WatermarkError(f"Failed to watermark PDF: {e}") from e

    after = page_geometry(result)
    if len(after) != len(before):
        raise WatermarkError(f"Watermarking changed the page count from {len(before)} to {len(after)}")
    for index, (old, new) in enumerate(zip(before, after)):
        if not old.same_size(new):
            raise WatermarkError(
                f"Watermarking changed page {index + 1} from {old.width}x{old.height} to {new.width}x{new.height}")

    logger.info(f"Watermarked {len(after)} page(s) with '{text}'")
    return result


def watermark_pdf_async(executor: Executor, pdf_bytes: bytes, text: str) -> "Future[bytes]":
    """Runs watermark_pdf on the given executor so UI threads are not blocked."""
    return executor.submit(watermark_pdf, pdf_bytes, text)
