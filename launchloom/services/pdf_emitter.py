"""Serialize laid-out pages into a single in-memory PDF buffer."""

from __future__ import annotations

import io
import logging
from typing import Any, List, Sequence

from reportlab.lib.colors import HexColor
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .layout import BODY_FONT, DocumentSpec, DrawInstruction, Page, PageGeometry

logger = logging.getLogger(__name__)

FOOTER_SIZE = 10
FOOTER_COLOR = "#999999"
DIVIDER_COLOR = "#D0D0D0"


class EmissionError(RuntimeError):
    """Raised when the PDF writer fails; a broken document is never returned."""


class _FooterStampingCanvas(canvas.Canvas):
    """Canvas that holds finished pages until ``save`` so every footer can
    say ``Page X of N``; N is only known once the last page is written."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._page_states: List[dict] = []

    def showPage(self) -> None:  # noqa: N802 - ReportLab API
        self._page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._page_states)
        for number, state in enumerate(self._page_states, start=1):
            self.__dict__.update(state)
            self._stamp_footer(number, total)
            super().showPage()
        super().save()

    def _stamp_footer(self, number: int, total: int) -> None:
        width, _ = self._pagesize
        self.setFont(BODY_FONT, FOOTER_SIZE)
        self.setFillColor(HexColor(FOOTER_COLOR))
        self.drawCentredString(width / 2, 20, f"Page {number} of {total}")


def _draw_instruction(pdf: canvas.Canvas, ins: DrawInstruction, geometry: PageGeometry) -> None:
    style = ins.style
    color = HexColor(style.color)
    x = geometry.left + style.indent
    pdf.setFont(style.font, style.size)
    pdf.setFillColor(color)
    for i, line in enumerate(ins.lines):
        baseline = geometry.height - (ins.y + i * style.leading + style.size)
        if style.align == "center":
            pdf.drawCentredString(geometry.width / 2, baseline, line)
        else:
            pdf.drawString(x, baseline, line)
        if style.underline and line:
            pdf.setStrokeColor(color)
            pdf.setLineWidth(0.8)
            pdf.line(x, baseline - 2, x + stringWidth(line, style.font, style.size), baseline - 2)
    if style.rule_below:
        rule_y = geometry.height - (ins.bottom + style.space_after / 2)
        pdf.setStrokeColor(HexColor(DIVIDER_COLOR))
        pdf.setLineWidth(0.5)
        pdf.line(geometry.left, rule_y, geometry.width - geometry.right, rule_y)


def emit_pdf(pages: Sequence[Page], spec: DocumentSpec, *, compress: bool = True) -> bytes:
    """Write ``pages`` in order, stamp footers, and return the PDF bytes."""

    if not pages:
        raise EmissionError("no pages to emit")

    geometry = spec.geometry
    buffer = io.BytesIO()
    try:
        pdf = _FooterStampingCanvas(
            buffer,
            pagesize=(geometry.width, geometry.height),
            pageCompression=1 if compress else 0,
        )
        pdf.setTitle(f"{spec.title} Launch Playbook")
        pdf.setAuthor("LaunchLoom")
        pdf.setSubject(f"{spec.policy.label.title()} launch playbook for {spec.title}")
        pdf.setKeywords("launch playbook, marketing, LaunchLoom")
        for page in pages:
            for ins in page.instructions:
                _draw_instruction(pdf, ins, geometry)
            pdf.showPage()
        pdf.save()
    except Exception as exc:
        raise EmissionError(f"PDF serialization failed: {exc}") from exc

    data = buffer.getvalue()
    logger.info("pdf_emitted", extra={"pages": len(pages), "bytes": len(data), "tier": spec.tier.value})
    return data
