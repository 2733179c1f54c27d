"""Plan export to PDF, Word and plain text."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass

from docx import Document
from docx.shared import Pt
from fpdf import FPDF
from fpdf.enums import MethodReturnValue

from bizplan.schemas import ExportFormat


MEDIA_TYPES: dict[ExportFormat, str] = {
    ExportFormat.PDF: "application/pdf",
    ExportFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ExportFormat.TXT: "text/plain; charset=utf-8",
}

# A4 page, millimetres
PDF_LEFT = 20
PDF_BODY_WIDTH = 170
PDF_BODY_TOP = 70
PDF_BODY_LINE_HEIGHT = 5
PDF_BOTTOM_LIMIT = 287


@dataclass
class PlanDocument:
    """Everything an exported plan shows."""
    business_name: str
    industry: str
    plan: str
    target_market: str | None = None
    usps: str | None = None

    def header_lines(self) -> list[str]:
        return [
            f"Industry: {self.industry}",
            f"Target Market: {self.target_market or ''}",
            f"USPs: {self.usps or ''}",
        ]


def export_filename(doc: PlanDocument, fmt: ExportFormat) -> str:
    """``{name}_Business_Plan.{ext}``, safe for a Content-Disposition header."""
    name = re.sub(r"\s+", "_", doc.business_name.strip()) or "Untitled"
    name = re.sub(r"[^\w\-.]", "", name)
    return f"{name}_Business_Plan.{fmt.value}"


def render_txt(doc: PlanDocument) -> str:
    return doc.plan


def render_docx(doc: PlanDocument) -> bytes:
    """Ordered paragraphs: title, fields, plan label, plan body."""
    document = Document()
    _add_docx_paragraph(document, f"Business Plan for {doc.business_name}", size=16, bold=True)
    for line in doc.header_lines():
        _add_docx_paragraph(document, line, size=12)
    _add_docx_paragraph(document, "Plan:", size=12, bold=True)
    _add_docx_paragraph(document, doc.plan, size=10)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _add_docx_paragraph(document, text: str, size: int, bold: bool = False) -> None:
    run = document.add_paragraph().add_run(text)
    run.bold = bold
    run.font.size = Pt(size)


def render_pdf(doc: PlanDocument) -> bytes:
    """A single A4 page; a plan body longer than the page is cut off."""
    pdf = FPDF(format="A4", unit="mm")
    pdf.set_auto_page_break(auto=False)
    pdf.add_page()

    pdf.set_font("Helvetica", size=16)
    pdf.text(PDF_LEFT, 20, _latin1(f"Business Plan for {doc.business_name}"))

    pdf.set_font("Helvetica", size=12)
    y = 30
    for line in doc.header_lines() + ["Plan:"]:
        pdf.text(PDF_LEFT, y, _latin1(line))
        y += 10

    pdf.set_font("Helvetica", size=10)
    lines = pdf.multi_cell(
        PDF_BODY_WIDTH,
        PDF_BODY_LINE_HEIGHT,
        _latin1(doc.plan),
        dry_run=True,
        output=MethodReturnValue.LINES,
    )
    max_lines = (PDF_BOTTOM_LIMIT - PDF_BODY_TOP) // PDF_BODY_LINE_HEIGHT
    y = PDF_BODY_TOP
    for line in lines[:max_lines]:
        if line:
            pdf.text(PDF_LEFT, y, line)
        y += PDF_BODY_LINE_HEIGHT

    return bytes(pdf.output())


def render(doc: PlanDocument, fmt: ExportFormat) -> bytes:
    """Render ``doc`` in ``fmt`` as bytes."""
    if fmt is ExportFormat.PDF:
        return render_pdf(doc)
    if fmt is ExportFormat.DOCX:
        return render_docx(doc)
    return render_txt(doc).encode("utf-8")


def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")
