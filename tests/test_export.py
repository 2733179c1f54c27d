"""Document export tests."""

from __future__ import annotations

import io

from docx import Document

from bizplan.export import PlanDocument, export_filename, render, render_docx, render_pdf, render_txt
from bizplan.schemas import ExportFormat


def _doc(**overrides):
    fields = dict(
        business_name="Sample Coffee Shop",
        industry="Food and Beverage",
        target_market="Young adults aged 18-35 in urban areas",
        usps="Specialty coffee blends, cozy atmosphere, community events",
        plan="1. Executive Summary\nWe serve coffee.\n\n2. Market Analysis\nStudents love coffee.",
    )
    fields.update(overrides)
    return PlanDocument(**fields)


def test_txt_is_plan_body_only():
    assert render_txt(_doc()) == _doc().plan
    assert render(_doc(), ExportFormat.TXT) == _doc().plan.encode("utf-8")


def test_docx_paragraph_order_and_styling():
    document = Document(io.BytesIO(render_docx(_doc())))
    paragraphs = document.paragraphs

    assert [p.text for p in paragraphs] == [
        "Business Plan for Sample Coffee Shop",
        "Industry: Food and Beverage",
        "Target Market: Young adults aged 18-35 in urban areas",
        "USPs: Specialty coffee blends, cozy atmosphere, community events",
        "Plan:",
        _doc().plan,
    ]
    title_run = paragraphs[0].runs[0]
    assert title_run.bold is True
    assert title_run.font.size.pt == 16
    assert paragraphs[1].runs[0].font.size.pt == 12
    assert paragraphs[4].runs[0].bold is True
    assert paragraphs[5].runs[0].font.size.pt == 10


def test_docx_blank_optional_fields():
    document = Document(io.BytesIO(render_docx(_doc(target_market=None, usps=None))))
    texts = [p.text for p in document.paragraphs]
    assert "Target Market: " in texts
    assert "USPs: " in texts


def test_pdf_is_a_single_page():
    content = render_pdf(_doc())
    assert content.startswith(b"%PDF")
    assert b"/Count 1" in content


def test_pdf_long_plan_is_truncated_to_one_page():
    long_plan = "\n".join(f"Line {i} of a very long plan body." for i in range(400))
    content = render_pdf(_doc(plan=long_plan))
    assert content.startswith(b"%PDF")
    assert b"/Count 1" in content
    assert b"/Count 2" not in content


def test_pdf_tolerates_non_latin_text():
    content = render_pdf(_doc(business_name="Café ☕", plan="Plan — with “quotes” and 漢字"))
    assert content.startswith(b"%PDF")


def test_export_filename():
    assert export_filename(_doc(), ExportFormat.PDF) == "Sample_Coffee_Shop_Business_Plan.pdf"
    assert export_filename(_doc(business_name="  A/B  Co "), ExportFormat.DOCX) == "AB_Co_Business_Plan.docx"
    assert export_filename(_doc(business_name="   "), ExportFormat.TXT) == "Untitled_Business_Plan.txt"
