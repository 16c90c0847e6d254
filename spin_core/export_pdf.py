# spin_core/export_pdf.py
from __future__ import annotations
import io
from typing import List
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from .models import SelectionResult


def _rows(result: SelectionResult) -> List[List[str]]:
    if result.kind == "teams":
        data = [["Team", "Members"]]
        for i, team in enumerate(result.teams, start=1):
            data.append([f"Team {i}", ", ".join(m.name for m in team)])
        return data
    data = [["#", "Item"]]
    for i, it in enumerate(result.items, start=1):
        rank = result.position if result.position else i
        data.append([str(rank), it.name])
    return data


def render_results_pdf(result: SelectionResult, title: str) -> bytes:
    buf = io.BytesIO()
    width, height = letter
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle(title)

    c.setFont("Helvetica-Bold", 16)
    c.drawString(40, height - 40, title)

    t = Table(_rows(result), repeatRows=1)
    t.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
    ]))
    _, table_h = t.wrapOn(c, width - 80, height - 100)
    t.drawOn(c, 40, height - 70 - table_h)

    if result.violated_constraints:
        c.setFont("Helvetica-Oblique", 9)
        c.drawString(40, 40, f"{len(result.violated_constraints)} constraint(s) could not be honored.")

    c.showPage()
    c.save()
    return buf.getvalue()
