# src/jira2pdf/pdf.py
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from fpdf import FPDF, XPos, YPos

from .config import Settings
from .errors import WriteError
from .fields import render_fields
from .parse import Issue
from .partition import partition

log = logging.getLogger(__name__)

LINE_HEIGHT = 9
TITLE_FILL = (222, 222, 222)
RULE_COLOR = (195, 195, 195)


def _pdf_safe_text(text: str) -> str:
    # core fonts only cover latin-1
    if text is None:
        return ""
    return str(text).encode("latin-1", "replace").decode("latin-1")


def _pdf_add_title(pdf: FPDF, title: str) -> None:
    pdf.set_font("Helvetica", "B", 16)
    pdf.set_fill_color(*TITLE_FILL)
    pdf.set_text_color(0, 0, 0)
    pdf.multi_cell(0, 16, _pdf_safe_text(title), border=1, align="C", fill=True,
                   new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def _pdf_add_subtitle(pdf: FPDF, left: str, right: str) -> None:
    """Two texts on the same bordered row, one left- and one right-aligned."""
    y = pdf.get_y()
    pdf.set_font("Helvetica", "", LINE_HEIGHT)
    pdf.set_text_color(0, 0, 0)
    pdf.multi_cell(0, LINE_HEIGHT, _pdf_safe_text(left), border=1, align="L",
                   new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_y(y)
    pdf.multi_cell(0, LINE_HEIGHT, _pdf_safe_text(right), border=1, align="R",
                   new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)


def _pdf_add_rule(pdf: FPDF) -> None:
    pdf.set_draw_color(*RULE_COLOR)
    pdf.ln(2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.w - pdf.r_margin, y)
    pdf.ln(2)


def build_document(
    file_name: str,
    title: str,
    issues: Sequence[Issue],
    settings: Settings,
    generated_at: Optional[datetime] = None,
) -> Path:
    """Write ``{output_dir}/{file_name}.pdf`` with one block per issue, in order."""
    generated_at = generated_at or datetime.now()
    pdf = FPDF(orientation="P", unit="mm", format="A4")
    pdf.add_page()

    _pdf_add_title(pdf, f"{title} Issues")
    _pdf_add_subtitle(
        pdf,
        f"Total of issues: {len(issues)}",
        f"Created at: {generated_at.strftime(settings.datetime_format)}",
    )

    for issue in issues:
        pdf.set_font("Helvetica", "", LINE_HEIGHT)
        pdf.set_text_color(0, 0, 0)
        pdf.write_html(_pdf_safe_text(render_fields(issue, settings.fields, settings)))
        _pdf_add_rule(pdf)

    path = settings.output_dir / f"{file_name}.pdf"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(path))
    except OSError as e:
        raise WriteError(f"Error while saving {path}: {e}", [path]) from e

    log.info("PDF written", extra={"path": str(path), "issues": len(issues)})
    return path


def build_partitioned_documents(project: str, issues: Sequence[Issue], settings: Settings) -> List[Path]:
    """
    One document per chunk of ``issues_per_pdf`` issues. A single chunk is
    written as ``{project}.pdf``, several as ``{project}_1.pdf``, ``{project}_2.pdf``...
    No issues, no document.
    """
    chunks = partition(len(issues), settings.issues_per_pdf)
    generated_at = datetime.now()
    written: List[Path] = []
    failed: List[Path] = []

    for index, (start, end) in enumerate(chunks):
        name = project if len(chunks) == 1 else f"{project}_{index + 1}"
        try:
            written.append(build_document(name, project, issues[start:end], settings, generated_at))
        except WriteError as e:
            if settings.on_write_error == "abort":
                raise
            log.error("PDF write failed, continuing with next partition", extra={"project": project, "error": str(e)})
            failed.extend(e.paths)

    if failed:
        names = ", ".join(str(p) for p in failed)
        raise WriteError(f"{len(failed)} of {len(chunks)} document(s) for {project} not written: {names}", failed)
    return written
