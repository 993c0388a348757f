"""
PDF Export Service.

Generates prescription summaries for a child's medications using reportlab.
"""

import io
from datetime import date
from typing import Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.db.models import Child, Medication
from app.utils.dates import describe_age


HEADER_COLOR = colors.HexColor("#1e293b")
MUTED_COLOR = colors.HexColor("#64748b")
GRID_COLOR = colors.HexColor("#e2e8f0")


def _escape(text: str | None) -> str:
    # Paragraph parses mini-markup; escape the few characters it cares about
    return (text or "-").replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _cell(text: str | None, style: ParagraphStyle) -> Paragraph:
    return Paragraph(_escape(text), style)


def create_prescription_pdf(
    child: Child,
    medications: Sequence[Medication],
    generated_on: date,
) -> bytes:
    """
    Generate a prescription summary PDF.

    Args:
        child: The child the prescriptions belong to
        medications: Medications to list, in display order
        generated_on: Date printed on the document

    Returns:
        PDF bytes
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=40,
        leftMargin=40,
        topMargin=40,
        bottomMargin=40,
        title=f"Prescriptions - {child.name}",
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "PrescriptionTitle",
        parent=styles["Heading1"],
        fontSize=20,
        spaceAfter=12,
        textColor=HEADER_COLOR,
    )
    subheading_style = ParagraphStyle(
        "PrescriptionSubHeading",
        parent=styles["Normal"],
        fontSize=10,
        textColor=MUTED_COLOR,
        spaceAfter=10,
    )
    cell_style = ParagraphStyle(
        "PrescriptionCell",
        parent=styles["Normal"],
        fontSize=9,
        leading=11,
    )

    elements = [
        Paragraph("Prescription Summary", title_style),
        Paragraph(
            f"{_escape(child.name)} | "
            f"{describe_age(child.date_of_birth, generated_on)} | "
            f"Generated: {generated_on.strftime('%d %b %Y')}",
            subheading_style,
        ),
        Spacer(1, 10),
    ]

    if not medications:
        elements.append(Paragraph("No medications recorded.", styles["Normal"]))
    else:
        rows = [["Medicine", "Health issue", "Dosage", "Frequency", "Duration", "Prescribed by", "Date"]]
        for med in medications:
            rows.append(
                [
                    _cell(med.medicine_name, cell_style),
                    _cell(med.health_issue, cell_style),
                    _cell(med.dosage, cell_style),
                    _cell(med.frequency, cell_style),
                    _cell(med.duration, cell_style),
                    _cell(
                        f"{med.doctor_name} ({med.doctor_contact})"
                        if med.doctor_contact
                        else med.doctor_name,
                        cell_style,
                    ),
                    _cell(med.prescribed_date.strftime("%d %b %Y"), cell_style),
                ]
            )

        table = Table(
            rows,
            repeatRows=1,
            colWidths=[
                1.1 * inch, 1.1 * inch, 0.8 * inch, 0.9 * inch,
                0.8 * inch, 1.5 * inch, 0.9 * inch,
            ],
        )
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 9),
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f1f5f9")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOX", (0, 0), (-1, -1), 1, GRID_COLOR),
                    ("INNERGRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        elements.append(table)

        notes = [med for med in medications if med.notes]
        if notes:
            elements.append(Spacer(1, 14))
            elements.append(Paragraph("Notes", styles["Heading3"]))
            for med in notes:
                elements.append(
                    Paragraph(
                        f"<b>{_escape(med.medicine_name)}</b>: "
                        f"{_escape(med.notes)}",
                        cell_style,
                    )
                )

    elements.append(Spacer(1, 20))
    elements.append(
        Paragraph(
            "This summary is for reference only. Follow your doctor's instructions.",
            subheading_style,
        )
    )

    doc.build(elements)
    return buffer.getvalue()
