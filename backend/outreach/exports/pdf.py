from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from ..domain.report import NO_RESERVATIONS, DayReport

PDF_MEDIA_TYPE = "application/pdf"

LEFT = 15 * mm
INDENT = 20 * mm
LINE = 7 * mm
TOP_MARGIN = 15 * mm
BOTTOM_MARGIN = 20 * mm


class _Cursor:
    """Writes lines top to bottom, starting a new page at the bottom margin."""

    def __init__(self, pdf: canvas.Canvas) -> None:
        self.pdf = pdf
        self.width, self.height = A4
        self.y = self.height - TOP_MARGIN

    def line(self, text: str, *, x: float = LEFT, size: int = 10, bold: bool = False) -> None:
        self.columns([(x, text)], size=size, bold=bold)

    def columns(self, cells: list[tuple[float, str]], *, size: int = 10, bold: bool = False) -> None:
        if self.y < BOTTOM_MARGIN:
            self.pdf.showPage()
            self.y = self.height - TOP_MARGIN
        self.pdf.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        for x, text in cells:
            self.pdf.drawString(x, self.y, text)
        self.y -= LINE

    def gap(self) -> None:
        self.y -= LINE / 2


def day_report_to_pdf(report: DayReport) -> bytes:
    output = BytesIO()
    pdf = canvas.Canvas(output, pagesize=A4)
    pdf.setTitle(f"Reservations for {report.date.isoformat()}")
    cursor = _Cursor(pdf)

    cursor.line(f"Reservations for {report.date.strftime('%d %B %Y')}", size=16, bold=True)
    if report.is_empty:
        cursor.line("No performances scheduled for this day")

    if report.venue_sections:
        cursor.line("Venue performances", size=14, bold=True)
        for section in report.venue_sections:
            cursor.line(section.header, size=12, bold=True)
            if section.is_empty:
                cursor.line(NO_RESERVATIONS, x=INDENT)
            else:
                cursor.columns(
                    [(INDENT, "School"), (100 * mm, "Students"), (125 * mm, "Companions"), (165 * mm, "Phone")],
                    bold=True,
                )
                for r in section.rows:
                    cursor.columns(
                        [
                            (INDENT, r.school_name[:40]),
                            (100 * mm, str(r.student_count)),
                            (125 * mm, str(r.companion_count)),
                            (165 * mm, r.contact_phone),
                        ]
                    )
            cursor.line(
                f"Attendees: {section.attendee_subtotal} / {section.performance.capacity}",
                x=INDENT,
            )
            cursor.gap()

    if report.traveling_sections:
        cursor.line("Traveling performances", size=14, bold=True)
        for section in report.traveling_sections:
            cursor.line(section.header, size=12, bold=True)
            if section.is_empty:
                cursor.line(NO_RESERVATIONS, x=INDENT)
            else:
                cursor.columns([(INDENT, "School"), (90 * mm, "Address"), (165 * mm, "Phone")], bold=True)
                for r in section.rows:
                    cursor.columns([(INDENT, r.school_name[:30]), (90 * mm, r.address[:40]), (165 * mm, r.contact_phone)])
            cursor.line(f"Reservations: {section.reservation_count}", x=INDENT)
            cursor.gap()

    pdf.save()
    return output.getvalue()
