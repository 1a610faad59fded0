"""Streaming PDF rendering for weekly reports.

The document is produced as a generator of byte chunks so a caller can start
writing the file (or a response body) while later pages are still being laid
out. Chunks come out in this order: file header and shared objects, one chunk
per finished page, then the page tree, cross-reference table and trailer.

reportlab's Canvas only writes a file on save(), buffering the whole document, so
the PDF objects are serialized here. reportlab supplies page sizes and font metrics.

Only the standard Helvetica fonts are used, with WinAnsi encoding, so nothing
needs embedding. Content streams are left uncompressed.
"""

import logging
from collections.abc import Iterator
from typing import Any

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfbase.pdfmetrics import stringWidth

from tally.dates import format_date
from tally.domain.ledger import format_money
from tally.domain.report import WeeklyReport

logger = logging.getLogger(__name__)

MARGIN = 2 * cm
LINE_HEIGHT = 18
TITLE_HEIGHT = 32
FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
FONT_SIZE = 11
TITLE_SIZE = 16
FOOTER_SIZE = 8
DATE_COLUMN_WIDTH = 70
AMOUNT_COLUMN_WIDTH = 90
COLUMN_GAP = 16

# Fixed object numbers; page content/page pairs are numbered from FIRST_PAGE_OBJECT
CATALOG_OBJECT = 1
PAGES_OBJECT = 2
FONT_OBJECT = 3
BOLD_FONT_OBJECT = 4
FIRST_PAGE_OBJECT = 5

_FONT_NAMES = {FONT: b"/F1", BOLD_FONT: b"/F2"}


def _num(value: float) -> bytes:
    return f"{value:.2f}".encode("ascii")


def _pdf_string(text: str) -> bytes:
    """Encode text as a PDF literal string."""
    raw = text.encode("cp1252", errors="replace")
    escaped = raw.replace(b"\\", b"\\\\").replace(b"(", b"\\(").replace(b")", b"\\)")
    return b"(" + escaped + b")"


def _text(font: str, size: float, x: float, y: float, text: str) -> bytes:
    return b"BT %s %s Tf %s %s Td %s Tj ET\n" % (
        _FONT_NAMES[font],
        _num(size),
        _num(x),
        _num(y),
        _pdf_string(text),
    )


def _fit(text: str, font: str, size: float, max_width: float) -> str:
    """Truncate text with an ellipsis so it fits max_width points."""
    if stringWidth(text, font, size) <= max_width:
        return text
    ellipsis = "..."
    while text and stringWidth(text + ellipsis, font, size) > max_width:
        text = text[:-1]
    return text + ellipsis


class _ObjectWriter:
    """Tracks byte offsets of numbered objects for the cross-reference table."""

    def __init__(self) -> None:
        self.position = 0
        self.offsets: dict[int, int] = {}

    def raw(self, data: bytes) -> bytes:
        self.position += len(data)
        return data

    def object(self, number: int, body: bytes) -> bytes:
        self.offsets[number] = self.position
        return self.raw(b"%d 0 obj\n%s\nendobj\n" % (number, body))

    def stream(self, number: int, data: bytes) -> bytes:
        return self.object(number, b"<< /Length %d >>\nstream\n%s\nendstream" % (len(data), data))

    def xref(self, root: int) -> bytes:
        size = max(self.offsets) + 1
        start = self.position
        lines = [b"xref\n", b"0 %d\n" % size, b"0000000000 65535 f \n"]
        for number in range(1, size):
            lines.append(b"%010d 00000 n \n" % self.offsets[number])
        lines.append(b"trailer\n<< /Size %d /Root %d 0 R >>\n" % (size, root))
        lines.append(b"startxref\n%d\n%%%%EOF\n" % start)
        return self.raw(b"".join(lines))


def _layout_pages(report: WeeklyReport, currency: str, width: float, height: float) -> Iterator[bytes]:
    """Lay out report lines, yielding the content stream of each finished page."""
    top = height - MARGIN
    bottom = MARGIN
    right = width - MARGIN
    date_right = right
    amount_right = date_right - DATE_COLUMN_WIDTH - COLUMN_GAP
    description_width = amount_right - AMOUNT_COLUMN_WIDTH - COLUMN_GAP - MARGIN

    title = f"Weekly Expenses: {format_date(report.window.start)} - {format_date(report.window.end)}"

    rows: list[tuple[str, Any]] = [("title", title)]
    rows.extend(("item", expense) for expense in report.expenses)
    rows.append(("blank", None))
    rows.append(("total", report.total))

    page_number = 1
    ops: list[bytes] = []
    y = top

    def footer() -> bytes:
        label = f"Page {page_number}"
        x = (width - stringWidth(label, FONT, FOOTER_SIZE)) / 2
        return _text(FONT, FOOTER_SIZE, x, bottom / 2, label)

    for kind, payload in rows:
        needed = TITLE_HEIGHT if kind == "title" else LINE_HEIGHT
        if y - needed < bottom:
            ops.append(footer())
            yield b"".join(ops)
            page_number += 1
            ops = []
            y = top

        y -= needed

        if kind == "title":
            text = str(payload)
            x = (width - stringWidth(text, BOLD_FONT, TITLE_SIZE)) / 2
            ops.append(_text(BOLD_FONT, TITLE_SIZE, x, y, text))
        elif kind == "item":
            description = _fit(payload.description, FONT, FONT_SIZE, description_width)
            amount = format_money(payload.amount, currency)
            date = format_date(payload.created_at)
            ops.append(_text(FONT, FONT_SIZE, MARGIN, y, description))
            ops.append(
                _text(FONT, FONT_SIZE, amount_right - stringWidth(amount, FONT, FONT_SIZE), y, amount)
            )
            ops.append(_text(FONT, FONT_SIZE, date_right - stringWidth(date, FONT, FONT_SIZE), y, date))
        elif kind == "total":
            amount = format_money(payload, currency)
            ops.append(_text(BOLD_FONT, FONT_SIZE, MARGIN, y, "Total"))
            ops.append(
                _text(BOLD_FONT, FONT_SIZE, amount_right - stringWidth(amount, BOLD_FONT, FONT_SIZE), y, amount)
            )

    ops.append(footer())
    yield b"".join(ops)


def render_document(
    report: WeeklyReport,
    currency: str = "$",
    page_size: tuple[float, float] = A4,
) -> Iterator[bytes]:
    """Render a weekly report as a PDF, one chunk at a time.

    Args:
        report: Aggregated weekly report.
        currency: Currency label prefixed to amounts.
        page_size: (width, height) in points.

    Yields:
        Consecutive byte chunks of the PDF file.
    """
    width, height = page_size
    writer = _ObjectWriter()

    yield writer.raw(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
    yield b"".join(
        [
            writer.object(CATALOG_OBJECT, b"<< /Type /Catalog /Pages %d 0 R >>" % PAGES_OBJECT),
            writer.object(
                FONT_OBJECT, b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>"
            ),
            writer.object(
                BOLD_FONT_OBJECT,
                b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica-Bold /Encoding /WinAnsiEncoding >>",
            ),
        ]
    )

    page_objects: list[int] = []
    number = FIRST_PAGE_OBJECT
    for content in _layout_pages(report, currency, width, height):
        content_number, page_number = number, number + 1
        number += 2
        page_objects.append(page_number)
        page = (
            b"<< /Type /Page /Parent %d 0 R /MediaBox [0 0 %s %s] "
            b"/Resources << /Font << /F1 %d 0 R /F2 %d 0 R >> >> /Contents %d 0 R >>"
            % (PAGES_OBJECT, _num(width), _num(height), FONT_OBJECT, BOLD_FONT_OBJECT, content_number)
        )
        yield writer.stream(content_number, content) + writer.object(page_number, page)

    kids = b" ".join(b"%d 0 R" % n for n in page_objects)
    yield writer.object(
        PAGES_OBJECT, b"<< /Type /Pages /Kids [%s] /Count %d >>" % (kids, len(page_objects))
    ) + writer.xref(CATALOG_OBJECT)

    logger.debug("Rendered %d expense(s) on %d page(s)", len(report.expenses), len(page_objects))
