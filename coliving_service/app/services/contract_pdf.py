import base64
import logging
import re
from io import BytesIO
from typing import Dict, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer

from .contract_template_engine import SIGNATURE_PLACEHOLDER_PATTERN
from .signature_pad import decode_image_data_url

logger = logging.getLogger(__name__)

PDF_DATA_URL_PREFIX = "data:application/pdf;base64,"
CONTRACT_TITLE = "CONTRAT DE LOCATION EN COLOCATION"
MANUAL_SIGNATURE_LINE = "_______________________ (Signature manuscrite)"

BOLD_PATTERN = re.compile(r"\*\*(.+?)\*\*")
ITALIC_PATTERN = re.compile(r"(?<!\*)\*(?!\*)(.+?)(?<!\*)\*(?!\*)")


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="ContractTitle", parent=styles["Title"],
                              fontSize=16, spaceAfter=4))
    styles.add(ParagraphStyle(name="Reference", parent=styles["Normal"],
                              alignment=TA_CENTER, textColor=colors.grey))
    styles.add(ParagraphStyle(name="Body", parent=styles["Normal"],
                              fontSize=10, leading=14))
    styles.add(ParagraphStyle(name="Article", parent=styles["Heading2"],
                              fontSize=12, spaceBefore=8, spaceAfter=4))
    return styles


def _inline_markup(line: str) -> str:
    text = escape(line)
    text = BOLD_PATTERN.sub(r"<b>\1</b>", text)
    return ITALIC_PATTERN.sub(r"<i>\1</i>", text)


def _signature_flowable(key: str, signatures: Dict[str, str], styles):
    image_bytes = decode_image_data_url(signatures.get(key))
    if image_bytes:
        return Image(BytesIO(image_bytes), width=60 * mm, height=25 * mm, kind="proportional")

    if signatures.get(key):
        logger.warning(f"Signature {key} is not a readable image, using manual line")
    return Paragraph(MANUAL_SIGNATURE_LINE, styles["Body"])


def _draw_page_footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.grey)
    canvas.drawString(20 * mm, 12 * mm, "Paraphes : ________")
    canvas.drawRightString(A4[0] - 20 * mm, 12 * mm, f"Page {doc.page}")
    canvas.restoreState()


def build_contract_pdf(text: str, reference: str = "", signatures: Optional[Dict[str, str]] = None) -> bytes:
    """
    Lay out a rendered contract body:
    - ``#``/``##`` lines become headings
    - ``**bold**`` and ``*italic*`` spans are kept
    - ``===`` separator lines are dropped
    - ``[SIGNATURE:KEY]`` lines become the image in ``signatures[KEY]``
      or a manual signature line
    """
    signatures = signatures or {}
    styles = _styles()
    story = [Paragraph(CONTRACT_TITLE, styles["ContractTitle"])]
    if reference:
        story.append(Paragraph(escape(reference), styles["Reference"]))
    story.append(Spacer(1, 12))

    has_signature_slot = False
    for raw_line in (text or "").split("\n"):
        line = raw_line.strip()

        if not line:
            story.append(Spacer(1, 6))
            continue
        if line.startswith("==="):
            continue

        slot = SIGNATURE_PLACEHOLDER_PATTERN.fullmatch(line)
        if slot:
            has_signature_slot = True
            story.append(_signature_flowable(slot.group(1), signatures, styles))
            continue

        if line.startswith("## "):
            story.append(Paragraph(_inline_markup(line[3:]), styles["Article"]))
        elif line.startswith("# "):
            story.append(Paragraph(_inline_markup(line[2:]), styles["Heading1"]))
        elif line.startswith("- "):
            story.append(Paragraph(_inline_markup(line[2:]), styles["Body"], bulletText="•"))
        else:
            story.append(Paragraph(_inline_markup(line), styles["Body"]))

    if not has_signature_slot:
        story.append(Spacer(1, 18))
        for label, key in (("Le Bailleur", "ADMIN_SIGNATURE"), ("Le Locataire", "TENANT_SIGNATURE")):
            story.append(Paragraph(f"<b>{label}</b>", styles["Body"]))
            story.append(_signature_flowable(key, signatures, styles))
            story.append(Spacer(1, 10))

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=20 * mm,
        leftMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=22 * mm,
        title=CONTRACT_TITLE,
    )
    doc.build(story, onFirstPage=_draw_page_footer, onLaterPages=_draw_page_footer)
    return buffer.getvalue()


def to_data_url(pdf_bytes: bytes) -> str:
    return PDF_DATA_URL_PREFIX + base64.b64encode(pdf_bytes).decode("ascii")


def is_pdf_data_url(value: Optional[str]) -> bool:
    return bool(value) and value.startswith("data:application/pdf")
