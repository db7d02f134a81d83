from __future__ import annotations
import io
import logging
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import LETTER
from reportlab.lib import colors
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet

from lendinghub.i18n import t
from lendinghub.models import CalculationOutcome
from lendinghub.presets import DISCLAIMER
from lendinghub.rules import has_blocking
from lendinghub.summary import result_rows

logger = logging.getLogger(__name__)

_CALCULATOR_TITLES = {
    "conventional": "Conventional",
    "va": "VA Loan",
    "fha": "FHA Loan",
    "refinance": "Refinance",
    "affordability": "Affordability",
}

_TABLE_STYLE = TableStyle(
    [
        ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
        ('BOX', (0, 0), (-1, -1), 1, colors.black),
        ('INNERGRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ]
)


def build_estimate_pdf(
    outcome: CalculationOutcome,
    branding: Optional[dict] = None,
    out_path: Optional[str] = None,
    lang: str = "en",
    override_reason: Optional[str] = None,
) -> bytes:
    """Render a co-branded payment estimate and return the PDF bytes.

    ``branding`` may carry ``title``, ``loan_officer``, ``nmls``, ``agent`` and
    ``contact``. When the outcome has critical advisories an
    ``override_reason`` is required and printed on the estimate. The PDF is
    also written to ``out_path`` when given.
    """

    if not outcome.ok or outcome.result is None:
        raise ValueError("Cannot export a calculation that failed validation")
    if has_blocking(outcome.advisories) and not override_reason:
        raise ValueError("override_reason required when critical advisories exist")

    branding = branding or {}
    styles = getSampleStyleSheet()
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=LETTER, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    story = []
    title = escape(branding.get("title") or t("Payment Estimate", lang))
    story += [Paragraph(f"<b>{title}</b>", styles['Title']), Spacer(1, 6)]
    if branding.get("loan_officer"):
        story.append(Paragraph(f"{t('Loan Officer', lang)}: {escape(str(branding['loan_officer']))}  |  NMLS: {escape(str(branding.get('nmls', '')))}", styles['Normal']))
    if branding.get("agent"):
        story.append(Paragraph(f"{t('Real Estate Agent', lang)}: {escape(str(branding['agent']))}", styles['Normal']))
    if branding.get("contact"):
        story.append(Paragraph(f"{t('Contact', lang)}: {escape(str(branding['contact']))}", styles['Normal']))
    story += [Spacer(1, 12)]

    heading = t(_CALCULATOR_TITLES.get(outcome.calculator, outcome.calculator), lang)
    rows = [[heading, ""]] + [[label, value] for label, value in result_rows(outcome.calculator, outcome.result, lang)]
    table = Table(rows, hAlign='LEFT', colWidths=[260, 260])
    table.setStyle(_TABLE_STYLE)
    story += [table, Spacer(1, 12)]

    if outcome.advisories:
        a_rows = [[t("Code", lang), t("Severity", lang), t("Message", lang)]] + [[a.code, a.severity, a.message] for a in outcome.advisories]
        table = Table(a_rows, hAlign='LEFT')
        table.setStyle(_TABLE_STYLE)
        story += [Paragraph(f"<b>{t('Notes', lang)}</b>", styles['Heading3']), Spacer(1, 6), table, Spacer(1, 12)]
    if override_reason:
        story.append(Paragraph(f"{t('Override Reason', lang)}: {escape(override_reason)}", styles['Normal']))

    story += [Spacer(1, 12), Paragraph(f"<font size=8>{DISCLAIMER}</font>", styles['Normal'])]
    doc.build(story)
    data = buf.getvalue()

    if out_path:
        with open(out_path, "wb") as f:
            f.write(data)
    logger.info("Exported %s estimate (%d bytes)", outcome.calculator, len(data))
    return data
