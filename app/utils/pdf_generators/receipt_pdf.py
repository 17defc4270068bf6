# app/utils/pdf_generators/receipt_pdf.py
import os
from dataclasses import dataclass, field
from datetime import datetime
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A5
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from app.core.config import BUSINESS_NAME, RECEIPT_DIR
from app.schemas.billing.billing_schemas import BillingOut
from app.utils.decimal_utils import money_text


@dataclass
class ReceiptData:
    title: str
    reference: str
    issued_at: datetime
    billing: BillingOut
    customer_lines: list[tuple[str, str]] = field(default_factory=list)
    item_header: list[str] = field(default_factory=lambda: ["Item", "Qty", "Price", "Total"])
    item_rows: list[list[str]] = field(default_factory=list)
    note: str | None = None


def _summary_rows(billing: BillingOut) -> list[list[str]]:
    rows = [
        ["Base Cost", money_text(billing.base_cost)],
        ["Discount", billing.discount_text],
    ]
    if billing.discount_amount > 0:
        rows.append(["Discount Amount", f"-{money_text(billing.discount_amount)}"])
    rows.append(["Discounted Cost", money_text(billing.discounted_cost)])
    if billing.down_payment > 0:
        rows.append(["Down Payment", money_text(billing.down_payment)])
    rows += [
        ["GCash", money_text(billing.gcash_amount)],
        ["Cash", money_text(billing.cash_amount)],
        ["Total Paid", money_text(billing.total_paid)],
    ]
    if billing.remaining > 0:
        rows.append(["Remaining", money_text(billing.remaining)])
    # a surplus down payment is already the "Total Change" line
    shown_change = billing.display_amount if billing.display_label == "Total Change" else 0
    if billing.change > shown_change:
        rows.append(["Change", money_text(billing.change)])
    rows.append([billing.display_label, money_text(billing.display_amount)])
    return rows


def generate_receipt_pdf(receipt: ReceiptData) -> str:
    """
    Render a receipt to RECEIPT_DIR and return the file path.
    """
    os.makedirs(RECEIPT_DIR, exist_ok=True)
    file_path = os.path.join(RECEIPT_DIR, f"Receipt_{receipt.reference}.pdf")

    styles = getSampleStyleSheet()
    story = []

    # -----------------------------
    # HEADER
    # -----------------------------
    story.append(Paragraph(f"<b>{BUSINESS_NAME}</b>", styles["Title"]))
    story.append(Paragraph(f"<b>{receipt.title}</b>", styles["Heading2"]))
    story.append(Paragraph(f"Receipt #: {receipt.reference}", styles["Normal"]))
    story.append(Paragraph(f"Date: {receipt.issued_at.strftime('%d-%m-%Y %H:%M')}", styles["Normal"]))
    story.append(Spacer(1, 10))

    # -----------------------------
    # CUSTOMER
    # -----------------------------
    if receipt.customer_lines:
        story.append(Paragraph("<b>Customer:</b>", styles["Heading3"]))
        for label, value in receipt.customer_lines:
            story.append(Paragraph(f"{label}: {escape(str(value))}", styles["Normal"]))
        story.append(Spacer(1, 10))

    # -----------------------------
    # ITEMS
    # -----------------------------
    if receipt.item_rows:
        data = [receipt.item_header] + receipt.item_rows
        table = Table(data)
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("ALIGN", (1, 1), (-1, -1), "CENTER"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
        ]))
        story.append(table)
        story.append(Spacer(1, 12))

    # -----------------------------
    # TOTALS
    # -----------------------------
    summary = Table(_summary_rows(receipt.billing), colWidths=[140, 120])
    summary.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEABOVE", (0, -1), (-1, -1), 0.75, colors.black),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
    ]))
    story.append(summary)
    story.append(Spacer(1, 12))

    status = "PAID" if receipt.billing.is_paid else "UNPAID"
    story.append(Paragraph(f"<b>Status: {status}</b>", styles["Heading2"]))
    if receipt.note:
        story.append(Paragraph(escape(receipt.note), styles["Normal"]))
    story.append(Spacer(1, 12))

    # -----------------------------
    # FOOTER
    # -----------------------------
    story.append(Paragraph("Thank you for studying with us!", styles["Italic"]))

    doc = SimpleDocTemplate(file_path, pagesize=A5)
    doc.build(story)

    return file_path
