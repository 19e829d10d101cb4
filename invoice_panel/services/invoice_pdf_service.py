"""Printable invoice PDF rendered locally with ReportLab."""

from io import BytesIO
from typing import Any, Dict
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from invoice_panel.models import Invoice
from invoice_panel.services.invoice_status_service import status_label
from invoice_panel.services.totals_service import format_amount
from invoice_panel.utils.formatters import date_fr


def render_invoice_pdf(invoice: Invoice, business_info: Dict[str, Any]) -> BytesIO:
    """
    Render an invoice as an A4 PDF.

    Args:
        invoice: Invoice loaded from the backend
        business_info: name/address/phone/email, `currency` label and `footer_text`

    Returns:
        Buffer positioned at the start of the document
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.75*inch,
        leftMargin=0.75*inch,
        topMargin=0.75*inch,
        bottomMargin=0.75*inch,
        title=f"Facture {invoice.invoice_number}",
    )
    currency = business_info.get('currency', '')

    def money(value: float) -> str:
        return f"{format_amount(value)} {currency}".strip()

    elements = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'InvoiceTitle',
        parent=styles['Heading1'],
        fontSize=22,
        textColor=colors.HexColor('#2C3E50'),
        spaceAfter=12,
        alignment=TA_CENTER,
        fontName='Helvetica-Bold'
    )
    header_style = ParagraphStyle(
        'InvoiceHeader',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.HexColor('#7F8C8D'),
        alignment=TA_CENTER,
        spaceAfter=6
    )

    # 1. Title and business header
    elements.append(Paragraph("FACTURE", title_style))
    if business_info.get('name'):
        elements.append(Paragraph(f"<b>{escape(business_info['name'])}</b>", header_style))
    if business_info.get('address'):
        elements.append(Paragraph(escape(business_info['address']), header_style))

    contact_parts = []
    if business_info.get('phone'):
        contact_parts.append(f"Tél : {business_info['phone']}")
    if business_info.get('email'):
        contact_parts.append(f"Email : {business_info['email']}")
    if contact_parts:
        elements.append(Paragraph(" | ".join(contact_parts), header_style))

    elements.append(Spacer(1, 0.3*inch))

    # 2. Invoice metadata
    info_rows = [
        ['Facture N° :', invoice.invoice_number or '-'],
        ['Statut :', status_label(invoice.status)],
        ["Date d'émission :", date_fr(invoice.issue_date)],
    ]
    if invoice.due_date:
        info_rows.append(["Date d'échéance :", date_fr(invoice.due_date)])
    info_rows.append(['Client :', invoice.client_name])
    if invoice.client and invoice.client.email:
        info_rows.append(['Email :', invoice.client.email])
    if invoice.client and invoice.client.address:
        info_rows.append(['Adresse :', invoice.client.address])

    info_table = Table(info_rows, colWidths=[2*inch, 4*inch])
    info_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (0, -1), 'RIGHT'),
        ('ALIGN', (1, 0), (1, -1), 'LEFT'),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('TEXTCOLOR', (0, 0), (-1, -1), colors.HexColor('#34495E')),
    ]))
    elements.append(info_table)
    elements.append(Spacer(1, 0.3*inch))

    # 3. Items
    table_data = [['Produit/Service', 'Quantité', 'Prix unitaire', 'Total']]
    for item in invoice.items:
        table_data.append([
            item.product_name,
            str(item.quantity),
            money(item.unit_price),
            money(item.line_total),
        ])

    items_table = Table(table_data, colWidths=[3*inch, 0.9*inch, 1.4*inch, 1.4*inch])
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#3498DB')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
        ('ALIGN', (1, 1), (1, -1), 'CENTER'),
        ('ALIGN', (2, 1), (-1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#BDC3C7')),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#ECF0F1')]),
    ]))
    elements.append(items_table)
    elements.append(Spacer(1, 0.2*inch))

    # 4. Totals
    totals_table = Table([
        ['Sous-total HT :', money(invoice.subtotal)],
        [f"TVA ({invoice.tax_rate:g}%) :", money(invoice.tax_amount)],
        ['Total TTC :', money(invoice.total)],
    ], colWidths=[5.3*inch, 1.4*inch])
    totals_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('FONTNAME', (0, 2), (-1, 2), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 2), (-1, 2), 13),
        ('TEXTCOLOR', (0, 2), (-1, 2), colors.HexColor('#27AE60')),
        ('LINEABOVE', (0, 2), (-1, 2), 1, colors.HexColor('#27AE60')),
    ]))
    elements.append(totals_table)
    elements.append(Spacer(1, 0.4*inch))

    # 5. Notes and footer
    footer_style = ParagraphStyle('Footer', parent=styles['Normal'], fontSize=9, textColor=colors.HexColor('#95A5A6'), alignment=TA_CENTER)
    if invoice.notes:
        elements.append(Paragraph(f"<b>Notes :</b> {escape(invoice.notes)}", styles['Normal']))
        elements.append(Spacer(1, 0.2*inch))
    if business_info.get('footer_text'):
        elements.append(Paragraph(escape(business_info['footer_text']).replace('\n', '<br/>'), footer_style))

    doc.build(elements)
    buffer.seek(0)
    return buffer
