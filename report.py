from datetime import date, datetime
from typing import Iterable
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
)
from reportlab.pdfgen.canvas import Canvas

STATUS_LABEL = {
    "pendente": "Pendente",
    "atrasado": "Atrasado",
    "pago": "Pago",
    "cancelado": "Cancelado",
}


def _styles():
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("title", parent=base["Heading1"], fontSize=16, leading=20, spaceAfter=8),
        "label": ParagraphStyle("label", parent=base["Normal"], fontSize=9, leading=12, textColor=colors.grey),
        "value": ParagraphStyle("value", parent=base["Normal"], fontSize=10, leading=12),
        "value_bold": ParagraphStyle("value_bold", parent=base["Normal"], fontSize=10, leading=12, fontName="Helvetica-Bold"),
        "total": ParagraphStyle("total", parent=base["Heading3"], fontSize=12, leading=14, spaceBefore=6),
    }


def fmt_moeda(v) -> str:
    try:
        return f"{float(v):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    except (TypeError, ValueError):
        return "0,00"


def _fmt_data(d) -> str:
    return d.strftime("%d/%m/%Y") if d else "-"


def _footer(canvas: Canvas, doc):
    w, h = A4
    y = 12 * mm
    canvas.setStrokeColor(colors.lightgrey)
    canvas.setLineWidth(0.5)
    canvas.line(15 * mm, y + 6 * mm, w - 15 * mm, y + 6 * mm)
    canvas.setFont("Helvetica", 8)
    ts = datetime.now().strftime("%d/%m/%Y %H:%M:%S")
    canvas.drawRightString(w - 15 * mm, y + 2 * mm, f"Gerado em {ts}  •  Página {doc.page}")


def _title(mes_referencia: date):
    st = _styles()
    return Paragraph(
        f"Clube de Vantagens — Financeiro de <b>{mes_referencia:%m/%Y}</b>",
        st["title"],
    )


def _tabela(registros) -> Table:
    st = _styles()
    rows = [[
        Paragraph("Anunciante", st["label"]),
        Paragraph("Vencimento", st["label"]),
        Paragraph("Contratado", st["label"]),
        Paragraph("Pago", st["label"]),
        Paragraph("Pagamento", st["label"]),
        Paragraph("Status", st["label"]),
    ]]
    for r in registros:
        nome = r.anunciante.nome_empresa if r.anunciante else f"#{r.anunciante_id}"
        rows.append([
            Paragraph(escape(nome), st["value"]),
            Paragraph(_fmt_data(r.data_vencimento), st["value"]),
            Paragraph(fmt_moeda(r.valor_contratado), st["value"]),
            Paragraph(fmt_moeda(r.valor_pago) if r.valor_pago is not None else "-", st["value"]),
            Paragraph(_fmt_data(r.data_pagamento), st["value"]),
            Paragraph(STATUS_LABEL.get(r.status, r.status), st["value_bold"]),
        ])

    table = Table(rows, colWidths=[55*mm, 24*mm, 26*mm, 24*mm, 24*mm, 22*mm], repeatRows=1)
    table.setStyle(TableStyle([
        ("FONT", (0, 0), (-1, -1), "Helvetica", 9),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("BACKGROUND", (0, 0), (-1, 0), colors.whitesmoke),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("LEFTPADDING", (0, 0), (-1, -1), 4),
        ("RIGHTPADDING", (0, 0), (-1, -1), 4),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]))
    return table


def gerar_pdf_financeiro(registros: Iterable, mes_referencia: date) -> bytes:
    """PDF com os registros financeiros do mês e os totais contratado/recebido."""
    from io import BytesIO
    registros = list(registros)
    buff = BytesIO()

    doc = SimpleDocTemplate(
        buff,
        pagesize=A4,
        leftMargin=15*mm,
        rightMargin=15*mm,
        topMargin=18*mm,
        bottomMargin=18*mm,
        title=f"Financeiro do Clube {mes_referencia:%m/%Y}",
    )

    st = _styles()
    story = [_title(mes_referencia), Spacer(1, 4*mm)]
    if registros:
        story.append(_tabela(registros))
    else:
        story.append(Paragraph("Nenhum faturamento neste mês.", st["value"]))
    story.append(Spacer(1, 5*mm))

    contratado = sum(float(r.valor_contratado or 0) for r in registros)
    recebido = sum(float(r.valor_pago or 0) for r in registros if r.status == "pago")
    story.append(Paragraph(f"Total contratado: <b>R$ {fmt_moeda(contratado)}</b>", st["total"]))
    story.append(Paragraph(f"Total recebido: <b>R$ {fmt_moeda(recebido)}</b>", st["total"]))

    doc.build(story, onFirstPage=_footer, onLaterPages=_footer)
    pdf = buff.getvalue()
    buff.close()
    return pdf
