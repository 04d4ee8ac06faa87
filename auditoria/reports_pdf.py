from __future__ import annotations
import io
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .config import OFFICE_NAME
from .date_utils import format_date_br
from .models import (
    AuditRow,
    AuditTotals,
    CorrectedEntry,
    CorrectionResult,
    FgtsLiquidation,
    LaborCalculationResult,
)
from .utils import format_brl_money

COLOR_PRIMARY = colors.Color(39 / 255, 49 / 255, 89 / 255)
COLOR_LIGHT = colors.Color(245 / 255, 245 / 255, 245 / 255)

DISCLAIMER = (
    "Este documento é um demonstrativo de cálculo estimado e não possui valor legal "
    "de homologação oficial."
)


def _fmt_money(v: Optional[float]) -> str:
    if v is None:
        return "-"
    return format_brl_money(v)


def _styles():
    styles = getSampleStyleSheet()
    return {
        "office": ParagraphStyle("Office", parent=styles["Heading1"], fontSize=18, textColor=COLOR_PRIMARY, spaceAfter=4),
        "title": ParagraphStyle("Title2", parent=styles["Heading2"], fontSize=14, textColor=colors.grey, spaceAfter=4),
        "normal": styles["Normal"],
        "italic": ParagraphStyle("Italic", parent=styles["Normal"], fontName="Helvetica-Oblique"),
        "bold": ParagraphStyle("Bold", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=12, spaceAfter=4),
        "center": ParagraphStyle("Center", parent=styles["Normal"], alignment=TA_CENTER),
        "small": ParagraphStyle("Small", parent=styles["Normal"], fontSize=8, textColor=colors.grey),
    }


def _header(elements: list, st: dict, title: str, logo_path: Optional[str]):
    if logo_path and Path(logo_path).exists():
        elements.append(Image(logo_path, width=35 * mm, height=20 * mm, hAlign="RIGHT"))
    elements.append(Paragraph(OFFICE_NAME.upper(), st["office"]))
    elements.append(Paragraph(title, st["title"]))
    elements.append(Paragraph(f"Gerado em: {datetime.now().strftime('%d/%m/%Y às %H:%M')}", st["normal"]))
    elements.append(Spacer(1, 8 * mm))


def _table(data: List[list], col_widths=None, foot_rows: int = 0, right_from: int = 1) -> Table:
    t = Table(data, colWidths=col_widths, repeatRows=1)
    style = [
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("BACKGROUND", (0, 0), (-1, 0), COLOR_PRIMARY),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (right_from, 1), (-1, -1), "RIGHT"),
    ]
    if foot_rows:
        style += [
            ("BACKGROUND", (0, -foot_rows), (-1, -1), COLOR_LIGHT),
            ("TEXTCOLOR", (0, -foot_rows), (-1, -1), COLOR_PRIMARY),
            ("FONTNAME", (0, -foot_rows), (-1, -1), "Helvetica-Bold"),
        ]
    t.setStyle(TableStyle(style))
    return t


def _page_number(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    w, _ = doc.pagesize
    canvas.drawRightString(w - doc.rightMargin, 10 * mm, f"Página {doc.page}")
    canvas.restoreState()


def _build(elements: list, pagesize) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=pagesize,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=15 * mm,
        bottomMargin=18 * mm,
    )
    doc.build(elements, onFirstPage=_page_number, onLaterPages=_page_number)
    return buf.getvalue()


def corrected_differences(rows: Sequence[AuditRow], corrections: Sequence[CorrectedEntry] = ()) -> List[float]:
    """Diferença por linha: corrigida + juros quando houver lançamento para a linha, senão a original."""
    by_row = {c.row_index: c.total for c in corrections if c.row_index is not None}
    return [by_row.get(i, r.diferenca) for i, r in enumerate(rows)]


def generate_audit_report(
    rows: Sequence[AuditRow],
    totals: AuditTotals,
    summary: str,
    nome: Optional[str],
    id_funcional: Optional[str],
    vinculo: Optional[str],
    corrections: Sequence[CorrectedEntry] = (),
    logo_path: Optional[str] = None,
) -> bytes:
    """
    Relatório de auditoria das aulas suplementares.
    Com `corrections`, a coluna Diferença mostra o valor corrigido + juros da competência.
    """
    st = _styles()
    elements: list = []
    _header(elements, st, "Relatório de Auditoria - Aulas Suplementares", logo_path)

    elements.append(Paragraph("Dados do Servidor:", st["bold"]))
    elements.append(Paragraph(f"Nome: {escape(nome or 'Não Identificado')}", st["normal"]))
    elements.append(Paragraph(f"Matrícula/ID: {escape(id_funcional or 'N/A')}", st["normal"]))
    elements.append(Paragraph(f"Vínculo Identificado: {escape(vinculo or 'Não Identificado')}", st["normal"]))
    elements.append(Spacer(1, 6 * mm))

    elements.append(Paragraph("Resumo dos Fatos:", st["bold"]))
    elements.append(Paragraph(escape(summary), st["italic"]))
    elements.append(Spacer(1, 6 * mm))
    elements.append(Paragraph("Detalhamento Mensal:", st["normal"]))
    elements.append(Spacer(1, 3 * mm))

    diferencas = corrected_differences(rows, corrections)
    data = [["Ref.", "V. Base", "G. Tit.", "G. Mag.", "G. Esc.", "Aulas", "Pago", "Devido", "Diferença"]]
    for r, diferenca in zip(rows, diferencas):
        data.append([
            r.mes_ano,
            _fmt_money(r.venc_base),
            _fmt_money(r.grat_tit),
            _fmt_money(r.grat_mag),
            _fmt_money(r.grat_esc),
            f"{r.aulas:g}",
            _fmt_money(r.pago),
            _fmt_money(r.devido),
            _fmt_money(diferenca),
        ])
    data.append([
        "TOTAIS GERAIS", "-", "-", "-", "-", "-",
        _fmt_money(totals.total_recebido),
        _fmt_money(totals.total_devidas),
        _fmt_money(sum(diferencas)),
    ])
    elements.append(_table(data, col_widths=[45 * mm] + [None] * 8, foot_rows=1))
    return _build(elements, landscape(A4))


def generate_severance_report(
    result: LaborCalculationResult,
    nome: Optional[str],
    admissao: Optional[date],
    demissao: Optional[date],
    salario_base: float,
    correction: Optional[CorrectionResult] = None,
    logo_path: Optional[str] = None,
) -> bytes:
    """Termo de cálculo de verbas rescisórias."""
    st = _styles()
    elements: list = []
    _header(elements, st, "Termo de Cálculo de Verbas Rescisórias", logo_path)

    card = Table(
        [
            [Paragraph("<b>Dados Contratuais</b>", st["normal"]), ""],
            [f"Funcionário: {nome or 'Servidor'}", ""],
            [f"Data de Admissão: {format_date_br(admissao)}", f"Data de Demissão: {format_date_br(demissao)}"],
            [f"Base de Cálculo: {_fmt_money(salario_base)}", ""],
        ],
        colWidths=[90 * mm, 80 * mm],
    )
    card.setStyle(TableStyle([
        ("BOX", (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ("BACKGROUND", (0, 0), (-1, -1), COLOR_LIGHT),
    ]))
    elements.append(card)
    elements.append(Spacer(1, 8 * mm))

    data = [
        ["Discriminação das Verbas", "Referência / Dias", "Valor Calculado"],
        ["Aviso Prévio Indenizado", f"{result.aviso_previo.dias} dias", _fmt_money(result.aviso_previo.valor)],
        ["Férias com 1/3", "Base + 30%", _fmt_money(result.ferias.valor)],
        ["Reflexo FGTS sobre Aviso Prévio", "8.00%", _fmt_money(result.aviso_previo.reflexo_fgts)],
    ]
    total = result.aviso_previo.valor + result.ferias.valor + result.aviso_previo.reflexo_fgts
    if correction:
        idx = correction.details.correction_index.value
        juros = correction.details.interest_type.value
        data.append([f"Atualização Monetária ({idx})", "-", _fmt_money(correction.correction_amount)])
        data.append([f"Juros de Mora ({juros})", "-", _fmt_money(correction.interest_amount)])
        data.append(["TOTAL ORIGINAL", "", _fmt_money(correction.original_value)])
        data.append(["TOTAL FINAL (Corrigido + Juros)", "", _fmt_money(correction.total_value)])
        foot = 2
    else:
        data.append(["TOTAL BRUTO A PAGAR", "", _fmt_money(total)])
        foot = 1
    elements.append(_table(data, col_widths=[90 * mm, 40 * mm, 40 * mm], foot_rows=foot, right_from=2))

    elements.append(Spacer(1, 10 * mm))
    elements.append(Paragraph(DISCLAIMER, st["small"]))
    return _build(elements, A4)


def generate_fgts_report(
    result: LaborCalculationResult,
    nome: Optional[str],
    id_funcional: Optional[str],
    vinculo: Optional[str],
    admissao: Optional[date],
    demissao: Optional[date],
    liquidation: Optional[FgtsLiquidation] = None,
    logo_path: Optional[str] = None,
) -> bytes:
    """Memória de cálculo do FGTS, com colunas de correção quando houver liquidação."""
    st = _styles()
    elements: list = []
    _header(elements, st, "Memória de Cálculo - FGTS", logo_path)

    elements.append(Paragraph(f"<b>Funcionário: {escape(nome or 'Servidor')}</b>", st["center"]))
    elements.append(Paragraph(
        f"ID Funcional: {escape(id_funcional or 'N/A')}   |   Vínculo: {escape(vinculo or 'N/A')}", st["center"]
    ))
    elements.append(Paragraph(
        f"Admissão: {format_date_br(admissao)}   |   Desligamento: {format_date_br(demissao)}", st["center"]
    ))
    elements.append(Spacer(1, 6 * mm))

    # multa sempre sobre os depósitos originais
    multa = result.fgts.multa_40
    total = (liquidation.total_final if liquidation else result.fgts.total) + multa
    elements.append(Paragraph(f"<b>Total FGTS Apurado: R$ {_fmt_money(total)}</b>", st["office"]))
    elements.append(Spacer(1, 6 * mm))

    if liquidation:
        data = [["Ref.", "FGTS Original", "Correção ($)", "Valor Atualizado", "Juros ($)", "Total"]]
        for entry in liquidation.mensal:
            calc = entry.correction
            data.append([
                entry.competencia,
                _fmt_money(entry.original),
                _fmt_money(calc.correction_amount) if calc else "-",
                _fmt_money(calc.corrected_value) if calc else "-",
                _fmt_money(calc.interest_amount) if calc else "-",
                _fmt_money(entry.total),
            ])
        data.append(["Subtotal Depósitos", _fmt_money(result.fgts.depositos), "-",
                     _fmt_money(liquidation.total_corrigido), _fmt_money(liquidation.total_juros),
                     _fmt_money(liquidation.total_final)])
        data.append(["Multa 40% (s/ depósitos)", "", "", "", "", _fmt_money(multa)])
    else:
        data = [["Ref.", "Base de Cálculo", "FGTS (8%)", "Status"]]
        for m in result.fgts.mensal:
            data.append([m.competencia, _fmt_money(m.base), _fmt_money(m.valor), m.status])
        data.append(["Total Depósitos", "", _fmt_money(result.fgts.depositos), ""])
        data.append(["Multa 40% (s/ depósitos)", "", _fmt_money(multa), ""])
    elements.append(_table(data, foot_rows=2))

    elements.append(Spacer(1, 10 * mm))
    elements.append(Paragraph(DISCLAIMER, st["small"]))
    return _build(elements, landscape(A4))
