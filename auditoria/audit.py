"""
Auditoria das aulas suplementares e sinalizações por competência.

Para cada contracheque, a hora-aula é a soma de vencimento base e
gratificações dividida pelas horas do vencimento base; a aula suplementar
vale a hora-aula acrescida de 50%. A diferença é o devido menos o pago.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from .config import OVERTIME_PREMIUM, PRESCRIPTION_YEARS, VINCENDAS_MONTHS
from .models import AuditRow, AuditTotals, Contracheque, Vinculo
from .utils import format_brl_money, increment_mes_ano, parse_brl_money, parse_mes_ano

FLAG_DUPLICADA = "Competência Duplicada"
FLAG_SEM_AULAS = "Sem Aulas Suplementares Lançadas"
FLAG_PRESCRICAO = "Prescrição Quinquenal (> 5 Anos)"


def sort_by_competencia(records: Sequence[Contracheque]) -> List[Contracheque]:
    """Ordem cronológica; sem competência válida ao final, na ordem original."""
    dated = [r for r in records if parse_mes_ano(r.mes_ano)]
    undated = [r for r in records if not parse_mes_ano(r.mes_ano)]
    return sorted(dated, key=lambda r: parse_mes_ano(r.mes_ano)) + undated


def prescription_cutoff(today: Optional[date] = None) -> date:
    return (today or date.today()) - relativedelta(years=PRESCRIPTION_YEARS)


def is_prescribed(record: Contracheque, today: Optional[date] = None) -> bool:
    ref = parse_mes_ano(record.mes_ano)
    return ref is not None and ref < prescription_cutoff(today)


def split_prescribed(
    records: Sequence[Contracheque], today: Optional[date] = None
) -> Tuple[List[Contracheque], List[Contracheque]]:
    """(ativos, prescritos). Registros sem competência permanecem ativos."""
    active, prescribed = [], []
    for r in records:
        (prescribed if is_prescribed(r, today) else active).append(r)
    return active, prescribed


def record_flags(records: Sequence[Contracheque], today: Optional[date] = None) -> List[List[str]]:
    """Avisos de extração + sinalizações de auditoria, alinhados com `records`."""
    counts = Counter(r.mes_ano for r in records if r.mes_ano)
    out = []
    for r in records:
        flags = list(r.warnings)
        if r.mes_ano and counts[r.mes_ano] > 1:
            flags.append(FLAG_DUPLICADA)
        if r.valor_aulas == 0:
            flags.append(FLAG_SEM_AULAS)
        if is_prescribed(r, today):
            flags.append(FLAG_PRESCRICAO)
        out.append(flags)
    return out


def compute_audit_row(record: Contracheque) -> AuditRow:
    venc = record.valor_vencimento_base
    tit = parse_brl_money(record.grat_titularidade)
    mag = parse_brl_money(record.grat_magisterio)
    esc = parse_brl_money(record.grat_escolaridade)
    horas = record.horas_base
    aulas = record.qtd_aulas
    pago = record.valor_aulas

    devido = 0.0
    if horas > 0:
        hora_aula = (venc + tit + mag + esc) / horas
        devido = hora_aula * OVERTIME_PREMIUM * aulas

    return AuditRow(
        mes_ano=record.mes_ano or "-",
        venc_base=venc,
        grat_tit=tit,
        grat_mag=mag,
        grat_esc=esc,
        horas_base=horas,
        aulas=aulas,
        pago=pago,
        devido=devido,
        diferenca=devido - pago,
    )


def project_vincendas(rows: List[AuditRow], vinculo: Optional[Vinculo]) -> List[AuditRow]:
    """Servidor efetivo: repete a última competência datada por mais 12 meses (vincendas)."""
    dated = [r for r in rows if parse_mes_ano(r.mes_ano)]
    if vinculo != Vinculo.EFETIVO or not dated:
        return list(rows)
    last = max(dated, key=lambda r: parse_mes_ano(r.mes_ano))
    out = list(rows)
    mes_ano = last.mes_ano
    for i in range(1, VINCENDAS_MONTHS + 1):
        mes_ano = increment_mes_ano(mes_ano)
        label = f"{mes_ano} (Vincenda {i})"
        out.append(last.model_copy(update={"mes_ano": label, "vincenda": True, "prescrita": False}))
    return out


def audit_rows(
    records: Sequence[Contracheque],
    vinculo: Optional[Vinculo] = None,
    today: Optional[date] = None,
) -> List[AuditRow]:
    rows = [
        compute_audit_row(r).model_copy(update={"prescrita": is_prescribed(r, today)})
        for r in records
    ]
    return project_vincendas(rows, vinculo)


def audit_totals(rows: Sequence[AuditRow]) -> AuditTotals:
    return AuditTotals(
        total_devidas=sum(r.devido for r in rows),
        total_recebido=sum(r.pago for r in rows),
        total_diferenca=sum(r.diferenca for r in rows),
    )


def build_summary_text(nome: Optional[str], totals: AuditTotals, missing: Sequence[str]) -> str:
    if missing:
        return (
            "ATENÇÃO: Foram identificadas interrupções na sequência lógica das competências "
            f"analisadas. As seguintes competências não foram localizadas: {', '.join(missing)}."
        )
    nome = nome or "[Nome do Servidor]"
    return (
        f"O servidor {nome} deveria ter recebido do Estado do Pará o valor de "
        f"R$ {format_brl_money(totals.total_devidas)}, no entanto recebeu apenas "
        f"R$ {format_brl_money(totals.total_recebido)}, sendo portanto devida a diferença "
        f"no valor de R$ {format_brl_money(totals.total_diferenca)}."
    )
