from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from .config import FGTS_FINE_RATE, SHORTFALL_TOLERANCE
from .correction import calculate_correction
from .date_utils import fgts_due_date, severance_due_date, shortfall_due_date
from .logging_config import log
from .models import (
    AuditRow,
    CorrectedEntry,
    FgtsLiquidation,
    LaborCalculationResult,
    LiquidationResult,
    LiquidationSettings,
)


def liquidate_fgts(
    result: LaborCalculationResult,
    settings: LiquidationSettings,
    reference_date: Optional[date] = None,
) -> FgtsLiquidation:
    """Cada depósito mensal é corrigido a partir do seu próprio vencimento (dia 10 do mês seguinte)."""
    entries: List[CorrectedEntry] = []
    total_corrigido = 0.0
    total_juros = 0.0
    for item in result.fgts.mensal:
        due = fgts_due_date(item.competencia)
        if due is None:
            entries.append(CorrectedEntry(competencia=item.competencia, original=item.valor))
            total_corrigido += item.valor
            continue
        calc = calculate_correction(
            item.valor, due, settings.correction_index, settings.interest_type, reference_date
        )
        entries.append(CorrectedEntry(
            competencia=item.competencia, original=item.valor, due_date=due, correction=calc
        ))
        total_corrigido += calc.corrected_value
        total_juros += calc.interest_amount

    return FgtsLiquidation(
        total_corrigido=total_corrigido,
        total_juros=total_juros,
        total_final=total_corrigido + total_juros,
        # multa sobre os depósitos originais, sem correção
        multa_total=result.fgts.depositos * FGTS_FINE_RATE,
        mensal=entries,
    )


def liquidate_shortfalls(
    rows: Sequence[AuditRow],
    settings: LiquidationSettings,
    reference_date: Optional[date] = None,
) -> List[CorrectedEntry]:
    """
    Diferenças de aulas suplementares vencem no 5º dia do mês seguinte.
    Vincendas e competências prescritas não são liquidadas; `row_index`
    aponta para a linha correspondente em `rows`.
    """
    out: List[CorrectedEntry] = []
    for idx, row in enumerate(rows):
        if row.vincenda or row.prescrita or row.diferenca <= SHORTFALL_TOLERANCE:
            continue
        due = shortfall_due_date(row.mes_ano)
        if due is None:
            continue
        calc = calculate_correction(
            row.diferenca, due, settings.correction_index, settings.interest_type, reference_date
        )
        out.append(CorrectedEntry(
            competencia=row.mes_ano, row_index=idx, original=row.diferenca, due_date=due, correction=calc
        ))
    return out


def liquidate(
    result: LaborCalculationResult,
    audit: Sequence[AuditRow],
    demissao: Optional[date],
    settings: LiquidationSettings,
    reference_date: Optional[date] = None,
) -> Optional[LiquidationResult]:
    if not settings.enabled:
        return None

    fgts = liquidate_fgts(result, settings, reference_date)

    principal = result.aviso_previo.valor + result.ferias.valor + result.aviso_previo.reflexo_fgts
    due = severance_due_date(demissao, reference_date)
    rescisao = calculate_correction(
        principal, due, settings.correction_index, settings.interest_type, reference_date
    )

    shortfalls = liquidate_shortfalls(audit, settings, reference_date)
    log.debug(
        f"Liquidação: {len(fgts.mensal)} depósitos FGTS, {len(shortfalls)} diferenças corrigidas "
        f"({settings.correction_index.value} / {settings.interest_type.value})"
    )
    return LiquidationResult(fgts=fgts, rescisao=rescisao, rescisao_due_date=due, audit=shortfalls)
