from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence, Tuple

from .config import (
    FGTS_FINE_RATE,
    FGTS_RATE,
    NOTICE_BASE_DAYS,
    NOTICE_DAYS_PER_YEAR,
    NOTICE_MAX_YEARS,
    VACATION_MULTIPLIER,
)
from .logging_config import log
from .models import (
    AvisoPrevio,
    Contracheque,
    Ferias,
    FgtsMensal,
    FgtsResumo,
    LaborCalculationResult,
    TipoFolha,
    Vinculo,
)
from .utils import parse_brl_money, parse_mes_ano


def completed_years(admissao: date, demissao: date) -> int:
    """Anos completos de serviço; o ano corrente só conta após o aniversário."""
    years = demissao.year - admissao.year
    if (demissao.month, demissao.day) < (admissao.month, admissao.day):
        years -= 1
    return years


def notice_days(admissao: Optional[date], demissao: Optional[date]) -> int:
    """30 dias + 3 por ano completo, limitado a 20 anos (máximo de 90 dias)."""
    if not admissao or not demissao:
        return NOTICE_BASE_DAYS
    years = max(0, min(completed_years(admissao, demissao), NOTICE_MAX_YEARS))
    return NOTICE_BASE_DAYS + NOTICE_DAYS_PER_YEAR * years


def calculate_labor_rights(
    data: Sequence[Contracheque],
    admissao: Optional[date],
    demissao: Optional[date],
    salario_base: float,
) -> LaborCalculationResult:
    """
    Verbas rescisórias e FGTS.

    `data` já vem filtrado (prescrição, erros) e ordenado pelo chamador.
    A multa de 40% incide só sobre os depósitos; o reflexo do FGTS sobre o
    aviso prévio fica fora da base da multa, mas entra no total geral.
    """
    salario_base = float(salario_base or 0.0)

    # 1. aviso prévio
    dias = notice_days(admissao, demissao)
    valor_aviso = (salario_base / 30) * dias
    reflexo = valor_aviso * FGTS_RATE

    # 2. férias + 1/3
    valor_ferias = salario_base * VACATION_MULTIPLIER

    # 3. FGTS mensal
    mensal: List[FgtsMensal] = []
    depositos = 0.0
    for row in data:
        bruto = row.bruto_mensal
        valor = bruto * FGTS_RATE
        depositos += valor
        mensal.append(FgtsMensal(competencia=row.mes_ano or "N/D", base=bruto, valor=valor))

    total_fgts = depositos
    multa = total_fgts * FGTS_FINE_RATE
    total_geral = valor_aviso + valor_ferias + reflexo + total_fgts + multa

    return LaborCalculationResult(
        aviso_previo=AvisoPrevio(dias=dias, valor=valor_aviso, reflexo_fgts=reflexo),
        ferias=Ferias(valor=valor_ferias),
        fgts=FgtsResumo(
            depositos=depositos,
            total=total_fgts,
            multa_40=multa,
            saldo_para_fins_rescisorios=total_fgts,
            mensal=mensal,
        ),
        total_geral=total_geral,
    )


def _looks_like_normal(row: Contracheque) -> bool:
    if row.tipo_folha == TipoFolha.NORMAL:
        return True
    if row.tipo_folha is None:
        label = (row.mes_ano or "").lower()
        return "13" not in label and "fér" not in label
    return False


def detect_last_salary(data: Sequence[Contracheque]) -> float:
    """
    Último salário bruto: contracheque NORMAL mais recente (ou qualquer um,
    se não houver NORMAL). Base Previdência tem preferência sobre a soma das verbas.
    """
    if not data:
        return 0.0
    normais = [r for r in data if _looks_like_normal(r)]
    pool = normais or list(data)
    # sorted é estável: sem competência vai para o início e nunca é o "mais recente"
    newest = sorted(pool, key=lambda r: parse_mes_ano(r.mes_ano) or date.min)[-1]
    return newest.bruto_mensal


def resolve_salary_basis(data: Sequence[Contracheque], manual_override: Optional[str] = None) -> float:
    if manual_override and str(manual_override).strip():
        value = parse_brl_money(manual_override)
        log.debug(f"Base de cálculo informada manualmente: {value:.2f}")
        return value
    return detect_last_salary(data)


def detect_vinculo(data: Sequence[Contracheque]) -> Tuple[Optional[Vinculo], bool]:
    """(vínculo do primeiro contracheque que o informa, é efetivo?)"""
    found = next((r.vinculo for r in data if r.vinculo), None)
    return found, found == Vinculo.EFETIVO
