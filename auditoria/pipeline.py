"""
Ponto único de recálculo.

Qualquer alteração de entrada (arquivos, datas, salário, correção) chama
`recompute`, que refaz tudo a partir dos contracheques. Não há cache nem
atualização parcial.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from .audit import (
    audit_rows,
    audit_totals,
    build_summary_text,
    record_flags,
    sort_by_competencia,
    split_prescribed,
)
from .date_utils import parse_iso_date
from .labor import calculate_labor_rights, detect_last_salary, detect_vinculo, resolve_salary_basis
from .liquidation import liquidate
from .logging_config import log
from .models import (
    AuditRow,
    AuditTotals,
    Contracheque,
    LaborCalculationResult,
    LiquidationResult,
    LiquidationSettings,
    Vinculo,
)
from .utils import detect_missing_competencias


class AuditInputs(BaseModel):
    admissao: Optional[str] = None   # AAAA-MM-DD
    demissao: Optional[str] = None   # AAAA-MM-DD
    salario_manual: Optional[str] = None  # "3.000,00"
    liquidation: LiquidationSettings = Field(default_factory=LiquidationSettings)


class AuditSnapshot(BaseModel):
    records: List[Contracheque] = Field(default_factory=list)
    failed: List[Contracheque] = Field(default_factory=list)
    prescribed: List[Contracheque] = Field(default_factory=list)
    flags: List[List[str]] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    vinculo: Optional[Vinculo] = None
    is_efetivo: bool = False
    audit: List[AuditRow] = Field(default_factory=list)
    totals: AuditTotals = Field(default_factory=AuditTotals)
    summary: str = ""
    detected_salary: float = 0.0
    salary_basis: float = 0.0
    labor: LaborCalculationResult = Field(default_factory=LaborCalculationResult)
    liquidation: Optional[LiquidationResult] = None


def recompute(
    records: List[Contracheque],
    inputs: Optional[AuditInputs] = None,
    today: Optional[date] = None,
) -> AuditSnapshot:
    inputs = inputs or AuditInputs()
    today = today or date.today()

    failed = [r for r in records if r.error]
    ordered = sort_by_competencia([r for r in records if not r.error])
    active, prescribed = split_prescribed(ordered, today)

    vinculo, is_efetivo = detect_vinculo(ordered)
    rows = audit_rows(ordered, vinculo, today)
    totals = audit_totals(rows)
    missing = detect_missing_competencias([r.mes_ano for r in ordered])
    nome = next((r.nome for r in ordered if r.nome), None)

    admissao = parse_iso_date(inputs.admissao)
    demissao = parse_iso_date(inputs.demissao)
    salary = resolve_salary_basis(active, inputs.salario_manual)
    labor = calculate_labor_rights(active, admissao, demissao, salary)
    liquidation = liquidate(labor, rows, demissao, inputs.liquidation, today)

    log.debug(
        f"Recalculado: {len(active)} ativos, {len(prescribed)} prescritos, "
        f"{len(failed)} com erro, {len(missing)} competências ausentes"
    )
    return AuditSnapshot(
        records=ordered,
        failed=failed,
        prescribed=prescribed,
        flags=record_flags(ordered, today),
        missing=missing,
        vinculo=vinculo,
        is_efetivo=is_efetivo,
        audit=rows,
        totals=totals,
        summary=build_summary_text(nome, totals, missing),
        detected_salary=detect_last_salary(active),
        salary_basis=salary,
        labor=labor,
        liquidation=liquidation,
    )
