"""
Correção monetária e juros de mora.

A correção acumula, mês a mês, a taxa do índice escolhido a partir do mês
seguinte ao vencimento até o mês de referência (inclusive). Os juros são
simples, contados em dias a partir do vencimento com mês comercial de 30
dias, e incidem sobre o principal já corrigido (Súmula 200 do TST).

As tabelas são esparsas (chave ``AAAA-MM``, valor em % ao mês). Meses
ausentes usam a taxa de fallback do índice.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional

from .models import (
    CorrectionDetails,
    CorrectionIndex,
    CorrectionResult,
    InterestType,
)
from .utils import add_months

SELIC_TABLE: Dict[str, float] = {
    "2025-01": 0.90, "2025-02": 0.85,
    "2024-12": 0.88, "2024-11": 0.80, "2024-10": 0.93, "2024-09": 0.84,
    "2024-08": 0.87, "2024-07": 0.91, "2024-06": 0.79, "2024-05": 0.83, "2024-04": 0.89,
    "2024-03": 0.83, "2024-02": 0.80, "2024-01": 0.97,
    "2023-12": 0.89, "2023-11": 0.92, "2023-10": 1.00, "2023-09": 0.97, "2023-08": 1.14,
    "2023-07": 1.07, "2023-06": 1.07, "2023-05": 1.12, "2023-04": 0.92, "2023-03": 1.17,
    "2023-02": 0.92, "2023-01": 1.12,
    "2022-12": 1.12, "2022-11": 1.02, "2022-10": 1.02, "2022-09": 1.07, "2022-08": 1.17,
    "2022-07": 1.03, "2022-06": 1.02, "2022-05": 1.03, "2022-04": 0.83, "2022-03": 0.93,
    "2022-02": 0.76, "2022-01": 0.73,
    "2021-12": 0.77, "2021-11": 0.59, "2021-10": 0.49, "2021-09": 0.44, "2021-08": 0.43,
    "2021-07": 0.36, "2021-06": 0.31, "2021-05": 0.27, "2021-04": 0.21, "2021-03": 0.20,
    "2021-02": 0.13, "2021-01": 0.15,
    "2020-12": 0.16, "2020-11": 0.15, "2020-10": 0.16, "2020-09": 0.16, "2020-08": 0.16,
    "2020-07": 0.19, "2020-06": 0.21, "2020-05": 0.24, "2020-04": 0.28, "2020-03": 0.34,
    "2020-02": 0.29, "2020-01": 0.38,
}

# IPCA-E e INPC compartilham a mesma amostra reduzida
IPCA_E_TABLE: Dict[str, float] = {
    "2024-12": 0.50, "2024-11": 0.30, "2024-10": 0.50, "2024-09": 0.40, "2024-08": 0.20,
    "2024-07": 0.40, "2024-06": 0.21, "2024-05": 0.46, "2024-04": 0.38, "2024-03": 0.16,
}
INPC_TABLE: Dict[str, float] = dict(IPCA_E_TABLE)

INDEX_TABLES: Dict[CorrectionIndex, Dict[str, float]] = {
    CorrectionIndex.SELIC: SELIC_TABLE,
    CorrectionIndex.IPCA_E: IPCA_E_TABLE,
    CorrectionIndex.INPC: INPC_TABLE,
}

FALLBACK_RATES: Dict[CorrectionIndex, float] = {
    CorrectionIndex.SELIC: 0.5,
    CorrectionIndex.IPCA_E: 0.3,
    CorrectionIndex.INPC: 0.3,
}

MONTHLY_INTEREST: Dict[InterestType, float] = {
    InterestType.NONE: 0.0,
    InterestType.SIMPLE_1: 1.0,
    InterestType.SIMPLE_05: 0.5,
}

COMMERCIAL_MONTH_DAYS = 30


def index_rate(index: CorrectionIndex, year: int, month: int) -> float:
    key = f"{year}-{month:02d}"
    return INDEX_TABLES[index].get(key, FALLBACK_RATES[index])


def accumulated_index(index: CorrectionIndex, due_date: date, reference_date: date) -> float:
    """Soma das taxas (%) do mês seguinte ao vencimento até o mês de referência."""
    current = add_months(date(due_date.year, due_date.month, 1), 1)
    end = date(reference_date.year, reference_date.month, 1)
    total = 0.0
    while current <= end:
        total += index_rate(index, current.year, current.month)
        current = add_months(current, 1)
    return total


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def empty_result() -> CorrectionResult:
    return CorrectionResult()


def calculate_correction(
    principal: Optional[float],
    due_date: Optional[date],
    correction_index: CorrectionIndex = CorrectionIndex.SELIC,
    interest_type: InterestType = InterestType.NONE,
    reference_date: Optional[date] = None,
) -> CorrectionResult:
    if not principal or not due_date:
        return empty_result()

    correction_index = CorrectionIndex(correction_index)
    interest_type = InterestType(interest_type)
    reference_date = _as_date(reference_date or date.today())
    due_date = _as_date(due_date)

    # 1. correção monetária
    accumulated = accumulated_index(correction_index, due_date, reference_date)
    correction_amount = principal * (accumulated / 100)
    corrected = principal + correction_amount

    # 2. juros simples sobre o principal corrigido
    interest_amount = 0.0
    interest_rate = 0.0
    days = 0
    monthly = MONTHLY_INTEREST[interest_type]
    if monthly and reference_date > due_date:
        days = (reference_date - due_date).days
        interest_rate = days * (monthly / COMMERCIAL_MONTH_DAYS) / 100
        interest_amount = corrected * interest_rate

    return CorrectionResult(
        original_value=principal,
        corrected_value=corrected,
        correction_amount=correction_amount,
        interest_amount=interest_amount,
        total_value=corrected + interest_amount,
        correction_factor=accumulated,
        interest_factor=interest_rate * 100,
        details=CorrectionDetails(
            correction_index=correction_index,
            interest_type=interest_type,
            days_elapsed=days,
        ),
    )
