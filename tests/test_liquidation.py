from datetime import date

import pytest

from auditoria.liquidation import liquidate, liquidate_fgts, liquidate_shortfalls
from auditoria.models import (
    AuditRow,
    CorrectionIndex,
    FgtsMensal,
    FgtsResumo,
    InterestType,
    LaborCalculationResult,
    LiquidationSettings,
)

REF = date(2024, 4, 15)


def labor_result():
    mensal = [FgtsMensal(competencia="01/2024", base=1250.0, valor=100.0), FgtsMensal(valor=50.0)]
    return LaborCalculationResult(fgts=FgtsResumo(depositos=150.0, total=150.0, multa_40=60.0, mensal=mensal))


def test_disabled_returns_none():
    assert liquidate(labor_result(), [], date(2024, 3, 31), LiquidationSettings(), REF) is None


def test_fgts_each_deposit_from_its_due_date():
    settings = LiquidationSettings(enabled=True, interest_type=InterestType.NONE)
    liq = liquidate_fgts(labor_result(), settings, REF)
    first, undated = liq.mensal
    assert first.due_date == date(2024, 2, 10)
    # mar/2024 (0,83) + abr/2024 (0,89)
    assert first.correction.corrected_value == pytest.approx(101.72)
    assert undated.due_date is None and undated.correction is None
    assert undated.total == 50.0
    assert liq.total_corrigido == pytest.approx(151.72)
    assert liq.total_juros == 0
    assert liq.total_final == pytest.approx(151.72)
    assert liq.multa_total == pytest.approx(60.0)


def test_fgts_total_counts_interest_once():
    settings = LiquidationSettings(enabled=True, interest_type=InterestType.SIMPLE_1)
    liq = liquidate_fgts(labor_result(), settings, REF)
    assert liq.total_juros > 0
    assert liq.total_final == pytest.approx(liq.total_corrigido + liq.total_juros)
    assert liq.total_final == pytest.approx(sum(e.total for e in liq.mensal))


def test_shortfalls_skip_vincendas_and_small_differences():
    rows = [
        AuditRow(mes_ano="12/2023", diferenca=260.0),
        AuditRow(mes_ano="01/2024", diferenca=0.005),
        AuditRow(mes_ano="02/2024", diferenca=-10.0),
        AuditRow(mes_ano="03/2024 (Vincenda 1)", diferenca=260.0, vincenda=True),
    ]
    out = liquidate_shortfalls(rows, LiquidationSettings(enabled=True), REF)
    assert [e.competencia for e in out] == ["12/2023"]
    assert out[0].due_date == date(2024, 1, 5)
    assert out[0].total > 260.0


def test_liquidate_severance_due_date():
    settings = LiquidationSettings(enabled=True, correction_index=CorrectionIndex.IPCA_E)
    res = labor_result().model_copy(deep=True)
    res.aviso_previo.valor = 3000.0
    res.ferias.valor = 3900.0
    res.aviso_previo.reflexo_fgts = 240.0
    liq = liquidate(res, [AuditRow(mes_ano="12/2023", diferenca=100.0)], date(2024, 1, 31), settings, REF)
    assert liq.rescisao_due_date == date(2024, 2, 10)
    assert liq.rescisao.original_value == pytest.approx(7140.0)
    assert liq.rescisao.details.correction_index == CorrectionIndex.IPCA_E
    assert len(liq.audit) == 1


def test_shortfalls_skip_prescribed_rows_and_keep_row_position():
    rows = [
        AuditRow(mes_ano="03/2018", diferenca=500.0, prescrita=True),
        AuditRow(mes_ano="03/2024", diferenca=200.0),
        AuditRow(mes_ano="03/2024", diferenca=100.0),
    ]
    out = liquidate_shortfalls(rows, LiquidationSettings(enabled=True), REF)
    assert [e.row_index for e in out] == [1, 2]
    assert [e.original for e in out] == [200.0, 100.0]
