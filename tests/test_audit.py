from datetime import date

import pytest

from auditoria.audit import (
    FLAG_DUPLICADA,
    FLAG_PRESCRICAO,
    FLAG_SEM_AULAS,
    audit_rows,
    audit_totals,
    build_summary_text,
    compute_audit_row,
    record_flags,
    sort_by_competencia,
    split_prescribed,
)
from auditoria.models import AuditTotals, Contracheque, ValorInfo, Vinculo


def stub(mes_ano, aulas="100,00", qtd="20.00", arquivo=None):
    return Contracheque(
        arquivo=arquivo,
        mes_ano=mes_ano,
        vencimento_base=ValorInfo(info="200.00", valor="2.000,00"),
        aulas_suplementares=ValorInfo(info=qtd, valor=aulas),
        grat_titularidade="400,00",
    )


def test_audit_row():
    row = compute_audit_row(stub("03/2021"))
    # (2000 + 400) / 200 = 12 por hora; 12 x 1,5 x 20 aulas = 360
    assert row.devido == pytest.approx(360.0)
    assert row.pago == pytest.approx(100.0)
    assert row.diferenca == pytest.approx(260.0)
    assert row.horas_base == 200.0
    assert row.mes_ano == "03/2021"


def test_zero_hours_gives_zero_due():
    c = Contracheque(mes_ano="03/2021", aulas_suplementares=ValorInfo(info="10.00", valor="50,00"))
    row = compute_audit_row(c)
    assert row.devido == 0.0
    assert row.diferenca == pytest.approx(-50.0)


def test_vincendas_for_efetivo():
    rows = audit_rows([stub("11/2021"), stub("12/2021")], Vinculo.EFETIVO)
    assert len(rows) == 14
    assert rows[2].mes_ano == "01/2022 (Vincenda 1)"
    assert rows[-1].mes_ano == "12/2022 (Vincenda 12)"
    assert all(r.vincenda for r in rows[2:])
    assert rows[2].devido == rows[1].devido


def test_no_vincendas_for_temporario():
    rows = audit_rows([stub("12/2021")], Vinculo.CONTRATO_TEMPORARIO)
    assert len(rows) == 1
    assert audit_rows([], Vinculo.EFETIVO) == []


def test_totals():
    totals = audit_totals(audit_rows([stub("01/2021"), stub("02/2021", aulas="360,00")]))
    assert totals.total_devidas == pytest.approx(720.0)
    assert totals.total_recebido == pytest.approx(460.0)
    assert totals.total_diferenca == pytest.approx(260.0)


def test_prescription_split():
    today = date(2024, 6, 1)
    old, edge, new, undated = stub("01/2019"), stub("06/2019"), stub("03/2024"), stub(None)
    active, prescribed = split_prescribed([old, edge, new, undated], today)
    assert prescribed == [old]
    assert active == [edge, new, undated]


def test_flags():
    today = date(2024, 6, 1)
    records = [stub("01/2019"), stub("03/2024", aulas=""), stub("03/2024")]
    flags = record_flags(records, today)
    assert FLAG_PRESCRICAO in flags[0]
    assert FLAG_DUPLICADA not in flags[0]
    assert FLAG_SEM_AULAS in flags[1]
    assert FLAG_DUPLICADA in flags[1] and FLAG_DUPLICADA in flags[2]
    assert FLAG_SEM_AULAS not in flags[2]


def test_sort_keeps_undated_last():
    a, b, c, d = stub("03/2021", arquivo="a"), stub(None, arquivo="b"), stub("Jan/2021", arquivo="c"), stub("x", arquivo="d")
    assert [r.arquivo for r in sort_by_competencia([a, b, c, d])] == ["c", "a", "b", "d"]


def test_summary_text():
    totals = AuditTotals(total_devidas=360.0, total_recebido=100.0, total_diferenca=260.0)
    text = build_summary_text("MARIA", totals, [])
    assert "O servidor MARIA" in text
    assert "R$ 360,00" in text and "R$ 260,00" in text
    assert build_summary_text(None, totals, []).startswith("O servidor [Nome do Servidor]")
    warn = build_summary_text("MARIA", totals, ["Fev/2021"])
    assert warn.startswith("ATENÇÃO")
    assert "Fev/2021" in warn


def test_vincendas_skip_undated_rows():
    rows = audit_rows([stub("11/2021"), stub("12/2021"), stub(None, aulas="999,00")], Vinculo.EFETIVO, date(2022, 1, 15))
    assert rows[3].mes_ano == "01/2022 (Vincenda 1)"
    assert rows[3].pago == 100.0
    assert len(rows) == 15


def test_vincendas_need_a_dated_row():
    rows = audit_rows([stub(None)], Vinculo.EFETIVO)
    assert len(rows) == 1


def test_rows_marked_prescribed():
    rows = audit_rows([stub("01/2019"), stub("03/2024")], Vinculo.EFETIVO, date(2024, 6, 1))
    assert [r.prescrita for r in rows[:2]] == [True, False]
    assert not any(r.prescrita for r in rows[2:])
