from auditoria.extractors import (
    classify_tipo_folha,
    classify_vinculo,
    extract_first_value,
    extract_line_parts,
    extract_paystub_data,
    extract_paystub_text,
)
from auditoria.models import TipoFolha, Vinculo


def test_base_line_parts():
    parts = extract_line_parts("1Vencimento Base200.001/2021***********2.069,08", "Vencimento Base")
    assert parts.info == "200.00"
    assert parts.valor == "2.069,08"


def test_first_amount_is_credit():
    assert extract_first_value("Vencimento Base 200.00 2.069,08 150,00") == "2.069,08"
    assert extract_first_value("sem valores") is None


def test_line_without_amount():
    assert extract_line_parts("Vencimento Base 200.00", "Vencimento Base") is None


def test_repeated_lines_are_summed():
    c = extract_paystub_data([
        "Referência 03/2021",
        "Vencimento Base 100.00 1.000,00",
        "Vencimento Base 100.00 500,00 20,00",
        "Grat Titularidade 300,00",
        "Grat Titularidade 200,00",
    ])
    assert c.vencimento_base.valor == "1.500,00"
    assert c.vencimento_base.info == "100.00"
    assert c.grat_titularidade == "500,00"
    assert "Vencimento Base (Soma de 2 linhas)" in c.warnings
    assert "Grat. Titularidade (Soma de 2 linhas)" in c.warnings


def test_header_fields():
    c = extract_paystub_data([
        "Nome",
        "MARIA DA SILVA",
        "ID Funcional",
        "54321/1",
        "Referência 03/2021",
        "Aulas Suplementares 20.00 300,00",
        "Grat Magistério 150,00",
        "Grat Escolaridade 80,00",
    ], arquivo="maria.pdf")
    assert c.arquivo == "maria.pdf"
    assert c.nome == "MARIA DA SILVA"
    assert c.id_funcional == "54321/1"
    assert c.mes_ano == "03/2021"
    assert c.aulas_suplementares.info == "20.00"
    assert c.aulas_suplementares.valor == "300,00"
    assert c.grat_magisterio == "150,00"
    assert c.grat_escolaridade == "80,00"
    assert c.warnings == []


def test_textual_period_and_tipo_folha():
    c = extract_paystub_text("Folha Normal - Mar/2021\nVencimento Base 200.00 2.000,00")
    assert c.mes_ano == "Mar/2021"
    assert c.tipo_folha == TipoFolha.NORMAL


def test_classify_tipo_folha():
    assert classify_tipo_folha("Folha de 13º Salário") == TipoFolha.DECIMO
    assert classify_tipo_folha("Folha de Férias") == TipoFolha.FERIAS
    assert classify_tipo_folha("qualquer") is None


def test_vinculo_local_context():
    c = extract_paystub_data(["Tipo de Vínculo", "EFETIVO"])
    assert c.vinculo == Vinculo.EFETIVO
    c = extract_paystub_data(["Cargo", "PROFESSOR", "CONTRATO TEMPORÁRIO"])
    assert c.vinculo == Vinculo.CONTRATO_TEMPORARIO


def test_vinculo_document_fallback():
    c = extract_paystub_data(["SERVIDOR PUBLICO", "VÍNCULO: EFETIVO"])
    assert c.vinculo == Vinculo.EFETIVO


def test_vinculo_unknown():
    assert classify_vinculo("PROFESSOR CLASSE I") is None
    assert extract_paystub_data(["Cargo", "PROFESSOR"]).vinculo is None


def test_base_previdencia_next_line():
    c = extract_paystub_data(["Base Previdência", "3.500,00 1.000,00", "Vencimento Base 200.00 2.000,00"])
    assert c.base_previdencia == "3.500,00"
    assert c.bruto_mensal == 3500.0


def test_missing_period_and_hours():
    c = extract_paystub_data(["Vencimento Base 2.069,08"])
    assert c.mes_ano is None
    assert c.vencimento_base.valor == "2.069,08"
    assert "Vencimento Base sem horas" in c.warnings
    assert "Competência não identificada" in c.warnings


def test_bruto_without_base_previdencia():
    c = extract_paystub_data([
        "Vencimento Base 200.00 2.000,00",
        "Aulas Suplementares 10.00 100,00",
        "Grat Titularidade 400,00",
    ])
    assert c.bruto_mensal == 2500.0
