import io
from datetime import date

import pdfplumber
from openpyxl import load_workbook

from auditoria.audit import audit_rows, audit_totals, build_summary_text
from auditoria.correction import calculate_correction
from auditoria.export_csv import CSV_COLUMNS, build_csv
from auditoria.export_xlsx import export_audit_xlsx
from auditoria.labor import calculate_labor_rights
from auditoria.liquidation import liquidate, liquidate_shortfalls
from auditoria.models import AuditRow, Contracheque, LiquidationSettings, ValorInfo, Vinculo
from auditoria.reports_pdf import (
    corrected_differences,
    generate_audit_report,
    generate_fgts_report,
    generate_severance_report,
)
from auditoria.utils import format_brl_money


def records():
    return [
        Contracheque(
            arquivo=f"{m}.pdf",
            nome="MARIA DA SILVA",
            id_funcional="54321/1",
            mes_ano=f"{m:02d}/2024",
            vencimento_base=ValorInfo(info="200.00", valor="2.000,00"),
            aulas_suplementares=ValorInfo(info="20.00", valor="100,00"),
            grat_titularidade="400,00",
        )
        for m in (1, 2)
    ]


def test_csv_layout():
    out = build_csv(records())
    lines = out.strip("\n").split("\n")
    assert len(CSV_COLUMNS) == 13
    assert lines[0] == ";".join(f'"{c}"' for c in CSV_COLUMNS)
    assert len(lines) == 3
    first = lines[1].split(";")
    assert first[0] == '"1.pdf"'
    assert first[3] == '"01/2024"'
    assert first[-2] == '"360,00"'
    assert first[-1] == '"260,00"'


def test_xlsx_sheets(tmp_path):
    rows = audit_rows(records())
    labor = calculate_labor_rights(records(), None, None, 2500.0)
    out = tmp_path / "auditoria.xlsx"
    export_audit_xlsx(rows, str(out), fgts=labor.fgts.mensal)
    wb = load_workbook(out)
    assert wb.sheetnames == ["Auditoria", "FGTS"]
    ws = wb["Auditoria"]
    assert ws["A1"].value == "Ref."
    assert ws["A2"].value == "01/2024"
    assert ws.max_row == 3


def test_xlsx_without_fgts(tmp_path):
    out = tmp_path / "auditoria.xlsx"
    export_audit_xlsx(audit_rows(records(), Vinculo.EFETIVO), str(out))
    wb = load_workbook(out)
    assert wb.sheetnames == ["Auditoria"]
    assert wb["Auditoria"].max_row == 15


def test_pdf_reports():
    recs = records()
    rows = audit_rows(recs, Vinculo.EFETIVO)
    totals = audit_totals(rows)
    summary = build_summary_text("MARIA DA SILVA", totals, [])
    labor = calculate_labor_rights(recs, date(2020, 1, 1), date(2024, 3, 31), 2500.0)
    liq = liquidate(labor, rows, date(2024, 3, 31), LiquidationSettings(enabled=True), date(2024, 6, 1))

    pdf = generate_audit_report(rows, totals, summary, "MARIA DA SILVA", "54321/1", "EFETIVO")
    assert pdf.startswith(b"%PDF")
    pdf = generate_audit_report(rows, totals, summary, None, None, None, corrections=liq.audit)
    assert pdf.startswith(b"%PDF")

    pdf = generate_severance_report(labor, "MARIA DA SILVA", date(2020, 1, 1), date(2024, 3, 31), 2500.0)
    assert pdf.startswith(b"%PDF")
    correction = calculate_correction(5000.0, date(2024, 4, 10), reference_date=date(2024, 6, 1))
    pdf = generate_severance_report(labor, None, None, None, 2500.0, correction=correction)
    assert pdf.startswith(b"%PDF")

    pdf = generate_fgts_report(labor, "MARIA DA SILVA", "54321/1", "EFETIVO", date(2020, 1, 1), date(2024, 3, 31))
    assert pdf.startswith(b"%PDF")
    pdf = generate_fgts_report(labor, None, None, None, None, None, liquidation=liq.fgts)
    assert pdf.startswith(b"%PDF")


def pdf_lines(data):
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages).split("\n")


def test_audit_report_duplicate_period_keeps_each_row_value():
    rows = [AuditRow(mes_ano="03/2024", diferenca=200.0), AuditRow(mes_ano="03/2024", diferenca=100.0)]
    entries = liquidate_shortfalls(rows, LiquidationSettings(enabled=True), date(2024, 6, 1))
    assert corrected_differences(rows, entries) == [entries[0].total, entries[1].total]
    assert entries[0].total > 200.0 > entries[1].total

    pdf = generate_audit_report(rows, audit_totals(rows), "Resumo", "MARIA", None, None, corrections=entries)
    lines = [l for l in pdf_lines(pdf) if l.startswith("03/2024")]
    assert len(lines) == 2
    assert lines[0].endswith(format_brl_money(entries[0].total))
    assert lines[1].endswith(format_brl_money(entries[1].total))
    total = [l for l in pdf_lines(pdf) if l.startswith("TOTAIS GERAIS")][0]
    assert total.endswith(format_brl_money(entries[0].total + entries[1].total))


def test_reports_escape_markup_in_names():
    recs = records()
    rows = audit_rows(recs)
    nome = "SILVA & SOUZA <ME>"
    summary = build_summary_text(nome, audit_totals(rows), [])
    pdf = generate_audit_report(rows, audit_totals(rows), summary, nome, "1/1", "A&B")
    assert "Nome: SILVA & SOUZA <ME>" in pdf_lines(pdf)
    labor = calculate_labor_rights(recs, None, None, 2500.0)
    assert generate_fgts_report(labor, nome, "<1>", None, None, None).startswith(b"%PDF")
