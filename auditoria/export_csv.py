from __future__ import annotations
import csv
from typing import List, Sequence

import pandas as pd

from .audit import compute_audit_row
from .models import Contracheque
from .utils import format_brl_money

CSV_COLUMNS = [
    "Arquivo", "Nome", "Matrícula", "Mês/Ano",
    "Venc. Base (Info)", "Venc. Base (Valor)",
    "Aulas Supl. (Info)", "Aulas Supl. (Valor)",
    "Grat. Titularidade", "Grat. Magistério", "Grat. Escolaridade",
    "Aulas Supl. (Devidas)", "Diferença a Receber",
]


def csv_rows(records: Sequence[Contracheque]) -> List[list]:
    rows = []
    for r in records:
        audit = compute_audit_row(r)
        rows.append([
            r.arquivo or "",
            r.nome or "",
            r.id_funcional or "",
            r.mes_ano or "",
            r.vencimento_base.info, r.vencimento_base.valor,
            r.aulas_suplementares.info, r.aulas_suplementares.valor,
            r.grat_titularidade,
            r.grat_magisterio,
            r.grat_escolaridade,
            format_brl_money(audit.devido),
            format_brl_money(audit.diferenca),
        ])
    return rows


def build_csv(records: Sequence[Contracheque]) -> str:
    """CSV ";" com todos os campos entre aspas (planilha de auditoria)."""
    df = pd.DataFrame(csv_rows(records), columns=CSV_COLUMNS)
    return df.to_csv(sep=";", index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
