from __future__ import annotations
import pandas as pd
from typing import List, Sequence
from openpyxl import load_workbook
from openpyxl.drawing.image import Image as XLImage
from pathlib import Path

from .models import AuditRow, FgtsMensal

AUDIT_HEADERS = {
    "mes_ano": "Ref.",
    "venc_base": "V. Base",
    "grat_tit": "G. Tit.",
    "grat_mag": "G. Mag.",
    "grat_esc": "G. Esc.",
    "horas_base": "Horas",
    "aulas": "Aulas",
    "pago": "Pago",
    "devido": "Devido",
    "diferenca": "Diferença",
}


def audit_dataframe(rows: Sequence[AuditRow]) -> pd.DataFrame:
    df = pd.DataFrame([r.model_dump() for r in rows], columns=list(AUDIT_HEADERS) + ["vincenda"])
    df = df.drop(columns=["vincenda"]).rename(columns=AUDIT_HEADERS)
    return df.round(2)


def fgts_dataframe(mensal: Sequence[FgtsMensal]) -> pd.DataFrame:
    df = pd.DataFrame([m.model_dump() for m in mensal], columns=["competencia", "base", "valor", "status"])
    df.columns = ["Competência", "Base", "FGTS (8%)", "Status"]
    return df.round(2)


def _format_sheet(ws, logo_path: str | None = None):
    # Freeze header row
    ws.freeze_panes = "A2"

    # Auto-width (simple)
    for col in ws.columns:
        max_len = 0
        letter = col[0].column_letter
        for cell in col[:200]:
            val = "" if cell.value is None else str(cell.value)
            max_len = max(max_len, len(val))
        ws.column_dimensions[letter].width = min(max(12, max_len + 2), 45)

    if logo_path and Path(logo_path).exists():
        img = XLImage(logo_path)
        img.anchor = "A1"
        ws.add_image(img)


def export_audit_xlsx(
    rows: List[AuditRow],
    out_path: str,
    fgts: Sequence[FgtsMensal] = (),
    logo_path: str | None = None,
):
    """Planilha com a auditoria mensal e, se houver, a memória do FGTS."""
    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        audit_dataframe(rows).to_excel(writer, index=False, sheet_name="Auditoria")
        if fgts:
            fgts_dataframe(fgts).to_excel(writer, index=False, sheet_name="FGTS")

    wb = load_workbook(out_path)
    for ws in wb.worksheets:
        _format_sheet(ws, logo_path if ws.title == "Auditoria" else None)
    wb.save(out_path)
