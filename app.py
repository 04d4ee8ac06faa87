from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import streamlit as st

from auditoria.audit import FLAG_PRESCRICAO
from auditoria.config import (
    APP_TITLE,
    DEFAULT_CORRECTION_INDEX,
    DEFAULT_INTEREST_TYPE,
    LOGO_PATH,
    PROJECT_ROOT,
)
from auditoria.export_csv import build_csv
from auditoria.export_xlsx import audit_dataframe, export_audit_xlsx, fgts_dataframe
from auditoria.logging_config import log
from auditoria.models import CorrectionIndex, InterestType, LiquidationSettings
from auditoria.parsing_pdf import process_batch
from auditoria.pipeline import AuditInputs, recompute
from auditoria.reports_pdf import generate_audit_report, generate_fgts_report, generate_severance_report
from auditoria.storage import JsonUserRepository, Session, init_storage
from auditoria.utils import format_brl

USERS_PATH = PROJECT_ROOT / ".data" / "users.json"
logo = LOGO_PATH if Path(LOGO_PATH).exists() else None


# -----------------------------
# Sessão
# -----------------------------
st.set_page_config(page_title=APP_TITLE, layout="wide")

if "session" not in st.session_state:
    repo = JsonUserRepository(USERS_PATH)
    init_storage(repo)
    st.session_state["session"] = Session(repo)
session: Session = st.session_state["session"]

if session.current is None:
    st.title(APP_TITLE)
    with st.form("login"):
        email = st.text_input("E-mail")
        password = st.text_input("Senha", type="password")
        if st.form_submit_button("Entrar", type="primary"):
            if session.login(email, password):
                st.rerun()
            st.error("Credenciais inválidas.")
    st.stop()


# -----------------------------
# UI
# -----------------------------
col1, col2 = st.columns([1, 4])
with col1:
    if logo:
        st.image(logo, width=180)
with col2:
    st.title(APP_TITLE)
    st.caption(
        "Aula suplementar devida = (Vencimento Base + Gratificações) / Horas × 1,5 × Quantidade de aulas. "
        "Competências com mais de 5 anos ficam fora do cálculo rescisório."
    )

st.sidebar.header("Dados do contrato")
st.sidebar.caption(f"Usuário: {session.current.name}")
if st.sidebar.button("Sair"):
    session.logout()
    st.rerun()

admissao = st.sidebar.date_input("Data de admissão", value=None, format="DD/MM/YYYY")
demissao = st.sidebar.date_input("Data de demissão", value=None, format="DD/MM/YYYY")
salario_manual = st.sidebar.text_input("Salário base (opcional, ex.: 3.000,00)", value="")

st.sidebar.markdown("---")
st.sidebar.header("Correção monetária")
enabled = st.sidebar.toggle("Aplicar correção e juros", value=False)
indices = [i.value for i in CorrectionIndex]
juros = [j.value for j in InterestType]
indice = st.sidebar.selectbox(
    "Índice", indices, index=indices.index(DEFAULT_CORRECTION_INDEX) if DEFAULT_CORRECTION_INDEX in indices else 0
)
tipo_juros = st.sidebar.selectbox(
    "Juros de mora", juros, index=juros.index(DEFAULT_INTEREST_TYPE) if DEFAULT_INTEREST_TYPE in juros else 0
)

files = st.file_uploader("Suba os contracheques (PDF)", type=["pdf"], accept_multiple_files=True)

if not files:
    st.info("Envie um ou mais contracheques para processar.")
    st.stop()

if st.button("Processar", type="primary"):
    with st.spinner("Extraindo dados dos contracheques..."):
        st.session_state["records"] = process_batch((f.name, f.getvalue()) for f in files)

records = st.session_state.get("records")
if not records:
    st.stop()

inputs = AuditInputs(
    admissao=admissao.isoformat() if admissao else None,
    demissao=demissao.isoformat() if demissao else None,
    salario_manual=salario_manual or None,
    liquidation=LiquidationSettings(
        enabled=enabled,
        correction_index=CorrectionIndex(indice),
        interest_type=InterestType(tipo_juros),
    ),
)
snap = recompute(records, inputs)
log.info(f"Auditoria recalculada para {len(snap.records)} contracheques")

for r in snap.failed:
    st.error(f"{r.arquivo}: {r.error}")

labor = snap.labor
liq = snap.liquidation
rescisao_disponivel = not snap.is_efetivo
if snap.is_efetivo:
    st.warning(
        "Vínculo EFETIVO identificado: servidor estatutário não tem direito a FGTS nem aviso prévio. "
        "O cálculo de verbas rescisórias não se aplica; a auditoria inclui as competências vincendas."
    )

# --- Auditoria ---
st.subheader("Auditoria de aulas suplementares")
st.dataframe(audit_dataframe(snap.audit), use_container_width=True, hide_index=True)

m1, m2, m3 = st.columns(3)
m1.metric("Total devido", format_brl(snap.totals.total_devidas))
m2.metric("Total recebido", format_brl(snap.totals.total_recebido))
m3.metric("Diferença", format_brl(snap.totals.total_diferenca))
st.write(snap.summary)
if liq and liq.audit:
    st.caption(f"Diferenças atualizadas (correção + juros): {format_brl(sum(e.total for e in liq.audit))}")

st.subheader("Contracheques extraídos")
df_records = pd.DataFrame([
    {
        "Arquivo": r.arquivo,
        "Competência": r.mes_ano or "-",
        "Tipo": r.tipo_folha.value if r.tipo_folha else "-",
        "Bruto": r.bruto_mensal,
        "Sinalizações": "; ".join(flags),
    }
    for r, flags in zip(snap.records, snap.flags)
])
st.dataframe(df_records, use_container_width=True, hide_index=True)
if snap.prescribed:
    st.caption(f"{len(snap.prescribed)} competência(s) com {FLAG_PRESCRICAO}.")

# --- Verbas rescisórias ---
if rescisao_disponivel:
    st.subheader("Verbas rescisórias")
    st.caption(
        f"Salário detectado: {format_brl(snap.detected_salary)} | Base utilizada: {format_brl(snap.salary_basis)}"
    )
    c1, c2, c3, c4 = st.columns(4)
    c1.metric(f"Aviso prévio ({labor.aviso_previo.dias} dias)", format_brl(labor.aviso_previo.valor))
    c2.metric("Férias + 1/3", format_brl(labor.ferias.valor))
    c3.metric("FGTS + multa 40%", format_brl(labor.fgts.total + labor.fgts.multa_40))
    c4.metric("Total geral", format_brl(labor.total_geral))

    st.dataframe(fgts_dataframe(labor.fgts.mensal), use_container_width=True, hide_index=True)

    if liq:
        st.subheader("Liquidação (correção + juros)")
        l1, l2 = st.columns(2)
        l1.metric("FGTS atualizado", format_brl(liq.fgts.total_final))
        l2.metric("Rescisão atualizada", format_brl(liq.rescisao.total_value))

# --- Downloads ---
st.subheader("Exportação")
workdir = Path(st.session_state.get("workdir") or tempfile.mkdtemp(prefix="auditoria_"))
st.session_state["workdir"] = str(workdir)
nome = next((r.nome for r in snap.records if r.nome), None)
id_funcional = next((r.id_funcional for r in snap.records if r.id_funcional), None)
vinculo = snap.vinculo.value if snap.vinculo else None

colA, colB, colC, colD, colE = st.columns(5)
with colA:
    st.download_button(
        "CSV (auditoria)",
        data=build_csv(snap.records).encode("utf-8-sig"),
        file_name="auditoria_contracheques.csv",
        mime="text/csv",
    )
with colB:
    out_xlsx = workdir / "auditoria.xlsx"
    export_audit_xlsx(
        snap.audit,
        str(out_xlsx),
        fgts=labor.fgts.mensal if rescisao_disponivel else (),
        logo_path=logo,
    )
    st.download_button(
        "Excel (auditoria)",
        data=out_xlsx.read_bytes(),
        file_name="auditoria.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
with colC:
    st.download_button(
        "PDF (auditoria)",
        data=generate_audit_report(
            snap.audit, snap.totals, snap.summary, nome, id_funcional, vinculo,
            corrections=liq.audit if liq else (), logo_path=logo,
        ),
        file_name="relatorio_auditoria.pdf",
        mime="application/pdf",
    )

if rescisao_disponivel:
    with colD:
        st.download_button(
            "PDF (rescisão)",
            data=generate_severance_report(
                labor, nome, admissao, demissao, snap.salary_basis,
                correction=liq.rescisao if liq else None, logo_path=logo,
            ),
            file_name="calculo_rescisao.pdf",
            mime="application/pdf",
        )
    with colE:
        st.download_button(
            "PDF (FGTS)",
            data=generate_fgts_report(
                labor, nome, id_funcional, vinculo, admissao, demissao,
                liquidation=liq.fgts if liq else None, logo_path=logo,
            ),
            file_name="memoria_fgts.pdf",
            mime="application/pdf",
        )
