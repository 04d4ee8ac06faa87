from __future__ import annotations
import re
from typing import Iterable, Optional

from .models import Contracheque, TipoFolha, ValorInfo, Vinculo
from .utils import format_brl_money, normalize_name, parse_brl_money

# --- Regex helpers (tuned for the state paystub template) ---
RE_CURRENCY = re.compile(r"(\d{1,3}(?:\.\d{3})*,\d{2})")
RE_REFERENCIA = re.compile(r"Referência")
RE_MES_ANO = re.compile(r"\b((?:0[1-9]|1[0-2])/20\d{2})\b")
RE_MES_ANO_TEXTO = re.compile(r"(?:Jan|Fev|Mar|Abr|Mai|Jun|Jul|Ago|Set|Out|Nov|Dez)/\d{4}", re.IGNORECASE)
RE_ID_FUNCIONAL = re.compile(r"(\d+/\d)")
RE_INFO_DECIMAL = re.compile(r"^\d+[.,]\d{2}")
RE_INFO_COMPETENCIA = re.compile(r"\d{2}/\d{4}")

KW_VENCIMENTO_BASE = "Vencimento Base"
KW_AULAS_SUPLEMENTARES = "Aulas Suplementares"
KW_GRAT_TITULARIDADE = "Grat Titularidade"
KW_GRAT_MAGISTERIO = "Grat Magistério"
KW_GRAT_ESCOLARIDADE = "Grat Escolaridade"

VINCULO_LABELS = ("Tipo de Vínculo", "Vínculo", "Cargo")

WARNING_LABELS = {
    KW_VENCIMENTO_BASE: "Vencimento Base",
    KW_AULAS_SUPLEMENTARES: "Aulas Supl.",
    KW_GRAT_TITULARIDADE: "Grat. Titularidade",
    KW_GRAT_MAGISTERIO: "Grat. Magistério",
    KW_GRAT_ESCOLARIDADE: "Grat. Escolaridade",
}


def extract_first_value(line: str) -> Optional[str]:
    """
    First currency-looking amount on the line.
    The first money column of the template is the credit; later ones are discounts.
    """
    m = RE_CURRENCY.search(line or "")
    return m.group(1) if m else None


def extract_line_parts(line: str, keyword: str) -> Optional[ValorInfo]:
    """
    "1Vencimento Base200.001/2021***********2.069,08" -> info "200.00", valor "2.069,08"
    """
    valor = extract_first_value(line)
    if not valor:
        return None

    rest = line.replace(valor, "", 1)
    idx = rest.find(keyword)
    if idx == -1:
        return None

    info_raw = rest[idx + len(keyword):].replace("*", "").strip()
    m = RE_INFO_DECIMAL.match(info_raw)
    if m:
        info = m.group(0)
    else:
        info = RE_INFO_COMPETENCIA.sub("", info_raw, count=1).strip()
    return ValorInfo(info=info, valor=valor)


def classify_tipo_folha(line: str) -> Optional[TipoFolha]:
    up = line.upper()
    if "FOLHA NORMAL" in up:
        return TipoFolha.NORMAL
    if "13º" in up or "DÉCIMO" in up or "DECIMO" in up:
        return TipoFolha.DECIMO
    if "FÉRIAS" in up:
        return TipoFolha.FERIAS
    return None


def classify_vinculo(context: str) -> Optional[Vinculo]:
    ctx = normalize_name(context)
    if "EFETIVO" in ctx:
        return Vinculo.EFETIVO
    if "CONTRATO TEMPORARIO" in ctx or "TEMPORARIO" in ctx:
        return Vinculo.CONTRATO_TEMPORARIO
    return None


def classify_vinculo_document(text: str) -> Optional[Vinculo]:
    doc = normalize_name(text)
    if "TIPO DE VINCULO EFETIVO" in doc or "VINCULO: EFETIVO" in doc:
        return Vinculo.EFETIVO
    if "CONTRATO TEMPORARIO" in doc:
        return Vinculo.CONTRATO_TEMPORARIO
    return None


def extract_mes_ano(line: str) -> Optional[str]:
    if RE_REFERENCIA.search(line):
        m = RE_MES_ANO.search(line)
        if m:
            return m.group(1)
    elif "Folha Normal -" in line:
        m = RE_MES_ANO_TEXTO.search(line)
        if m:
            return m.group(0)
    return None


class _Accumulator:
    """Soma de uma verba repetida em várias linhas do mesmo contracheque."""

    def __init__(self):
        self.total = 0.0
        self.count = 0
        self.info = ""

    def add(self, valor: str, info: str = ""):
        self.total += parse_brl_money(valor)
        self.count += 1
        if not self.info and info:
            self.info = info


def extract_paystub_data(lines: Iterable[str], arquivo: Optional[str] = None) -> Contracheque:
    lines = [l.strip() for l in lines if l and l.strip()]
    c = Contracheque(arquivo=arquivo)

    paired = {KW_VENCIMENTO_BASE: _Accumulator(), KW_AULAS_SUPLEMENTARES: _Accumulator()}
    scalars = {
        KW_GRAT_TITULARIDADE: _Accumulator(),
        KW_GRAT_MAGISTERIO: _Accumulator(),
        KW_GRAT_ESCOLARIDADE: _Accumulator(),
    }

    for i, line in enumerate(lines):
        nxt = lines[i + 1] if i + 1 < len(lines) else ""

        if not c.mes_ano:
            c.mes_ano = extract_mes_ano(line)

        if c.tipo_folha is None:
            c.tipo_folha = classify_tipo_folha(line)

        if not c.nome and line == "Nome" and nxt:
            c.nome = nxt

        if not c.id_funcional and "ID Funcional" in line:
            m = RE_ID_FUNCIONAL.search(nxt)
            if m:
                c.id_funcional = m.group(1)

        if c.vinculo is None and any(label in line for label in VINCULO_LABELS):
            context = " ".join(lines[i:i + 3])
            c.vinculo = classify_vinculo(context)

        for keyword, acc in paired.items():
            if keyword in line:
                parts = extract_line_parts(line, keyword)
                if parts:
                    acc.add(parts.valor, parts.info)

        for keyword, acc in scalars.items():
            if keyword in line:
                val = extract_first_value(line)
                if val:
                    acc.add(val)

        if not c.base_previdencia and ("Base Previdência" in line or "Base Previd" in line):
            val = extract_first_value(line)
            if not val and nxt:
                # valor costuma vir como primeira coluna da linha seguinte
                val = extract_first_value(nxt)
            if val:
                c.base_previdencia = val

    if c.vinculo is None:
        c.vinculo = classify_vinculo_document("\n".join(lines))

    for keyword, acc in paired.items():
        if acc.total > 0 or acc.info:
            pair = ValorInfo(info=acc.info, valor=format_brl_money(acc.total))
            if keyword == KW_VENCIMENTO_BASE:
                c.vencimento_base = pair
            else:
                c.aulas_suplementares = pair

    if scalars[KW_GRAT_TITULARIDADE].total > 0:
        c.grat_titularidade = format_brl_money(scalars[KW_GRAT_TITULARIDADE].total)
    if scalars[KW_GRAT_MAGISTERIO].total > 0:
        c.grat_magisterio = format_brl_money(scalars[KW_GRAT_MAGISTERIO].total)
    if scalars[KW_GRAT_ESCOLARIDADE].total > 0:
        c.grat_escolaridade = format_brl_money(scalars[KW_GRAT_ESCOLARIDADE].total)

    # warnings
    for keyword, acc in {**paired, **scalars}.items():
        if acc.count > 1:
            c.warnings.append(f"{WARNING_LABELS[keyword]} (Soma de {acc.count} linhas)")
    if c.vencimento_base.valor and not c.vencimento_base.info:
        c.warnings.append("Vencimento Base sem horas")
    if not c.mes_ano:
        c.warnings.append("Competência não identificada")

    return c


def extract_paystub_text(text: str, arquivo: Optional[str] = None) -> Contracheque:
    return extract_paystub_data((text or "").split("\n"), arquivo=arquivo)
