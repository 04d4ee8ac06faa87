from __future__ import annotations
import re
from datetime import date
from typing import Iterable, List, Optional
from unidecode import unidecode

MONTHS_SHORT = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"]

RE_THOUSANDS_ONLY = re.compile(r"^-?\d{1,3}(?:\.\d{3})+$")
RE_INFO_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")
RE_MES_ANO_NUMERIC = re.compile(r"^(\d{1,2})/(\d{4})$")


def normalize_name(name: str) -> str:
    name = unidecode(name or "").upper()
    name = re.sub(r"\s+", " ", name).strip()
    return name


def parse_brl_money(value) -> float:
    """
    Convert "1.415,89" or "1415,89" or "1 415,89" to float 1415.89
    Returns 0.0 if it can't parse.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).strip()
    s = s.replace("\xa0", " ").replace(" ", "")
    # keep digits, dot, comma
    s = re.sub(r"[^0-9\.,\-]", "", s)
    if s == "":
        return 0.0
    # if comma exists, assume comma decimal
    if "," in s:
        s = s.replace(".", "")
        s = s.replace(",", ".")
    elif RE_THOUSANDS_ONLY.match(s):
        s = s.replace(".", "")
    try:
        return float(s)
    except ValueError:
        return 0.0


def parse_info(value: Optional[str]) -> float:
    """First number in an hours/quantity annotation: "200.00h" -> 200.0."""
    if not value:
        return 0.0
    m = RE_INFO_NUMBER.search(str(value))
    return float(m.group(1)) if m else 0.0


def format_brl_money(value: float) -> str:
    """2069.08 -> "2.069,08" (inverse of parse_brl_money)."""
    return f"{float(value or 0.0):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def format_brl(value: float) -> str:
    """Formata como Real brasileiro (R$ 150.000,50)."""
    if value >= 0:
        return f"R$ {format_brl_money(value)}"
    return f"-R$ {format_brl_money(abs(value))}"


def parse_mes_ano(mes_ano: Optional[str]) -> Optional[date]:
    """
    "03/2021" or "Mar/2021" (any case) -> date(2021, 3, 1).
    Returns None for anything else.
    """
    if not mes_ano:
        return None
    parts = str(mes_ano).strip().split("/")
    if len(parts) != 2:
        return None
    month_str, year_str = parts[0].strip(), parts[1].strip()
    if not year_str.isdigit():
        return None
    year = int(year_str)

    if month_str.isdigit():
        month = int(month_str)
    else:
        key = unidecode(month_str[:3]).lower()
        shorts = [unidecode(m).lower() for m in MONTHS_SHORT]
        if key not in shorts:
            return None
        month = shorts.index(key) + 1

    if not 1 <= month <= 12 or year < 1:
        return None
    return date(year, month, 1)


def format_mes_ano_short(d: date) -> str:
    return f"{MONTHS_SHORT[d.month - 1]}/{d.year}"


def add_months(d: date, months: int) -> date:
    idx = d.year * 12 + (d.month - 1) + months
    return date(idx // 12, idx % 12 + 1, 1)


def increment_mes_ano(mes_ano: str) -> str:
    """Next competência keeping the input form ("12/2021" -> "01/2022", "Dez/2021" -> "Jan/2022")."""
    parsed = parse_mes_ano(mes_ano)
    if parsed is None:
        return mes_ano
    nxt = add_months(parsed, 1)
    if RE_MES_ANO_NUMERIC.match(mes_ano.strip()):
        return f"{nxt.month:02d}/{nxt.year}"
    return format_mes_ano_short(nxt)


def detect_missing_competencias(mes_anos: Iterable[Optional[str]]) -> List[str]:
    """
    Months with no paystub between the earliest and the latest competência.
    ["01/2021", "03/2021"] -> ["Fev/2021"]. Needs at least two valid periods.
    """
    dates = sorted({d for d in (parse_mes_ano(m) for m in mes_anos or []) if d is not None})
    if len(dates) < 2:
        return []

    present = set(dates)
    missing = []
    current = add_months(dates[0], 1)
    while current < dates[-1]:
        if current not in present:
            missing.append(format_mes_ano_short(current))
        current = add_months(current, 1)
    return missing
