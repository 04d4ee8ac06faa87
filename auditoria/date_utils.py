from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from .config import FGTS_DUE_DAY, SEVERANCE_DUE_DAYS, SHORTFALL_DUE_DAY
from .utils import parse_mes_ano


def is_business_day(d: date) -> bool:
    # apenas fins de semana; feriados não são considerados
    return d.weekday() < 5


def next_month_date(d: date, day: int) -> date:
    return (d + relativedelta(months=1)).replace(day=day)


def fifth_day_next_month(d: date) -> date:
    return next_month_date(d, 5)


def eighth_day_next_month(d: date) -> date:
    return next_month_date(d, 8)


def tenth_business_day_next_month(d: date) -> date:
    current = next_month_date(d, 1)
    count = 0
    while True:
        if is_business_day(current):
            count += 1
            if count == 10:
                return current
        current += timedelta(days=1)


def fgts_due_date(mes_ano: Optional[str]) -> Optional[date]:
    """Depósito do FGTS vence no dia 10 do mês seguinte à competência."""
    ref = parse_mes_ano(mes_ano)
    return next_month_date(ref, FGTS_DUE_DAY) if ref else None


def shortfall_due_date(mes_ano: Optional[str]) -> Optional[date]:
    """Diferença salarial vence no 5º dia do mês seguinte."""
    ref = parse_mes_ano(mes_ano)
    return next_month_date(ref, SHORTFALL_DUE_DAY) if ref else None


def severance_due_date(demissao: Optional[date], today: Optional[date] = None) -> date:
    base = demissao or today or date.today()
    return base + timedelta(days=SEVERANCE_DUE_DAYS)


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """"2023-06-15" -> date; vazio ou inválido -> None."""
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def format_date_br(value: Optional[date]) -> str:
    if not value:
        return "N/I"
    return value.strftime("%d/%m/%Y")
