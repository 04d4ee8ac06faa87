from datetime import date

from auditoria.date_utils import (
    eighth_day_next_month,
    fgts_due_date,
    fifth_day_next_month,
    format_date_br,
    is_business_day,
    parse_iso_date,
    severance_due_date,
    shortfall_due_date,
    tenth_business_day_next_month,
)


def test_fixed_days_next_month():
    assert fifth_day_next_month(date(2023, 12, 20)) == date(2024, 1, 5)
    assert eighth_day_next_month(date(2024, 1, 31)) == date(2024, 2, 8)


def test_tenth_business_day():
    # fev/2024 começa numa quinta-feira
    assert tenth_business_day_next_month(date(2024, 1, 15)) == date(2024, 2, 14)
    assert is_business_day(date(2024, 2, 14))
    assert not is_business_day(date(2024, 2, 10))


def test_entry_due_dates():
    assert fgts_due_date("01/2024") == date(2024, 2, 10)
    assert fgts_due_date("Dez/2023") == date(2024, 1, 10)
    assert fgts_due_date("N/D") is None
    assert shortfall_due_date("12/2023") == date(2024, 1, 5)
    assert shortfall_due_date(None) is None


def test_severance_due_date():
    assert severance_due_date(date(2024, 5, 31)) == date(2024, 6, 10)
    assert severance_due_date(None, today=date(2024, 1, 1)) == date(2024, 1, 11)


def test_parse_and_format():
    assert parse_iso_date("2023-06-15") == date(2023, 6, 15)
    assert parse_iso_date("15/06/2023") is None
    assert parse_iso_date("") is None
    assert format_date_br(date(2023, 6, 15)) == "15/06/2023"
    assert format_date_br(None) == "N/I"
