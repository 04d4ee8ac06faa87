"""
Configurações centralizadas da auditoria.
Valores padrão podem ser sobrescritos por variáveis de ambiente.
"""

from __future__ import annotations

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

APP_TITLE = "Auditoria de Contracheques"
OFFICE_NAME = os.getenv("AUDITORIA_ESCRITORIO", "Auditoria Trabalhista")
LOGO_PATH = os.getenv("AUDITORIA_LOGO", str(PROJECT_ROOT / "assets" / "logo.png"))

# ─── Logging ───

LOG_LEVEL = os.getenv("AUDITORIA_LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("AUDITORIA_LOG_DIR")  # sem valor: apenas console

# ─── Layout do PDF ───

LINE_TOLERANCE = 5.0  # unidades de layout para considerar "mesma linha"

# ─── Regras trabalhistas ───

FGTS_RATE = 0.08
FGTS_FINE_RATE = 0.4
VACATION_MULTIPLIER = 1.3  # férias + 1/3 (simplificado)
NOTICE_BASE_DAYS = 30
NOTICE_DAYS_PER_YEAR = 3
NOTICE_MAX_YEARS = 20
OVERTIME_PREMIUM = 1.5  # aulas suplementares: hora-aula + 50%
PRESCRIPTION_YEARS = 5
SHORTFALL_TOLERANCE = 0.01
VINCENDAS_MONTHS = 12

# ─── Vencimentos ───

FGTS_DUE_DAY = 10
SHORTFALL_DUE_DAY = 5
SEVERANCE_DUE_DAYS = 10

# ─── Correção monetária ───

DEFAULT_CORRECTION_INDEX = os.getenv("AUDITORIA_INDICE", "SELIC")
DEFAULT_INTEREST_TYPE = os.getenv("AUDITORIA_JUROS", "1%_SIMPLE")
