# auditoria/logging_config.py

import sys
from pathlib import Path

from loguru import logger

from .config import LOG_DIR, LOG_LEVEL

# Remove o handler padrão para evitar duplicação de logs no console.
logger.remove()

logger.add(
    sys.stderr,
    level=LOG_LEVEL,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    colorize=True,
)

# Arquivo de log só quando AUDITORIA_LOG_DIR estiver definido.
if LOG_DIR:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    logger.add(
        str(Path(LOG_DIR) / "auditoria_{time}.log"),
        rotation="10 MB",
        retention="30 days",
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )

log = logger
