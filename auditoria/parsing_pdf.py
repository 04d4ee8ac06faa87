from __future__ import annotations
import io
from pathlib import Path
from typing import BinaryIO, Iterable, List, Tuple, Union

import pdfplumber

from .audit import sort_by_competencia
from .errors import PdfParseError
from .extractors import extract_paystub_data
from .layout import TextToken, reconstruct_lines
from .logging_config import log
from .models import Contracheque

PdfSource = Union[str, Path, bytes, BinaryIO]


def _open_source(source: PdfSource):
    if isinstance(source, (bytes, bytearray)):
        return pdfplumber.open(io.BytesIO(source))
    return pdfplumber.open(source)


def extract_tokens_from_pdf(source: PdfSource, arquivo: str = "documento.pdf") -> List[TextToken]:
    """
    Positioned words of every page. y is converted to PDF space
    (bottom-left origin) so the top of the page has the largest y.
    """
    tokens: List[TextToken] = []
    try:
        with _open_source(source) as pdf:
            for page_no, page in enumerate(pdf.pages):
                for w in page.extract_words() or []:
                    tokens.append(TextToken(
                        text=w["text"],
                        x=float(w["x0"]),
                        y=float(page.height) - float(w["bottom"]),
                        width=float(w["x1"]) - float(w["x0"]),
                        height=float(w["bottom"]) - float(w["top"]),
                        page=page_no,
                    ))
    except Exception as e:
        raise PdfParseError(arquivo, f"Falha ao ler o PDF ({e.__class__.__name__}).") from e
    return tokens


def extract_lines_from_pdf(source: PdfSource, arquivo: str = "documento.pdf") -> List[str]:
    return reconstruct_lines(extract_tokens_from_pdf(source, arquivo))


def parse_pdf(source: PdfSource, arquivo: str = "documento.pdf") -> Contracheque:
    lines = extract_lines_from_pdf(source, arquivo)
    log.debug(f"{arquivo}: {len(lines)} linhas reconstruídas")
    return extract_paystub_data(lines, arquivo=arquivo)


def process_batch(files: Iterable[Tuple[str, PdfSource]]) -> List[Contracheque]:
    """
    Processa um lote de (nome, conteúdo). Um arquivo com falha vira um registro
    com `error` preenchido; os demais seguem normalmente. O resultado volta
    ordenado por competência (sem competência ao final, na ordem de entrada).
    """
    results: List[Contracheque] = []
    for arquivo, source in files:
        try:
            record = parse_pdf(source, arquivo)
        except PdfParseError as e:
            log.warning(str(e))
            record = Contracheque(arquivo=arquivo, error="Falha na leitura do PDF")
        except Exception as e:
            log.exception(f"{arquivo}: erro inesperado na extração")
            record = Contracheque(arquivo=arquivo, error=f"Erro na extração: {e}")
        results.append(record)

    ok = sum(1 for r in results if not r.error)
    log.info(f"Lote processado: {ok} de {len(results)} arquivos extraídos")
    return sort_by_competencia(results)
