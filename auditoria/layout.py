"""
Reconstrução de linhas a partir de tokens posicionados do PDF.

O texto de um contracheque chega como pedaços soltos com coordenadas.
Tokens cuja altura (``y``) difere menos que a tolerância são tratados como
uma mesma linha impressa; dentro da linha a ordem é da esquerda para a
direita. ``y`` segue o espaço do PDF: origem no canto inferior esquerdo,
portanto valores maiores estão mais no topo da página.
"""

from __future__ import annotations

from itertools import groupby
from typing import Iterable, List

from pydantic import BaseModel

from .config import LINE_TOLERANCE


class TextToken(BaseModel):
    text: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    page: int = 0


def group_lines(tokens: Iterable[TextToken], tolerance: float = LINE_TOLERANCE) -> List[List[TextToken]]:
    """Agrupa tokens de uma página em linhas, do topo para a base."""
    ordered = sorted(tokens, key=lambda t: t.y, reverse=True)

    lines: List[List[TextToken]] = []
    current: List[TextToken] = []
    anchor_y = 0.0
    for token in ordered:
        if current and abs(token.y - anchor_y) < tolerance:
            current.append(token)
            continue
        if current:
            lines.append(current)
        current = [token]
        anchor_y = token.y
    if current:
        lines.append(current)

    return [sorted(line, key=lambda t: t.x) for line in lines]


def reconstruct_page(tokens: Iterable[TextToken], tolerance: float = LINE_TOLERANCE) -> List[str]:
    return [" ".join(t.text for t in line) for line in group_lines(tokens, tolerance)]


def reconstruct_lines(tokens: Iterable[TextToken], tolerance: float = LINE_TOLERANCE) -> List[str]:
    """
    Linhas de texto na ordem visual aproximada, página a página.
    Lista vazia de tokens resulta em lista vazia de linhas.
    """
    by_page = sorted(tokens, key=lambda t: t.page)
    lines: List[str] = []
    for _, page_tokens in groupby(by_page, key=lambda t: t.page):
        lines.extend(reconstruct_page(page_tokens, tolerance))
    return lines
