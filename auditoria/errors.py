from __future__ import annotations


class AuditoriaError(Exception):
    """Base para erros da auditoria."""


class PdfParseError(AuditoriaError):
    """PDF ilegível, criptografado ou corrompido. Afeta apenas o arquivo em questão."""

    def __init__(self, arquivo: str, message: str = "Falha ao ler o PDF."):
        self.arquivo = arquivo
        super().__init__(f"{arquivo}: {message}")
