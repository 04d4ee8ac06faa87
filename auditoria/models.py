from __future__ import annotations
from datetime import date
from enum import Enum
from typing import Optional, List, Literal
from pydantic import BaseModel, Field

from .utils import parse_brl_money, parse_info


class Vinculo(str, Enum):
    EFETIVO = "EFETIVO"
    CONTRATO_TEMPORARIO = "CONTRATO TEMPORÁRIO"


class TipoFolha(str, Enum):
    NORMAL = "NORMAL"
    DECIMO = "DECIMO"
    FERIAS = "FERIAS"


class CorrectionIndex(str, Enum):
    SELIC = "SELIC"
    IPCA_E = "IPCA-E"
    INPC = "INPC"


class InterestType(str, Enum):
    NONE = "NONE"
    SIMPLE_1 = "1%_SIMPLE"
    SIMPLE_05 = "0.5%_SIMPLE"


class ValorInfo(BaseModel):
    info: str = ""   # horas / quantidade, ex.: "200.00"
    valor: str = ""  # moeda, ex.: "2.069,08"


class Contracheque(BaseModel):
    arquivo: Optional[str] = None
    error: Optional[str] = None
    nome: Optional[str] = None
    id_funcional: Optional[str] = None
    mes_ano: Optional[str] = None  # MM/AAAA ou Mmm/AAAA
    vencimento_base: ValorInfo = Field(default_factory=ValorInfo)
    aulas_suplementares: ValorInfo = Field(default_factory=ValorInfo)
    grat_titularidade: str = ""
    grat_magisterio: str = ""
    grat_escolaridade: str = ""
    vinculo: Optional[Vinculo] = None
    base_previdencia: str = ""
    tipo_folha: Optional[TipoFolha] = None
    warnings: List[str] = Field(default_factory=list)

    @property
    def valor_vencimento_base(self) -> float:
        return parse_brl_money(self.vencimento_base.valor)

    @property
    def valor_aulas(self) -> float:
        return parse_brl_money(self.aulas_suplementares.valor)

    @property
    def horas_base(self) -> float:
        return parse_info(self.vencimento_base.info)

    @property
    def qtd_aulas(self) -> float:
        return parse_info(self.aulas_suplementares.info)

    @property
    def soma_gratificacoes(self) -> float:
        return (
            parse_brl_money(self.grat_titularidade)
            + parse_brl_money(self.grat_magisterio)
            + parse_brl_money(self.grat_escolaridade)
        )

    @property
    def soma_componentes(self) -> float:
        return self.valor_vencimento_base + self.valor_aulas + self.soma_gratificacoes

    @property
    def bruto_mensal(self) -> float:
        """Base Previdência do rodapé quando presente; senão, soma das verbas."""
        if self.base_previdencia:
            return parse_brl_money(self.base_previdencia)
        return self.soma_componentes


# ─── Correção monetária ───

class CorrectionDetails(BaseModel):
    correction_index: CorrectionIndex = CorrectionIndex.SELIC
    interest_type: InterestType = InterestType.NONE
    days_elapsed: int = 0


class CorrectionResult(BaseModel):
    original_value: float = 0.0
    corrected_value: float = 0.0    # principal + correção
    correction_amount: float = 0.0
    interest_amount: float = 0.0
    total_value: float = 0.0        # corrigido + juros
    correction_factor: float = 0.0  # % acumulado
    interest_factor: float = 0.0    # % acumulado
    details: CorrectionDetails = Field(default_factory=CorrectionDetails)


class LiquidationSettings(BaseModel):
    enabled: bool = False
    correction_index: CorrectionIndex = CorrectionIndex.SELIC
    interest_type: InterestType = InterestType.SIMPLE_1


# ─── Verbas rescisórias ───

class AvisoPrevio(BaseModel):
    dias: int = 30
    valor: float = 0.0
    reflexo_fgts: float = 0.0


class Ferias(BaseModel):
    valor: float = 0.0


class FgtsMensal(BaseModel):
    competencia: str = "N/D"
    base: float = 0.0
    valor: float = 0.0
    status: str = "Devido"


class FgtsResumo(BaseModel):
    depositos: float = 0.0
    total: float = 0.0
    multa_40: float = 0.0
    saldo_para_fins_rescisorios: float = 0.0
    mensal: List[FgtsMensal] = Field(default_factory=list)


class LaborCalculationResult(BaseModel):
    aviso_previo: AvisoPrevio = Field(default_factory=AvisoPrevio)
    ferias: Ferias = Field(default_factory=Ferias)
    fgts: FgtsResumo = Field(default_factory=FgtsResumo)
    total_geral: float = 0.0


# ─── Auditoria de aulas suplementares ───

class AuditRow(BaseModel):
    mes_ano: str = "-"
    venc_base: float = 0.0
    grat_tit: float = 0.0
    grat_mag: float = 0.0
    grat_esc: float = 0.0
    horas_base: float = 0.0
    aulas: float = 0.0
    pago: float = 0.0
    devido: float = 0.0
    diferenca: float = 0.0
    vincenda: bool = False
    prescrita: bool = False


class AuditTotals(BaseModel):
    total_devidas: float = 0.0
    total_recebido: float = 0.0
    total_diferenca: float = 0.0


# ─── Liquidação (correção aplicada por lançamento) ───

class CorrectedEntry(BaseModel):
    competencia: str
    row_index: Optional[int] = None  # posição da linha na tabela de auditoria
    original: float = 0.0
    due_date: Optional[date] = None
    correction: Optional[CorrectionResult] = None

    @property
    def total(self) -> float:
        return self.correction.total_value if self.correction else self.original


class FgtsLiquidation(BaseModel):
    total_corrigido: float = 0.0
    total_juros: float = 0.0
    total_final: float = 0.0
    multa_total: float = 0.0
    mensal: List[CorrectedEntry] = Field(default_factory=list)


class LiquidationResult(BaseModel):
    fgts: FgtsLiquidation = Field(default_factory=FgtsLiquidation)
    rescisao: CorrectionResult = Field(default_factory=CorrectionResult)
    rescisao_due_date: Optional[date] = None
    audit: List[CorrectedEntry] = Field(default_factory=list)


# ─── Usuários ───

class User(BaseModel):
    id: str
    name: str
    email: str
    password_hash: Optional[str] = None
    role: Literal["admin", "user"] = "user"
    created_at: float = 0.0
