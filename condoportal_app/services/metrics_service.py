# condoportal_app/services/metrics_service.py
# -*- coding: utf-8 -*-
"""
Métricas do dashboard do clube de vantagens.

Responsabilidades:
- Receita do mês (potencial e recebida)
- Divisão gestor / condomínio
- Crescimento em relação ao mês anterior
- Pendências (pendente + atrasado)
- Visualizações e cliques dos anunciantes ativos
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

import pandas as pd
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..models import Anunciante, FinanceiroClube
from ..models.financeiro import STATUS_EM_ABERTO, STATUS_PAGO
from .settings import comissao_gestor_percentual

COLUNAS_REGISTRO = ["anunciante_id", "mes_referencia", "valor_contratado", "valor_pago", "status"]
COLUNAS_ANUNCIANTE = ["id", "ativo", "visualizacoes", "cliques"]


@dataclass
class MetricasDashboard:
    mes_referencia: str
    receita_potencial_mensal: float
    receita_mensal: float
    receita_mes_anterior: float
    comissao_percentual: float
    ganho_gestor_mensal: float
    ganho_condominio_mensal: float
    crescimento_receita_percentual: float
    valor_pendente: float
    pagamentos_pendentes: int
    anunciantes_pagantes_mes: int
    receita_media_por_anunciante: float
    total_anunciantes_ativos: int
    visualizacoes_totais: int
    cliques_totais: int
    media_visualizacoes: float
    taxa_cliques_percentual: float

    def to_dict(self) -> dict:
        return asdict(self)


def _mes(d: date) -> str:
    return d.strftime("%Y-%m")

def _mes_anterior(hoje: date) -> str:
    return _mes(hoje.replace(day=1) - timedelta(days=1))

def _numeric(s: pd.Series) -> pd.Series:
    return pd.to_numeric(s, errors="coerce").fillna(0.0)


def _frame_registros(registros: Iterable[dict]) -> pd.DataFrame:
    df = pd.DataFrame(list(registros), columns=COLUNAS_REGISTRO)
    df["mes"] = df["mes_referencia"].astype(str).str[:7]
    df["valor_contratado"] = _numeric(df["valor_contratado"])
    df["valor_pago"] = _numeric(df["valor_pago"])
    return df

def _frame_anunciantes(anunciantes: Iterable[dict]) -> pd.DataFrame:
    df = pd.DataFrame(list(anunciantes), columns=COLUNAS_ANUNCIANTE)
    df["ativo"] = df["ativo"].fillna(False).astype(bool)
    df["visualizacoes"] = _numeric(df["visualizacoes"])
    df["cliques"] = _numeric(df["cliques"])
    return df[df["ativo"]]


def _receita(df: pd.DataFrame, mes: str) -> float:
    pagos = df[(df["mes"] == mes) & (df["status"] == STATUS_PAGO)]
    return float(pagos["valor_pago"].sum())

def crescimento_percentual(atual: float, anterior: float) -> float:
    if anterior == 0:
        return 100.0 if atual > 0 else 0.0
    return round((atual - anterior) / anterior * 100, 2)


def calcular_metricas(registros: Iterable[dict],
                      anunciantes: Iterable[dict],
                      comissao_percentual: float = 60.0,
                      hoje: Optional[date] = None) -> MetricasDashboard:
    """Cálculo puro, sem acesso ao banco.

    ``registros`` e ``anunciantes`` são dicts no formato de ``to_dict()``.
    """
    hoje = hoje or date.today()
    mes_atual = _mes(hoje)

    df = _frame_registros(registros)
    do_mes = df[df["mes"] == mes_atual]
    pagos = do_mes[do_mes["status"] == STATUS_PAGO]
    em_aberto = do_mes[do_mes["status"].isin(STATUS_EM_ABERTO)]

    receita = _receita(df, mes_atual)
    receita_anterior = _receita(df, _mes_anterior(hoje))
    ganho_gestor = receita * comissao_percentual / 100
    pagantes = int(pagos["anunciante_id"].nunique())

    ativos = _frame_anunciantes(anunciantes)
    total_ativos = int(len(ativos.index))
    visualizacoes = int(ativos["visualizacoes"].sum())
    cliques = int(ativos["cliques"].sum())

    return MetricasDashboard(
        mes_referencia=mes_atual,
        receita_potencial_mensal=round(float(do_mes["valor_contratado"].sum()), 2),
        receita_mensal=round(receita, 2),
        receita_mes_anterior=round(receita_anterior, 2),
        comissao_percentual=float(comissao_percentual),
        ganho_gestor_mensal=round(ganho_gestor, 2),
        ganho_condominio_mensal=round(receita - ganho_gestor, 2),
        crescimento_receita_percentual=crescimento_percentual(receita, receita_anterior),
        valor_pendente=round(float(em_aberto["valor_contratado"].sum()), 2),
        pagamentos_pendentes=int(len(em_aberto.index)),
        anunciantes_pagantes_mes=pagantes,
        receita_media_por_anunciante=round(receita / pagantes, 2) if pagantes else 0.0,
        total_anunciantes_ativos=total_ativos,
        visualizacoes_totais=visualizacoes,
        cliques_totais=cliques,
        media_visualizacoes=round(visualizacoes / total_ativos, 2) if total_ativos else 0.0,
        taxa_cliques_percentual=round(cliques / visualizacoes * 100, 2) if visualizacoes else 0.0,
    )


def carregar_metricas(hoje: Optional[date] = None) -> Optional[MetricasDashboard]:
    """Busca registros e anunciantes e calcula as métricas.

    Retorna ``None`` (métricas indisponíveis) se qualquer leitura falhar.
    """
    try:
        registros = [r.to_dict() for r in FinanceiroClube.query.all()]
        anunciantes = [a.to_dict() for a in Anunciante.query.all()]
        comissao = comissao_gestor_percentual()
    except SQLAlchemyError:
        current_app.logger.warning("Métricas do clube indisponíveis", exc_info=True)
        return None
    return calcular_metricas(registros, anunciantes, comissao_percentual=comissao, hoje=hoje)
