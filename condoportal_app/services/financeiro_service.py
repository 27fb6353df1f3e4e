# condoportal_app/services/financeiro_service.py
# -*- coding: utf-8 -*-
"""Cobrança mensal dos anunciantes do clube de vantagens.

Fluxo: ação do gestor -> ``gerar_faturamento_mes_atual`` ->
``sincronizar_anunciante`` (um por anunciante) -> registros em
``financeiro_clube`` -> métricas do dashboard na próxima leitura.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from flask import current_app, has_app_context
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Anunciante, FinanceiroClube
from ..models.financeiro import STATUS_EM_ABERTO, STATUS_PAGO
from .repositories import (
    AnuncianteRepository,
    FinanceiroRepository,
    SQLAnuncianteRepository,
    SQLFinanceiroRepository,
)

DIA_VENCIMENTO_MAX = 28

# resultado de uma sincronização
CRIADO = "criado"
ATUALIZADO = "atualizado"
REMOVIDO = "removido"
INALTERADO = "inalterado"
PRESERVADO = "preservado"   # registro pago, nunca tocado


class TransicaoInvalida(ValueError):
    """Mudança de status não permitida (ex.: pagar um registro já pago)."""


def _hoje(hoje: Optional[date] = None) -> date:
    return hoje or date.today()

def _dia_max() -> int:
    if has_app_context():
        return int(current_app.config.get("CLUBE_DIA_VENCIMENTO_MAX", DIA_VENCIMENTO_MAX))
    return DIA_VENCIMENTO_MAX

def _to_decimal(v) -> Decimal:
    if v is None:
        return Decimal("0")
    return Decimal(str(v))


def primeiro_dia_mes(hoje: Optional[date] = None) -> date:
    return _hoje(hoje).replace(day=1)

def calcular_vencimento(dia_vencimento: Optional[int], hoje: Optional[date] = None) -> date:
    # limitado ao dia 28 para existir em todos os meses
    dia = min(max(int(dia_vencimento or 1), 1), _dia_max())
    return _hoje(hoje).replace(day=dia)

def deve_ter_registro(anunciante) -> bool:
    return bool(anunciante.ativo) and _to_decimal(anunciante.valor_mensal) > 0


def sincronizar_anunciante(anunciante,
                           repo: Optional[FinanceiroRepository] = None,
                           hoje: Optional[date] = None) -> str:
    """Garante que o registro do mês corrente reflita o estado do anunciante.

    Idempotente. Faz uma leitura e no máximo uma escrita. Registros ``pago``
    nunca são alterados nem removidos. Retorna o que foi feito
    (``criado``, ``atualizado``, ``removido``, ``inalterado`` ou ``preservado``).
    """
    repo = repo or SQLFinanceiroRepository()
    mes_ref = primeiro_dia_mes(hoje)
    vencimento = calcular_vencimento(anunciante.dia_vencimento, hoje)
    existente = repo.find_by_anunciante_mes(anunciante.id, mes_ref)

    if existente is not None and existente.status == STATUS_PAGO:
        return PRESERVADO

    if deve_ter_registro(anunciante):
        valor = _to_decimal(anunciante.valor_mensal)
        if existente is None:
            repo.upsert(anunciante.id, mes_ref, valor, vencimento)
            return CRIADO
        if _to_decimal(existente.valor_contratado) == valor and existente.data_vencimento == vencimento:
            return INALTERADO
        repo.upsert(anunciante.id, mes_ref, valor, vencimento)
        return ATUALIZADO

    if existente is None:
        return INALTERADO
    repo.delete_if_unpaid(anunciante.id, mes_ref)
    return REMOVIDO


def gerar_faturamento_mes_atual(hoje: Optional[date] = None,
                                anunciantes: Optional[AnuncianteRepository] = None,
                                repo: Optional[FinanceiroRepository] = None) -> dict:
    """Sincroniza, em sequência, todos os anunciantes ativos.

    ``count`` é o número de anunciantes processados, com ou sem escrita.
    Falha de um anunciante é registrada em log e não interrompe o lote.
    """
    anunciantes = anunciantes or SQLAnuncianteRepository()
    repo = repo or SQLFinanceiroRepository()
    try:
        ativos = anunciantes.listar_ativos()
    except SQLAlchemyError:
        current_app.logger.exception("Falha ao buscar anunciantes ativos")
        return {"success": False, "count": 0}

    count = 0
    falhas = 0
    # ids lidos antes do laço: cada commit expira a sessão
    for anunciante_id, anunciante in [(a.id, a) for a in ativos]:
        try:
            sincronizar_anunciante(anunciante, repo=repo, hoje=hoje)
        except SQLAlchemyError:
            falhas += 1
            current_app.logger.exception("Falha ao sincronizar cobrança do anunciante %s", anunciante_id)
        count += 1

    current_app.logger.info(
        "Faturamento %s: %d anunciantes processados, %d falhas",
        primeiro_dia_mes(hoje).strftime("%Y-%m"), count, falhas,
    )
    return {"success": True, "count": count}


def atualizar_atrasados(hoje: Optional[date] = None,
                        repo: Optional[FinanceiroRepository] = None) -> dict:
    """pendente com vencimento anterior a hoje -> atrasado."""
    repo = repo or SQLFinanceiroRepository()
    try:
        count = repo.bulk_mark_overdue(_hoje(hoje))
    except SQLAlchemyError:
        current_app.logger.exception("Falha ao atualizar registros em atraso")
        return {"success": False, "count": 0}
    current_app.logger.info("%d registros marcados como atrasados", count)
    return {"success": True, "count": count}


def registrar_pagamento(registro_id: int,
                        valor_pago=None,
                        data_pagamento: Optional[date] = None) -> Optional[FinanceiroClube]:
    """Baixa manual feita pelo gestor: pendente/atrasado -> pago."""
    reg = db.session.get(FinanceiroClube, registro_id)
    if reg is None:
        return None
    if reg.status not in STATUS_EM_ABERTO:
        raise TransicaoInvalida(f"Registro {registro_id} está '{reg.status}' e não pode ser pago.")
    if valor_pago is not None and _to_decimal(valor_pago) <= 0:
        raise ValueError("Valor pago deve ser maior que zero.")

    reg.status = STATUS_PAGO
    reg.valor_pago = _to_decimal(valor_pago) if valor_pago is not None else reg.valor_contratado
    reg.data_pagamento = _hoje(data_pagamento)
    db.session.commit()
    current_app.logger.info("Pagamento registrado: financeiro_clube #%s", registro_id)
    return reg


def listar_registros(mes_referencia: Optional[date] = None) -> list[FinanceiroClube]:
    stmt = select(FinanceiroClube).order_by(FinanceiroClube.mes_referencia.desc(), FinanceiroClube.id)
    if mes_referencia is not None:
        stmt = stmt.where(FinanceiroClube.mes_referencia == mes_referencia)
    return list(db.session.execute(stmt).scalars().all())

def listar_pagamentos_mes(hoje: Optional[date] = None) -> list[FinanceiroClube]:
    """Registros do mês corrente: pendentes e atrasados primeiro, depois por nome da empresa."""
    registros = listar_registros(primeiro_dia_mes(hoje))
    return sorted(
        registros,
        key=lambda r: (r.status not in STATUS_EM_ABERTO, (r.anunciante.nome_empresa or "").lower()),
    )


def excluir_anunciante(anunciante: Anunciante) -> None:
    """Remove o histórico financeiro e depois o anunciante.

    A cascata do relacionamento apaga os registros antes do anunciante na mesma transação.
    """
    db.session.delete(anunciante)
    db.session.commit()
