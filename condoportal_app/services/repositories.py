# condoportal_app/services/repositories.py
# -*- coding: utf-8 -*-
"""Acesso tipado às tabelas ``anunciantes`` e ``financeiro_clube``.

O sincronizador de cobranças depende apenas dos protocolos abaixo, de modo
que pode ser exercitado com implementações em memória.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Protocol

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Anunciante, FinanceiroClube
from ..models.financeiro import STATUS_ATRASADO, STATUS_PAGO, STATUS_PENDENTE


class AnuncianteRepository(Protocol):
    def listar_ativos(self) -> List[Anunciante]: ...

    def obter(self, anunciante_id: int) -> Optional[Anunciante]: ...


class FinanceiroRepository(Protocol):
    def find_by_anunciante_mes(self, anunciante_id: int, mes_referencia: date) -> Optional[FinanceiroClube]: ...

    def upsert(self, anunciante_id: int, mes_referencia: date,
               valor_contratado: Decimal, data_vencimento: date) -> None: ...

    def delete_if_unpaid(self, anunciante_id: int, mes_referencia: date) -> int: ...

    def bulk_mark_overdue(self, hoje: date) -> int: ...


class SQLAnuncianteRepository:
    def __init__(self, session=None):
        self.session = session or db.session

    def listar_ativos(self) -> List[Anunciante]:
        stmt = select(Anunciante).where(Anunciante.ativo.is_(True)).order_by(Anunciante.id)
        return list(self.session.execute(stmt).scalars().all())

    def obter(self, anunciante_id: int) -> Optional[Anunciante]:
        return self.session.get(Anunciante, anunciante_id)


class SQLFinanceiroRepository:
    """Cada escrita é confirmada isoladamente; em caso de erro faz rollback e propaga."""

    def __init__(self, session=None):
        self.session = session or db.session

    def _commit(self, stmt):
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return result

    def _insert(self):
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            return None
        return insert

    def find_by_anunciante_mes(self, anunciante_id: int, mes_referencia: date) -> Optional[FinanceiroClube]:
        stmt = select(FinanceiroClube).where(
            FinanceiroClube.anunciante_id == anunciante_id,
            FinanceiroClube.mes_referencia == mes_referencia,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def upsert(self, anunciante_id: int, mes_referencia: date,
               valor_contratado: Decimal, data_vencimento: date) -> None:
        insert = self._insert()
        now = datetime.utcnow()
        if insert is None:
            # dialeto sem ON CONFLICT: lê e escreve
            reg = self.find_by_anunciante_mes(anunciante_id, mes_referencia)
            if reg is None:
                self.session.add(FinanceiroClube(
                    anunciante_id=anunciante_id, mes_referencia=mes_referencia,
                    valor_contratado=valor_contratado, data_vencimento=data_vencimento,
                    status=STATUS_PENDENTE,
                ))
            elif reg.status != STATUS_PAGO:
                reg.valor_contratado = valor_contratado
                reg.data_vencimento = data_vencimento
            try:
                self.session.commit()
            except SQLAlchemyError:
                self.session.rollback()
                raise
            return

        tabela = FinanceiroClube.__table__
        stmt = insert(tabela).values(
            anunciante_id=anunciante_id,
            mes_referencia=mes_referencia,
            valor_contratado=valor_contratado,
            data_vencimento=data_vencimento,
            status=STATUS_PENDENTE,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["anunciante_id", "mes_referencia"],
            set_={
                "valor_contratado": stmt.excluded.valor_contratado,
                "data_vencimento": stmt.excluded.data_vencimento,
                "updated_at": now,
            },
            # registro pago não é tocado pela reconciliação
            where=tabela.c.status != STATUS_PAGO,
        )
        self._commit(stmt)

    def delete_if_unpaid(self, anunciante_id: int, mes_referencia: date) -> int:
        stmt = (
            delete(FinanceiroClube)
            .where(
                FinanceiroClube.anunciante_id == anunciante_id,
                FinanceiroClube.mes_referencia == mes_referencia,
                FinanceiroClube.status != STATUS_PAGO,
            )
            .execution_options(synchronize_session=False)
        )
        return self._commit(stmt).rowcount or 0

    def bulk_mark_overdue(self, hoje: date) -> int:
        stmt = (
            update(FinanceiroClube)
            .where(
                FinanceiroClube.status == STATUS_PENDENTE,
                FinanceiroClube.data_vencimento < hoje,
            )
            .values(status=STATUS_ATRASADO, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return self._commit(stmt).rowcount or 0
