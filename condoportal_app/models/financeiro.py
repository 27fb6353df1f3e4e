# condoportal_app/models/financeiro.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db

STATUS_PENDENTE = "pendente"
STATUS_PAGO = "pago"
STATUS_ATRASADO = "atrasado"
STATUS_CANCELADO = "cancelado"
STATUS_EM_ABERTO = (STATUS_PENDENTE, STATUS_ATRASADO)


class FinanceiroClube(db.Model):
    __tablename__ = "financeiro_clube"

    id = db.Column(db.Integer, primary_key=True)
    anunciante_id = db.Column(
        db.Integer, db.ForeignKey("anunciantes.id", ondelete="CASCADE"), index=True, nullable=False
    )
    mes_referencia = db.Column(db.Date, nullable=False, index=True)  # sempre dia 1
    valor_contratado = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    valor_pago = db.Column(db.Numeric(10, 2))
    data_pagamento = db.Column(db.Date)
    data_vencimento = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(12), nullable=False, default=STATUS_PENDENTE, index=True)  # pendente, pago, atrasado, cancelado
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    anunciante = db.relationship("Anunciante", back_populates="registros_financeiros")

    __table_args__ = (
        db.UniqueConstraint("anunciante_id", "mes_referencia", name="uq_financeiro_anunciante_mes"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "anunciante_id": self.anunciante_id,
            "nome_empresa": self.anunciante.nome_empresa if self.anunciante else None,
            "mes_referencia": self.mes_referencia.isoformat(),
            "valor_contratado": float(self.valor_contratado or 0),
            "valor_pago": float(self.valor_pago) if self.valor_pago is not None else None,
            "data_pagamento": self.data_pagamento.isoformat() if self.data_pagamento else None,
            "data_vencimento": self.data_vencimento.isoformat(),
            "status": self.status,
        }
