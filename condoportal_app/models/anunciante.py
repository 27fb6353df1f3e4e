# condoportal_app/models/anunciante.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db

PLANOS = ("bronze", "prata", "ouro")


class Anunciante(db.Model):
    """Empresa listada no clube de vantagens dos moradores.

    ``valor_mensal == 0`` representa um anúncio gratuito (morador); só
    anunciantes ativos com valor positivo geram cobrança mensal.
    """
    __tablename__ = "anunciantes"

    id = db.Column(db.Integer, primary_key=True)
    nome_empresa = db.Column(db.String(180), nullable=False)
    descricao = db.Column(db.Text, default="")
    telefone = db.Column(db.String(30))
    whatsapp = db.Column(db.String(30))
    email = db.Column(db.String(180))
    endereco = db.Column(db.String(255))
    site_url = db.Column(db.String(255))
    instagram = db.Column(db.String(120))
    logo_url = db.Column(db.String(512))

    plano = db.Column(db.String(10), nullable=False, default="bronze")  # bronze, prata, ouro (cosmético)
    ativo = db.Column(db.Boolean, nullable=False, default=True, index=True)
    destaque = db.Column(db.Boolean, nullable=False, default=False)
    ordem_exibicao = db.Column(db.Integer, default=0)

    # contrato
    valor_mensal = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    dia_vencimento = db.Column(db.Integer, nullable=False, default=10)   # 1..31
    comissao_gestor = db.Column(db.Numeric(5, 2), default=0)             # 0..100 (%)
    contrato_inicio = db.Column(db.Date)
    contrato_duracao = db.Column(db.Integer)                             # meses

    # métricas simples
    visualizacoes = db.Column(db.Integer, nullable=False, default=0)
    cliques = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    registros_financeiros = db.relationship(
        "FinanceiroClube",
        back_populates="anunciante",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome_empresa": self.nome_empresa,
            "descricao": self.descricao,
            "telefone": self.telefone,
            "whatsapp": self.whatsapp,
            "email": self.email,
            "endereco": self.endereco,
            "site_url": self.site_url,
            "instagram": self.instagram,
            "logo_url": self.logo_url,
            "plano": self.plano,
            "ativo": bool(self.ativo),
            "destaque": bool(self.destaque),
            "ordem_exibicao": self.ordem_exibicao,
            "valor_mensal": float(self.valor_mensal or 0),
            "dia_vencimento": self.dia_vencimento,
            "comissao_gestor": float(self.comissao_gestor or 0),
            "contrato_inicio": self.contrato_inicio.isoformat() if self.contrato_inicio else None,
            "contrato_duracao": self.contrato_duracao,
            "visualizacoes": self.visualizacoes or 0,
            "cliques": self.cliques or 0,
        }
