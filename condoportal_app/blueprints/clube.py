# condoportal_app/blueprints/clube.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, jsonify, request, current_app, abort
from sqlalchemy import update

from condoportal_app.extensions import db
from condoportal_app.models import Anunciante

bp = Blueprint("clube", __name__, url_prefix="/clube")


def _ativos():
    return Anunciante.query.filter_by(ativo=True) \
        .order_by(Anunciante.destaque.desc(), Anunciante.ordem_exibicao.asc(), Anunciante.nome_empresa.asc())


def _publico(a: Anunciante) -> dict:
    # dados comerciais (valor, comissão) não são expostos aos moradores
    d = a.to_dict()
    for k in ("valor_mensal", "dia_vencimento", "comissao_gestor", "contrato_inicio", "contrato_duracao"):
        d.pop(k, None)
    return d


@bp.route("/anunciantes")
def listar_anunciantes():
    return jsonify([_publico(a) for a in _ativos().all()])

@bp.route("/anunciantes/destaque")
def destaques():
    limit = request.args.get("limit", type=int) or current_app.config.get("CLUBE_DESTAQUES_LIMITE", 5)
    rows = Anunciante.query.filter_by(ativo=True, destaque=True) \
        .order_by(Anunciante.ordem_exibicao.asc()).limit(limit).all()
    return jsonify([_publico(a) for a in rows])


def _incrementa(anunciante_id: int, coluna: str):
    col = getattr(Anunciante, coluna)
    res = db.session.execute(
        update(Anunciante)
        .where(Anunciante.id == anunciante_id, Anunciante.ativo.is_(True))
        .values({coluna: col + 1})
        .execution_options(synchronize_session=False)
    )
    db.session.commit()
    if not res.rowcount:
        abort(404)
    return jsonify(ok=True)

@bp.route("/anunciantes/<int:anunciante_id>/view", methods=["POST"])
def registrar_visualizacao(anunciante_id: int):
    return _incrementa(anunciante_id, "visualizacoes")

@bp.route("/anunciantes/<int:anunciante_id>/click", methods=["POST"])
def registrar_clique(anunciante_id: int):
    return _incrementa(anunciante_id, "cliques")
