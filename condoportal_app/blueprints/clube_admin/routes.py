# condoportal_app/blueprints/clube_admin/routes.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from flask import request, jsonify, current_app, abort, make_response
from sqlalchemy.exc import SQLAlchemyError

from report import gerar_pdf_financeiro
from ..clube_admin import clube_admin_bp
from ...decorators import gestor_clube_required
from ...extensions import db
from ...models import Anunciante
from ...models.anunciante import PLANOS
from ...services import financeiro_service as fin
from ...services.metrics_service import carregar_metricas
from ...services.repositories import SQLAnuncianteRepository
from ...services.settings import (
    CHAVE_COMISSAO_GESTOR,
    GRUPO_CLUBE,
    comissao_gestor_percentual,
    set_setting,
)

MSG_ERRO = "Ocorreu um erro."


def _anunciante_or_404(anunciante_id: int) -> Anunciante:
    a = SQLAnuncianteRepository().obter(anunciante_id)
    if a is None:
        abort(404)
    return a


def _to_decimal(v: str | None) -> Decimal:
    if v is None or not str(v).strip():
        return Decimal("0")
    v = str(v).strip()
    if "," in v:
        # formato brasileiro: 1.234,56
        v = v.replace('.', '').replace(',', '.')
    try:
        d = Decimal(v)
    except InvalidOperation:
        raise ValueError(f"Valor inválido: {v!r}")
    if not d.is_finite():
        raise ValueError(f"Valor inválido: {v!r}")
    return d

def _to_bool(v) -> bool:
    return str(v or "").strip().lower() in ("1", "true", "on", "sim", "s", "yes")

def _to_date(v: str | None) -> date | None:
    if not v:
        return None
    try:
        return datetime.strptime(v.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Data inválida: {v!r}")


def _preencher_anunciante(a: Anunciante, form) -> Anunciante:
    """Aplica os campos do formulário; campos ausentes mantêm o valor atual."""
    if "nome_empresa" in form or a.nome_empresa is None:
        nome = (form.get("nome_empresa") or "").strip()
        if not nome:
            raise ValueError("Nome da empresa é obrigatório.")
        a.nome_empresa = nome

    for campo in ("descricao", "telefone", "whatsapp", "email", "endereco", "site_url", "instagram", "logo_url"):
        if campo in form:
            setattr(a, campo, form.get(campo) or None)

    if "plano" in form:
        plano = form.get("plano")
        if plano not in PLANOS:
            raise ValueError(f"Plano inválido: {plano!r}")
        a.plano = plano
    if "ativo" in form:
        a.ativo = _to_bool(form.get("ativo"))
    if "destaque" in form:
        a.destaque = _to_bool(form.get("destaque"))
    if "ordem_exibicao" in form:
        a.ordem_exibicao = int(form.get("ordem_exibicao") or 0)

    if "valor_mensal" in form:
        valor = _to_decimal(form.get("valor_mensal"))
        if valor < 0:
            raise ValueError("Valor mensal não pode ser negativo.")
        a.valor_mensal = valor
    if "dia_vencimento" in form:
        dia = int(form.get("dia_vencimento") or 0)
        if not 1 <= dia <= 31:
            raise ValueError("Dia de vencimento deve estar entre 1 e 31.")
        a.dia_vencimento = dia
    if "comissao_gestor" in form:
        comissao = _to_decimal(form.get("comissao_gestor"))
        if not 0 <= comissao <= 100:
            raise ValueError("Comissão deve estar entre 0 e 100.")
        a.comissao_gestor = comissao
    if "contrato_inicio" in form:
        a.contrato_inicio = _to_date(form.get("contrato_inicio"))
    if "contrato_duracao" in form:
        a.contrato_duracao = int(form.get("contrato_duracao")) if form.get("contrato_duracao") else None
    return a


def _salvar_e_sincronizar(a: Anunciante, status_code: int):
    db.session.add(a)
    db.session.commit()
    try:
        acao = fin.sincronizar_anunciante(a)
    except SQLAlchemyError:
        current_app.logger.exception("Falha ao sincronizar cobrança do anunciante %s", a.id)
        acao = None
    return jsonify(anunciante=a.to_dict(), financeiro=acao), status_code


# ---------------- Dashboard ----------------
@clube_admin_bp.route("/dashboard")
@gestor_clube_required
def dashboard():
    metricas = carregar_metricas()
    if metricas is None:
        return jsonify(disponivel=False, error="Métricas indisponíveis."), 503
    return jsonify(disponivel=True, **metricas.to_dict())

# ---------------- Faturamento ----------------
@clube_admin_bp.route("/faturamento/gerar", methods=["POST"])
@gestor_clube_required
def gerar_faturamento():
    result = fin.gerar_faturamento_mes_atual()
    if not result["success"]:
        return jsonify(error=MSG_ERRO, **result), 500
    return jsonify(result)

@clube_admin_bp.route("/faturamento/atrasados", methods=["POST"])
@gestor_clube_required
def atualizar_atrasados():
    result = fin.atualizar_atrasados()
    if not result["success"]:
        return jsonify(error=MSG_ERRO, **result), 500
    return jsonify(result)

# ---------------- Pagamentos ----------------
@clube_admin_bp.route("/pagamentos")
@gestor_clube_required
def pagamentos():
    return jsonify([r.to_dict() for r in fin.listar_pagamentos_mes()])

@clube_admin_bp.route("/pagamentos/<int:registro_id>/receber", methods=["POST"])
@gestor_clube_required
def receber_pagamento(registro_id: int):
    try:
        valor = _to_decimal(request.form["valor_pago"]) if request.form.get("valor_pago") else None
        reg = fin.registrar_pagamento(registro_id, valor_pago=valor)
    except ValueError as e:
        # inclui TransicaoInvalida
        return jsonify(error=str(e)), 400
    if reg is None:
        abort(404)
    return jsonify(reg.to_dict())

@clube_admin_bp.route("/relatorio.pdf")
@gestor_clube_required
def relatorio_pdf():
    mes_ref = fin.primeiro_dia_mes()
    pdf = gerar_pdf_financeiro(fin.listar_pagamentos_mes(), mes_ref)
    resp = make_response(pdf)
    resp.headers["Content-Type"] = "application/pdf"
    resp.headers["Content-Disposition"] = f'inline; filename="financeiro_clube_{mes_ref:%Y_%m}.pdf"'
    return resp

# ---------------- Anunciantes ----------------
@clube_admin_bp.route("/anunciantes")
@gestor_clube_required
def anunciantes():
    rows = Anunciante.query.order_by(Anunciante.nome_empresa.asc()).all()
    return jsonify([a.to_dict() for a in rows])

@clube_admin_bp.route("/anunciantes", methods=["POST"])
@gestor_clube_required
def anunciantes_create():
    try:
        a = _preencher_anunciante(Anunciante(nome_empresa=None), request.form)
    except ValueError as e:
        return jsonify(error=str(e)), 400
    return _salvar_e_sincronizar(a, 201)

@clube_admin_bp.route("/anunciantes/<int:anunciante_id>", methods=["POST"])
@gestor_clube_required
def anunciantes_update(anunciante_id: int):
    a = _anunciante_or_404(anunciante_id)
    try:
        _preencher_anunciante(a, request.form)
    except ValueError as e:
        db.session.rollback()
        return jsonify(error=str(e)), 400
    return _salvar_e_sincronizar(a, 200)

@clube_admin_bp.route("/anunciantes/<int:anunciante_id>/excluir", methods=["POST"])
@gestor_clube_required
def anunciantes_delete(anunciante_id: int):
    a = _anunciante_or_404(anunciante_id)
    fin.excluir_anunciante(a)
    return jsonify(ok=True)

@clube_admin_bp.route("/anunciantes/<int:anunciante_id>/sincronizar", methods=["POST"])
@gestor_clube_required
def anunciantes_sincronizar(anunciante_id: int):
    a = _anunciante_or_404(anunciante_id)
    try:
        acao = fin.sincronizar_anunciante(a)
    except SQLAlchemyError:
        current_app.logger.exception("Falha ao sincronizar cobrança do anunciante %s", anunciante_id)
        return jsonify(error=MSG_ERRO), 500
    return jsonify(anunciante_id=anunciante_id, financeiro=acao)

# ---------------- Configurações ----------------
@clube_admin_bp.route("/configuracoes/comissao", methods=["GET", "POST"])
@gestor_clube_required
def comissao():
    if request.method == "POST":
        try:
            valor = _to_decimal(request.form.get("percentual"))
        except ValueError as e:
            return jsonify(error=str(e)), 400
        if not 0 <= valor <= 100:
            return jsonify(error="Percentual deve estar entre 0 e 100."), 400
        set_setting(CHAVE_COMISSAO_GESTOR, str(valor), group=GRUPO_CLUBE)
    return jsonify(comissao_percentual=comissao_gestor_percentual())
