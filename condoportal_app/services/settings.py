# condoportal_app/services/settings.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import math
from flask import current_app
from ..extensions import db
from ..models import Setting

GRUPO_CLUBE = "clube"
CHAVE_COMISSAO_GESTOR = "comissao_gestor_percentual"


def get_setting(key: str, group: str = GRUPO_CLUBE, default: str = "") -> str:
    s = Setting.query.filter_by(group=group, key=key).first()
    return s.value if s else default

def set_setting(key: str, value: str, group: str = GRUPO_CLUBE) -> None:
    s = Setting.query.filter_by(group=group, key=key).first()
    if not s:
        s = Setting(group=group, key=key, value=value)
        db.session.add(s)
    else:
        s.value = value
    db.session.commit()

def comissao_gestor_percentual() -> float:
    """Percentual da receita do clube que fica com o gestor (0..100)."""
    padrao = float(current_app.config.get("CLUBE_COMISSAO_GESTOR_PADRAO", 60))
    raw = get_setting(CHAVE_COMISSAO_GESTOR, group=GRUPO_CLUBE, default="")
    if not raw:
        return padrao
    try:
        valor = float(raw.replace(",", "."))
        if not math.isfinite(valor):
            raise ValueError(raw)
    except ValueError:
        current_app.logger.warning("Comissão do gestor inválida em settings: %r", raw)
        return padrao
    return min(max(valor, 0.0), 100.0)
