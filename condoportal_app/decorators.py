# condoportal_app/decorators.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass
from functools import wraps
from typing import Optional
from flask import session, flash, redirect, url_for, request, jsonify

from .models.admin_user import ROLE_GESTOR_CLUBE


@dataclass(frozen=True)
class AdminSession:
    """Administrador autenticado, reconstruído a partir de ``session['user']``."""
    id: int
    email: str
    role: str

    @classmethod
    def from_session(cls) -> Optional["AdminSession"]:
        data = session.get("user")
        if not data or not data.get("role"):
            return None
        return cls(id=data.get("id"), email=data.get("email", ""), role=data["role"])

    def to_session(self) -> dict:
        return {"id": self.id, "email": self.email, "role": self.role}


def pode_gerir_financeiro(sessao: Optional[AdminSession]) -> bool:
    """Único ponto de decisão para as operações de cobrança do clube."""
    return sessao is not None and sessao.role == ROLE_GESTOR_CLUBE

def gestor_clube_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        sessao = AdminSession.from_session()
        if sessao is None:
            flash("Faça login para acessar.", "warning")
            return redirect(url_for("auth.login", next=request.path))
        if not pode_gerir_financeiro(sessao):
            return jsonify(error="Acesso restrito ao gestor do clube."), 403
        return view_func(*args, **kwargs)
    return wrapper
