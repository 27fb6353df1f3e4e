# condoportal_app/blueprints/clube_admin/__init__.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint

clube_admin_bp = Blueprint("clube_admin", __name__, url_prefix="")

# importa rotas para registrar no blueprint
from . import routes  # noqa: E402,F401
