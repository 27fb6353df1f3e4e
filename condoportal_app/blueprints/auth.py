# condoportal_app/blueprints/auth.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, render_template, request, redirect, url_for, flash, session

from condoportal_app.decorators import AdminSession
from condoportal_app.models import AdminUser

bp = Blueprint("auth", __name__)

@bp.route("/login", methods=["GET","POST"])
def login():
    if request.method == "POST":
        email = request.form.get("email")
        pwd = request.form.get("password") or ""

        u = AdminUser.query.filter_by(email=email, active=True).first()
        if not u or not u.check_password(pwd):
            flash("Credenciais inválidas.", "danger")
            return redirect(url_for("auth.login"))

        session["user"] = AdminSession(id=u.id, email=u.email, role=u.role).to_session()
        flash("Login efetuado.", "success")
        next_url = request.args.get("next") or url_for("clube.listar_anunciantes")
        return redirect(next_url)
    return render_template("auth_login.html")

@bp.route("/logout")
def logout():
    session.clear()
    flash("Você saiu da sessão.", "info")
    return redirect(url_for("auth.login"))
