# condoportal_app/extensions.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import click
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from sqlalchemy import text



db = SQLAlchemy()
bcrypt = Bcrypt()
migrate = Migrate()

def init_extensions(app):
    # DB/Bcrypt/Migrate
    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)

def register_cli(app):
    from .models.admin_user import ROLE_GESTOR_CLUBE, ROLE_SINDICO

    @app.cli.command("init-db")
    def init_db_cmd():
        """Cria as tabelas iniciais (DEV/MVP). Para produção: use flask db upgrade."""
        with app.app_context():
            # sanity check
            db.session.execute(text("SELECT 1"))
            db.create_all()
            print("Tabelas criadas.")

    @app.cli.command("create-admin")
    @click.option("--email", required=True)
    @click.option("--password", required=True)
    @click.option("--name", default="Administrador")
    @click.option("--role", type=click.Choice([ROLE_SINDICO, ROLE_GESTOR_CLUBE]), default=ROLE_GESTOR_CLUBE)
    def create_admin_cmd(email, password, name, role):
        """Cria (ou redefine a senha de) um administrador do portal."""
        from .models import AdminUser
        with app.app_context():
            u = AdminUser.query.filter_by(email=email).first()
            if not u:
                u = AdminUser(email=email, name=name, role=role)
                db.session.add(u)
            u.role = role
            u.set_password(password)
            db.session.commit()
            print(f"Administrador {email} ({role}) salvo.")
