# tests/conftest.py
# -*- coding: utf-8 -*-
import os
import sys
import uuid
import pathlib
import tempfile
from datetime import date
from decimal import Decimal

import pytest


# =====================================================================================
# Localização do projeto (garante que "condoportal_app" e "config" estejam no sys.path)
# =====================================================================================
def _add_project_root():
    here = pathlib.Path(__file__).resolve()
    for base in [here.parent, here.parent.parent, pathlib.Path.cwd()]:
        for candidate in [base, *base.parents]:
            if (candidate / "condoportal_app").is_dir():
                if str(candidate) not in sys.path:
                    sys.path.insert(0, str(candidate))
                return candidate
    return None


PROJECT_ROOT = _add_project_root()


# =====================================================================================
# App Flask com SQLite temporário e schema criado uma vez por sessão
# =====================================================================================
@pytest.fixture(scope="session")
def app():
    os.environ["APP_ENV"] = "testing"
    os.environ.setdefault("SECRET_KEY", "testing-secret")

    fd, db_path = tempfile.mkstemp(prefix="condoportal_test_", suffix=".sqlite")
    os.close(fd)

    from config import TestingConfig
    from condoportal_app import create_app
    from condoportal_app.extensions import db

    app = create_app(TestingConfig, {
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path}",
        "SECRET_KEY": "testing-secret",
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()
    try:
        os.remove(db_path)
    except OSError:
        pass


# =====================================================================================
# Cada teste começa com as tabelas vazias
# =====================================================================================
@pytest.fixture(autouse=True)
def _clean_tables(app):
    yield
    from condoportal_app.extensions import db
    with app.app_context():
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    from condoportal_app.extensions import db
    with app.app_context():
        try:
            yield db.session
        finally:
            db.session.rollback()
            db.session.close()


# =====================================================================================
# Factories
# =====================================================================================
@pytest.fixture
def make_anunciante(db_session):
    from condoportal_app.models import Anunciante

    def _make(**overrides):
        data = dict(
            nome_empresa=f"Empresa {uuid.uuid4().hex[:6]}",
            plano="bronze",
            ativo=True,
            valor_mensal=Decimal("300.00"),
            dia_vencimento=5,
            comissao_gestor=Decimal("60"),
        )
        data.update(overrides)
        a = Anunciante(**data)
        db_session.add(a)
        db_session.commit()
        return a
    return _make


@pytest.fixture
def make_registro(db_session):
    from condoportal_app.models import FinanceiroClube

    def _make(anunciante, **overrides):
        hoje = date.today()
        data = dict(
            anunciante_id=anunciante.id,
            mes_referencia=hoje.replace(day=1),
            valor_contratado=Decimal("300.00"),
            data_vencimento=hoje.replace(day=5),
            status="pendente",
        )
        data.update(overrides)
        r = FinanceiroClube(**data)
        db_session.add(r)
        db_session.commit()
        return r
    return _make


# =====================================================================================
# Administradores e clientes logados
# =====================================================================================
def _make_admin(db_session, role):
    from condoportal_app.models import AdminUser
    email = f"{role}+{uuid.uuid4().hex[:6]}@test.com"
    u = AdminUser(name=role.title(), email=email, role=role)
    u.set_password("secret123")
    db_session.add(u); db_session.commit()
    return u


@pytest.fixture
def gestor_clube(db_session):
    return _make_admin(db_session, "gestor_clube")


@pytest.fixture
def sindico(db_session):
    return _make_admin(db_session, "sindico")


@pytest.fixture
def logged_client_gestor(client, gestor_clube):
    with client.session_transaction() as sess:
        sess["user"] = {"id": gestor_clube.id, "email": gestor_clube.email, "role": "gestor_clube"}
    return client


@pytest.fixture
def logged_client_sindico(client, sindico):
    with client.session_transaction() as sess:
        sess["user"] = {"id": sindico.id, "email": sindico.email, "role": "sindico"}
    return client
