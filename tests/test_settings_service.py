# tests/test_settings_service.py
from __future__ import annotations

import pytest

from condoportal_app.services.settings import get_setting, set_setting, comissao_gestor_percentual
from condoportal_app.models.setting import Setting


def test_get_setting_returns_default_when_missing(app, db_session):
    assert get_setting("comissao_gestor_percentual", group="clube", default="") == ""
    assert get_setting("nao_existe", group="qualquer", default="DEFAULT") == "DEFAULT"


def test_set_then_get_creates_record(app, db_session):
    assert db_session.query(Setting).count() == 0

    set_setting("comissao_gestor_percentual", "55", group="clube")

    row = db_session.query(Setting).filter_by(group="clube", key="comissao_gestor_percentual").first()
    assert row is not None
    assert row.value == "55"
    assert get_setting("comissao_gestor_percentual", group="clube", default="x") == "55"


def test_set_setting_updates_existing_value(app, db_session):
    set_setting("comissao_gestor_percentual", "50")
    set_setting("comissao_gestor_percentual", "70")
    assert get_setting("comissao_gestor_percentual") == "70"

    rows = db_session.query(Setting).filter_by(group="clube", key="comissao_gestor_percentual").all()
    assert len(rows) == 1


def test_groups_are_isolated(app, db_session):
    set_setting("contato", "gestor@clube", group="clube")
    set_setting("contato", "sindico@condominio", group="condominio")

    assert get_setting("contato", group="clube") == "gestor@clube"
    assert get_setting("contato", group="condominio") == "sindico@condominio"


def test_comissao_default_from_config(app, db_session):
    assert comissao_gestor_percentual() == app.config["CLUBE_COMISSAO_GESTOR_PADRAO"] == 60.0


def test_comissao_accepts_comma_and_clamps(app, db_session):
    set_setting("comissao_gestor_percentual", "42,5")
    assert comissao_gestor_percentual() == 42.5
    set_setting("comissao_gestor_percentual", "130")
    assert comissao_gestor_percentual() == 100.0


def test_comissao_invalid_falls_back_to_default(app, db_session):
    set_setting("comissao_gestor_percentual", "sessenta")
    assert comissao_gestor_percentual() == 60.0


@pytest.mark.parametrize("raw", ["nan", "inf", "-Infinity"])
def test_comissao_nao_finita_usa_padrao(app, db_session, raw):
    set_setting("comissao_gestor_percentual", raw)
    assert comissao_gestor_percentual() == 60.0
