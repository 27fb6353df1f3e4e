# tests/test_extensions_cli.py
def test_init_db_cli_runs(app):
    runner = app.test_cli_runner()
    res = runner.invoke(args=["init-db"])
    assert res.exit_code == 0
    assert "Tabelas criadas" in res.output


def test_create_admin_cli(app, db_session):
    from condoportal_app.models import AdminUser

    runner = app.test_cli_runner()
    res = runner.invoke(args=["create-admin", "--email", "gestor@condo.test", "--password", "s3nha"])
    assert res.exit_code == 0, res.output

    u = AdminUser.query.filter_by(email="gestor@condo.test").first()
    assert u is not None
    assert u.role == "gestor_clube"
    assert u.check_password("s3nha")

    res = runner.invoke(args=["create-admin", "--email", "gestor@condo.test", "--password", "nova", "--role", "sindico"])
    assert res.exit_code == 0
    db_session.expire_all()
    u = AdminUser.query.filter_by(email="gestor@condo.test").one()
    assert u.role == "sindico"
    assert u.check_password("nova")
