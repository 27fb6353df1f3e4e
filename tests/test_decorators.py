from condoportal_app.decorators import AdminSession, pode_gerir_financeiro


def test_policy_gestor_clube():
    assert pode_gerir_financeiro(AdminSession(id=1, email="g@x", role="gestor_clube"))
    assert not pode_gerir_financeiro(AdminSession(id=2, email="s@x", role="sindico"))
    assert not pode_gerir_financeiro(None)


def test_session_without_role_is_anonymous(app):
    with app.test_request_context():
        from flask import session
        session["user"] = {"id": 1, "email": "x@y"}
        assert AdminSession.from_session() is None
        session["user"]["role"] = "gestor_clube"
        assert AdminSession.from_session() == AdminSession(id=1, email="x@y", role="gestor_clube")
