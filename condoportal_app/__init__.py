# condoportal_app/__init__.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import os
from datetime import datetime
from typing import Optional

from flask import Flask
from config import Config, TestingConfig, StagingConfig, ProductionConfig
from .extensions import db, bcrypt, migrate, init_extensions, register_cli
from .blueprints.auth import bp as auth_bp
from .blueprints.clube import bp as clube_bp
from .blueprints.clube_admin import clube_admin_bp

_CONFIGS = {
    "testing": TestingConfig,
    "staging": StagingConfig,
    "production": ProductionConfig,
}

def create_app(config_object: Optional[type[Config]] = None, overrides: Optional[dict] = None) -> Flask:
    app = Flask(__name__, template_folder="../templates")

    if config_object is None:
        app_env = os.getenv("APP_ENV", "").lower()
        config_object = _CONFIGS.get(app_env, Config)
    app.config.from_object(config_object)
    app.config.update(overrides or {})

    # Extensões (DB/Bcrypt/Migrate)
    init_extensions(app)
    app.config["STARTED_AT"] = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S UTC")

    # Blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(clube_bp)
    app.register_blueprint(clube_admin_bp, url_prefix="/clube/admin")
    # CLI (ex.: flask init-db)
    register_cli(app)

    return app
