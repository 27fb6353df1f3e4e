# condoportal_app/models/__init__.py
# -*- coding: utf-8 -*-
from .admin_user import AdminUser
from .anunciante import Anunciante
from .financeiro import FinanceiroClube
from .setting import Setting


__all__ = [
    "AdminUser",
    "Anunciante",
    "FinanceiroClube",
    "Setting",
]
