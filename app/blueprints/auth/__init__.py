# app/blueprints/auth/__init__.py
"""
Authentication Blueprint

Responsible for:
- Login
- Logout
- Creating staff accounts
"""

from flask import Blueprint

# No url_prefix to keep /login and /logout at the top level
auth_bp = Blueprint('auth', __name__)

# Import routes after blueprint creation to avoid circular imports
from . import routes
