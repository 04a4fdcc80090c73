# app/blueprints/profiles/__init__.py
"""
Profiles Blueprint

Responsible for:
- Profile list with search
- Create/Edit/Delete profiles
- Print view and PDF download (single and all)
- Export to Excel
"""

from flask import Blueprint

profiles_bp = Blueprint('profiles', __name__)

# Import routes after blueprint creation to avoid circular imports
from . import routes
