# backend/app/config/__init__.py
from __future__ import annotations

"""
Shortcut imports for configuration (see settings.py for the fields).
"""

from .settings import Settings, get_settings  # noqa: F401
