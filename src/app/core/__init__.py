"""
Core module - Configuration, database, security, auth, email, rate limiting
and background job scheduling.

Import from the submodules directly, e.g. ``from app.core.database import get_db``.
"""
