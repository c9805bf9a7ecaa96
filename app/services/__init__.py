# app/services/__init__.py
from .advisor_session import AdvisorSessionService, db_session, init_db

__all__ = ["AdvisorSessionService", "db_session", "init_db"]
