"""Database package."""

from .db import get_session, init_db
from .models import ConferenceRecord

__all__ = ["get_session", "init_db", "ConferenceRecord"]
