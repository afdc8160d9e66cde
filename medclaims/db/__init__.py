"""
Database module for the Medical Claims Service.
"""

from medclaims.db.connection import (
    check_db_connection,
    close_db_connection,
    get_engine,
    get_session,
    get_session_maker,
    session_scope,
)

__all__ = [
    "get_engine",
    "get_session_maker",
    "get_session",
    "session_scope",
    "close_db_connection",
    "check_db_connection",
]
