"""
Database package for Daily Coder Hub
Provides PostgreSQL/Supabase database management and the repository error types
"""

from .manager import DatabaseManager
from .errors import (
    RepositoryError,
    FetchError,
    WriteError,
    DuplicateSubmissionError,
    StreakProcedureError,
)

__all__ = [
    'DatabaseManager',
    'RepositoryError',
    'FetchError',
    'WriteError',
    'DuplicateSubmissionError',
    'StreakProcedureError',
]
