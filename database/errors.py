"""
Error taxonomy for repository calls
"""


class RepositoryError(Exception):
    """Base class for anything that went wrong talking to the database"""


class FetchError(RepositoryError):
    """A read from problems, daily sets, submissions or profiles failed"""


class WriteError(RepositoryError):
    """An insert, update or delete failed"""


class DuplicateSubmissionError(WriteError):
    """The (user_id, problem_id, date) submission already exists"""


class StreakProcedureError(RepositoryError):
    """update_user_streak() failed"""
