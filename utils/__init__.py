# Utility functions and helpers
from .logic import (
    DifficultyCategory,
    classify_difficulty,
    normalize_problem_name,
    parse_problem_ids,
    generate_problem_url,
    pluralize_days,
    format_member_since,
)

from .models import (
    Problem,
    DailyProblemSet,
    Submission,
    Profile,
    AuthUser,
)

__all__ = [
    'DifficultyCategory',
    'classify_difficulty',
    'normalize_problem_name',
    'parse_problem_ids',
    'generate_problem_url',
    'pluralize_days',
    'format_member_since',
    'Problem',
    'DailyProblemSet',
    'Submission',
    'Profile',
    'AuthUser',
]
