"""
Data models shared by the database layer, the tracker and the cogs
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass(frozen=True)
class Problem:
    id: str
    title: str
    platform: str
    url: str
    difficulty: str
    tags: List[str] = field(default_factory=list)
    description: Optional[str] = None


@dataclass(frozen=True)
class DailyProblemSet:
    date: date
    problem_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Submission:
    user_id: str
    problem_id: str
    date: date


@dataclass
class Profile:
    user_id: str
    discord_id: Optional[int] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    streak_count: int = 0
    longest_streak: int = 0
    total_solved: int = 0
    email_verified: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthUser:
    """Authenticated identity: the profile owner"""
    id: str
    email: Optional[str] = None
