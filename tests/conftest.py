from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

import pytest

from database.errors import (
    DuplicateSubmissionError,
    FetchError,
    StreakProcedureError,
    WriteError,
)
from utils.models import AuthUser, DailyProblemSet, Problem, Profile, Submission

DAY = date(2024, 1, 1)


class FakeRepository:
    """In-memory stand-in for DatabaseManager"""

    def __init__(self):
        self.problems: Dict[str, Problem] = {}
        self.daily_sets: Dict[date, List[str]] = {}
        self.submissions: Set[Tuple[str, str, date]] = set()
        self.profiles: Dict[str, Profile] = {}

        self.fail_reads: Set[str] = set()
        self.fail_writes = False
        self.fail_streak = False
        # Simulates a row inserted by a concurrent toggle
        self.force_duplicate = False

        self.streak_calls: List[str] = []
        self.inserts: List[Tuple[str, str, date]] = []
        self.deletes: List[Tuple[str, str, date]] = []

    def _check_read(self, name: str) -> None:
        if name in self.fail_reads:
            raise FetchError(f"{name} unavailable")

    async def get_daily_problem_set(self, day: date) -> Optional[DailyProblemSet]:
        self._check_read("daily_set")
        if day not in self.daily_sets:
            return None
        return DailyProblemSet(date=day, problem_ids=list(self.daily_sets[day]))

    async def get_problems(self, problem_ids) -> List[Problem]:
        self._check_read("problems")
        # Deliberately reversed to mimic an unordered IN query
        return [self.problems[i] for i in reversed(list(problem_ids)) if i in self.problems]

    async def get_submissions(self, user_id: str, day: date) -> List[Submission]:
        self._check_read("submissions")
        return [
            Submission(user_id=u, problem_id=p, date=d)
            for (u, p, d) in sorted(self.submissions)
            if u == user_id and d == day
        ]

    async def insert_submission(self, user_id: str, problem_id: str, day: date) -> None:
        if self.fail_writes:
            raise WriteError("insert failed")
        key = (user_id, problem_id, day)
        if self.force_duplicate:
            self.submissions.add(key)
        if key in self.submissions:
            raise DuplicateSubmissionError("duplicate")
        self.inserts.append(key)
        self.submissions.add(key)

    async def delete_submission(self, user_id: str, problem_id: str, day: date) -> None:
        if self.fail_writes:
            raise WriteError("delete failed")
        key = (user_id, problem_id, day)
        self.deletes.append(key)
        self.submissions.discard(key)

    async def recalculate_streak(self, user_id: str, today: Optional[date] = None) -> None:
        self.streak_calls.append(user_id)
        if self.fail_streak:
            raise StreakProcedureError("rpc failed")
        profile = self.profiles.get(user_id)
        if profile is not None:
            profile.total_solved = len([s for s in self.submissions if s[0] == user_id])
            profile.streak_count = 1 if profile.total_solved else 0

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        self._check_read("profile")
        profile = self.profiles.get(user_id)
        return Profile(**profile.__dict__) if profile else None

    async def get_profile_by_discord_id(self, discord_id: int) -> Optional[Profile]:
        self._check_read("profile")
        for profile in self.profiles.values():
            if profile.discord_id == discord_id:
                return Profile(**profile.__dict__)
        return None


def make_problem(problem_id: str, difficulty: str = "Easy", **kwargs) -> Problem:
    return Problem(
        id=problem_id,
        title=kwargs.pop("title", f"Problem {problem_id}"),
        platform=kwargs.pop("platform", "LeetCode"),
        url=kwargs.pop("url", f"https://leetcode.com/problems/{problem_id}/"),
        difficulty=difficulty,
        **kwargs
    )


class NoticeRecorder:
    def __init__(self):
        self.notices = []

    async def __call__(self, notice):
        self.notices.append(notice)

    @property
    def errors(self):
        return [n for n in self.notices if n.is_error]


class CallCounter:
    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1


@pytest.fixture()
def repo() -> FakeRepository:
    """Scenario A: 2024-01-01 has problems p1 and p2, nothing completed"""
    fake = FakeRepository()
    fake.problems["p1"] = make_problem("p1", "Easy")
    fake.problems["p2"] = make_problem("p2", "Hard")
    fake.daily_sets[DAY] = ["p1", "p2"]
    fake.profiles["u1"] = Profile(
        user_id="u1",
        discord_id=1001,
        full_name="Ada",
        email="ada@example.com",
        email_verified=True,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    return fake


@pytest.fixture()
def user() -> AuthUser:
    return AuthUser(id="u1", email="ada@example.com")
