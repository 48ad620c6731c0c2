"""
Daily Problem Tracker
---------------------
Reconciles today's assigned problems with the user's submissions:

1. load_today: fetch the daily set, its problems and the user's completions
2. toggle_completion: insert/delete one submission, then recalculate the streak

The local completed set is only changed after the database confirms the write.
Failures become non-blocking notices; nothing is retried.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable, List, Optional, Set

from database.errors import DuplicateSubmissionError, RepositoryError
from utils.models import AuthUser, Problem

logger = logging.getLogger(__name__)


# -----------------------------
# Data Models
# -----------------------------

@dataclass(frozen=True)
class Notice:
    title: str
    description: str
    level: str = "info"  # info | success | error

    @property
    def is_error(self) -> bool:
        return self.level == "error"


@dataclass
class TodayView:
    problems: List[Problem] = field(default_factory=list)
    completed: Set[str] = field(default_factory=set)


Notifier = Callable[[Notice], Awaitable[None]]
ChangeListener = Callable[[], Awaitable[None]]


async def _discard_notice(notice: Notice) -> None:
    logger.debug(f"Unhandled notice: {notice.title} - {notice.description}")


# -----------------------------
# Tracker
# -----------------------------

class DailyProblemTracker:
    """Owns the problem list and completed-id set of one rendered view"""

    def __init__(
        self,
        db,
        notify: Optional[Notifier] = None,
        on_completion_changed: Optional[ChangeListener] = None
    ):
        self.db = db
        self.notify = notify or _discard_notice
        self.on_completion_changed = on_completion_changed
        self.problems: List[Problem] = []
        self.completed: Set[str] = set()
        self.loading = False

    @property
    def completed_count(self) -> int:
        return sum(1 for problem in self.problems if problem.id in self.completed)

    def is_completed(self, problem_id: str) -> bool:
        return problem_id in self.completed

    def snapshot(self) -> TodayView:
        return TodayView(problems=list(self.problems), completed=set(self.completed))

    async def load_today(self, day: date, user: Optional[AuthUser] = None) -> TodayView:
        """
        Fetch the problems assigned for `day` and, for a signed-in user, which
        of them are completed. A failed fetch keeps the last known value.
        """
        self.loading = True
        try:
            try:
                self.problems = await self._fetch_problems(day)
            except RepositoryError as e:
                logger.error(f"Error fetching problems for {day}: {e}")
                await self.notify(Notice("Error", "Failed to load today's problems.", "error"))

            if user is None:
                self.completed = set()
            else:
                try:
                    submissions = await self.db.get_submissions(user.id, day)
                    self.completed = {sub.problem_id for sub in submissions}
                except RepositoryError as e:
                    logger.error(f"Error fetching progress for {user.id} on {day}: {e}")
                    await self.notify(Notice("Error", "Failed to load your progress.", "error"))
        finally:
            self.loading = False

        return self.snapshot()

    async def _fetch_problems(self, day: date) -> List[Problem]:
        problem_set = await self.db.get_daily_problem_set(day)
        if problem_set is None or not problem_set.problem_ids:
            return []

        records = await self.db.get_problems(problem_set.problem_ids)
        by_id = {problem.id: problem for problem in records}

        # Keep the order of the daily set; drop ids with no record
        ordered = []
        seen = set()
        for problem_id in problem_set.problem_ids:
            if problem_id in seen or problem_id not in by_id:
                continue
            seen.add(problem_id)
            ordered.append(by_id[problem_id])

        missing = set(problem_set.problem_ids) - set(by_id)
        if missing:
            logger.warning(f"Daily set for {day} references unknown problems: {sorted(missing)}")
        return ordered

    async def toggle_completion(
        self,
        user: AuthUser,
        problem_id: str,
        day: date,
        currently_completed: bool
    ) -> bool:
        """
        Mark a problem complete or incomplete for `day`.

        `loading` stays set until the write and its follow-up calls finish.

        Returns:
            True if the submission change was recorded
        """
        self.loading = True
        try:
            return await self._apply_toggle(user, problem_id, day, currently_completed)
        finally:
            self.loading = False

    async def _apply_toggle(self, user: AuthUser, problem_id: str, day: date, currently_completed: bool) -> bool:
        if currently_completed:
            try:
                await self.db.delete_submission(user.id, problem_id, day)
            except RepositoryError as e:
                logger.error(f"Error removing completion {problem_id} for {user.id}: {e}")
                await self.notify(Notice("Error", "Failed to update problem status.", "error"))
                return False

            self.completed.discard(problem_id)
            notice = Notice("Problem unmarked", "Problem removed from today's completed list.", "success")
        else:
            try:
                await self.db.insert_submission(user.id, problem_id, day)
                notice = Notice("Problem completed! 🎉", "Great job! Keep up the consistency.", "success")
            except DuplicateSubmissionError:
                # Another toggle got there first; the row is what we wanted
                logger.info(f"Submission {problem_id} for {user.id} on {day} already recorded")
                notice = Notice("Already completed", "This problem is already on today's completed list.")
            except RepositoryError as e:
                logger.error(f"Error recording completion {problem_id} for {user.id}: {e}")
                await self.notify(Notice("Error", "Failed to update problem status.", "error"))
                return False

            self.completed.add(problem_id)

        await self.notify(notice)

        try:
            await self.db.recalculate_streak(user.id)
        except RepositoryError as e:
            logger.warning(f"Streak update failed for {user.id}, will settle on next recalculation: {e}")

        if self.on_completion_changed is not None:
            try:
                await self.on_completion_changed()
            except RepositoryError as e:
                logger.warning(f"Profile refresh after completion change failed: {e}")

        return True
