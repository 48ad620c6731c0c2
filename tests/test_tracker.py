import asyncio
from datetime import date

from conftest import DAY, CallCounter, NoticeRecorder, make_problem
from utils.tracker import DailyProblemTracker


def run(coro):
    return asyncio.run(coro)


def test_day_without_problem_set_is_empty_and_silent(repo, user):
    notices = NoticeRecorder()
    tracker = DailyProblemTracker(repo, notify=notices)

    view = run(tracker.load_today(date(2030, 5, 5), user))

    assert view.problems == []
    assert view.completed == set()
    assert notices.notices == []


def test_load_today_without_submissions(repo, user):
    tracker = DailyProblemTracker(repo)

    view = run(tracker.load_today(DAY, user))

    assert [p.id for p in view.problems] == ["p1", "p2"]
    assert view.completed == set()


def test_load_today_with_existing_submission(repo, user):
    repo.submissions.add(("u1", "p1", DAY))
    tracker = DailyProblemTracker(repo)

    view = run(tracker.load_today(DAY, user))

    assert view.completed == {"p1"}
    assert tracker.completed_count == 1


def test_completed_set_matches_rows_for_user_and_day_only(repo, user):
    repo.submissions.update({
        ("u1", "p2", DAY),
        ("u1", "p1", date(2023, 12, 31)),
        ("u2", "p1", DAY),
    })
    tracker = DailyProblemTracker(repo)

    view = run(tracker.load_today(DAY, user))

    assert view.completed == {"p2"}


def test_anonymous_load_has_empty_completed_set(repo):
    repo.submissions.add(("u1", "p1", DAY))
    tracker = DailyProblemTracker(repo)

    view = run(tracker.load_today(DAY))

    assert len(view.problems) == 2
    assert view.completed == set()


def test_problems_follow_daily_set_order(repo, user):
    repo.problems["p3"] = make_problem("p3", "Medium")
    repo.daily_sets[DAY] = ["p3", "p1", "missing", "p3", "p2"]
    tracker = DailyProblemTracker(repo)

    view = run(tracker.load_today(DAY, user))

    assert [p.id for p in view.problems] == ["p3", "p1", "p2"]


def test_problem_fetch_failure_keeps_last_known_problems(repo, user):
    notices = NoticeRecorder()
    tracker = DailyProblemTracker(repo, notify=notices)
    run(tracker.load_today(DAY, user))

    repo.fail_reads.add("problems")
    view = run(tracker.load_today(DAY, user))

    assert [p.id for p in view.problems] == ["p1", "p2"]
    assert [n.description for n in notices.errors] == ["Failed to load today's problems."]


def test_submission_fetch_failure_keeps_problems(repo, user):
    repo.fail_reads.add("submissions")
    notices = NoticeRecorder()
    tracker = DailyProblemTracker(repo, notify=notices)

    view = run(tracker.load_today(DAY, user))

    assert [p.id for p in view.problems] == ["p1", "p2"]
    assert view.completed == set()
    assert [n.description for n in notices.errors] == ["Failed to load your progress."]
    assert tracker.loading is False


def test_mark_complete_adds_and_recalculates_streak(repo, user):
    repo.submissions.add(("u1", "p1", DAY))
    changed = CallCounter()
    notices = NoticeRecorder()
    tracker = DailyProblemTracker(repo, notify=notices, on_completion_changed=changed)
    run(tracker.load_today(DAY, user))

    ok = run(tracker.toggle_completion(user, "p2", DAY, False))

    assert ok is True
    assert tracker.completed == {"p1", "p2"}
    assert repo.streak_calls == ["u1"]
    assert changed.calls == 1
    assert notices.notices[-1].title == "Problem completed! 🎉"


def test_unmark_removes_completion(repo, user):
    repo.submissions.update({("u1", "p1", DAY), ("u1", "p2", DAY)})
    tracker = DailyProblemTracker(repo)
    run(tracker.load_today(DAY, user))

    ok = run(tracker.toggle_completion(user, "p1", DAY, True))

    assert ok is True
    assert tracker.completed == {"p2"}
    assert ("u1", "p1", DAY) not in repo.submissions


def test_round_trip_restores_absence_of_submission(repo, user):
    tracker = DailyProblemTracker(repo)
    run(tracker.load_today(DAY, user))

    run(tracker.toggle_completion(user, "p2", DAY, False))
    run(tracker.toggle_completion(user, "p2", DAY, True))

    assert repo.submissions == set()
    assert tracker.completed == set()
    assert repo.streak_calls == ["u1", "u1"]


def test_duplicate_insert_reconciles_to_completed(repo, user):
    tracker = DailyProblemTracker(repo)
    run(tracker.load_today(DAY, user))
    # A second tab already recorded p1
    repo.force_duplicate = True
    notices = NoticeRecorder()
    tracker.notify = notices

    ok = run(tracker.toggle_completion(user, "p1", DAY, False))

    assert ok is True
    assert "p1" in tracker.completed
    assert notices.errors == []
    assert repo.inserts == []


def test_write_failure_leaves_completed_set_untouched(repo, user):
    repo.submissions.add(("u1", "p1", DAY))
    changed = CallCounter()
    notices = NoticeRecorder()
    tracker = DailyProblemTracker(repo, notify=notices, on_completion_changed=changed)
    run(tracker.load_today(DAY, user))
    repo.fail_writes = True

    assert run(tracker.toggle_completion(user, "p2", DAY, False)) is False
    assert run(tracker.toggle_completion(user, "p1", DAY, True)) is False

    assert tracker.completed == {"p1"}
    assert repo.streak_calls == []
    assert changed.calls == 0
    assert [n.description for n in notices.errors] == ["Failed to update problem status."] * 2


def test_streak_failure_does_not_undo_toggle(repo, user):
    repo.fail_streak = True
    changed = CallCounter()
    notices = NoticeRecorder()
    tracker = DailyProblemTracker(repo, notify=notices, on_completion_changed=changed)
    run(tracker.load_today(DAY, user))

    ok = run(tracker.toggle_completion(user, "p1", DAY, False))

    assert ok is True
    assert tracker.completed == {"p1"}
    assert ("u1", "p1", DAY) in repo.submissions
    assert changed.calls == 1
    assert notices.errors == []


def test_completed_set_changes_only_after_write_confirms(repo, user):
    seen_during_insert = []
    tracker = DailyProblemTracker(repo)
    original_insert = repo.insert_submission

    async def observing_insert(user_id, problem_id, day):
        seen_during_insert.append(set(tracker.completed))
        await original_insert(user_id, problem_id, day)

    repo.insert_submission = observing_insert
    run(tracker.toggle_completion(user, "p2", DAY, False))

    assert seen_during_insert == [set()]
    assert tracker.completed == {"p2"}


def test_loading_is_set_while_a_toggle_is_in_flight(repo, user):
    tracker = DailyProblemTracker(repo)
    seen = []

    async def record_loading():
        seen.append(tracker.loading)

    tracker.on_completion_changed = record_loading
    run(tracker.toggle_completion(user, "p1", DAY, False))

    assert seen == [True]
    assert tracker.loading is False


def test_loading_is_cleared_after_a_failed_toggle(repo, user):
    repo.fail_writes = True
    tracker = DailyProblemTracker(repo)

    assert run(tracker.toggle_completion(user, "p1", DAY, False)) is False
    assert tracker.loading is False
