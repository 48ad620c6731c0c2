import asyncio
from datetime import date
from types import SimpleNamespace

import pytest
from discord import app_commands

import config
import cogs.problems
from cogs.problems import Problems, parse_day
from cogs.user_mgmt import is_valid_email
from utils.leetcode_api import LeetCodeUnavailableError

LEETCODE = app_commands.Choice(name="LeetCode", value="LeetCode")


def test_parse_day():
    assert parse_day("2024-01-01") == date(2024, 1, 1)
    assert parse_day(None) == config.today()


def test_parse_day_rejects_garbage():
    with pytest.raises(ValueError):
        parse_day("tomorrow")


@pytest.mark.parametrize("email, valid", [
    ("ada@example.com", True),
    ("ada@example", False),
    ("not an email", False),
    ("", False),
])
def test_is_valid_email(email, valid):
    assert is_valid_email(email) is valid


class StubLeetCode:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    async def get_problem_metadata(self, slug):
        if self.error is not None:
            raise self.error
        return self.result


def run_add_problem(monkeypatch, service, repo, slug="two-sum"):
    monkeypatch.setattr(cogs.problems, "get_leetcode_api", lambda: service)
    sent = []

    async def defer(**kwargs):
        pass

    async def send(content=None, **kwargs):
        sent.append(content)

    interaction = SimpleNamespace(
        response=SimpleNamespace(defer=defer),
        followup=SimpleNamespace(send=send),
    )
    cog = Problems(SimpleNamespace(db=repo))
    asyncio.run(Problems.add_problem.callback(cog, interaction, slug, LEETCODE))
    return sent


def test_add_problem_reports_leetcode_outage(monkeypatch, repo):
    sent = run_add_problem(monkeypatch, StubLeetCode(error=LeetCodeUnavailableError("down")), repo)

    assert sent == ["⚠️ LeetCode is unavailable right now. Try again later."]


def test_add_problem_reports_unknown_slug(monkeypatch, repo):
    sent = run_add_problem(monkeypatch, StubLeetCode(result=None), repo, slug="nope")

    assert sent == ["❌ Problem `nope` not found on LeetCode."]
