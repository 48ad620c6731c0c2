from datetime import datetime

import pytest

from utils.logic import (
    DifficultyCategory,
    classify_difficulty,
    format_member_since,
    generate_problem_url,
    normalize_problem_name,
    parse_problem_ids,
    pluralize_days,
)


@pytest.mark.parametrize("label, expected", [
    ("easy", DifficultyCategory.EASY),
    ("Medium", DifficultyCategory.MEDIUM),
    ("  HARD ", DifficultyCategory.HARD),
    ("1st Year", DifficultyCategory.DEFAULT),
    ("", DifficultyCategory.DEFAULT),
    (None, DifficultyCategory.DEFAULT),
])
def test_classify_difficulty(label, expected):
    assert classify_difficulty(label) is expected


def test_difficulty_categories_have_distinct_presentation():
    colors = {category.color for category in DifficultyCategory}
    emojis = {category.emoji for category in DifficultyCategory}
    assert len(colors) == len(emojis) == 4


def test_normalize_problem_name():
    assert normalize_problem_name(" Two Sum ") == "two-sum"
    assert normalize_problem_name("") == ""


def test_parse_problem_ids():
    assert parse_problem_ids("two-sum, 3sum  valid-parentheses,") == ["two-sum", "3sum", "valid-parentheses"]
    assert parse_problem_ids("") == []


def test_generate_problem_url():
    assert generate_problem_url("LeetCode", "two-sum") == "https://leetcode.com/problems/two-sum/"
    assert generate_problem_url("Codeforces", "1872A") == "https://codeforces.com/contest/1872/problem/A"
    assert generate_problem_url("GeeksforGeeks", "detect-cycle") == "https://www.geeksforgeeks.org/problems/detect-cycle/"
    assert generate_problem_url("LeetCode", "https://example.com/x") == "https://example.com/x"


def test_stat_formatting():
    assert pluralize_days(1) == "day"
    assert pluralize_days(0) == "days"
    assert format_member_since(datetime(2024, 3, 15)) == "Mar 2024"
    assert format_member_since(None) == "New"
