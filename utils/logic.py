"""
Core presentation helpers for Daily Coder Hub
Handles difficulty classification, problem ids/URLs and stat formatting
"""
import re
from datetime import datetime
from enum import Enum
from typing import List, Optional


# ==========================
# Difficulty Classification
# ==========================

class DifficultyCategory(Enum):
    EASY = ("🟢", 0x22C55E)
    MEDIUM = ("🟡", 0xEAB308)
    HARD = ("🔴", 0xEF4444)
    DEFAULT = ("⚪", 0x6B7280)

    def __init__(self, emoji: str, color: int):
        self.emoji = emoji
        self.color = color


_DIFFICULTY_LOOKUP = {
    "easy": DifficultyCategory.EASY,
    "medium": DifficultyCategory.MEDIUM,
    "hard": DifficultyCategory.HARD,
}


def classify_difficulty(label: Optional[str]) -> DifficultyCategory:
    """Map a free-text difficulty label to its presentation category"""
    if not label:
        return DifficultyCategory.DEFAULT
    return _DIFFICULTY_LOOKUP.get(label.strip().lower(), DifficultyCategory.DEFAULT)


# ==========================
# Normalization & Helpers
# ==========================

def normalize_problem_name(name: str) -> str:
    if not name: return ""
    return name.strip().lower().replace(" ", "-").strip("-")


def parse_problem_ids(raw: str) -> List[str]:
    """
    Split a comma or whitespace separated list of problem ids.

    Example: 'two-sum, 3sum  valid-parentheses' -> ['two-sum', '3sum', 'valid-parentheses']
    """
    return [part for part in re.split(r"[,\s]+", raw or "") if part]


def generate_problem_url(platform: str, slug: str) -> str:
    """
    Generate the problem URL for a platform.

    Examples:
        generate_problem_url("LeetCode", "two-sum")
            -> "https://leetcode.com/problems/two-sum/"
        generate_problem_url("Codeforces", "1872A")
            -> "https://codeforces.com/contest/1872/problem/A"
    """
    if slug.startswith("http"):
        return slug

    if platform == "LeetCode":
        return f"https://leetcode.com/problems/{slug}/"

    elif platform == "Codeforces":
        match = re.match(r"^(\d+)([A-Z]\d?)$", slug.upper())
        if match:
            return f"https://codeforces.com/contest/{match.group(1)}/problem/{match.group(2)}"
        return f"https://codeforces.com/problemset/problem/{slug}"

    elif platform == "GeeksforGeeks":
        return f"https://www.geeksforgeeks.org/problems/{slug}/"

    return slug


# ==========================
# Stat Formatting
# ==========================

def pluralize_days(count: int) -> str:
    return "day" if count == 1 else "days"


def format_member_since(created_at: Optional[datetime]) -> str:
    """'Jan 2024' style join date, or 'New' when unknown"""
    if created_at is None:
        return "New"
    return created_at.strftime("%b %Y")
