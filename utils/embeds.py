"""
Embed builders for the dashboard views
"""

from datetime import date
from typing import List, Optional

import discord

import config
from utils.logic import classify_difficulty, format_member_since, pluralize_days
from utils.models import Profile
from utils.session import SessionContext
from utils.tracker import Notice, TodayView

NOTICE_COLORS = {
    "success": config.COLOR_SUCCESS,
    "error": config.COLOR_ERROR,
    "info": config.COLOR_INFO,
}

EMPTY_DAY_MESSAGE = "No problems assigned for today. Check back later or contact an admin."

# Discord limits: 25 fields per embed, 1024 characters per field value,
# 256 per field name and 6000 across the whole embed
MAX_PROBLEM_FIELDS = 25
FIELD_NAME_LIMIT = 256
FIELD_VALUE_LIMIT = 1024
EMBED_TOTAL_LIMIT = 6000


def notice_embed(notice: Notice) -> discord.Embed:
    return discord.Embed(
        title=notice.title,
        description=notice.description,
        color=NOTICE_COLORS.get(notice.level, config.COLOR_INFO)
    )


def _fit_field_value(lines: List[str], limit: int) -> str:
    """Join the field lines, trimming everything but the trailing link to fit `limit`"""
    value = "\n".join(lines)
    if len(value) <= limit:
        return value

    link = lines[-1]
    room = limit - len(link) - 2
    if room <= 0:
        return link[:limit]
    return "\n".join(lines[:-1])[:room].rstrip() + "…\n" + link


def daily_problems_embed(view: TodayView, day: date, ctx: Optional[SessionContext] = None) -> discord.Embed:
    """Render today's problems with completion state"""
    embed = discord.Embed(title="📋 Today's Problems", color=config.COLOR_PRIMARY)

    if ctx is not None and ctx.is_authenticated:
        streak = ctx.profile.streak_count if ctx.profile else 0
        header = f"Welcome, {ctx.display_name}"
        if streak > 0:
            header += f"  🔥 {streak}"
        embed.set_author(name=header)

    if not view.problems:
        embed.description = EMPTY_DAY_MESSAGE
        embed.set_footer(text=day.isoformat())
        return embed

    shown = view.problems[:MAX_PROBLEM_FIELDS]
    hidden = len(view.problems) - len(shown)

    done = sum(1 for problem in view.problems if problem.id in view.completed)
    embed.description = f"**{done} of {len(view.problems)} completed**"
    if hidden:
        embed.description += f"\n+{hidden} more not shown"
    embed.set_footer(text=f"{day.isoformat()} • Press Done when you solve a problem")

    fields = []
    for problem in shown:
        is_completed = problem.id in view.completed
        category = classify_difficulty(problem.difficulty)

        title = f"~~{problem.title}~~" if is_completed else problem.title
        status = "✅ " if is_completed else ""
        name = f"{status}{title} {category.emoji} {problem.difficulty} • {problem.platform}"

        lines = []
        if problem.tags:
            lines.append(" ".join(f"`{tag}`" for tag in problem.tags))
        if problem.description:
            lines.append(problem.description)
        lines.append(f"[Solve Here]({problem.url})")

        fields.append((name, lines))

    # Names get at most half of the budget; values share whatever is left
    available = EMBED_TOTAL_LIMIT - len(embed)
    name_limit = min(FIELD_NAME_LIMIT, available // (2 * len(fields)))
    fields = [(name[:name_limit], lines) for name, lines in fields]

    remaining = available - sum(len(name) for name, _ in fields)
    for index, (name, lines) in enumerate(fields):
        budget = min(FIELD_VALUE_LIMIT, remaining // (len(fields) - index))
        value = _fit_field_value(lines, budget)
        remaining -= len(value)
        embed.add_field(name=name, value=value, inline=False)

    return embed


def stats_embed(profile: Optional[Profile], display_name: str) -> discord.Embed:
    """Current streak, longest streak, total solved and join date"""
    streak = profile.streak_count if profile else 0
    longest = profile.longest_streak if profile else 0
    solved = profile.total_solved if profile else 0
    joined = format_member_since(profile.created_at if profile else None)

    embed = discord.Embed(title=f"📊 Stats for {display_name}", color=config.COLOR_PRIMARY)
    embed.add_field(name="🔥 Current Streak", value=f"**{streak}** {pluralize_days(streak)}", inline=True)
    embed.add_field(name="🏆 Longest Streak", value=f"**{longest}** {pluralize_days(longest)}", inline=True)
    embed.add_field(name="🎯 Total Solved", value=f"**{solved}** problems", inline=True)
    embed.add_field(name="📅 Member Since", value=f"**{joined}** joined", inline=True)
    return embed
