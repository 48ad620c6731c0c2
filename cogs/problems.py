"""
Problems Cog - Admin curation of the problem bank and daily problem sets
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

import discord
from discord.ext import commands
from discord import app_commands

import config
from database.errors import RepositoryError
from utils.leetcode_api import LeetCodeUnavailableError, get_leetcode_api
from utils.logic import (
    classify_difficulty,
    generate_problem_url,
    normalize_problem_name,
    parse_problem_ids,
)
from utils.models import Problem

logger = logging.getLogger(__name__)

PLATFORM_CHOICES = [
    app_commands.Choice(name="LeetCode", value="LeetCode"),
    app_commands.Choice(name="Codeforces", value="Codeforces"),
    app_commands.Choice(name="GeeksforGeeks", value="GeeksforGeeks")
]


def parse_day(raw: Optional[str]) -> date:
    """YYYY-MM-DD, or today when omitted"""
    if not raw:
        return config.today()
    return date.fromisoformat(raw.strip())


class Problems(commands.Cog):
    """Commands for managing problems and daily sets"""

    def __init__(self, bot):
        self.bot = bot

    async def _build_problem(
        self,
        slug: str,
        platform: str,
        title: Optional[str],
        difficulty: Optional[str]
    ) -> Optional[Problem]:
        """LeetCode problems come from the API; other platforms need a title"""
        if platform == "LeetCode":
            return await get_leetcode_api().get_problem_metadata(normalize_problem_name(slug))

        if not title:
            return None
        clean_slug = slug.strip().upper() if platform == "Codeforces" else normalize_problem_name(slug)
        return Problem(
            id=clean_slug,
            title=title.strip(),
            platform=platform,
            url=generate_problem_url(platform, clean_slug),
            difficulty=difficulty or "Medium",
        )

    # ==================================================================
    # 1. Add Problem
    # ==================================================================
    @app_commands.command(name="addproblem", description="Add a problem to the bank (Admin only)")
    @app_commands.describe(
        slug="Problem slug/ID (e.g. two-sum, 1872A)",
        platform="Platform",
        title="Title (required outside LeetCode)",
        difficulty="Easy, Medium or Hard (outside LeetCode)",
        description="Optional short description"
    )
    @app_commands.choices(platform=PLATFORM_CHOICES)
    @app_commands.checks.has_permissions(administrator=True)
    async def add_problem(
        self,
        interaction: discord.Interaction,
        slug: str,
        platform: app_commands.Choice[str],
        title: Optional[str] = None,
        difficulty: Optional[str] = None,
        description: Optional[str] = None
    ):
        await interaction.response.defer(ephemeral=True)

        try:
            problem = await self._build_problem(slug, platform.value, title, difficulty)
        except LeetCodeUnavailableError as e:
            logger.warning(f"LeetCode lookup failed for {slug}: {e}")
            await interaction.followup.send("⚠️ LeetCode is unavailable right now. Try again later.")
            return

        if problem is None:
            if platform.value == "LeetCode":
                await interaction.followup.send(f"❌ Problem `{slug}` not found on LeetCode.")
            else:
                await interaction.followup.send(f"❌ A title is required for {platform.value} problems.")
            return

        if description:
            problem = replace(problem, description=description.strip())

        try:
            await self.bot.db.create_problem(problem)
        except RepositoryError as e:
            logger.error(f"Error saving problem {problem.id}: {e}")
            await interaction.followup.send("❌ Failed to save problem.")
            return

        category = classify_difficulty(problem.difficulty)
        embed = discord.Embed(title="✅ Problem Saved", color=category.color)
        embed.add_field(name="ID", value=f"`{problem.id}`", inline=True)
        embed.add_field(name="Title", value=problem.title, inline=True)
        embed.add_field(name="Difficulty", value=f"{category.emoji} {problem.difficulty}", inline=True)
        if problem.tags:
            embed.add_field(name="Tags", value=", ".join(problem.tags), inline=False)
        await interaction.followup.send(embed=embed)

    # ==================================================================
    # 2. Set Daily Problem Set
    # ==================================================================
    @app_commands.command(name="setdaily", description="Assign the problem set for a day (Admin only)")
    @app_commands.describe(
        problem_ids="Problem IDs separated by commas",
        day="Date as YYYY-MM-DD (defaults to today)"
    )
    @app_commands.checks.has_permissions(administrator=True)
    async def set_daily(self, interaction: discord.Interaction, problem_ids: str, day: Optional[str] = None):
        await interaction.response.defer(ephemeral=True)

        try:
            target_day = parse_day(day)
        except ValueError:
            await interaction.followup.send(f"❌ `{day}` is not a valid date. Use YYYY-MM-DD.")
            return

        ids = list(dict.fromkeys(parse_problem_ids(problem_ids)))
        if not ids:
            await interaction.followup.send("❌ Provide at least one problem ID.")
            return

        try:
            known = {problem.id for problem in await self.bot.db.get_problems(ids)}
            unknown = [problem_id for problem_id in ids if problem_id not in known]
            if unknown:
                await interaction.followup.send(
                    f"❌ Unknown problem IDs: {', '.join(f'`{i}`' for i in unknown)}. Add them with `/addproblem` first."
                )
                return

            await self.bot.db.set_daily_problem_set(target_day, ids)
        except RepositoryError as e:
            logger.error(f"Error saving daily set for {target_day}: {e}")
            await interaction.followup.send("❌ Failed to save the daily problem set.")
            return

        await interaction.followup.send(
            embed=discord.Embed(
                title="✅ Daily Set Saved",
                description=f"**{target_day.isoformat()}**: " + ", ".join(f"`{i}`" for i in ids),
                color=config.COLOR_SUCCESS
            )
        )


async def setup(bot):
    await bot.add_cog(Problems(bot))
