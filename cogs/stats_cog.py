"""
StatsCog: Personal dashboard statistics.

- /stats command: current streak, longest streak, total solved, member since
"""

import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from database.errors import RepositoryError
from utils.embeds import stats_embed
from utils.session import SessionProvider

logger = logging.getLogger(__name__)


class StatsCog(commands.Cog):
    """Cog for profile statistics"""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.sessions = SessionProvider(bot.db)

    @app_commands.command(name="stats", description="View streak and progress statistics")
    @app_commands.describe(user="Member to look up (defaults to you)")
    async def stats(self, interaction: discord.Interaction, user: Optional[discord.User] = None):
        await interaction.response.defer()
        target = user or interaction.user

        try:
            ctx = await self.sessions.resolve(target.id)
        except RepositoryError:
            await interaction.followup.send("❌ Failed to load statistics. Try again later.")
            return

        if not ctx.is_authenticated:
            who = "You don't" if target.id == interaction.user.id else f"{target.display_name} doesn't"
            await interaction.followup.send(f"ℹ️ {who} have a profile yet. Use `/setup` to create one.")
            return

        embed = stats_embed(ctx.profile, ctx.profile.full_name or target.display_name)
        embed.set_thumbnail(url=target.display_avatar.url)
        await interaction.followup.send(embed=embed)


async def setup(bot: commands.Bot) -> None:
    """Load the StatsCog"""
    await bot.add_cog(StatsCog(bot))
