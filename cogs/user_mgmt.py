"""
User Management Cog
Handles profile setup and e-mail verification
"""

import logging
import re

import discord
from discord.ext import commands
from discord import app_commands

from database.errors import RepositoryError

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


class UserManagementCog(commands.Cog):
    """User profile management commands"""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="setup", description="Create or update your dashboard profile")
    @app_commands.describe(full_name="Name shown on your dashboard", email="Your e-mail address")
    async def setup(self, interaction: discord.Interaction, full_name: str, email: str):
        clean_name = full_name.strip()
        clean_email = email.strip().lower()

        if not clean_name:
            await interaction.response.send_message("❌ Name cannot be empty.", ephemeral=True)
            return

        if not is_valid_email(clean_email):
            await interaction.response.send_message(
                f"❌ `{clean_email}` is not a valid e-mail address.",
                ephemeral=True
            )
            return

        try:
            profile = await self.bot.db.upsert_profile(interaction.user.id, clean_name, clean_email)
        except RepositoryError as e:
            logger.error(f"Error in /setup for {interaction.user.id}: {e}")
            await interaction.response.send_message("❌ Failed to update profile.", ephemeral=True)
            return

        embed = discord.Embed(title="✅ Profile Updated", color=discord.Color.green())
        embed.add_field(name="Name", value=profile.full_name, inline=True)
        embed.add_field(name="Email", value=profile.email, inline=True)
        embed.add_field(
            name="Verified",
            value="Yes" if profile.email_verified else "Pending - an admin will confirm your e-mail",
            inline=False
        )
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(name="verify_user", description="Admin: Confirm a member's e-mail address")
    @app_commands.checks.has_permissions(administrator=True)
    async def verify_user(self, interaction: discord.Interaction, user: discord.User):
        await interaction.response.defer(ephemeral=True)

        try:
            profile = await self.bot.db.get_profile_by_discord_id(user.id)
            if profile is None:
                await interaction.followup.send(f"❌ {user.name} has no profile yet.")
                return

            if profile.email_verified:
                await interaction.followup.send(f"ℹ️ {user.name} is already verified.")
                return

            await self.bot.db.mark_email_verified(profile.user_id)
            await interaction.followup.send(f"✅ Verified {user.name} ({profile.email}).")

        except RepositoryError as e:
            logger.error(f"Error verifying {user.id}: {e}")
            await interaction.followup.send("❌ Failed to verify user.")


async def setup(bot: commands.Bot) -> None:
    """Load the UserManagementCog"""
    await bot.add_cog(UserManagementCog(bot))
