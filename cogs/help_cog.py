"""
Help Cog - Display all available commands with descriptions
"""

import discord
from discord import app_commands
from discord.ext import commands
import config


class HelpCog(commands.Cog):
    """Cog for displaying help information about all available commands"""

    def __init__(self, bot):
        self.bot = bot

    @app_commands.command(name="help", description="View all available commands")
    async def help_command(self, interaction: discord.Interaction):
        """Display help for user and admin commands"""
        embed = discord.Embed(
            title="📚 Daily Coder Hub Commands",
            description="Track your daily coding progress and maintain your streak",
            color=config.COLOR_PRIMARY
        )

        embed.add_field(
            name="👤 /setup — Create your profile",
            value=(
                "```\n"
                "/setup <full_name> <email>\n"
                "```\n"
                "An admin confirms your e-mail before you can track problems."
            ),
            inline=False
        )

        embed.add_field(
            name="📋 /today — Today's problems",
            value=(
                "Lists the problems assigned for today.\n"
                "Press **Done** after solving one, **Undo** to take it back. "
                "Your streak updates automatically."
            ),
            inline=False
        )

        embed.add_field(
            name="📊 /stats — Statistics",
            value=(
                "```\n"
                "/stats [user]\n"
                "```\n"
                "Current streak, longest streak, total solved and join date."
            ),
            inline=False
        )

        embed.add_field(
            name="🛠️ Admin",
            value=(
                "• `/addproblem <slug> <platform>` — Add a problem to the bank\n"
                "• `/setdaily <problem_ids> [day]` — Assign a day's problems\n"
                "• `/verify_user <user>` — Confirm a member's e-mail"
            ),
            inline=False
        )

        embed.set_footer(text=f"Days roll over at midnight ({config.TIMEZONE})")
        await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot):
    await bot.add_cog(HelpCog(bot))
