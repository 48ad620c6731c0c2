"""
Daily Problems Cog - Today's problem list with Done/Undo buttons
Each /today message owns one DailyProblemTracker; buttons toggle completion
and the profile is re-fetched after every successful change.
"""

import logging
from datetime import date
from typing import List, Optional

import discord
from discord import app_commands
from discord.ext import commands

import config
from database.errors import RepositoryError
from utils.embeds import MAX_PROBLEM_FIELDS, daily_problems_embed, notice_embed
from utils.models import Problem
from utils.session import SessionContext, SessionProvider
from utils.tracker import DailyProblemTracker, Notice

logger = logging.getLogger(__name__)

# One button per rendered problem; Discord allows 25 components per message
MAX_BUTTONS = MAX_PROBLEM_FIELDS


class ToggleButton(discord.ui.Button):
    """Done/Undo button bound to one problem"""

    def __init__(self, problem: Problem, completed: bool, row: int):
        super().__init__(row=row)
        self.problem = problem
        self.apply_state(completed)

    def apply_state(self, completed: bool) -> None:
        title = self.problem.title[:70]
        if completed:
            self.label = f"Undo: {title}"
            self.style = discord.ButtonStyle.danger
            self.emoji = "✖️"
        else:
            self.label = f"Done: {title}"
            self.style = discord.ButtonStyle.success
            self.emoji = "✔️"

    async def callback(self, interaction: discord.Interaction):
        await self.view.handle_toggle(interaction, self.problem.id)


class DailyProblemsView(discord.ui.View):
    """The dashboard message: embed + one toggle button per problem"""

    def __init__(
        self,
        db,
        sessions: SessionProvider,
        ctx: SessionContext,
        day: date,
        owner_id: int,
        timeout: Optional[float] = config.VIEW_TIMEOUT_SECONDS
    ):
        super().__init__(timeout=timeout)
        self.ctx = ctx
        self.day = day
        self.owner_id = owner_id
        self.sessions = sessions
        self.message: Optional[discord.Message] = None
        self._notices: List[Notice] = []
        self.tracker = DailyProblemTracker(
            db,
            notify=self._queue_notice,
            on_completion_changed=self._refresh_profile
        )

    async def _queue_notice(self, notice: Notice) -> None:
        self._notices.append(notice)

    async def _refresh_profile(self) -> None:
        await self.sessions.refresh_profile(self.ctx)

    async def flush_notices(self, interaction: discord.Interaction) -> None:
        notices, self._notices = self._notices, []
        for notice in notices:
            await interaction.followup.send(embed=notice_embed(notice), ephemeral=True)

    async def load(self) -> None:
        await self.tracker.load_today(self.day, self.ctx.user)
        self.rebuild_buttons()

    def rebuild_buttons(self) -> None:
        self.clear_items()
        for index, problem in enumerate(self.tracker.problems[:MAX_BUTTONS]):
            self.add_item(ToggleButton(problem, self.tracker.is_completed(problem.id), row=index // 5))

    def render(self) -> discord.Embed:
        return daily_problems_embed(self.tracker.snapshot(), self.day, self.ctx)

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.owner_id:
            await interaction.response.send_message(
                "🚫 This isn't your dashboard. Run `/today` to open your own.",
                ephemeral=True
            )
            return False
        return True

    async def handle_toggle(self, interaction: discord.Interaction, problem_id: str) -> None:
        await interaction.response.defer()

        if self.tracker.loading:
            await interaction.followup.send("⏳ Still saving your last change.", ephemeral=True)
            return

        await self.tracker.toggle_completion(
            self.ctx.user,
            problem_id,
            self.day,
            self.tracker.is_completed(problem_id)
        )

        for item in self.children:
            if isinstance(item, ToggleButton):
                item.apply_state(self.tracker.is_completed(item.problem.id))

        # The write is settled by now; a redraw failure is not a toggle failure
        try:
            await interaction.edit_original_response(embed=self.render(), view=self)
        except discord.HTTPException as e:
            logger.error(f"Could not redraw dashboard after toggling {problem_id}: {e}")
            self._notices.append(Notice("Display out of date", "Run `/today` again to see the latest state."))
        await self.flush_notices(interaction)

    async def on_timeout(self) -> None:
        for item in self.children:
            item.disabled = True
        if self.message is None:
            return
        try:
            await self.message.edit(view=self)
        except discord.HTTPException as e:
            logger.debug(f"Could not disable expired dashboard buttons: {e}")

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item) -> None:
        logger.exception(f"Error in dashboard button {item}", exc_info=error)
        try:
            await interaction.followup.send("❌ Failed to update problem status.", ephemeral=True)
        except discord.HTTPException:
            pass


class DailyProblemsCog(commands.Cog):
    """Today's problems and completion tracking"""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.sessions = SessionProvider(bot.db)

    @app_commands.command(name="today", description="Show today's problems and mark them done")
    async def today(self, interaction: discord.Interaction):
        await interaction.response.defer(ephemeral=True, thinking=True)

        try:
            ctx = await self.sessions.resolve(interaction.user.id)
        except RepositoryError:
            await interaction.followup.send("❌ Failed to load your profile. Try again later.", ephemeral=True)
            return

        if not ctx.is_authenticated:
            await interaction.followup.send(
                embed=discord.Embed(
                    title="👋 Welcome to Daily Coder Hub",
                    description="Create your profile first with `/setup full_name:<name> email:<email>`.",
                    color=config.COLOR_INFO
                ),
                ephemeral=True
            )
            return

        if not ctx.is_verified:
            await interaction.followup.send(
                embed=discord.Embed(
                    title="📧 Check your email",
                    description=(
                        "Your e-mail address is not verified yet. Once an admin confirms it "
                        "you can start tracking your coding progress."
                    ),
                    color=config.COLOR_WARNING
                ),
                ephemeral=True
            )
            return

        try:
            view = DailyProblemsView(self.bot.db, self.sessions, ctx, config.today(), interaction.user.id)
            await view.load()
            view.message = await interaction.followup.send(
                embed=view.render(),
                view=view if view.children else discord.utils.MISSING,
                ephemeral=True,
                wait=True
            )
            await view.flush_notices(interaction)
        except Exception as e:
            logger.exception(f"Error in /today: {e}")
            await interaction.followup.send("❌ Failed to load today's problems.", ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    """Load the DailyProblemsCog"""
    await bot.add_cog(DailyProblemsCog(bot))
