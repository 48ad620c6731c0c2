"""
Daily Coder Hub Discord Bot - Main Entry Point
Track daily coding-practice problems, mark them complete and keep a streak

Features:
- /today dashboard with Done/Undo buttons per problem
- Streak recalculation through the update_user_streak() database procedure
- Profile statistics
- Admin curation of the problem bank and daily sets
- PostgreSQL/Supabase database

Usage:
    python main.py

Environment Variables:
    DISCORD_TOKEN - Your Discord bot token (required)
    DATABASE_URL - PostgreSQL connection URL from Supabase (required)
    TIMEZONE - IANA timezone for the daily rollover (default UTC)
"""

import asyncio
import logging
import sys
from datetime import datetime

import discord
from discord.ext import commands
from discord import app_commands

import config
from database import DatabaseManager
from keep_alive import keep_alive
from utils.leetcode_api import close_leetcode_api

logger = logging.getLogger(__name__)

COGS = [
    "daily_cog",
    "stats_cog",
    "user_mgmt",
    "problems",
    "help_cog",
]


def error_embed(title: str, description: str, color: int = config.COLOR_ERROR) -> discord.Embed:
    return discord.Embed(title=title, description=description, color=color)


class DailyCoderBot(commands.Bot):
    """Custom Bot class with database integration and error handling"""

    def __init__(self, database_url: str):
        intents = discord.Intents.default()
        intents.message_content = True

        super().__init__(
            command_prefix=config.COMMAND_PREFIX,
            description=config.BOT_DESCRIPTION,
            intents=intents
        )

        self.db = DatabaseManager(database_url)
        self.start_time = datetime.now()

    async def setup_hook(self):
        """Called when the bot is starting up"""
        print(f"\n{'='*60}")
        print("🚀 Daily Coder Hub - Initialization")
        print(f"{'='*60}")

        print("📊 Connecting to database...")
        await self.db.connect()
        await self.db.initialize_tables()

        print("\n🔌 Loading cogs...")
        await self.load_cogs()

        @self.command(name='sync', hidden=True)
        @commands.is_owner()
        async def sync_commands(ctx: commands.Context, scope: str = "guild"):
            """
            Owner-only sync.
            Usage: !sync (this server, instant) or !sync global (~1 hour)
            """
            if scope.lower() == "global" or not ctx.guild:
                synced = await self.tree.sync()
                await ctx.send(f"✅ Synced {len(synced)} global commands.", delete_after=5)
                return

            self.tree.copy_global_to(guild=ctx.guild)
            synced = await self.tree.sync(guild=ctx.guild)
            await ctx.send(
                f"✅ Synced {len(synced)} commands: {', '.join(f'`/{cmd.name}`' for cmd in synced)}",
                delete_after=5
            )

        self.tree.error(self.on_app_command_error)
        print("✓ Setup complete\n")

    async def load_cogs(self):
        """Load all cogs listed in COGS"""
        loaded = 0
        failed = 0

        for cog_name in COGS:
            try:
                await self.load_extension(f"cogs.{cog_name}")
                print(f"  ✓ {cog_name.ljust(20)} - Loaded successfully")
                loaded += 1
            except commands.ExtensionError as e:
                print(f"  ✗ {cog_name.ljust(20)} - Failed: {e}")
                logger.exception(f"Failed to load cog {cog_name}", exc_info=e)
                failed += 1

        print(f"\n  Summary: {loaded} loaded, {failed} failed")

    async def on_ready(self):
        """Called when the bot is ready and connected to Discord"""
        print(f"\n{'='*60}")
        print("✅ Bot is now ONLINE and ready!")
        print(f"{'='*60}")
        print(f"👤 Logged in as: {self.user.name} (ID: {self.user.id})")
        print(f"🌐 Connected to {len(self.guilds)} guild(s)")

        print("\n🔄 Syncing slash commands with Discord...")
        try:
            synced = await self.tree.sync()
            print(f"✓ Successfully synced {len(synced)} slash command(s)")
        except discord.HTTPException as e:
            print(f"✗ Failed to sync commands: {e}")

        uptime = (datetime.now() - self.start_time).total_seconds()
        print(f"\n⚡ Bot ready in {uptime:.2f} seconds")
        print(f"{'='*60}\n")

        await self.change_presence(
            activity=discord.Activity(
                type=discord.ActivityType.watching,
                name="/today | Daily Coding Problems"
            )
        )

    async def on_command_error(self, ctx: commands.Context, error: Exception):
        """Global error handler for prefix commands"""
        if isinstance(error, (commands.CommandNotFound, commands.NotOwner)):
            return

        if isinstance(error, commands.MissingRequiredArgument):
            await ctx.send(embed=error_embed(
                "❌ Missing Argument",
                f"Missing required argument: `{error.param.name}`"
            ))
            return

        logger.error(f"Error in command {ctx.command}: {error}")
        await ctx.send(embed=error_embed("❌ Error", "An unexpected error occurred."))

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError
    ):
        """Global error handler for slash commands - ensures bot never crashes"""
        if isinstance(error, app_commands.CommandOnCooldown):
            embed = error_embed(
                "⏱️ Cooldown Active",
                f"Please wait **{error.retry_after:.1f} seconds** before using this command again.",
                config.COLOR_WARNING
            )
        elif isinstance(error, app_commands.MissingPermissions):
            embed = error_embed("❌ Missing Permissions", "You don't have permission to use this command.")
        elif isinstance(error, app_commands.TransformerError):
            embed = error_embed("❌ Invalid Input", f"Invalid input provided: {error}")
        elif isinstance(error, app_commands.CheckFailure):
            embed = error_embed("🚫 Check Failed", "You cannot use this command here or now.")
        else:
            logger.error(
                f"Unhandled slash command error in "
                f"/{interaction.command.name if interaction.command else 'unknown'} "
                f"(user {interaction.user.id}): {type(error).__name__}: {error}",
                exc_info=error
            )
            embed = error_embed(
                "❌ Unexpected Error",
                "An unexpected error occurred while processing your command.\n"
                "The error has been logged. Please try again later."
            )

        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except discord.HTTPException as send_error:
            logger.error(f"Failed to send error message: {send_error}")

    async def close(self):
        """Cleanup when bot is shutting down"""
        print("\n🔄 Shutting down bot...")
        await self.db.close()
        await close_leetcode_api()
        await super().close()
        print("✓ Cleanup complete")


async def main():
    """Validate configuration, start the keep-alive server and run the bot"""
    discord.utils.setup_logging(level=logging.INFO)

    print("\n" + "="*60)
    print(" "*15 + "🤖 Daily Coder Hub Bot")
    print(" "*20 + "v1.0.0")
    print("="*60 + "\n")

    if not config.DISCORD_TOKEN:
        print("❌ ERROR: DISCORD_TOKEN not found in environment variables")
        print("   Add DISCORD_TOKEN=your_token_here to your .env file")
        sys.exit(1)

    try:
        database_url = config.require_database_url()
    except ValueError as e:
        print(e)
        sys.exit(1)

    # Start the web server first so the host marks the service as live
    keep_alive()
    print(f"🌍 Web server started on port {config.KEEP_ALIVE_PORT}\n")

    bot = DailyCoderBot(database_url)

    try:
        await bot.start(config.DISCORD_TOKEN)
    except discord.LoginFailure:
        print("\n❌ ERROR: Invalid Discord token")
        await bot.close()
        sys.exit(1)
    except discord.PrivilegedIntentsRequired:
        print("\n❌ ERROR: Missing required intents")
        print("   Enable MESSAGE CONTENT INTENT in the Discord Developer Portal")
        await bot.close()
        sys.exit(1)
    finally:
        if not bot.is_closed():
            await bot.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n✓ Bot stopped")
