"""
Session resolution: maps a Discord member to the dashboard identity and profile.

The resulting SessionContext is passed explicitly to whatever needs the
current user, so flows can be tested with an injected repository.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from utils.models import AuthUser, Profile

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    user: Optional[AuthUser] = None
    profile: Optional[Profile] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_verified(self) -> bool:
        return self.is_authenticated and self.profile is not None and self.profile.email_verified

    @property
    def display_name(self) -> str:
        if self.profile and self.profile.full_name:
            return self.profile.full_name
        if self.user and self.user.email:
            return self.user.email
        return "coder"


class SessionProvider:
    """Builds SessionContext objects from the profiles table"""

    def __init__(self, db):
        self.db = db

    async def resolve(self, discord_id: int) -> SessionContext:
        """Look up the profile linked to a Discord account (FetchError propagates)"""
        profile = await self.db.get_profile_by_discord_id(discord_id)
        if profile is None:
            return SessionContext()
        return SessionContext(user=AuthUser(id=profile.user_id, email=profile.email), profile=profile)

    async def refresh_profile(self, ctx: SessionContext) -> Optional[Profile]:
        """Re-fetch the profile so streak counters reflect the latest recalculation"""
        if not ctx.is_authenticated:
            return None
        profile = await self.db.get_profile(ctx.user.id)
        if profile is not None:
            ctx.profile = profile
        else:
            logger.warning(f"Profile {ctx.user.id} disappeared during refresh")
        return ctx.profile
