import logging
from enum import Enum
from typing import Optional, Protocol

from .preferences import LocalSettings
from .schemas import Group

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Failed to fetch group"


class RollMode(str, Enum):
    """RANDOM rolls in place; REDIRECT is a shared-link view that switches to RANDOM on the first roll."""

    RANDOM = "random"
    REDIRECT = "redirect"


class GroupSource(Protocol):
    async def get_random_group(
        self, previous_id: Optional[int] = None, include_unapproved: bool = False
    ) -> Optional[Group]: ...

    async def get_group(self, group_id: int) -> Optional[Group]: ...


class RollController:
    """
    Current group plus one prefetched group, so a roll can swap instantly.

    Every fetch takes a sequence number; results from fetches that were
    superseded by a later roll or load are dropped, so a slow response
    can never replace what is on screen now.
    """

    def __init__(
        self,
        api: GroupSource,
        settings: LocalSettings,
        initial_group: Optional[Group] = None,
        mode: RollMode = RollMode.RANDOM,
    ):
        self._api = api
        self._settings = settings
        self._seq = 0

        self.mode = mode
        self.group: Optional[Group] = initial_group
        self.next_group: Optional[Group] = None
        self.loading = False
        self.error: Optional[str] = None

    @property
    def has_error(self) -> bool:
        """True when the screen should show the retry state."""
        return self.error is not None or self.group is None

    def share_url(self, origin: str) -> Optional[str]:
        if self.group is None:
            return None
        return f"{origin.rstrip('/')}/{self.group.id}"

    async def _fetch_random(self, previous_id: Optional[int], prefetch: bool = False) -> Optional[Group]:
        """
        Fetch one random group.

        A prefetch runs in the background: its misses are not shown as
        errors and it leaves the loading flag alone.
        """
        if not prefetch:
            self.loading = True
            self.error = None
        try:
            group = await self._api.get_random_group(
                previous_id, self._settings.include_unapproved
            )
            if group is None and not prefetch:
                self.error = NOT_FOUND_MESSAGE
            return group
        except Exception as e:
            logger.warning(f"Roll failed: {e}")
            if not prefetch:
                self.error = str(e) or "An error occurred"
            return None
        finally:
            if not prefetch:
                self.loading = False

    def _begin(self) -> int:
        self._seq += 1
        return self._seq

    async def start(self) -> None:
        """Prefetch the group that the first roll will show."""
        if self.group is None:
            return
        seq = self._begin()
        upcoming = await self._fetch_random(self.group.id, prefetch=True)
        if seq == self._seq:
            self.next_group = upcoming

    async def load(self, group_id: int) -> Optional[Group]:
        """Show a specific group, then prefetch a random one after it."""
        seq = self._begin()
        self.loading = True
        self.error = None
        try:
            group = await self._api.get_group(group_id)
        except Exception as e:
            logger.warning(f"Failed to load group {group_id}: {e}")
            group = None
            if seq == self._seq:
                self.error = str(e) or "An error occurred"
        finally:
            if seq == self._seq:
                self.loading = False

        if seq != self._seq:
            return None

        self.group = group
        self.next_group = None
        if group is None:
            self.error = self.error or NOT_FOUND_MESSAGE
            return None

        await self.start()
        return self.group

    async def roll(self) -> Optional[Group]:
        """
        Advance to another random group.

        The prefetched group is promoted and a new one fetched behind it,
        excluding the promoted one. With nothing prefetched, a group is
        fetched, shown, and another prefetched. An empty result clears the
        screen into the retry state.
        """
        self.mode = RollMode.RANDOM
        seq = self._begin()

        upcoming = self.next_group
        fetched = await self._fetch_random(upcoming.id if upcoming else None)
        if seq != self._seq:
            logger.debug("Discarding superseded roll")
            return self.group

        if fetched is None:
            self.group = None
            self.next_group = None
            return None

        if upcoming is not None:
            self.group = upcoming
            self.next_group = fetched
            return self.group

        self.group = fetched
        after = await self._fetch_random(fetched.id, prefetch=True)
        if seq == self._seq and after is not None:
            self.next_group = after
        return self.group
