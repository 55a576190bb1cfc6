import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence, Set

from .schemas import Group

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    """Swipe right approves, swipe left denies."""

    APPROVE = "approve"
    DENY = "deny"

    @classmethod
    def from_swipe(cls, direction: str) -> "Decision":
        if direction == "right":
            return cls.APPROVE
        if direction == "left":
            return cls.DENY
        raise ValueError(f"Unknown swipe direction: {direction}")


@dataclass
class Notice:
    """Dismissible message for the reviewer."""

    level: str  # "success" | "error"
    message: str


class ReviewApi(Protocol):
    async def get_unapproved_groups(self) -> List[Group]: ...

    async def approve_group(self, group_id: int) -> str: ...

    async def deny_group(self, group_id: int) -> str: ...


class ModerationQueue:
    """
    Stack of pending groups for the swipe review screen.

    The queue keeps the server's list (``_groups``) and an overlay of
    decisions still in flight. A decided card leaves ``stack`` before the
    request is sent; it is dropped for good when the server confirms,
    and comes back if the request fails. Ids decided successfully are
    remembered so a refetch that raced the decision cannot bring them back.
    """

    def __init__(self, api: ReviewApi, groups: Optional[Sequence[Group]] = None):
        self._api = api
        self._groups: List[Group] = list(groups or [])
        self._in_flight: Dict[int, Decision] = {}
        self._decided: Set[int] = set()
        self._refetch_seq = 0

        self.loading = False
        self.direction: Optional[Decision] = None
        self.notices: List[Notice] = []

    @property
    def stack(self) -> List[Group]:
        """Cards currently shown, top of the stack first."""
        return [
            group
            for group in self._groups
            if group.id not in self._in_flight and group.id not in self._decided
        ]

    @property
    def is_empty(self) -> bool:
        return not self.stack

    @property
    def in_flight(self) -> Dict[int, Decision]:
        return dict(self._in_flight)

    def dismiss_notices(self) -> None:
        self.notices.clear()

    def _notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level=level, message=message))

    async def decide(self, group_id: int, decision: Decision) -> Optional[bool]:
        """
        Apply a reviewer decision to a card.

        Returns True once the server confirmed, False if the request failed
        and the card was put back, None if the card was not on the stack
        (already decided, in flight, or unknown).
        """
        group = next((g for g in self.stack if g.id == group_id), None)
        if group is None:
            logger.debug(f"Ignoring {decision.value} for group {group_id}: not on the stack")
            return None

        # Leave the stack before the first suspension point
        self._in_flight[group_id] = decision
        self.direction = decision

        verb, done = ("approve", "approved") if decision is Decision.APPROVE else ("deny", "denied")
        try:
            if decision is Decision.APPROVE:
                outcome = await self._api.approve_group(group_id)
            else:
                outcome = await self._api.deny_group(group_id)
        except Exception as e:
            self._in_flight.pop(group_id, None)
            logger.warning(f"Failed to {verb} group {group_id}: {e}")
            self._notify("error", f"failed to {verb} the group: {group.name}")
            return False

        self._in_flight.pop(group_id, None)
        self._decided.add(group_id)
        self._groups = [g for g in self._groups if g.id != group_id]

        logger.info(f"Group {group_id} {verb} -> {outcome}")
        self._notify("success", f"successfully {done} the group: {group.name}")
        return True

    async def swipe(self, group_id: int, direction: str) -> Optional[bool]:
        return await self.decide(group_id, Decision.from_swipe(direction))

    async def refetch(self) -> bool:
        """
        Replace the stack with the server's current pending list.

        On failure the stack is left as it was and an error notice is
        recorded. A refetch superseded by a newer one is discarded,
        including its failure.
        """
        self._refetch_seq += 1
        seq = self._refetch_seq
        self.loading = True

        try:
            groups = await self._api.get_unapproved_groups()
        except Exception as e:
            logger.warning(f"Failed to fetch unapproved groups: {e}")
            if seq == self._refetch_seq:
                self.loading = False
                self._notify("error", "failed to fetch unapproved groups")
            return False

        if seq != self._refetch_seq:
            logger.debug("Discarding superseded refetch")
            return False

        self._groups = list(groups)
        # Ids the server no longer lists cannot come back in a later response
        self._decided &= {group.id for group in self._groups}
        self.loading = False
        return True
