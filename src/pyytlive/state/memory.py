"""In-memory broadcast cache.

Owned and mutated by :class:`pyytlive.state.core.Core` only; the lifecycle
and the projection functions read it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from pyytlive.models.broadcast import Broadcast

_FAR_FUTURE = datetime.max.replace(tzinfo=UTC)


def _unfinished_sort_key(broadcast: Broadcast) -> tuple[datetime, str]:
    return broadcast.scheduled_start_time or _FAR_FUTURE, broadcast.id


def order_unfinished(broadcasts: Iterable[Broadcast]) -> list[Broadcast]:
    """Not-yet-finished broadcasts, soonest scheduled first."""
    return sorted((b for b in broadcasts if not b.status.is_finished), key=_unfinished_sort_key)


@dataclass
class StateMemory:
    """Known broadcasts plus the ordered subset that is not finished yet.

    ``unfinished_broadcasts`` order drives the positional ``unfinished_N``
    slots; every entry is also present in ``broadcasts`` under its id.
    """

    broadcasts: dict[str, Broadcast] = field(default_factory=dict)
    unfinished_broadcasts: list[Broadcast] = field(default_factory=list)

    @classmethod
    def from_broadcasts(cls, broadcasts: Iterable[Broadcast]) -> StateMemory:
        by_id = {b.id: b for b in broadcasts}
        return cls(broadcasts=by_id, unfinished_broadcasts=order_unfinished(by_id.values()))

    def unfinished_index(self, broadcast_id: str) -> int | None:
        """Current slot of *broadcast_id*, or ``None`` when it has no slot."""
        for index, broadcast in enumerate(self.unfinished_broadcasts):
            if broadcast.id == broadcast_id:
                return index
        return None

    def replace(self, broadcast: Broadcast) -> bool:
        """Store an updated broadcast, keeping its slot position.

        A broadcast that became finished leaves the unfinished list and the
        later slots move up. Returns whether the slot list changed.
        """
        if broadcast.id not in self.broadcasts:
            return False
        self.broadcasts[broadcast.id] = broadcast
        index = self.unfinished_index(broadcast.id)
        if index is None:
            return False
        if broadcast.status.is_finished:
            del self.unfinished_broadcasts[index]
            return True
        self.unfinished_broadcasts[index] = broadcast
        return False

    def reorder(self) -> None:
        """Rebuild the unfinished ordering from ``broadcasts``."""
        self.unfinished_broadcasts = order_unfinished(self.broadcasts.values())
