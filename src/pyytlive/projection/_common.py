"""Helpers shared by the projection modules.

Broadcast references used in action/feedback options are either a
broadcast id or an ``unfinished_<n>`` slot reference.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pyytlive._constants import UNFINISHED_SLOT_PREFIX
from pyytlive.models.broadcast import Broadcast
from pyytlive.models.surface import DropdownChoice, OptionField
from pyytlive.state.memory import StateMemory

RgbFn = Callable[[int, int, int], int]


def broadcast_choices(broadcasts: Mapping[str, Broadcast], unfinished_cnt: int) -> list[DropdownChoice]:
    """Dropdown entries: every known broadcast followed by the unfinished slots."""
    choices = [DropdownChoice(id=b.id, label=b.name) for b in broadcasts.values()]
    choices.extend(
        DropdownChoice(id=f"{UNFINISHED_SLOT_PREFIX}{i}", label=f"Unfinished/planned #{i + 1}")
        for i in range(unfinished_cnt)
    )
    return choices


def broadcast_option(broadcasts: Mapping[str, Broadcast], unfinished_cnt: int) -> OptionField:
    choices = broadcast_choices(broadcasts, unfinished_cnt)
    return OptionField(
        type="dropdown",
        id="broadcast",
        label="Broadcast",
        default=choices[0].id if choices else "",
        choices=choices,
    )


def resolve_broadcast(memory: StateMemory, ref: Any) -> Broadcast | None:
    """Look up a broadcast by id or slot reference.

    Slot references resolve against the current unfinished ordering.
    """
    key = str(ref or "")
    if key.startswith(UNFINISHED_SLOT_PREFIX):
        suffix = key[len(UNFINISHED_SLOT_PREFIX) :]
        if suffix.isdigit():
            index = int(suffix)
            if index < len(memory.unfinished_broadcasts):
                return memory.unfinished_broadcasts[index]
            return None
    return memory.broadcasts.get(key)
