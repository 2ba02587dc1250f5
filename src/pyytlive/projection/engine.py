"""Apply cache projections to the host surface at three granularities.

``reload_all`` is the only path that changes the shape of the host UI
(definitions); the other two only push values, sized to the change.
"""

from __future__ import annotations

from pyytlive.host import UiSurface
from pyytlive.models.broadcast import Broadcast
from pyytlive.projection.actions import list_actions
from pyytlive.projection.feedbacks import FEEDBACK_BROADCAST_STATUS, list_feedbacks
from pyytlive.projection.presets import list_presets
from pyytlive.projection.vars import (
    declare_vars,
    export_vars,
    get_broadcast_vars,
    get_unfinished_broadcast_state_vars,
)
from pyytlive.state.memory import StateMemory


def reload_all(surface: UiSurface, memory: StateMemory, unfinished_cnt: int) -> None:
    """Redefine variables, presets, feedbacks and actions, then push all values."""
    surface.set_variable_definitions(declare_vars(memory, unfinished_cnt))
    surface.set_variable_values(export_vars(memory, unfinished_cnt))
    surface.set_preset_definitions(list_presets(memory.broadcasts, surface.rgb, unfinished_cnt))
    surface.set_feedback_definitions(list_feedbacks(memory.broadcasts, surface.rgb, unfinished_cnt))
    surface.set_action_definitions(list_actions(memory.broadcasts, unfinished_cnt))
    surface.check_feedbacks()


def reload_states(surface: UiSurface, memory: StateMemory, unfinished_cnt: int) -> None:
    """Push every variable value; definitions stay untouched."""
    surface.set_variable_values(export_vars(memory, unfinished_cnt))
    surface.check_feedbacks()


def reload_broadcast(
    surface: UiSurface,
    broadcast: Broadcast,
    memory: StateMemory,
    unfinished_cnt: int,
) -> None:
    """Push the variables of one broadcast.

    Slot variables use the broadcast's index in the *current* unfinished
    ordering; nothing about earlier positions is remembered.
    """
    values: dict[str, str] = {}
    if broadcast.id in memory.broadcasts:
        values.update(get_broadcast_vars(broadcast))
    index = memory.unfinished_index(broadcast.id)
    if index is not None and index < unfinished_cnt:
        values.update(get_unfinished_broadcast_state_vars(index, broadcast))
    if values:
        surface.set_variable_values(values)
    surface.check_feedbacks(FEEDBACK_BROADCAST_STATUS)
