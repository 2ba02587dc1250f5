"""Projection of the broadcast cache onto host variables, presets, feedbacks and actions."""

from pyytlive.projection.engine import reload_all, reload_broadcast, reload_states

__all__ = ["reload_all", "reload_broadcast", "reload_states"]
