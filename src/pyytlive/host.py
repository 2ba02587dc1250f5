"""Capabilities the control-surface host injects into the module."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Protocol

from pyytlive.config import ModuleConfig
from pyytlive.models.surface import (
    ActionDefinition,
    FeedbackDefinition,
    PresetDefinition,
    VariableDefinition,
)


class InstanceStatus(StrEnum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


def combine_rgb(r: int, g: int, b: int) -> int:
    """Pack an RGB triple into the ``0xRRGGBB`` integer hosts expect."""
    return ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


class UiSurface(Protocol):
    """Artifact setters the projection engine writes to."""

    def rgb(self, r: int, g: int, b: int) -> int: ...

    def set_variable_definitions(self, definitions: Sequence[VariableDefinition]) -> None: ...

    def set_variable_values(self, values: Mapping[str, str]) -> None: ...

    def set_preset_definitions(self, presets: Sequence[PresetDefinition]) -> None: ...

    def set_feedback_definitions(self, feedbacks: Sequence[FeedbackDefinition]) -> None: ...

    def set_action_definitions(self, actions: Sequence[ActionDefinition]) -> None: ...

    def check_feedbacks(self, *feedback_types: str) -> None:
        """Re-evaluate feedbacks; all of them when no type is given."""
        ...


class ModuleHost(UiSurface, Protocol):
    """Everything the module may ask of its host."""

    def status(self, level: InstanceStatus, message: str | None = None) -> None: ...

    def save_config(self, config: ModuleConfig) -> None:
        """Durably persist *config*."""
        ...
