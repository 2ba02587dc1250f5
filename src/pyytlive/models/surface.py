"""Host UI artifact models.

These are the shapes handed to the control-surface host: variable
definitions, action/feedback definitions with their option fields,
presets, and the events the host sends back when a button is pressed or a
feedback needs evaluating.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _SurfaceModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class DropdownChoice(_SurfaceModel):
    id: str
    label: str


class OptionField(_SurfaceModel):
    """One input field shown when configuring an action or feedback."""

    type: Literal["dropdown", "colorpicker", "textinput", "checkbox", "number"]
    id: str
    label: str
    default: Any = None
    choices: list[DropdownChoice] = Field(default_factory=list)


class ConfigField(_SurfaceModel):
    """One field of the module configuration form."""

    type: Literal["static-text", "textinput", "number", "checkbox"]
    id: str
    label: str
    width: int = 6
    value: str | None = None
    default: Any = None
    min: float | None = None
    max: float | None = None


class VariableDefinition(_SurfaceModel):
    name: str
    label: str


class ActionDefinition(_SurfaceModel):
    id: str
    label: str
    options: list[OptionField] = Field(default_factory=list)


class FeedbackDefinition(_SurfaceModel):
    id: str
    label: str
    description: str = ""
    options: list[OptionField] = Field(default_factory=list)


class ButtonStyle(_SurfaceModel):
    text: str
    size: str = "auto"
    color: int
    bgcolor: int


class PresetAction(_SurfaceModel):
    action: str
    options: dict[str, Any] = Field(default_factory=dict)


class PresetFeedback(_SurfaceModel):
    type: str
    options: dict[str, Any] = Field(default_factory=dict)


class PresetDefinition(_SurfaceModel):
    category: str
    label: str
    bank: ButtonStyle
    actions: list[PresetAction] = Field(default_factory=list)
    feedbacks: list[PresetFeedback] = Field(default_factory=list)


class ActionEvent(_SurfaceModel):
    """Host request to run an action."""

    action: str
    options: dict[str, Any] = Field(default_factory=dict)


class FeedbackEvent(_SurfaceModel):
    """Host request to evaluate a feedback."""

    type: str
    options: dict[str, Any] = Field(default_factory=dict)


FeedbackStyle = dict[str, Any]
"""Style overrides returned by a feedback (``bgcolor``, ``color``); ``{}`` means unchanged."""
