"""Pydantic models for YouTube payloads and host UI artifacts."""

from pyytlive.models._base import YtBaseModel, YtEnum
from pyytlive.models.broadcast import Broadcast, BroadcastLifecycle, BroadcastState, StreamHealth, TransitionTarget
from pyytlive.models.credential import Credential
from pyytlive.models.surface import (
    ActionDefinition,
    ActionEvent,
    ButtonStyle,
    ConfigField,
    DropdownChoice,
    FeedbackDefinition,
    FeedbackEvent,
    FeedbackStyle,
    OptionField,
    PresetAction,
    PresetDefinition,
    PresetFeedback,
    VariableDefinition,
)

__all__ = [
    "ActionDefinition",
    "ActionEvent",
    "Broadcast",
    "BroadcastLifecycle",
    "BroadcastState",
    "ButtonStyle",
    "ConfigField",
    "Credential",
    "DropdownChoice",
    "FeedbackDefinition",
    "FeedbackEvent",
    "FeedbackStyle",
    "OptionField",
    "PresetAction",
    "PresetDefinition",
    "PresetFeedback",
    "StreamHealth",
    "TransitionTarget",
    "VariableDefinition",
    "YtBaseModel",
    "YtEnum",
]
