"""pyytlive - YouTube Live control-surface module."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyytlive")
except PackageNotFoundError:
    __version__ = "0+local"
from pyytlive.api import BroadcastApi, YouTubeClient
from pyytlive.auth import YouTubeAuthorization
from pyytlive.config import (
    ModuleConfig,
    list_config_fields,
    load_max_broadcast_count,
    load_max_unfinished_broadcast_count,
    load_refresh_interval,
)
from pyytlive.exceptions import (
    YtActionError,
    YtApiError,
    YtAuthorizationCancelled,
    YtAuthorizationError,
    YtConfigError,
    YtDataFetchError,
    YtError,
    YtTransitionError,
    YtTransportError,
)
from pyytlive.host import InstanceStatus, ModuleHost, UiSurface, combine_rgb
from pyytlive.models import (
    ActionEvent,
    Broadcast,
    BroadcastLifecycle,
    Credential,
    FeedbackEvent,
    StreamHealth,
)
from pyytlive.module import YouTubeModule
from pyytlive.state.core import Core
from pyytlive.state.memory import StateMemory

__all__ = [
    "__version__",
    "ActionEvent",
    "Broadcast",
    "BroadcastApi",
    "BroadcastLifecycle",
    "Core",
    "Credential",
    "FeedbackEvent",
    "InstanceStatus",
    "ModuleConfig",
    "ModuleHost",
    "StateMemory",
    "StreamHealth",
    "UiSurface",
    "YouTubeAuthorization",
    "YouTubeClient",
    "YouTubeModule",
    "YtActionError",
    "YtApiError",
    "YtAuthorizationCancelled",
    "YtAuthorizationError",
    "YtConfigError",
    "YtDataFetchError",
    "YtError",
    "YtTransitionError",
    "YtTransportError",
    "combine_rgb",
    "list_config_fields",
    "load_max_broadcast_count",
    "load_max_unfinished_broadcast_count",
    "load_refresh_interval",
]
