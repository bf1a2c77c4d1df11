"""Loop-marks video player.

Public API surface (keep minimal):
 - PlaybackController, PlayerConfig, VideoIdentity (core state machine)
 - PlayerSession, forget_video (session bootstrap and purge)

The Qt shell lives in ``loopr.ui`` and is not imported here.
"""

from .core.config import PlayerConfig  # noqa: F401
from .core.controller import PlaybackController  # noqa: F401
from .core.identity import VideoIdentity  # noqa: F401
from .session import PlayerSession, forget_video  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "PlaybackController",
    "PlayerConfig",
    "VideoIdentity",
    "PlayerSession",
    "forget_video",
]
