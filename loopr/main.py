"""Command-line entry point: open one video in the loop-marks player."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PySide6 import QtAsyncio
from PySide6.QtWidgets import QApplication

from .core.identity import VideoIdentity
from .media.clip_player import ClipMediaPlayer
from .services.mark_store import FileMarkStore
from .services.position_store import PositionStore
from .services.settings_manager import SettingsManager
from .session import PlayerSession
from .ui.player_window import PlayerWindow

logger = logging.getLogger(__name__)

APP_NAME = "Loopr"
ORG_NAME = "Loopr"
DEFAULT_MARKS_DIR = Path.home() / ".loopr" / "marks"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="loopr", description=__doc__)
    parser.add_argument("video", help="path to a video file")
    parser.add_argument(
        "--marks-dir",
        type=Path,
        default=DEFAULT_MARKS_DIR,
        help=f"where per-video marks are stored (default: {DEFAULT_MARKS_DIR})",
    )
    parser.add_argument("--paused", action="store_true", help="do not start playing")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    return parser.parse_args(argv)


def run(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setOrganizationName(ORG_NAME)
    app.setApplicationName(APP_NAME)

    player = ClipMediaPlayer()
    try:
        player.load(args.video)
    except RuntimeError as e:
        logger.error("%s", e)
        return 1
    session = PlayerSession(
        VideoIdentity.from_location(args.video),
        player,
        FileMarkStore(args.marks_dir),
        PositionStore(),
        SettingsManager(),
    )
    window = PlayerWindow(session, title=Path(args.video).name, frame_source=player)
    window.show()
    QtAsyncio.run(session.open(autoplay=not args.paused), handle_sigint=True)
    player.close()
    return 0


if __name__ == "__main__":
    sys.exit(run())
