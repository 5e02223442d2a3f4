"""mpv launcher - opens a YouTube URL in an external mpv window.

mpv resolves YouTube URLs itself through yt-dlp. Video and audio outputs are
tried in order of preference for the current display server, ending with a
plain ``--ytdl-format=best`` launch.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess

logger = logging.getLogger(__name__)

YTDL_FORMAT = "best[height<=?1080]/bestvideo[height<=?1080]+bestaudio/best"

WAYLAND_VIDEO_OUTPUTS = ["gpu", "dmabuf-wayland", "wlshm"]
X11_VIDEO_OUTPUTS = ["gpu", "x11"]
WAYLAND_AUDIO_OUTPUTS = ["pipewire", "pulse", "auto"]
X11_AUDIO_OUTPUTS = ["pulse", "alsa", "auto"]

# Software-only outputs can't use hardware decoding
SOFTWARE_OUTPUTS = {"wlshm", "x11"}


class PlayerError(Exception):
    """mpv could not be started."""


def is_wayland() -> bool:
    """True when running under a Wayland session."""
    return (
        os.environ.get("XDG_SESSION_TYPE") == "wayland"
        or bool(os.environ.get("WAYLAND_DISPLAY"))
    )


def is_mpv_available() -> bool:
    return shutil.which("mpv") is not None


def build_mpv_commands(url: str, wayland: bool | None = None) -> list[list[str]]:
    """Build mpv command lines in the order they should be tried."""
    if wayland is None:
        wayland = is_wayland()
    video_outputs = WAYLAND_VIDEO_OUTPUTS if wayland else X11_VIDEO_OUTPUTS
    audio_outputs = WAYLAND_AUDIO_OUTPUTS if wayland else X11_AUDIO_OUTPUTS

    commands = []
    for vo in video_outputs:
        for ao in audio_outputs:
            cmd = [
                "mpv",
                "--player-operation-mode=pseudo-gui",
                f"--ytdl-format={YTDL_FORMAT}",
                f"--vo={vo}",
                f"--ao={ao}",
            ]
            if vo in SOFTWARE_OUTPUTS:
                cmd.append("--hwdec=no")
            cmd.append(url)
            commands.append(cmd)

    commands.append([
        "mpv", "--player-operation-mode=pseudo-gui", "--ytdl-format=best", url,
    ])
    return commands


def open_in_mpv(url: str) -> None:
    """Launch mpv for the URL without waiting for it to exit.

    Raises PlayerError if no mpv process could be started.
    """
    last_error: OSError | None = None
    for cmd in build_mpv_commands(url):
        try:
            subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except FileNotFoundError as e:
            raise PlayerError(
                "mpv not found. Make sure mpv and yt-dlp are installed."
            ) from e
        except OSError as e:
            logger.debug("mpv launch failed (%s): %s", " ".join(cmd[:-1]), e)
            last_error = e
            continue
        logger.info("Opened %s in mpv", url)
        return

    raise PlayerError(f"Failed to open video with mpv: {last_error}. URL: {url}")
