"""Native clipboard reader using system tools."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from typing import Literal

logger = logging.getLogger(__name__)

Selection = Literal["clipboard", "primary"]

PASTE_TIMEOUT = 5


class NativeClipboard:
    """Reads the system clipboard through native command line tools.

    Supported tools (in order of preference):
    - Linux/BSD: wl-paste (Wayland), xclip, xsel (X11)
    - macOS: pbpaste
    - Windows: powershell Get-Clipboard

    The X11/Wayland primary selection is available as `primary`; other
    platforms only have the clipboard and return it for both.
    """

    def __init__(self) -> None:
        self._last_error: str | None = None

    @property
    def last_error(self) -> str | None:
        """Error from the most recent failed paste, if any."""
        return self._last_error

    def _detect_command(self, selection: Selection) -> list[str] | None:
        """Find a paste command for the selection.

        Returns:
            Command arguments, or None if no tool is available
        """
        if sys.platform == "darwin":
            return ["pbpaste"] if shutil.which("pbpaste") else None
        if sys.platform == "win32":
            if shutil.which("powershell"):
                return ["powershell", "-NoProfile", "-Command", "Get-Clipboard"]
            return None

        primary = selection == "primary"
        session_type = os.environ.get("XDG_SESSION_TYPE", "").lower()

        if session_type == "wayland" and shutil.which("wl-paste"):
            return ["wl-paste", "--no-newline"] + (["--primary"] if primary else [])

        if shutil.which("xclip"):
            return ["xclip", "-selection", "primary" if primary else "clipboard", "-o"]
        if shutil.which("xsel"):
            return ["xsel", "--primary" if primary else "--clipboard", "--output"]
        if shutil.which("wl-paste"):
            return ["wl-paste", "--no-newline"] + (["--primary"] if primary else [])
        return None

    @property
    def available(self) -> bool:
        """Check if a native clipboard tool is available."""
        return self._detect_command("clipboard") is not None

    def paste(self, selection: Selection = "clipboard") -> str | None:
        """Read text from the clipboard.

        Args:
            selection: `clipboard` or the X11/Wayland `primary` selection

        Returns:
            Clipboard text, or None if it could not be read
        """
        command = self._detect_command(selection)
        if command is None:
            self._last_error = "No clipboard tool available"
            logger.debug(self._last_error)
            return None

        try:
            proc = subprocess.run(  # nosec B603 - fixed argument lists
                command,
                capture_output=True,
                timeout=PASTE_TIMEOUT,
                check=False,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            self._last_error = str(e)
            logger.warning(f"Clipboard read with {command[0]} failed: {e}")
            return None

        if proc.returncode != 0:
            self._last_error = proc.stderr.decode("utf-8", errors="replace").strip()
            logger.debug(f"{command[0]} exited with {proc.returncode}: {self._last_error}")
            return None

        self._last_error = None
        return proc.stdout.decode("utf-8", errors="replace")
