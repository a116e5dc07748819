"""Checks that gate the whole run before any side effect."""
from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import Dict, Iterable, Optional

from .errors import PrivilegeError, UnsupportedOSError

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")
SUPPORTED_OS_MARKERS = ("Red Hat", "CentOS", "Rocky", "AlmaLinux")


def check_user(euid: Optional[int] = None) -> None:
    if euid is None:
        euid = os.geteuid()
    if euid == 0:
        raise PrivilegeError("Do not run as root. Use your regular user account.")


def check_os(os_release: Path = OS_RELEASE_PATH, markers: Iterable[str] = SUPPORTED_OS_MARKERS) -> str:
    """Return the descriptor text if it names a supported distribution.

    Matching is a case-sensitive substring search over the whole file.
    """
    markers = tuple(markers)
    supported = ", ".join(markers)
    try:
        text = Path(os_release).read_text(encoding="utf-8", errors="replace")
    except OSError:
        raise UnsupportedOSError(
            f"Cannot read {os_release}. This tool only supports Red Hat-based systems ({supported})."
        ) from None
    if not any(m in text for m in markers):
        raise UnsupportedOSError(f"This tool only supports Red Hat-based systems ({supported}).")
    return text


def read_os_release(text: str) -> Dict[str, str]:
    """Parse KEY=value lines of an os-release file."""
    info: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value.strip("\"'")]
        info[key.strip()] = parts[0] if parts else ""
    return info


def check_preconditions(
    euid: Optional[int] = None,
    os_release: Path = OS_RELEASE_PATH,
    markers: Iterable[str] = SUPPORTED_OS_MARKERS,
) -> Dict[str, str]:
    """Run the privilege check, then the OS check.

    Raises PrivilegeError or UnsupportedOSError. Returns the parsed
    os-release fields on success.
    """
    check_user(euid)
    info = read_os_release(check_os(os_release, markers))
    logger.debug(f"Detected {info.get('PRETTY_NAME') or info.get('NAME', 'unknown OS')}")
    return info
