from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .preflight import OS_RELEASE_PATH, SUPPORTED_OS_MARKERS, check_preconditions
from .runner import Runner

logger = logging.getLogger(__name__)


class Pipeline:
    """Run the preflight guard, then the runners in order.

    Any DevboxError propagates to the caller, which owns the exit policy.
    Nothing in the runners executes when the preflight guard fails.
    """

    def __init__(
        self,
        runners: List[Runner],
        os_release: Path = OS_RELEASE_PATH,
        os_markers: Iterable[str] = SUPPORTED_OS_MARKERS,
        euid: Optional[int] = None,
    ) -> None:
        self.runners = runners
        self.os_release = os_release
        self.os_markers = list(os_markers)
        self.euid = euid

    def preflight(self) -> Dict[str, str]:
        return check_preconditions(euid=self.euid, os_release=self.os_release, markers=self.os_markers)

    def execute(self) -> Dict[str, Any]:
        os_info = self.preflight()
        name = os_info.get("PRETTY_NAME") or os_info.get("NAME") or "Red Hat"
        logger.info(f"Starting local development environment setup on {name}...")

        results: Dict[str, Any] = {}
        exports: Dict[str, str] = {}
        for i, runner in enumerate(self.runners):
            runner.exports.update(exports)
            results[f"runner_{i}"] = runner.execute()
            exports = dict(runner.exports)
        return {"status": "ok", "os": os_info, "runners": results, "exports": exports}
