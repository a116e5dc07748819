from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .errors import DevboxError
from .shell import Shell
from .step import Step

logger = logging.getLogger(__name__)


class Runner:
    """Sequential fail-fast runner for a list of steps.

    The first failing step raises its error_class and no later step runs.
    """

    def __init__(self, steps: List[Step], shell: Optional[Shell] = None) -> None:
        self.steps = steps
        self.shell = shell
        self.exports: Dict[str, str] = {}

    def execute(self) -> Dict[str, Dict[str, Any]]:
        results: Dict[str, Dict[str, Any]] = {}
        for step in self.steps:
            step.shell = step.shell or self.shell
            step.exports = dict(self.exports)
            try:
                if step.check():
                    logger.info(step.skip_message or f"{step.id}: already satisfied, skipping.")
                    results[step.id] = {"status": "skipped", "reason": "already satisfied"}
                    continue
                logger.info(step.description or f"Running {step.id}...")
                res = step.run()
                if res.get("status") != "error" and not step.verify():
                    res = {"status": "error", "error": "postcondition check failed", "output": res}
                if res.get("status") == "error":
                    raise step.error_class(res.get("error") or "step failed", step=step.id, result=res)
            except DevboxError as e:
                if e.step is None:
                    e.step = step.id
                raise

            results[step.id] = res
            self.exports.update(res.get("exports") or {})
        return results
