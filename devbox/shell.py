from __future__ import annotations

import logging
import os
import subprocess
import threading
import time
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

READER_GRACE = 2.0


class Shell:
    """Run external commands and capture their output.

    Every provisioning command goes through a Shell so that steps can be
    exercised against a fake in tests.

    Options:
    - show: stream command output to stdout while it runs.
    - timeout: default timeout in seconds (None blocks until exit).
    """

    def __init__(self, show: bool = False, timeout: Optional[float] = None) -> None:
        self.show = show
        self.timeout = timeout

    def run(
        self,
        cmd: List[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        if not isinstance(cmd, list) or not cmd:
            return {"status": "error", "error": "Shell.run requires a non-empty command list"}
        timeout = timeout if timeout is not None else self.timeout
        full_env = None
        if env:
            full_env = dict(os.environ)
            full_env.update(env)

        logger.debug("exec: %s", " ".join(cmd))
        start = time.time()
        stdout_buf: list[str] = []
        stderr_buf: list[str] = []
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,  # line-buffered
                env=full_env,
                cwd=cwd,
            )
        except OSError as e:
            return {
                "status": "error",
                "error": f"Failed to execute {cmd[0]}: {e}",
                "stdout": "",
                "stderr": "",
                "returncode": None,
                "duration": time.time() - start,
            }

        def _read_stream(stream, buf):
            try:
                for line in iter(stream.readline, ""):
                    buf.append(line)
                    if self.show:
                        print(line, end="", flush=True)
            finally:
                stream.close()

        readers = [
            threading.Thread(target=_read_stream, args=(s, b), daemon=True)
            for s, b in ((proc.stdout, stdout_buf), (proc.stderr, stderr_buf))
            if s is not None
        ]
        for t in readers:
            t.start()

        error: Optional[str] = None
        try:
            proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            error = f"Command timed out after {timeout}s"
            proc.kill()
            proc.wait()

        for t in readers:
            # Grandchildren (e.g. dnf under sudo) outlive the kill and keep the pipes open.
            t.join(timeout=READER_GRACE if error else None)

        rc = proc.returncode if proc.returncode is not None else -1
        result: Dict[str, Any] = {
            "status": "success" if rc == 0 and error is None else "error",
            "stdout": "".join(stdout_buf).strip(),
            "stderr": "".join(stderr_buf).strip(),
            "returncode": rc,
            "duration": time.time() - start,
        }
        if result["status"] == "error":
            result["error"] = error or f"Process exited with code {rc}"
        return result

    def succeeds(self, cmd: List[str], cwd: Optional[str] = None) -> bool:
        """Probe command: True when it exits 0. Used by step checks."""
        return self.run(cmd, cwd=cwd).get("status") == "success"
