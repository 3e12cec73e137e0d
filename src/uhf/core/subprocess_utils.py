"""Running external media tools.

The fallback duration probe shells out to ffprobe. run_tool() runs such a
tool with a timeout and turns every way it can fail (missing executable,
timeout, non-zero exit) into a single ToolError carrying the tool name and
the first line of its diagnostics.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
import time
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60


class ToolError(Exception):
    """An external tool could not run or reported an error."""

    def __init__(self, tool: str, reason: str) -> None:
        self.tool = tool
        self.reason = reason
        super().__init__(f"{tool}: {reason}")


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def run_tool(
    executable: str | Path,
    *args: str | Path,
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """Run ``executable args...`` and return its standard output.

    Output is decoded as UTF-8 with undecodable bytes replaced, since media
    tools echo file names and tags in arbitrary encodings.

    Raises:
        ToolError: If the tool cannot be started, times out (the child is
            killed) or exits non-zero.
    """
    command = [str(executable), *(str(arg) for arg in args)]
    tool = Path(command[0]).name
    start = time.monotonic()

    logger.debug("Running %s", " ".join(command), extra={"tool": tool})
    try:
        result = subprocess.run(  # nosec B603 - arguments are never shell-parsed
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        logger.warning("%s timed out after %ds", tool, timeout, extra={"tool": tool})
        raise ToolError(tool, f"timed out after {timeout}s") from e
    except OSError as e:
        raise ToolError(tool, f"cannot run: {e}") from e

    elapsed = round(time.monotonic() - start, 3)
    if result.returncode != 0:
        reason = _first_line(result.stderr or "") or f"exit status {result.returncode}"
        logger.debug(
            "%s failed: %s",
            tool,
            reason,
            extra={"tool": tool, "returncode": result.returncode, "elapsed_seconds": elapsed},
        )
        raise ToolError(tool, reason)

    logger.debug("%s finished", tool, extra={"tool": tool, "elapsed_seconds": elapsed})
    return result.stdout or ""
