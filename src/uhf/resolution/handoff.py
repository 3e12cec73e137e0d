"""Rendez-vous between resolution workers and the foreground.

A worker that needs the user posts a LocateRequest and blocks on it. The
foreground takes requests off the handoff queue, asks its LocatePrompt and
fulfills the request, which wakes the worker. Workers also post a
WorkerFinished marker when they exit so the foreground can wait for a
specific worker without polling.

There is no timeout: a worker whose request is never answered blocks
forever.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class LocatePrompt(Protocol):
    """Foreground collaborator that asks the user for directories."""

    def request_directory(self, prompt_text: str) -> list[Path] | None:
        """Return the chosen directories, or None if the user declined."""
        ...


@dataclass
class LocateRequest:
    """A worker's question to the foreground, with its response slot."""

    prompt_text: str
    path: str
    worker_id: str
    _answered: threading.Event = field(default_factory=threading.Event, repr=False)
    _directories: list[Path] | None = field(default=None, repr=False)

    def respond(self, directories: Iterable[Path] | None) -> None:
        """Fill the response slot and wake the waiting worker.

        An empty selection counts as declining.
        """
        chosen = [Path(d) for d in directories] if directories is not None else []
        self._directories = chosen or None
        self._answered.set()

    def wait(self) -> list[Path] | None:
        """Block until the foreground responds; return its answer."""
        self._answered.wait()
        return self._directories

    @property
    def answered(self) -> bool:
        return self._answered.is_set()


@dataclass(frozen=True)
class WorkerFinished:
    """Posted by a worker when it exits, whatever the outcome."""

    worker_id: str


class ForegroundHandoff:
    """Queue of pending foreground work shared by all resolution workers."""

    def __init__(self) -> None:
        self._queue: queue.Queue[LocateRequest | WorkerFinished] = queue.Queue()

    def ask(self, prompt_text: str, path: str, worker_id: str) -> list[Path] | None:
        """Post a request and block until the foreground answers.

        Called from worker threads only.
        """
        request = LocateRequest(prompt_text=prompt_text, path=path, worker_id=worker_id)
        logger.debug("Waiting for foreground to locate %s", path)
        self._queue.put(request)
        return request.wait()

    def finished(self, worker_id: str) -> None:
        self._queue.put(WorkerFinished(worker_id))

    def next_item(
        self, block: bool = True, timeout: float | None = None
    ) -> LocateRequest | WorkerFinished | None:
        """Take the next item; None if nothing arrived in time."""
        try:
            return self._queue.get(block=block, timeout=timeout)
        except queue.Empty:
            return None


class ScriptedPrompt:
    """LocatePrompt that replays canned answers.

    Each call consumes the next answer; once they run out every request is
    declined. Prompt texts are recorded in ``prompts``.

    Example:
        prompt = ScriptedPrompt([[Path("/mnt/archive")], None])
    """

    def __init__(self, answers: Iterable[list[Path] | None] = ()) -> None:
        self._answers = list(answers)
        self.prompts: list[str] = []
        self._lock = threading.Lock()

    def request_directory(self, prompt_text: str) -> list[Path] | None:
        with self._lock:
            self.prompts.append(prompt_text)
            if self._answers:
                return self._answers.pop(0)
            return None
