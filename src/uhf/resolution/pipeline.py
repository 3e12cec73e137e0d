"""Per-day media duration resolution.

One background worker resolves one day. Each pass probes every program's
resource, including those with a stored duration, so moved files are
noticed and stale durations refreshed. When a file probes as 0 and its path
is not blacklisted, the worker asks the foreground to locate it and blocks
until answered, then starts the pass over from the first program: the
answer (new hint directories, or a blacklist entry) can change how every
later path resolves. The worker stops after a pass that asked nothing.

Workers only write durations into schedule resource tables, under the
schedule lock. Several workers may resolve the same day at once; writing
the same duration twice is harmless. Dirty flags, hints and the blacklist
are foreground state: the foreground records the user's answer before
waking the worker, and marks the schedule dirty from the worker's outcome
once it has finished.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from uhf.logging.context import resolution_context
from uhf.resolution.blacklist import SessionBlacklist
from uhf.resolution.handoff import (
    ForegroundHandoff,
    LocatePrompt,
    LocateRequest,
    WorkerFinished,
)
from uhf.resolution.hints import LocationHintRegistry, is_locatable

if TYPE_CHECKING:
    from uhf.channel.document import ChannelDocument
    from uhf.introspector.prober import MediaDurationProber

logger = logging.getLogger(__name__)


@dataclass
class ResolutionOutcome:
    """What one worker run did to one day.

    Attributes:
        day_ordinal: The day that was resolved.
        schedule_index: Schedule owning the day (None for an unknown day).
        changed_ids: Resource identifiers whose duration was written.
        prompts: Number of locate-content requests issued.
        passes: Number of passes over the day's programs.
        had_failure: True if the user declined at least one request.
        error: Message if the worker stopped on an unexpected exception.
    """

    day_ordinal: int
    schedule_index: int | None = None
    changed_ids: set[str] = field(default_factory=set)
    prompts: int = 0
    passes: int = 0
    had_failure: bool = False
    error: str | None = None


class ResolutionWorker:
    """A background thread resolving one day."""

    def __init__(self, resolver: DurationResolver, day_ordinal: int, worker_id: str) -> None:
        self.resolver = resolver
        self.day_ordinal = day_ordinal
        self.worker_id = worker_id
        self.outcome: ResolutionOutcome | None = None
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name=f"resolve-W{worker_id}",
        )

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _run(self) -> None:
        try:
            self.outcome = self.resolver.resolve_day(self.day_ordinal, self.worker_id)
        except Exception as e:
            logger.exception("Resolution worker W%s failed", self.worker_id)
            self.outcome = ResolutionOutcome(self.day_ordinal, error=str(e))
        finally:
            self.resolver.handoff.finished(self.worker_id)


class DurationResolver:
    """Resolves missing durations of a channel's days."""

    def __init__(
        self,
        document: ChannelDocument,
        prober: MediaDurationProber,
        handoff: ForegroundHandoff | None = None,
        blacklist: SessionBlacklist | None = None,
        hints: LocationHintRegistry | None = None,
    ) -> None:
        self.document = document
        self.prober = prober
        # Empty collaborators are falsy, so test against None.
        self.handoff = handoff if handoff is not None else ForegroundHandoff()
        self.blacklist = blacklist if blacklist is not None else SessionBlacklist()
        self.hints = hints if hints is not None else LocationHintRegistry()
        self._worker_ids = itertools.count(1)
        self._id_lock = threading.Lock()
        # Finished markers taken off the handoff by the foreground.
        self._finished: set[str] = set()

    # ------------------------------------------------------------------
    # Shared by both sides
    # ------------------------------------------------------------------

    def media_path(self, path: str) -> Path:
        """Where to probe ``path``: under the channel if readable there,
        else in the most recent hint directory holding the file name."""
        resolved = self.document.media_path(path)
        if self.document.storage.is_readable(path):
            return resolved
        hinted = self.hints.locate(Path(path).name)
        return hinted if hinted is not None else resolved

    def is_locatable(self, path: str) -> bool:
        """True if ``path`` is readable under the channel or through a hint."""
        return is_locatable(self.document.storage, self.hints, path)

    def needs_resolution(self, day_ordinal: int) -> bool:
        """True if a resource of the day has no duration or cannot be found,
        and its path is not blacklisted."""
        location = self.document.locate(day_ordinal)
        if location is None:
            return False
        for program in self.document.programs_for_day(day_ordinal):
            resource = self.document.resource_snapshot(
                location.schedule_index, program.resource_id
            )
            if resource is None:
                continue
            if resource.is_resolved and self.is_locatable(resource.path):
                continue
            if str(self.media_path(resource.path)) not in self.blacklist:
                return True
        return False

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------

    def resolve_day(self, day_ordinal: int, worker_id: str = "01") -> ResolutionOutcome:
        """Run the resolution loop for one day in the calling thread.

        Blocks whenever a locate-content request is outstanding, so this
        must not run on the thread that answers requests.
        """
        outcome = ResolutionOutcome(day_ordinal)
        location = self.document.locate(day_ordinal)
        if location is None:
            logger.warning("No day with ordinal %d to resolve", day_ordinal)
            return outcome
        outcome.schedule_index = location.schedule_index

        with resolution_context(worker_id, location.schedule_index, day_ordinal):
            while True:
                outcome.passes += 1
                if not self._run_pass(location.schedule_index, day_ordinal, worker_id, outcome):
                    break
                logger.debug("Restarting pass over day %d", day_ordinal)

            logger.info(
                "Resolved day %d: %d updated, %d prompt(s), %d pass(es)",
                day_ordinal,
                len(outcome.changed_ids),
                outcome.prompts,
                outcome.passes,
            )
        return outcome

    def _run_pass(
        self,
        schedule_index: int,
        day_ordinal: int,
        worker_id: str,
        outcome: ResolutionOutcome,
    ) -> bool:
        """Probe the day once. Returns True if the pass must restart."""
        seen: set[str] = set()
        for program in self.document.programs_for_day(day_ordinal):
            if program.resource_id in seen:
                continue
            seen.add(program.resource_id)

            resource = self.document.resource_snapshot(schedule_index, program.resource_id)
            if resource is None:
                logger.warning(
                    "Program at %s has no resource %s",
                    program.start_time,
                    program.resource_id,
                )
                continue

            path = self.media_path(resource.path)
            seconds = self.prober.probe_seconds(path)
            if seconds > 0:
                if self.document.set_resource_duration(
                    schedule_index, program.resource_id, seconds
                ):
                    outcome.changed_ids.add(program.resource_id)
                continue

            key = str(path)
            if key in self.blacklist:
                continue

            outcome.prompts += 1
            directories = self.handoff.ask(
                f"Locate the folder containing {path.name}", key, worker_id
            )
            if directories is None:
                outcome.had_failure = True
            return True
        return False

    def start(self, day_ordinal: int) -> ResolutionWorker:
        """Spawn a worker for ``day_ordinal``."""
        with self._id_lock:
            worker_id = f"{next(self._worker_ids):02d}"
        worker = ResolutionWorker(self, day_ordinal, worker_id)
        worker.start()
        return worker

    # ------------------------------------------------------------------
    # Foreground side
    # ------------------------------------------------------------------

    def answer(self, request: LocateRequest, prompt: LocatePrompt) -> None:
        """Ask the user and fulfill ``request``.

        Hints or the blacklist entry are recorded before the worker wakes.
        """
        directories = prompt.request_directory(request.prompt_text)
        if directories:
            self.hints.add(directories)
            self.hints.save()
        else:
            self.blacklist.add(request.path)
        request.respond(directories)

    def serve(self, worker: ResolutionWorker, prompt: LocatePrompt) -> ResolutionOutcome:
        """Answer requests until ``worker`` finishes, then apply its outcome.

        Requests from other workers sharing the handoff are answered too, and
        their finished markers are kept so that serving them later returns
        at once.
        """
        while worker.worker_id not in self._finished:
            item = self.handoff.next_item()
            if isinstance(item, WorkerFinished):
                self._finished.add(item.worker_id)
            elif item is not None:
                self.answer(item, prompt)
        self._finished.discard(worker.worker_id)
        worker.join()
        outcome = worker.outcome or ResolutionOutcome(worker.day_ordinal)
        self.apply_outcome(outcome)
        return outcome

    def apply_outcome(self, outcome: ResolutionOutcome) -> None:
        """Mark the resolved day's schedule dirty if durations changed."""
        if outcome.changed_ids and outcome.schedule_index is not None:
            self.document.mark_schedule_dirty(outcome.schedule_index)

    def resolve_interactive(self, day_ordinal: int, prompt: LocatePrompt) -> ResolutionOutcome:
        """Resolve a day on a worker while this thread answers its requests."""
        return self.serve(self.start(day_ordinal), prompt)
