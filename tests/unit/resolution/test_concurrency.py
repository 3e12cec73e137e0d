"""Tests for resolution workers running alongside foreground edits."""

import threading
from pathlib import Path

from uhf.channel import ChannelDocument
from uhf.introspector import MediaDurationProber, StubDurationProbe
from uhf.resolution import DurationResolver, ResolutionOutcome, ScriptedPrompt

TIMEOUT = 5


class GatedProbe(StubDurationProbe):
    """Holds the worker inside the measurement of one file until released."""

    def __init__(self, durations: dict[str, float], gated_name: str) -> None:
        super().__init__(durations)
        self.gated_name = gated_name
        self.entered = threading.Event()
        self.release = threading.Event()

    def probe_duration(self, path: Path) -> float:
        if path.name == self.gated_name:
            self.entered.set()
            self.release.wait(TIMEOUT)
        return super().probe_duration(path)


def serve_in_background(
    resolver: DurationResolver, workers, prompt: ScriptedPrompt
) -> list[ResolutionOutcome]:
    """Serve ``workers`` in order on another thread and fail instead of
    hanging if serving never returns."""
    outcomes: list[ResolutionOutcome] = []

    def foreground() -> None:
        for worker in workers:
            outcomes.append(resolver.serve(worker, prompt))

    thread = threading.Thread(target=foreground, daemon=True)
    thread.start()
    thread.join(TIMEOUT)
    assert not thread.is_alive(), "serving the workers did not return"
    return outcomes


class TestEditsDuringResolution:
    """Foreground edits made while a worker is measuring the same day."""

    def test_rekey_while_worker_measures(self, document: ChannelDocument) -> None:
        """The worker's write to the old identifier is dropped, not resurrected."""
        gate = GatedProbe({"pilot.mkv": 1800, "news.mp4": 600}, "news.mp4")
        resolver = DurationResolver(document, MediaDurationProber(gate))

        worker = resolver.start(0)
        assert gate.entered.wait(TIMEOUT)
        assert document.rekey_resource(0, "r2", "news")
        gate.release.set()
        [outcome] = serve_in_background(resolver, [worker], ScriptedPrompt())

        resources = document.schedules[0].resources
        assert outcome.changed_ids == set()
        assert "r2" not in resources
        assert resources["news"].duration == 0
        assert [p.resource_id for p in document.schedules[0].days[0]] == ["r1", "news"]

    def test_delete_while_worker_measures(self, document: ChannelDocument) -> None:
        """Deleting a program leaves its resource for the worker to update."""
        gate = GatedProbe({"pilot.mkv": 1800, "news.mp4": 600}, "news.mp4")
        resolver = DurationResolver(document, MediaDurationProber(gate))

        worker = resolver.start(0)
        assert gate.entered.wait(TIMEOUT)
        document.delete_program(0, "10:00")
        gate.release.set()
        [outcome] = serve_in_background(resolver, [worker], ScriptedPrompt())

        assert outcome.changed_ids == {"r2"}
        assert [p.resource_id for p in document.schedules[0].days[0]] == ["r1"]
        assert document.schedules[0].resources["r2"].duration == 600
        assert document.dirty.dirty_schedule_indices() == [0]

    def test_worker_waits_for_schedule_lock(self, document: ChannelDocument) -> None:
        """Nothing is written while the foreground holds the schedule lock."""
        resolver = DurationResolver(
            document,
            MediaDurationProber(StubDurationProbe({"pilot.mkv": 1800, "news.mp4": 600})),
        )

        with document.schedule_lock(0):
            worker = resolver.start(0)
            worker.join(0.2)
            assert worker.is_alive()
            assert document.schedules[0].resources["r2"].duration == 0

        [outcome] = serve_in_background(resolver, [worker], ScriptedPrompt())

        assert outcome.changed_ids == {"r2"}
        assert document.schedules[0].resources["r2"].duration == 600


class TestSeveralWorkers:
    """Workers sharing one resolver and handoff."""

    def test_served_in_reverse_order(self, document: ChannelDocument) -> None:
        """A worker that finished while another was served is not waited on."""
        resolver = DurationResolver(
            document,
            MediaDurationProber(StubDurationProbe({"pilot.mkv": 1800, "news.mp4": 600})),
        )
        first = resolver.start(0)
        first.join(TIMEOUT)
        second = resolver.start(0)
        second.join(TIMEOUT)

        later, earlier = serve_in_background(resolver, [second, first], ScriptedPrompt())

        assert earlier.changed_ids == {"r2"}
        assert later.changed_ids == set()
        assert document.schedules[0].resources["r2"].duration == 600

    def test_same_day_with_prompts(self, document: ChannelDocument) -> None:
        """Two workers asking about the same file both finish once it is declined."""
        resolver = DurationResolver(
            document, MediaDurationProber(StubDurationProbe({"pilot.mkv": 1800}))
        )
        prompt = ScriptedPrompt()

        workers = [resolver.start(0), resolver.start(0)]
        outcomes = serve_in_background(resolver, workers, prompt)

        assert str(document.media_path("media/news.mp4")) in resolver.blacklist
        assert 1 <= len(prompt.prompts) <= 2
        assert all(outcome.error is None for outcome in outcomes)
        assert not any(worker.is_alive() for worker in workers)
