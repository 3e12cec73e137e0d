"""Tests for the composite duration prober."""

from pathlib import Path
from unittest.mock import patch

from uhf.config.models import ProbeConfig, ToolPathsConfig, UHFConfig
from uhf.introspector import (
    MediaDurationProber,
    MediaIntrospectionError,
    StubDurationProbe,
)


class TestMediaDurationProber:
    """Tests for primary/fallback probing."""

    def test_primary_result_used(self) -> None:
        """A positive primary result skips the fallback."""
        secondary = StubDurationProbe({"a.mkv": 99})
        prober = MediaDurationProber(StubDurationProbe({"a.mkv": 12.5}), secondary)

        assert prober.probe_duration(Path("/m/a.mkv")) == 12.5
        assert secondary.calls == []

    def test_fallback_for_listed_extension(self) -> None:
        """Matroska files fall back to the secondary probe by default."""
        prober = MediaDurationProber(StubDurationProbe(), StubDurationProbe({"a.mkv": 30}))

        assert prober.probe_duration(Path("/m/a.mkv")) == 30

    def test_no_fallback_for_other_extensions(self) -> None:
        """Other containers report 0.0 when the primary fails."""
        secondary = StubDurationProbe({"a.mp4": 30})
        prober = MediaDurationProber(StubDurationProbe(), secondary)

        assert prober.probe_duration(Path("/m/a.mp4")) == 0.0
        assert secondary.calls == []

    def test_fallback_extensions_configurable(self) -> None:
        """Extensions are compared without dots or case."""
        prober = MediaDurationProber(
            StubDurationProbe(),
            StubDurationProbe({"a.MP4": 30}),
            fallback_extensions=[".Mp4"],
        )

        assert prober.probe_duration(Path("/m/a.MP4")) == 30

    def test_probe_seconds_rounds_up(self) -> None:
        prober = MediaDurationProber(StubDurationProbe({"a.mp4": 10.01}))

        assert prober.probe_seconds(Path("a.mp4")) == 11

    def test_is_media_file(self) -> None:
        prober = MediaDurationProber(StubDurationProbe())

        assert prober.is_media_file(Path("show.M4V"))
        assert not prober.is_media_file(Path("show.srt"))


class TestFromConfig:
    """Tests for building the production prober."""

    def test_missing_ffprobe_disables_fallback(self) -> None:
        """Without ffprobe the prober still works on the primary alone."""
        config = UHFConfig(probe=ProbeConfig(fallback_extensions=["avi"]))
        with patch(
            "uhf.introspector.ffprobe.FFprobeDurationProbe.__init__",
            side_effect=MediaIntrospectionError("ffprobe is not installed"),
        ):
            prober = MediaDurationProber.from_config(config)

        assert prober.secondary is None
        assert prober.fallback_extensions == frozenset({"avi"})

    def test_configured_ffprobe(self, temp_dir: Path) -> None:
        """A configured ffprobe path becomes the fallback probe."""
        config = UHFConfig(tools=ToolPathsConfig(ffprobe=temp_dir / "ffprobe"))

        prober = MediaDurationProber.from_config(config)

        assert prober.secondary is not None
