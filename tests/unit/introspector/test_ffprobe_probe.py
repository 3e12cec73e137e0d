"""Tests for the ffprobe fallback duration probe."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from uhf.core.subprocess_utils import ToolError
from uhf.introspector import FFprobeDurationProbe, MediaIntrospectionError


@pytest.fixture
def media_file(temp_dir: Path) -> Path:
    path = temp_dir / "episode.mkv"
    path.write_bytes(b"")
    return path


@pytest.fixture
def probe(temp_dir: Path) -> FFprobeDurationProbe:
    return FFprobeDurationProbe(temp_dir / "ffprobe", timeout=5)


class TestConstruction:
    """Tests for locating ffprobe."""

    def test_not_installed(self):
        """Construction fails when ffprobe cannot be found."""
        with patch("uhf.introspector.ffprobe.shutil.which", return_value=None):
            with pytest.raises(MediaIntrospectionError, match="not installed"):
                FFprobeDurationProbe()

    def test_found_on_path(self):
        with patch("uhf.introspector.ffprobe.shutil.which", return_value="/usr/bin/ffprobe"):
            assert FFprobeDurationProbe.is_available()

    def test_configured_path_wins(self, uhf_data_dir: Path):
        """UHF_FFPROBE_PATH is used before PATH lookup."""
        tool = uhf_data_dir / "ffprobe"
        tool.write_bytes(b"")
        with patch.dict("os.environ", {"UHF_FFPROBE_PATH": str(tool)}):
            with patch("uhf.introspector.ffprobe.shutil.which") as which:
                probe = FFprobeDurationProbe()

        assert probe._ffprobe_path == tool
        which.assert_not_called()


class TestReadDuration:
    """Tests for parsing ffprobe output."""

    def test_format_duration(self, probe, media_file):
        output = json.dumps({"format": {"duration": "1320.480000"}})
        with patch("uhf.introspector.ffprobe.run_tool", return_value=output) as run:
            assert probe.read_duration(media_file) == pytest.approx(1320.48)

        assert "-show_format" in run.call_args.args
        assert run.call_args.args[-1] == media_file
        assert run.call_args.kwargs["timeout"] == 5

    def test_missing_duration(self, probe, media_file):
        with patch("uhf.introspector.ffprobe.run_tool", return_value='{"format": {}}'):
            with pytest.raises(MediaIntrospectionError, match="No duration"):
                probe.read_duration(media_file)

    def test_tool_failure(self, probe, media_file):
        """ffprobe's own diagnostics end up in the error."""
        with patch(
            "uhf.introspector.ffprobe.run_tool",
            side_effect=ToolError("ffprobe", "Invalid data found when processing input"),
        ):
            with pytest.raises(MediaIntrospectionError, match="Invalid data found"):
                probe.read_duration(media_file)

    def test_timeout(self, probe, media_file):
        with patch(
            "uhf.introspector.ffprobe.run_tool",
            side_effect=ToolError("ffprobe", "timed out after 5s"),
        ):
            with pytest.raises(MediaIntrospectionError, match="timed out"):
                probe.read_duration(media_file)

    def test_missing_file(self, probe, temp_dir):
        with pytest.raises(MediaIntrospectionError, match="File not found"):
            probe.read_duration(temp_dir / "gone.mkv")


class TestProbeDuration:
    """Tests for the non-raising entry point."""

    def test_failure_is_zero(self, probe, media_file):
        """Any failure is reported as an unknown duration."""
        with patch("uhf.introspector.ffprobe.run_tool", return_value="not json"):
            assert probe.probe_duration(media_file) == 0.0
