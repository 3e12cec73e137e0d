"""Tests for the PyAV primary duration probe."""

from fractions import Fraction
from pathlib import Path
from unittest.mock import MagicMock, patch

import av
import pytest

from uhf.introspector import MediaIntrospectionError, PyAVDurationProbe


def _container(streams, duration=None):
    container = MagicMock()
    container.__enter__.return_value = container
    container.streams = streams
    container.duration = duration
    return container


def _stream(kind, duration=None, time_base=None):
    stream = MagicMock()
    stream.type = kind
    stream.duration = duration
    stream.time_base = time_base
    return stream


@pytest.fixture
def media_file(temp_dir: Path) -> Path:
    path = temp_dir / "episode.mp4"
    path.write_bytes(b"")
    return path


class TestPyAVDurationProbe:
    """Tests for PyAVDurationProbe."""

    def test_video_stream_duration_preferred(self, media_file):
        """The video stream's own duration wins over audio and container."""
        streams = [
            _stream("audio", 100, Fraction(1, 1)),
            _stream("video", 90000, Fraction(1, 1000)),
        ]
        with patch("uhf.introspector.pyav.av.open", return_value=_container(streams, 5_000_000)):
            assert PyAVDurationProbe().read_duration(media_file) == 90.0

    def test_container_duration_fallback(self, media_file):
        """Without a stream duration the container duration is used."""
        container = _container([_stream("video")], duration=2 * av.time_base)
        with patch("uhf.introspector.pyav.av.open", return_value=container):
            assert PyAVDurationProbe().read_duration(media_file) == 2.0

    def test_no_streams(self, media_file):
        with patch("uhf.introspector.pyav.av.open", return_value=_container([])):
            assert PyAVDurationProbe().read_duration(media_file) == 0.0

    def test_open_failure_raises(self, media_file):
        with patch("uhf.introspector.pyav.av.open", side_effect=OSError("bad header")):
            with pytest.raises(MediaIntrospectionError, match="bad header"):
                PyAVDurationProbe().read_duration(media_file)

    def test_probe_duration_swallows_failures(self, temp_dir):
        """A missing file probes as 0.0."""
        assert PyAVDurationProbe().probe_duration(temp_dir / "missing.mp4") == 0.0
