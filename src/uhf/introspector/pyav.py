"""PyAV-based primary duration probe."""

from __future__ import annotations

import logging
from pathlib import Path

import av
from av.error import FFmpegError

from uhf.introspector.interface import MediaIntrospectionError

logger = logging.getLogger(__name__)


class PyAVDurationProbe:
    """Reads container and stream durations through libav bindings.

    The video stream's own duration is preferred; the container duration
    is used when the stream does not carry one.
    """

    def read_duration(self, path: Path) -> float:
        """Read the duration of ``path``.

        Raises:
            MediaIntrospectionError: If the file cannot be opened or demuxed.
        """
        if not path.is_file():
            raise MediaIntrospectionError(f"File not found: {path}")
        try:
            with av.open(str(path)) as container:
                streams = list(container.streams)
                if not streams:
                    return 0.0
                stream = next((s for s in streams if s.type == "video"), streams[0])
                if stream.duration and stream.time_base:
                    return float(stream.duration * stream.time_base)
                if container.duration:
                    return container.duration / av.time_base
                return 0.0
        except FFmpegError as e:
            raise MediaIntrospectionError(f"Cannot demux {path}: {e}") from e
        except OSError as e:
            raise MediaIntrospectionError(f"Cannot open {path}: {e}") from e

    def probe_duration(self, path: Path) -> float:
        try:
            return self.read_duration(path)
        except MediaIntrospectionError as e:
            logger.debug("Primary probe failed: %s", e)
            return 0.0
