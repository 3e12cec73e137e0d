"""Introspector module for UHF Scheduler.

This module provides media duration probing:

- DurationProbe: Protocol defining the probe interface
- PyAVDurationProbe: Primary implementation using PyAV
- FFprobeDurationProbe: Fallback implementation using ffprobe
- StubDurationProbe: Stub implementation for testing
- MediaDurationProber: Primary probe with extension-gated fallback
- MediaIntrospectionError: Exception for probe failures
"""

from uhf.introspector.ffprobe import FFprobeDurationProbe
from uhf.introspector.interface import DurationProbe, MediaIntrospectionError
from uhf.introspector.prober import (
    DEFAULT_FALLBACK_EXTENSIONS,
    DEFAULT_MEDIA_EXTENSIONS,
    MediaDurationProber,
)
from uhf.introspector.pyav import PyAVDurationProbe
from uhf.introspector.stub import StubDurationProbe

__all__ = [
    "DurationProbe",
    "MediaIntrospectionError",
    "PyAVDurationProbe",
    "FFprobeDurationProbe",
    "StubDurationProbe",
    "MediaDurationProber",
    "DEFAULT_MEDIA_EXTENSIONS",
    "DEFAULT_FALLBACK_EXTENSIONS",
]
