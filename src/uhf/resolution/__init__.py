"""Media resolution pipeline.

- DurationResolver: Per-day background duration resolution
- ForegroundHandoff: Rendez-vous between workers and the foreground
- SessionBlacklist: Paths the user declined to locate
- LocationHintRegistry: Directories supplied to locate-content requests
- ScriptedPrompt: Canned locate-content answers for testing
"""

from uhf.resolution.blacklist import SessionBlacklist
from uhf.resolution.handoff import (
    ForegroundHandoff,
    LocatePrompt,
    LocateRequest,
    ScriptedPrompt,
    WorkerFinished,
)
from uhf.resolution.hints import LocationHintRegistry, is_locatable
from uhf.resolution.pipeline import DurationResolver, ResolutionOutcome, ResolutionWorker

__all__ = [
    "DurationResolver",
    "ResolutionOutcome",
    "ResolutionWorker",
    "ForegroundHandoff",
    "LocatePrompt",
    "LocateRequest",
    "ScriptedPrompt",
    "WorkerFinished",
    "SessionBlacklist",
    "LocationHintRegistry",
    "is_locatable",
]
