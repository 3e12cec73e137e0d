"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, input, rejected edits)
    20-29: Channel errors
    30-39: Tool/dependency errors
    40-49: Operation errors
    60-69: Warning states
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for uhf CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    CONFIG_ERROR = 11
    INVALID_INPUT = 12
    EDIT_REJECTED = 13

    # Channel errors (20-29)
    CHANNEL_NOT_FOUND = 20
    OPEN_FAILED = 21
    CHANNEL_EXISTS = 22

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Operation errors (40-49)
    SAVE_FAILED = 40
    EXPORT_FAILED = 41

    # Warning states (60-69)
    VALIDATION_ISSUES = 60
    UNRESOLVED_DURATIONS = 61
