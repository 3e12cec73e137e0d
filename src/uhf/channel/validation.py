"""Read-only validation passes over an open channel.

Three passes are run, each producing ValidationIssue records:
- program resources exist in their schedule's table and are readable
- list resources are readable
- resource paths contain no characters that break on common filesystems

Validation never mutates the document; issues are returned and logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uhf.channel.document import ChannelDocument

logger = logging.getLogger(__name__)

FORBIDDEN_PATH_CHARACTERS = frozenset('|<>\\"?*')


class IssueKind(str, Enum):
    """Kinds of validation issue."""

    MISSING_RESOURCE = "missing_resource"
    UNREADABLE = "unreadable"
    BAD_PATH = "bad_path"


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found by validate_channel().

    Attributes:
        kind: What is wrong.
        location: Where it was found, e.g. "schedule 0 day 3 09:00" or
            "list fillers".
        resource_id: Identifier of the offending resource.
        path: The resource path when known.
        message: Human-readable description.
    """

    kind: IssueKind
    location: str
    resource_id: str
    path: str | None
    message: str


def bad_path_components(path: str) -> list[str]:
    """Return the components of ``path`` that are not portable.

    A component is rejected when it contains one of ``| < > \\ " ? *`` or
    ends in a space.
    """
    return [
        part
        for part in PurePosixPath(path).parts
        if part.endswith(" ") or FORBIDDEN_PATH_CHARACTERS.intersection(part)
    ]


def _path_issue(location: str, resource_id: str, path: str) -> ValidationIssue | None:
    bad = bad_path_components(path)
    if not bad:
        return None
    return ValidationIssue(
        kind=IssueKind.BAD_PATH,
        location=location,
        resource_id=resource_id,
        path=path,
        message=f"Path component(s) not allowed: {', '.join(repr(p) for p in bad)}",
    )


def validate_schedules(document: ChannelDocument) -> list[ValidationIssue]:
    """Check every program's resource in every schedule."""
    issues: list[ValidationIssue] = []
    for schedule_index, schedule in enumerate(document.schedules):
        with document.schedule_lock(schedule_index):
            for day_index, day in enumerate(schedule.days):
                for program in day:
                    location = f"schedule {schedule_index} day {day_index} {program.start_time}"
                    resource = schedule.resources.get(program.resource_id)
                    if resource is None:
                        issues.append(
                            ValidationIssue(
                                kind=IssueKind.MISSING_RESOURCE,
                                location=location,
                                resource_id=program.resource_id,
                                path=None,
                                message="Resource missing from schedule",
                            )
                        )
                        continue
                    if not document.storage.is_readable(resource.path):
                        issues.append(
                            ValidationIssue(
                                kind=IssueKind.UNREADABLE,
                                location=location,
                                resource_id=program.resource_id,
                                path=resource.path,
                                message="File is not readable",
                            )
                        )
                    path_issue = _path_issue(location, program.resource_id, resource.path)
                    if path_issue is not None:
                        issues.append(path_issue)
    return issues


def validate_lists(document: ChannelDocument) -> list[ValidationIssue]:
    """Check every list resource path."""
    issues: list[ValidationIssue] = []
    for list_id, channel_list in document.lists.items():
        location = f"list {list_id}"
        for key, resource in channel_list.resources.items():
            if not document.storage.is_readable(resource.path):
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.UNREADABLE,
                        location=location,
                        resource_id=key,
                        path=resource.path,
                        message="File is not readable",
                    )
                )
            path_issue = _path_issue(location, key, resource.path)
            if path_issue is not None:
                issues.append(path_issue)
    return issues


def validate_channel(document: ChannelDocument) -> list[ValidationIssue]:
    """Run every validation pass and log what was found."""
    issues = validate_schedules(document) + validate_lists(document)
    for issue in issues:
        logger.warning(
            "%s: %s (%s)",
            issue.location,
            issue.message,
            issue.path or issue.resource_id,
            extra={"kind": issue.kind.value},
        )
    logger.info("Validation found %d issue(s)", len(issues))
    return issues
