"""Pydantic models for the persisted channel formats.

A channel on disk is three kinds of JSON document:
- Manifest (``manifest.json``): channel info, schedule descriptors, series,
  list descriptors, categories and the weekday list schedule.
- Schedule: a resource table plus an ordered sequence of days of programs.
- List: a named resource table used for weekday fillers.

Every document carries a ``version`` tag. Unknown tags are rejected at
validation time so a channel written by a newer format generation is never
silently reinterpreted.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from uhf.core.time_utils import normalize_time_of_day

MANIFEST_VERSION = "UHF Channel - v1"
SCHEDULE_VERSION = "UHF Schedule - v1"
LIST_VERSION = "UHF List - v1"

DAYS_PER_WEEK = 7


def _check_version(value: str, expected: str) -> str:
    # Older manifests were written with a lowercase "channel".
    if value.strip().casefold() != expected.casefold():
        raise ValueError(f"unsupported version {value!r}, expected {expected!r}")
    return value


class Resource(BaseModel):
    """Metadata for one media file.

    A resource with ``duration == 0`` is unresolved and is a candidate for
    the media resolution pipeline.
    """

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    path: str
    duration: int = Field(default=0, ge=0)
    title: str | None = None
    series_id: str | None = None
    order: int | None = None
    description: str | None = None
    year: int | None = None
    start_offset: int | None = Field(default=None, ge=0)

    @property
    def is_resolved(self) -> bool:
        """True when the resource has a known, non-zero duration."""
        return self.duration > 0

    @property
    def has_description(self) -> bool:
        """True when the resource carries a non-empty description."""
        return bool(self.description)


class Program(BaseModel):
    """A placement of a resource at a time of day within a day."""

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    start_time: str
    resource_id: str
    category_id: str | None = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        """Normalize the start time to HH:MM."""
        return normalize_time_of_day(v)


class Schedule(BaseModel):
    """One schedule file: a resource table and its days of programs."""

    model_config = ConfigDict(extra="allow")

    version: str = SCHEDULE_VERSION
    resources: dict[str, Resource] = Field(default_factory=dict)
    days: list[list[Program]] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Reject unknown schedule format generations."""
        return _check_version(v, SCHEDULE_VERSION)

    @classmethod
    def empty(cls, days: int = DAYS_PER_WEEK) -> Schedule:
        """Create a schedule with ``days`` empty days and no resources."""
        return cls(days=[[] for _ in range(days)])

    def referenced_ids(self) -> set[str]:
        """Return every resource identifier referenced by a program."""
        return {program.resource_id for day in self.days for program in day}

    def missing_ids(self) -> set[str]:
        """Return referenced identifiers that have no resource table entry."""
        return self.referenced_ids() - self.resources.keys()


class ListInfo(BaseModel):
    """Optional descriptive info for a list."""

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    description: str | None = None


class ChannelList(BaseModel):
    """A named bag of resources, independent of any schedule."""

    model_config = ConfigDict(extra="allow")

    version: str = LIST_VERSION
    info: ListInfo | None = None
    resources: dict[str, Resource] = Field(default_factory=dict)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Reject unknown list format generations."""
        return _check_version(v, LIST_VERSION)

    def paths(self) -> set[str]:
        """Return the set of resource paths held by this list."""
        return {resource.path for resource in self.resources.values()}


class ScheduleDescriptor(BaseModel):
    """Manifest entry locating one schedule file."""

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    start_date: str
    schedule_path: str

    @field_validator("start_date")
    @classmethod
    def validate_start_date(cls, v: str) -> str:
        """Require a calendar date in YYYY-MM-DD form."""
        try:
            date.fromisoformat(v.strip())
        except ValueError as e:
            raise ValueError(f"start_date must be YYYY-MM-DD, got {v!r}") from e
        return v.strip()

    @property
    def parsed_date(self) -> date:
        """The start date parsed as a calendar date."""
        return date.fromisoformat(self.start_date)


class ChannelInfo(BaseModel):
    """Optional channel-level descriptive info."""

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    description: str | None = None
    logo_path: str | None = None


class Series(BaseModel):
    """A series referenced by ``Resource.series_id``."""

    model_config = ConfigDict(extra="allow")

    title: str
    logo_path: str | None = None


class Category(BaseModel):
    """A program category."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    chyron_path: str | None = None


class ListProgram(BaseModel):
    """A block of list content scheduled at a time of day."""

    model_config = ConfigDict(extra="allow")

    start_time: str
    list_ids: list[str] = Field(default_factory=list)
    end_time: str | None = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        """Normalize the start time to HH:MM."""
        return normalize_time_of_day(v)

    @field_validator("end_time")
    @classmethod
    def validate_end_time(cls, v: str | None) -> str | None:
        """Normalize the optional end time to HH:MM."""
        if v is None:
            return None
        return normalize_time_of_day(v)


class ListSchedule(BaseModel):
    """The list programs for one weekday."""

    model_config = ConfigDict(extra="allow")

    schedule: list[ListProgram] = Field(default_factory=list)


class ListDescriptor(BaseModel):
    """Manifest entry locating one list file."""

    model_config = ConfigDict(extra="allow")

    list_path: str


class Manifest(BaseModel):
    """Root document of a channel.

    Schedule descriptors must be in ascending start date order, and the
    weekday list schedule, when present, has exactly seven entries
    (index 0 is Sunday).
    """

    model_config = ConfigDict(extra="allow")

    version: str = MANIFEST_VERSION
    info: ChannelInfo | None = None
    schedules: list[ScheduleDescriptor] = Field(default_factory=list)
    series: dict[str, Series] | None = None
    lists: dict[str, ListDescriptor] | None = None
    categories: list[Category] | None = None
    dotw_list_schedule: list[ListSchedule] | None = None
    beginning_of_broadcast_day: str | None = None

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Reject unknown manifest format generations."""
        return _check_version(v, MANIFEST_VERSION)

    @field_validator("beginning_of_broadcast_day")
    @classmethod
    def validate_bobd(cls, v: str | None) -> str | None:
        """Normalize the beginning of broadcast day to HH:MM."""
        if v is None:
            return None
        return normalize_time_of_day(v)

    @field_validator("dotw_list_schedule")
    @classmethod
    def validate_dotw(cls, v: list[ListSchedule] | None) -> list[ListSchedule] | None:
        """Require exactly one list schedule per weekday."""
        if v is not None and len(v) != DAYS_PER_WEEK:
            raise ValueError(
                f"dotw_list_schedule must have {DAYS_PER_WEEK} entries, got {len(v)}"
            )
        return v

    @model_validator(mode="after")
    def validate_schedule_order(self) -> Manifest:
        """Require schedule descriptors in ascending start date order."""
        dates = [descriptor.parsed_date for descriptor in self.schedules]
        if any(later < earlier for earlier, later in zip(dates, dates[1:])):
            raise ValueError("schedules must be in ascending start_date order")
        return self

    def series_title(self, series_id: str | None) -> str | None:
        """Return the title of a series, or None if unknown."""
        if not series_id or not self.series:
            return None
        series = self.series.get(series_id)
        return series.title if series else None


def to_json_bytes(document: BaseModel) -> bytes:
    """Serialize a document as pretty-printed UTF-8 JSON.

    Optional fields that are unset are omitted, matching the files written
    by earlier versions of the editor.
    """
    data: dict[str, Any] = document.model_dump(mode="json", exclude_none=True)
    return (json.dumps(data, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
