"""
Data classes exchanged by the voice command interpreter.

Classes:
    RosterEntry: Read-only projection of a project or task offered for matching
    MatchCandidate: Best roster entry found by an entity matcher
    TimeEntryContext, TaskContext, DailyLogContext: Per-parse caller context
    ParsedTimeEntry, ParsedTaskCommand, ParsedDailyLog: Structured commands

Every parsed command carries ``confidence`` (rounded to two decimals),
``raw_transcript`` and a possibly empty ``warnings`` list.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

RosterLike = Union["RosterEntry", Mapping[str, Any]]


@dataclass(frozen=True)
class RosterEntry:
    """
    A project or task the transcript may refer to.

    Attributes:
        id: Identifier handed back in the parsed command
        name: Display label used for fuzzy matching (project name, task title)
        status: Current lifecycle status, if known
        priority: Task priority, if known
    """
    id: str
    name: str
    status: Optional[str] = None
    priority: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RosterEntry":
        """Build an entry from a document-store style mapping.

        The label is read from ``name``, ``title`` or ``display_name``.
        """
        label = data.get("name") or data.get("title") or data.get("display_name") or ""
        return cls(
            id=str(data.get("id", "")),
            name=str(label),
            status=data.get("status"),
            priority=data.get("priority"),
        )


def coerce_roster(entries: Optional[Sequence[RosterLike]]) -> Tuple[RosterEntry, ...]:
    """Accept roster entries as ``RosterEntry`` objects or plain mappings."""
    if not entries:
        return ()
    return tuple(
        entry if isinstance(entry, RosterEntry) else RosterEntry.from_mapping(entry)
        for entry in entries
    )


@dataclass(frozen=True)
class MatchCandidate:
    """Best roster entry (or category) resolved from a transcript."""
    id: str
    label: str
    confidence: float


@dataclass
class TimeEntryContext:
    projects: Sequence[RosterLike] = ()
    user_id: Optional[str] = None

    def __post_init__(self):
        self.projects = coerce_roster(self.projects)


@dataclass
class TaskContext:
    tasks: Sequence[RosterLike] = ()
    project_id: Optional[str] = None
    user_id: Optional[str] = None

    def __post_init__(self):
        self.tasks = coerce_roster(self.tasks)


@dataclass
class PreviousLog:
    """Summary of an earlier daily log for the same project."""
    crew_count: Optional[int] = None
    weather_condition: Optional[str] = None


@dataclass
class DailyLogContext:
    project_id: str = ""
    project_name: str = ""
    date: Optional[str] = None
    previous_logs: Sequence[PreviousLog] = ()


@dataclass
class ParsedTimeEntry:
    hours: float
    description: str
    confidence: float
    raw_transcript: str
    project_id: Optional[str] = None
    project_name: Optional[str] = None
    activity_type: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TaskUpdates:
    status: Optional[str] = None
    priority: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.status is None and self.priority is None

    def to_dict(self) -> Dict[str, str]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class ParsedTaskCommand:
    action: str
    confidence: float
    raw_transcript: str
    task_id: Optional[str] = None
    task_title: Optional[str] = None
    updates: Optional[TaskUpdates] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["updates"] = self.updates.to_dict() if self.updates else None
        return data


@dataclass
class WeatherReport:
    condition: str
    temperature_high: Optional[int] = None
    temperature_low: Optional[int] = None
    notes: Optional[str] = None


@dataclass
class LogIssue:
    description: str
    severity: str = "medium"
    resolved: bool = False


@dataclass
class ParsedDailyLog:
    date: str
    category: str
    title: str
    description: str
    confidence: float
    raw_transcript: str
    weather: Optional[WeatherReport] = None
    crew_count: Optional[int] = None
    crew_members: Optional[List[str]] = None
    work_performed: Optional[List[str]] = None
    issues: Optional[List[LogIssue]] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def round_confidence(value: float) -> float:
    """Clamp to [0, 1] and round to two decimals."""
    return round(min(max(value, 0.0), 1.0), 2)
