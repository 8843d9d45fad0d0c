"""Keyword and taxonomy tables for the voice command interpreter.

Every table is read-only. Parsers receive a :class:`Vocabulary` instance as
an argument (``DEFAULT_VOCABULARY`` unless the caller injects another one),
so there is no module-level state to mutate. Deployments can extend the
tables through ``config/vocabulary.json``; see :meth:`Vocabulary.with_overrides`.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from loguru import logger


def _freeze_table(table: Mapping[str, Iterable[str]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({key: tuple(values) for key, values in table.items()})


NUMBER_WORDS = MappingProxyType({
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
    "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    # Common mis-transcriptions
    "to": 2, "too": 2, "for": 4, "ate": 8, "won": 1, "tree": 3,
})

# Homophones only count as numbers when a time unit follows them
MISHEARD_NUMBER_WORDS = frozenset({"to", "too", "for", "ate", "won", "tree"})

FRACTION_WORDS = MappingProxyType({
    "half": 0.5,
    "quarter": 0.25,
    "third": 0.333,
})

ACTIVITY_KEYWORDS = _freeze_table({
    "framing": ["framing", "frame", "framed", "frames", "studs", "walls"],
    "drywall": ["drywall", "dry wall", "sheetrock", "gypsum", "plaster"],
    "electrical": ["electrical", "electric", "wiring", "wire", "outlets", "switches", "panel"],
    "plumbing": ["plumbing", "plumb", "pipes", "piping", "fixtures", "faucet", "toilet"],
    "hvac": ["hvac", "heating", "cooling", "air conditioning", "ac", "ductwork", "vents"],
    "roofing": ["roofing", "roof", "shingles", "tiles", "gutters"],
    "flooring": ["flooring", "floor", "floors", "tile", "hardwood", "carpet", "laminate", "vinyl"],
    "painting": ["painting", "paint", "painted", "primer", "primed"],
    "demolition": ["demolition", "demo", "tear out", "tear down", "removal"],
    "concrete": ["concrete", "cement", "foundation", "slab", "pour", "poured"],
    "carpentry": ["carpentry", "carpenter", "trim", "molding", "cabinets", "woodwork"],
    "insulation": ["insulation", "insulate", "insulated", "batt", "spray foam"],
    "siding": ["siding", "exterior", "cladding", "vinyl siding"],
    "landscaping": ["landscaping", "landscape", "lawn", "plants", "grading", "dirt"],
    "cleaning": ["cleaning", "clean", "cleanup", "sweep", "trash"],
    "inspection": ["inspection", "inspect", "inspected", "walkthrough"],
    "meeting": ["meeting", "met", "client meeting", "coordination"],
    "general": ["general", "labor", "work", "miscellaneous", "misc"],
})

PROJECT_INDICATORS = (
    "at", "on", "for", "the", "project", "job", "site",
    "house", "property", "location", "building",
)

LIVE_PROJECT_STATUSES = frozenset({"active", "planning", "bidding"})

TIME_ENTRY_COMMAND_KEYWORDS = (
    "log", "record", "add", "enter", "hours", "hour", "minutes", "time",
    "worked", "spent", "clocked",
)

DAILY_LOG_COMMAND_KEYWORDS = (
    "today", "weather", "crew", "progress", "summary", "daily", "end of day",
    "report", "inspection", "delivery", "issue", "problem",
)

TASK_COMMAND_KEYWORDS = (
    "mark", "complete", "completed", "done", "finish", "finished", "task",
    "start", "begin", "pause", "stop",
)

TASK_ACTION_KEYWORDS = _freeze_table({
    "complete": [
        "complete", "completed", "finish", "finished", "done", "mark done",
        "mark complete", "mark as complete", "mark as done", "close",
    ],
    "start": [
        "start", "started", "begin", "began", "working on", "start working",
        "in progress", "mark in progress", "mark as in progress",
    ],
    "pause": ["pause", "paused", "stop", "stopped", "hold", "on hold", "put on hold"],
    "update": ["update", "change", "modify", "edit", "set"],
    "assign": ["assign", "assigned", "give", "delegate", "hand off"],
})

TASK_STATUS_KEYWORDS = _freeze_table({
    "pending": ["pending", "not started", "to do", "todo", "waiting"],
    "assigned": ["assigned", "hand off", "delegated", "given to"],
    "in_progress": ["in progress", "started", "working", "ongoing"],
    "blocked": ["blocked", "stuck", "waiting on", "dependent on"],
    "review": ["review", "needs review", "check", "verify"],
    "completed": ["completed", "complete", "done", "finished"],
})

TASK_PRIORITY_KEYWORDS = _freeze_table({
    "high": ["high", "urgent", "critical", "important", "asap", "priority"],
    "medium": ["medium", "normal", "moderate"],
    "low": ["low", "minor", "whenever", "back burner"],
})

TASK_FILLER_WORDS = (
    "can you", "could you", "please", "task", "the", "a", "an", "for", "on",
    "at", "in", "mark", "set", "update", "change", "complete", "finish", "as", "to",
)

TIME_ENTRY_COMMAND_VERBS = ("log", "record", "add", "enter", "put", "submit")

WEATHER_KEYWORDS = _freeze_table({
    "clear": ["sunny", "sun", "clear", "bright", "beautiful", "nice"],
    "partly_cloudy": ["partly cloudy", "partly sunny", "some clouds", "scattered clouds"],
    "cloudy": ["cloudy", "overcast", "gray", "grey", "clouds", "foggy", "fog", "misty", "hazy"],
    "rain": ["rainy", "rain", "raining", "wet", "drizzle", "drizzling", "showers", "light rain"],
    "heavy_rain": ["heavy rain", "downpour", "pouring", "flooding"],
    "snow": ["snowy", "snow", "snowing", "flurries", "blizzard"],
    "storm": ["stormy", "storm", "thunder", "thunderstorm", "lightning", "severe weather"],
    "wind": ["windy", "wind", "breezy", "gusty", "gusts", "high winds"],
    "extreme_heat": ["hot", "scorching", "heat wave", "sweltering", "extreme heat"],
    "extreme_cold": ["cold", "freezing", "frigid", "chilly", "extreme cold", "bitter cold"],
})

DAILY_LOG_CATEGORY_KEYWORDS = _freeze_table({
    "general": ["general", "normal", "standard", "regular", "typical"],
    "progress": ["progress", "completed", "finished", "done", "accomplished", "worked on", "installed", "built"],
    "issue": ["issue", "problem", "trouble", "difficulty", "challenge", "delayed", "broken", "failed"],
    "safety": ["safety", "injury", "accident", "hazard", "dangerous", "incident", "near miss", "safety meeting"],
    "weather": ["weather", "rain", "storm", "snow", "heat", "cold", "wind", "delay due to weather"],
    "delivery": ["delivery", "delivered", "received", "arrived", "shipment", "materials arrived", "supplies"],
    "inspection": ["inspection", "inspector", "inspected", "passed", "failed inspection", "code", "permit"],
    "client_interaction": ["client", "owner", "homeowner", "met with", "walkthrough", "discussed", "customer"],
    "subcontractor": ["subcontractor", "sub", "electrician", "plumber", "hvac", "roofer", "painter"],
    "equipment": ["equipment", "machine", "tool", "rental", "crane", "excavator", "forklift", "scaffolding"],
})

DAILY_LOG_CATEGORY_LABELS = MappingProxyType({
    "general": "Daily Update",
    "progress": "Progress Update",
    "issue": "Issue Report",
    "safety": "Safety Report",
    "weather": "Weather Update",
    "delivery": "Delivery Log",
    "inspection": "Inspection Report",
    "client_interaction": "Client Meeting",
    "subcontractor": "Subcontractor Update",
    "equipment": "Equipment Log",
})

ISSUE_SEVERITY_KEYWORDS = _freeze_table({
    "high": ["critical", "serious", "major", "severe", "urgent", "emergency", "stopped work", "safety hazard"],
    "medium": ["moderate", "significant", "delayed", "problem", "issue"],
    "low": ["minor", "small", "slight", "little", "trivial"],
})

ISSUE_INDICATORS = (
    "issue", "issues", "problem", "problems", "trouble", "delay", "delayed",
    "challenge", "difficulty", "broken", "failed", "late", "missing", "wrong", "damaged",
)

RESOLVED_KEYWORDS = ("resolved", "fixed", "solved", "handled", "taken care of")

WORK_ACTIVITIES = (
    "framing", "drywall", "electrical", "plumbing", "hvac", "roofing",
    "flooring", "painting", "demolition", "concrete", "carpentry",
    "insulation", "siding", "landscaping", "cleaning", "trim",
    "cabinets", "fixtures", "windows", "doors", "foundation",
)

WORK_INDICATORS = (
    "completed", "finished", "installed", "worked on", "started",
    "continued", "done", "built", "framed", "painted", "hung",
)


@dataclass(frozen=True)
class Vocabulary:
    """Read-only bundle of every keyword table used by the interpreter."""

    number_words: Mapping[str, int] = field(default_factory=lambda: NUMBER_WORDS)
    misheard_number_words: frozenset = field(default_factory=lambda: MISHEARD_NUMBER_WORDS)
    fraction_words: Mapping[str, float] = field(default_factory=lambda: FRACTION_WORDS)
    activity_keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: ACTIVITY_KEYWORDS)
    project_indicators: Tuple[str, ...] = PROJECT_INDICATORS
    live_project_statuses: frozenset = field(default_factory=lambda: LIVE_PROJECT_STATUSES)
    time_entry_keywords: Tuple[str, ...] = TIME_ENTRY_COMMAND_KEYWORDS
    daily_log_keywords: Tuple[str, ...] = DAILY_LOG_COMMAND_KEYWORDS
    task_keywords: Tuple[str, ...] = TASK_COMMAND_KEYWORDS
    task_action_keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: TASK_ACTION_KEYWORDS)
    task_status_keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: TASK_STATUS_KEYWORDS)
    task_priority_keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: TASK_PRIORITY_KEYWORDS)
    task_filler_words: Tuple[str, ...] = TASK_FILLER_WORDS
    time_entry_command_verbs: Tuple[str, ...] = TIME_ENTRY_COMMAND_VERBS
    weather_keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: WEATHER_KEYWORDS)
    daily_log_category_keywords: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: DAILY_LOG_CATEGORY_KEYWORDS
    )
    daily_log_category_labels: Mapping[str, str] = field(default_factory=lambda: DAILY_LOG_CATEGORY_LABELS)
    issue_severity_keywords: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: ISSUE_SEVERITY_KEYWORDS
    )
    issue_indicators: Tuple[str, ...] = ISSUE_INDICATORS
    resolved_keywords: Tuple[str, ...] = RESOLVED_KEYWORDS
    work_activities: Tuple[str, ...] = WORK_ACTIVITIES
    work_indicators: Tuple[str, ...] = WORK_INDICATORS

    def with_overrides(self, overrides: Optional[Dict[str, Any]]) -> "Vocabulary":
        """Return a copy extended with deployment-specific keywords.

        Supported keys:
            number_words: {"word": value} added to the number table
            activity_keywords: {"activity": ["kw", ...]} appended per activity
                (new activities are appended to the taxonomy)
            project_indicators: ["word", ...] appended to the indicator list
            live_project_statuses: ["status", ...] replacing the live set

        Unknown keys are ignored with a warning.
        """
        if not overrides:
            return self

        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key == "number_words":
                merged = dict(self.number_words)
                merged.update({str(k).lower(): int(v) for k, v in value.items()})
                changes["number_words"] = MappingProxyType(merged)
            elif key == "activity_keywords":
                merged_table = {k: list(v) for k, v in self.activity_keywords.items()}
                for activity, keywords in value.items():
                    existing = merged_table.setdefault(str(activity).lower(), [])
                    existing.extend(k.lower() for k in keywords if k.lower() not in existing)
                changes["activity_keywords"] = _freeze_table(merged_table)
            elif key == "project_indicators":
                extra = tuple(w.lower() for w in value if w.lower() not in self.project_indicators)
                changes["project_indicators"] = self.project_indicators + extra
            elif key == "live_project_statuses":
                changes["live_project_statuses"] = frozenset(s.lower() for s in value)
            else:
                logger.warning(f"Ignoring unknown vocabulary override: {key}")

        return replace(self, **changes)

    @classmethod
    def from_app_config(cls, app_config) -> "Vocabulary":
        """Build the vocabulary from the loaded application configuration."""
        return DEFAULT_VOCABULARY.with_overrides(getattr(app_config, "vocabulary_data", None))


DEFAULT_VOCABULARY = Vocabulary()
