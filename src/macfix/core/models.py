"""Data models for desired host state and reconciliation results.

A run is described by an ordered list of ``DesiredStateEntry`` objects plus
zero or more ``ConfigLine`` edits. Reconciling them yields one result object
per attempted step; each result can ``describe()`` itself as a single line
for the end-of-run summary.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Action(str, Enum):
    """Operation to apply to a unit, package or path."""

    MASK = "mask"
    UNMASK = "unmask"
    DISABLE = "disable"
    ENABLE = "enable"
    STOP = "stop"
    PURGE = "purge"
    REMOVE = "remove"
    NONE = "none"


class Outcome(str, Enum):
    """Result of attempting a single step."""

    APPLIED = "applied"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DesiredStateEntry:
    """A named unit, package or path together with the action to apply.

    Attributes:
        name: Unit name, package name or absolute path
        action: Operation to apply
        best_effort: Log and continue on failure instead of aborting the run
        reason: Short explanation logged before the step runs
    """

    name: str
    action: Action
    best_effort: bool = True
    reason: str = ""

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("DesiredStateEntry name must not be empty")


@dataclass(frozen=True)
class ConfigLine:
    """An edit of one ``KEY=value`` line in a text configuration file.

    Attributes:
        key: Variable name whose value is rewritten
        transform: Maps the old (unquoted) value to the new one; it must give
            the same result when applied to its own output
    """

    key: str
    transform: Callable[[str], str]

    def __post_init__(self) -> None:
        if not self.key or not self.key.strip():
            raise ValueError("ConfigLine key must not be empty")


@dataclass(frozen=True)
class EntryResult:
    """Outcome of applying a ``DesiredStateEntry``."""

    entry: DesiredStateEntry
    outcome: Outcome
    detail: str = ""

    def describe(self) -> str:
        line = f"{self.entry.action.value} {self.entry.name}: {self.outcome.value}"
        if self.detail:
            line += f" ({self.detail})"
        return line


@dataclass(frozen=True)
class ConfigEditResult:
    """Outcome of a ``ConfigLine`` edit.

    Attributes:
        path: File that was (or would have been) edited
        key: Key that was looked up
        outcome: What happened
        backup: Backup copy written before the edit, if any
        old_value: Value found in the file, if the key was present
        new_value: Value after the transform, if the key was present
        detail: Explanation for skipped or failed edits
    """

    path: Path
    key: str
    outcome: Outcome
    backup: Path | None = None
    old_value: str | None = None
    new_value: str | None = None
    detail: str = ""

    def describe(self) -> str:
        line = f"edit {self.key} in {self.path}: {self.outcome.value}"
        if self.outcome is Outcome.APPLIED:
            line += f" ({self.old_value!r} -> {self.new_value!r}, backup {self.backup})"
        elif self.detail:
            line += f" ({self.detail})"
        return line


@dataclass(frozen=True)
class HousekeepingResult:
    """Outcome of a trailing cleanup step such as ``apt-get autoremove``."""

    description: str
    outcome: Outcome
    detail: str = ""

    def describe(self) -> str:
        line = f"{self.description}: {self.outcome.value}"
        if self.detail:
            line += f" ({self.detail})"
        return line


StepResult = EntryResult | ConfigEditResult | HousekeepingResult
