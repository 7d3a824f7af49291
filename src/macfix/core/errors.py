"""Fatal errors that abort a macfix run."""

from macfix.core.models import DesiredStateEntry


class MacfixError(Exception):
    """Base class for errors that stop the run."""


class PrivilegeError(MacfixError):
    """Raised when the process lacks root privileges."""


class EntryFailedError(MacfixError):
    """Raised when an entry that is not best-effort fails.

    Attributes:
        entry: The entry that failed
    """

    def __init__(self, entry: DesiredStateEntry, cause: Exception) -> None:
        self.entry = entry
        super().__init__(f"Failed to {entry.action.value} {entry.name}: {cause}")
