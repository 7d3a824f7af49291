"""Reconciler that applies desired state to a host in a single pass."""

from collections.abc import Awaitable, Callable, Iterable, Sequence
from pathlib import Path

from macfix.core.config_edit import edit_config_line
from macfix.core.errors import EntryFailedError
from macfix.core.host import HostControl
from macfix.core.logging import get_logger
from macfix.core.models import (
    Action,
    ConfigEditResult,
    ConfigLine,
    DesiredStateEntry,
    EntryResult,
    HousekeepingResult,
    Outcome,
    StepResult,
)
from macfix.system.command import CommandError

logger = get_logger(__name__)


def _failure_detail(error: Exception) -> str:
    if isinstance(error, CommandError):
        return error.reason
    return str(error)


class Reconciler:
    """Applies entries and config edits in order, continuing past failures.

    Nothing is retried: every step is attempted once per run, and running the
    whole tool again is the retry.
    """

    def __init__(self, host: HostControl) -> None:
        """Initialize the Reconciler.

        Args:
            host: Host to apply actions to
        """
        self.host = host

    async def apply_entry(self, entry: DesiredStateEntry) -> EntryResult:
        """Apply one entry to the host.

        Args:
            entry: Entry to apply

        Returns:
            Result of the attempt; failures of best-effort entries are
            reported here rather than raised

        Raises:
            EntryFailedError: If an entry that is not best-effort fails
        """
        if entry.action is Action.NONE:
            return EntryResult(entry=entry, outcome=Outcome.SKIPPED, detail="nothing to do")

        logger.info(
            f"Applying {entry.action.value}", target=entry.name, reason=entry.reason or "-"
        )
        try:
            changed = await self.host.apply(entry.action, entry.name)
        except (CommandError, OSError) as e:
            if not entry.best_effort:
                logger.error(f"Failed to {entry.action.value}", target=entry.name)
                raise EntryFailedError(entry, e) from e
            detail = _failure_detail(e)
            logger.warning(
                f"Failed to {entry.action.value}, continuing", target=entry.name, error=detail
            )
            return EntryResult(entry=entry, outcome=Outcome.FAILED, detail=detail)

        if not changed:
            return EntryResult(entry=entry, outcome=Outcome.UNCHANGED, detail="already in place")
        return EntryResult(entry=entry, outcome=Outcome.APPLIED)

    def edit_config_line(self, path: Path, config_line: ConfigLine) -> ConfigEditResult:
        """Edit one key in a config file, reporting I/O errors as failures.

        Args:
            path: File to edit
            config_line: Key and transform to apply

        Returns:
            Result of the edit
        """
        try:
            return edit_config_line(path, config_line)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to edit config file", path=str(path), error=str(e))
            return ConfigEditResult(
                path=path, key=config_line.key, outcome=Outcome.FAILED, detail=str(e)
            )

    async def run(
        self,
        entries: Sequence[DesiredStateEntry],
        config_edits: Sequence[tuple[Path, ConfigLine]] = (),
    ) -> list[StepResult]:
        """Apply every entry and config edit in order.

        Args:
            entries: Entries to apply, in order
            config_edits: (path, ConfigLine) pairs to apply after the entries

        Returns:
            One result per attempted step, in the order attempted

        Raises:
            EntryFailedError: If an entry that is not best-effort fails
        """
        results: list[StepResult] = []

        for entry in entries:
            results.append(await self.apply_entry(entry))

        if any(
            r.entry.action is Action.PURGE and r.outcome is Outcome.APPLIED
            for r in results
            if isinstance(r, EntryResult)
        ):
            results.append(
                await self._housekeeping("apt-get autoremove", self.host.autoremove)
            )

        edits = [self.edit_config_line(path, line) for path, line in config_edits]
        results.extend(edits)

        if any(edit.outcome is Outcome.APPLIED for edit in edits):
            results.append(
                await self._housekeeping("update-grub", self.host.regenerate_bootloader)
            )

        return results

    async def _housekeeping(
        self, description: str, step: Callable[[], Awaitable[None]]
    ) -> HousekeepingResult:
        try:
            await step()
        except CommandError as e:
            logger.warning(f"{description} failed, continuing", error=e.reason)
            return HousekeepingResult(description, Outcome.FAILED, e.reason)
        return HousekeepingResult(description, Outcome.APPLIED)


def summarize(results: Iterable[StepResult]) -> list[str]:
    """Describe each result as one human-readable line, in order."""
    return [result.describe() for result in results]


def count_outcomes(results: Iterable[StepResult]) -> dict[Outcome, int]:
    """Count results per outcome."""
    counts = dict.fromkeys(Outcome, 0)
    for result in results:
        counts[result.outcome] += 1
    return counts
