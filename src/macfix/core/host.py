"""HostControl protocol used by the reconciler.

This is the seam between reconciliation logic and the real machine: the
reconciler only ever asks a ``HostControl`` to apply an action to a target,
so tests can substitute an in-memory double.
"""

from typing import Protocol, runtime_checkable

from macfix.core.models import Action


@runtime_checkable
class HostControl(Protocol):
    """Protocol for applying desired-state actions to a host."""

    async def apply(self, action: Action, target: str) -> bool:
        """Apply ``action`` to a unit, package or path.

        Returns:
            False if the target was already in the desired state, else True

        Raises:
            CommandError: If the underlying command fails
            OSError: If a filesystem operation fails
            ValueError: If the action is not supported
        """
        ...

    async def autoremove(self) -> None:
        """Remove packages that are no longer needed.

        Raises:
            CommandError: If the package manager fails
        """
        ...

    async def regenerate_bootloader(self) -> None:
        """Regenerate the bootloader configuration after editing its defaults.

        Raises:
            CommandError: If the generator fails
        """
        ...
