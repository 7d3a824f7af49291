"""Manager for orchestrating a macfix run."""

from dataclasses import dataclass, field

from macfix.config.models import FixesConfig
from macfix.core.errors import PrivilegeError
from macfix.core.logging import get_logger
from macfix.core.models import StepResult
from macfix.core.plan import Plan
from macfix.core.reconciler import Reconciler
from macfix.packages.systemd_handler import UNKNOWN_STATE, SystemdHandler
from macfix.system.command import CommandError
from macfix.system.host import SystemHost
from macfix.system.runner import System
from macfix.system.worker import Worker

logger = get_logger(__name__)


@dataclass
class HostStatus:
    """Post-run snapshot of the host.

    Attributes:
        failed_units: Output of ``systemctl --failed``
        unit_states: Enablement state of each watched unit, in order
    """

    failed_units: str = ""
    unit_states: dict[str, str] = field(default_factory=dict)


@dataclass
class RunReport:
    """Everything a run produced."""

    results: list[StepResult]
    status: HostStatus


class Manager:
    """Manager coordinates a full run: privilege check, plan, reconcile, report."""

    def __init__(self, config: FixesConfig, system: Worker | None = None) -> None:
        """Initialize the Manager.

        Args:
            config: Run configuration
            system: Worker to use; defaults to the local ``System``
        """
        self.config = config
        self.system = system if system is not None else System(trace=config.trace)
        self.plan: Plan | None = None

    async def run(self) -> RunReport:
        """Apply all fixes and collect the host status.

        Returns:
            Results of every step and the post-run host status

        Raises:
            PrivilegeError: If not running as root
            EntryFailedError: If an entry that is not best-effort fails
        """
        if not self.system.is_root():
            raise PrivilegeError("Run as root: sudo macfix")

        logger.info("Starting Intel Mac Ubuntu stabilization and boot-time tuning")

        self.plan = Plan(self.config)
        if not self.config.purge_snapd:
            logger.warning("Skipping snapd purge (set MACFIX_PURGE_SNAPD=1 to remove snapd)")
        if not self.config.edit_grub:
            logger.warning("GRUB not modified (set MACFIX_EDIT_GRUB=1 to edit kernel args)")

        reconciler = Reconciler(SystemHost(self.system))
        results = await reconciler.run(self.plan.entries, self.plan.config_edits)

        status = await self.collect_status(self.plan.watched_units)
        return RunReport(results=results, status=status)

    async def collect_status(self, units: list[str]) -> HostStatus:
        """Query failed units and the enablement state of ``units``.

        Args:
            units: Units to report on

        Returns:
            Host status; anything that cannot be read is reported as unknown
        """
        systemd = SystemdHandler(self.system)
        status = HostStatus()

        try:
            status.failed_units = await systemd.failed_units()
        except CommandError as e:
            logger.warning("Could not list failed units", error=e.reason)
            status.failed_units = UNKNOWN_STATE

        for unit in units:
            status.unit_states[unit] = await systemd.is_enabled(unit)

        return status
