"""Unit tests for the reconciler."""

from pathlib import Path

import pytest

from macfix.core.errors import EntryFailedError
from macfix.core.host import HostControl
from macfix.core.kernel_args import kernel_args_transform
from macfix.core.models import (
    Action,
    ConfigLine,
    DesiredStateEntry,
    EntryResult,
    HousekeepingResult,
    Outcome,
)
from macfix.core.reconciler import Reconciler, count_outcomes, summarize
from macfix.system.command import CommandError

_UNIT_STATES = {
    Action.MASK: "masked",
    Action.UNMASK: "disabled",
    Action.DISABLE: "disabled",
    Action.ENABLE: "enabled",
    Action.STOP: "stopped",
    Action.PURGE: "purged",
    Action.REMOVE: "absent",
}


class FakeHost:
    """In-memory HostControl that records the resulting state per target."""

    def __init__(self, failing: set[str] | None = None, error: Exception | None = None) -> None:
        self.state: dict[str, str] = {}
        self.calls: list[tuple[Action, str]] = []
        self.failing = failing or set()
        self.error = error
        self.autoremoves = 0
        self.bootloader_updates = 0

    async def apply(self, action: Action, target: str) -> bool:
        self.calls.append((action, target))
        if target in self.failing:
            raise self.error or CommandError(
                f"systemctl {action.value} {target}", 5, f"Unit {target} not found."
            )
        if action is Action.NONE:
            return False
        if action is Action.REMOVE and self.state.get(target) == "absent":
            return False
        self.state[target] = _UNIT_STATES[action]
        return True

    async def autoremove(self) -> None:
        self.autoremoves += 1

    async def regenerate_bootloader(self) -> None:
        self.bootloader_updates += 1


class NotFoundHost(FakeHost):
    """Host whose control interface reports every unit as missing."""

    async def apply(self, action: Action, target: str) -> bool:
        self.calls.append((action, target))
        raise CommandError(f"systemctl {action.value} {target}", 5, f"Unit {target} not found.")


ENTRIES = [
    DesiredStateEntry(name="systemd-rfkill.service", action=Action.MASK),
    DesiredStateEntry(name="plymouth", action=Action.PURGE),
    DesiredStateEntry(name="NetworkManager-wait-online.service", action=Action.DISABLE),
    DesiredStateEntry(name="snapd.service", action=Action.STOP),
    DesiredStateEntry(name="fstrim.timer", action=Action.ENABLE),
]


class TestFakeHost:
    """Sanity check for the test double."""

    def test_fake_host_is_host_control(self) -> None:
        """Test that the double satisfies the HostControl protocol."""
        assert isinstance(FakeHost(), HostControl)


class TestApplyEntry:
    """Tests for Reconciler.apply_entry."""

    @pytest.mark.asyncio
    async def test_applied(self) -> None:
        """Test that a successful action is reported as applied."""
        host = FakeHost()
        entry = DesiredStateEntry(name="fstrim.timer", action=Action.ENABLE)

        result = await Reconciler(host).apply_entry(entry)

        assert result == EntryResult(entry=entry, outcome=Outcome.APPLIED)
        assert host.calls == [(Action.ENABLE, "fstrim.timer")]

    @pytest.mark.asyncio
    async def test_best_effort_failure_is_reported(self) -> None:
        """Test that a best-effort failure is returned, not raised."""
        host = FakeHost(failing={"example.socket"})
        entry = DesiredStateEntry(name="example.socket", action=Action.DISABLE)

        result = await Reconciler(host).apply_entry(entry)

        assert result.outcome is Outcome.FAILED
        assert result.detail == "Unit example.socket not found."

    @pytest.mark.asyncio
    async def test_best_effort_os_error_is_reported(self) -> None:
        """Test that filesystem errors are treated like command failures."""
        host = FakeHost(failing={"/snap"}, error=PermissionError("read-only file system"))
        entry = DesiredStateEntry(name="/snap", action=Action.REMOVE)

        result = await Reconciler(host).apply_entry(entry)

        assert result.outcome is Outcome.FAILED
        assert "read-only" in result.detail

    @pytest.mark.asyncio
    async def test_required_failure_raises(self) -> None:
        """Test that a failure of a required entry aborts with its name."""
        host = FakeHost(failing={"fstrim.timer"})
        entry = DesiredStateEntry(name="fstrim.timer", action=Action.ENABLE, best_effort=False)

        with pytest.raises(EntryFailedError, match="enable fstrim.timer") as exc_info:
            await Reconciler(host).apply_entry(entry)

        assert exc_info.value.entry is entry

    @pytest.mark.asyncio
    async def test_none_action_skips_host(self) -> None:
        """Test that Action.NONE does not touch the host."""
        host = FakeHost()
        entry = DesiredStateEntry(name="placeholder", action=Action.NONE)

        result = await Reconciler(host).apply_entry(entry)

        assert result.outcome is Outcome.SKIPPED
        assert host.calls == []

    @pytest.mark.asyncio
    async def test_already_absent_path_is_unchanged(self) -> None:
        """Test that removing a path that is already gone is not reported as applied."""
        host = FakeHost()
        entry = DesiredStateEntry(name="/var/snap", action=Action.REMOVE)
        reconciler = Reconciler(host)

        first = await reconciler.apply_entry(entry)
        second = await reconciler.apply_entry(entry)

        assert first.outcome is Outcome.APPLIED
        assert second.outcome is Outcome.UNCHANGED
        assert second.describe() == "remove /var/snap: unchanged (already in place)"

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self) -> None:
        """Test that errors other than command/OS failures are not swallowed."""
        host = FakeHost(failing={"x.service"}, error=RuntimeError("bug"))
        entry = DesiredStateEntry(name="x.service", action=Action.MASK)

        with pytest.raises(RuntimeError, match="bug"):
            await Reconciler(host).apply_entry(entry)


class TestRun:
    """Tests for Reconciler.run."""

    @pytest.mark.asyncio
    async def test_applies_in_order_past_failures(self) -> None:
        """Test that every entry is attempted in order despite failures."""
        host = FakeHost(failing={"plymouth", "snapd.service"})

        results = await Reconciler(host).run(ENTRIES)

        assert [target for _, target in host.calls] == [e.name for e in ENTRIES]
        outcomes = [r.outcome for r in results]
        assert outcomes == [
            Outcome.APPLIED,
            Outcome.FAILED,
            Outcome.APPLIED,
            Outcome.FAILED,
            Outcome.APPLIED,
        ]

    @pytest.mark.asyncio
    async def test_autoremove_after_applied_purge(self) -> None:
        """Test that autoremove runs once when a purge was applied."""
        host = FakeHost()

        results = await Reconciler(host).run(ENTRIES)

        assert host.autoremoves == 1
        assert results[-1] == HousekeepingResult("apt-get autoremove", Outcome.APPLIED)

    @pytest.mark.asyncio
    async def test_no_autoremove_without_purge(self) -> None:
        """Test that autoremove is skipped when nothing was purged."""
        host = FakeHost(failing={"plymouth"})

        await Reconciler(host).run(ENTRIES)

        assert host.autoremoves == 0

    @pytest.mark.asyncio
    async def test_rerun_is_idempotent(self) -> None:
        """Test that applying the list twice leaves the same host state."""
        once = FakeHost()
        await Reconciler(once).run(ENTRIES)

        twice = FakeHost()
        reconciler = Reconciler(twice)
        await reconciler.run(ENTRIES)
        await reconciler.run(ENTRIES)

        assert twice.state == once.state

    @pytest.mark.asyncio
    async def test_config_edit_triggers_bootloader_update(self, tmp_path: Path) -> None:
        """Test that an applied edit regenerates the bootloader once."""
        grub = tmp_path / "grub"
        grub.write_text('GRUB_CMDLINE_LINUX_DEFAULT="quiet splash"\n')
        line = ConfigLine(
            key="GRUB_CMDLINE_LINUX_DEFAULT",
            transform=kernel_args_transform(
                strip=["quiet", "splash"], append=["usbcore.autosuspend=-1"]
            ),
        )
        host = FakeHost()
        reconciler = Reconciler(host)

        first = await reconciler.run([], [(grub, line)])
        second = await reconciler.run([], [(grub, line)])

        assert [r.outcome for r in first] == [Outcome.APPLIED, Outcome.APPLIED]
        assert [r.outcome for r in second] == [Outcome.UNCHANGED]
        assert host.bootloader_updates == 1

    @pytest.mark.asyncio
    async def test_unreadable_config_is_failed_not_raised(self, tmp_path: Path) -> None:
        """Test that a config file that cannot be decoded is reported as failed."""
        grub = tmp_path / "grub"
        grub.write_bytes(b"\xff\xfe GRUB_CMDLINE_LINUX_DEFAULT=x\n")
        line = ConfigLine(key="GRUB_CMDLINE_LINUX_DEFAULT", transform=str.upper)

        results = await Reconciler(FakeHost()).run([], [(grub, line)])

        assert [r.outcome for r in results] == [Outcome.FAILED]


class TestSummarize:
    """Tests for summarize and count_outcomes."""

    @pytest.mark.asyncio
    async def test_unit_not_found_listed_as_failed(self) -> None:
        """Test that an entry whose unit is missing is summarized as failed."""
        entry = DesiredStateEntry(name="example.socket", action=Action.DISABLE, best_effort=True)

        results = await Reconciler(NotFoundHost()).run([entry])

        assert summarize(results) == [
            "disable example.socket: failed (Unit example.socket not found.)"
        ]

    @pytest.mark.asyncio
    async def test_summary_order_matches_results(self) -> None:
        """Test that summary lines follow the order of the results."""
        results = await Reconciler(FakeHost()).run(ENTRIES)

        lines = summarize(results)

        assert lines[0] == "mask systemd-rfkill.service: applied"
        assert lines[-1] == "apt-get autoremove: applied"
        assert len(lines) == len(results)

    def test_summarize_empty(self) -> None:
        """Test summarizing no results."""
        assert summarize([]) == []

    @pytest.mark.asyncio
    async def test_count_outcomes(self) -> None:
        """Test counting results per outcome."""
        results = await Reconciler(FakeHost(failing={"fstrim.timer"})).run(ENTRIES)

        counts = count_outcomes(results)

        assert counts[Outcome.APPLIED] == 5
        assert counts[Outcome.FAILED] == 1
        assert counts[Outcome.SKIPPED] == 0
