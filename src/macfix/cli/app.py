"""Main CLI application for macfix."""

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from macfix.config.loader import get_env_overrides, load_config
from macfix.config.models import ConfigOverrides
from macfix.core.errors import MacfixError
from macfix.core.logging import get_logger, setup_logging
from macfix.core.manager import Manager, RunReport
from macfix.core.models import Outcome
from macfix.core.reconciler import count_outcomes, summarize

logger = get_logger(__name__)

app = typer.Typer(
    name="macfix",
    help="Boot-stability and boot-time fixes for Ubuntu on Intel Macs",
    add_completion=False,
)

_OUTCOME_STYLES = {
    Outcome.APPLIED: "green",
    Outcome.UNCHANGED: "cyan",
    Outcome.SKIPPED: "yellow",
    Outcome.FAILED: "red",
}


def print_report(report: RunReport, console: Console) -> None:
    """Print the change summary and host status."""
    console.print("\n[bold green]Done.[/bold green] Changes applied:")
    for result, line in zip(report.results, summarize(report.results)):
        console.print(Text(f"  - {line}", style=_OUTCOME_STYLES[result.outcome]))

    counts = count_outcomes(report.results)
    console.print(
        ", ".join(f"{count} {outcome.value}" for outcome, count in counts.items() if count)
    )

    console.print("\n---- failed units (if any) ----")
    console.print(report.status.failed_units, markup=False, highlight=False)

    table = Table(title="key unit states", title_justify="left")
    table.add_column("Unit")
    table.add_column("State")
    for unit, state in report.status.unit_states.items():
        table.add_row(unit, state)
    console.print()
    console.print(table)

    console.print("\n[bold]Recommended:[/bold] reboot now to validate a clean, fast boot.")
    console.print("After reboot, run:\n  systemd-analyze\n  systemd-analyze critical-chain")


@app.command()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    trace: Annotated[
        bool, typer.Option("--trace", help="Echo every command and its output")
    ] = False,
    purge_snapd: Annotated[
        bool,
        typer.Option("--purge-snapd", help="Purge snapd and remove its directories"),
    ] = False,
    edit_grub: Annotated[
        bool,
        typer.Option("--edit-grub", help="Rewrite the kernel command line in the GRUB defaults"),
    ] = False,
    grub_file: Annotated[
        str,
        typer.Option("--grub-file", help="GRUB defaults file to edit"),
    ] = "",
) -> None:
    """Apply boot-stability and boot-time fixes to this machine."""
    setup_logging(verbose=verbose, trace=trace)

    env_overrides = get_env_overrides()
    overrides = ConfigOverrides(
        purge_snapd=purge_snapd or env_overrides.purge_snapd,
        edit_grub=edit_grub or env_overrides.edit_grub,
        grub_file=grub_file or env_overrides.grub_file,
    )
    config = load_config(overrides, verbose=verbose, trace=trace)

    try:
        report = asyncio.run(Manager(config).run())
    except MacfixError as e:
        logger.error("Run aborted", error=str(e))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    print_report(report, Console())


if __name__ == "__main__":
    app()
