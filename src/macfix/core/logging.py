"""Logging setup for macfix: stdlib logging rendered through rich."""

import logging
from collections.abc import MutableMapping
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Keyword arguments that belong to the stdlib logging call itself.
_STDLIB_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that turns keyword arguments into context data.

    Example:
        logger = get_logger(__name__)
        logger.info("Masked unit", unit="systemd-rfkill.service")
        # Output: Masked unit [unit=systemd-rfkill.service]
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        """Move non-logging kwargs into a dimmed ``[k=v ...]`` suffix.

        Args:
            msg: Log message
            kwargs: Keyword arguments including context data

        Returns:
            Tuple of (formatted_message, cleaned_kwargs)
        """
        context = {k: v for k, v in kwargs.items() if k not in _STDLIB_KWARGS}
        clean_kwargs = {k: v for k, v in kwargs.items() if k in _STDLIB_KWARGS}

        if context:
            context_str = " ".join(f"{k}={escape(str(v))}" for k, v in sorted(context.items()))
            msg = f"{msg} [dim][[/dim]{context_str}[dim]][/dim]"

        return msg, clean_kwargs


def setup_logging(verbose: bool = False, trace: bool = False) -> None:
    """Configure the root logger with a rich handler on stderr.

    Args:
        verbose: Enable debug logging
        trace: Enable debug logging and show source locations
    """
    log_level = logging.DEBUG if (verbose or trace) else logging.INFO

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=trace,
        markup=True,
        rich_tracebacks=True,
        tracebacks_show_locals=trace,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def get_logger(name: str = "") -> StructuredLoggerAdapter:
    """Get a logger that accepts keyword context.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Logger adapter with structured context support
    """
    return StructuredLoggerAdapter(logging.getLogger(name or "macfix"), {})
