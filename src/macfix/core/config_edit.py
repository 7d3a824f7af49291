"""In-place editing of ``KEY=value`` lines in shell-style config files.

Used for ``/etc/default/grub``. The file is read in full, every uncommented
assignment of the key is rewritten through the ``ConfigLine`` transform, and
the result is written back only when something actually changed. A copy of
the original is saved next to it as ``<path>.bak.<timestamp>`` right before
the write.
"""

import re
import shutil
from datetime import datetime
from pathlib import Path

from macfix.core.logging import get_logger
from macfix.core.models import ConfigEditResult, ConfigLine, Outcome

logger = get_logger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

_QUOTES = ("'", '"')
_UNQUOTED_VALUE = re.compile(r"\S*")
# Shell only breaks lines on "\n"; str.splitlines would also split on \x0c etc.
_LINE_BREAK = re.compile(r"(?<=\n)")


def backup_path_for(path: Path, now: datetime) -> Path:
    """Return the sibling path used to back up ``path`` at time ``now``.

    An existing backup is never reused: if the timestamped name is taken, a
    numeric suffix (``.1``, ``.2``, ...) is added until the name is free.
    """
    backup = path.with_name(f"{path.name}.bak.{now.strftime(BACKUP_TIMESTAMP_FORMAT)}")
    candidate = backup
    counter = 0
    while candidate.exists():
        counter += 1
        candidate = backup.with_name(f"{backup.name}.{counter}")
    return candidate


def _split_value(raw: str) -> tuple[str, str, str]:
    """Split a raw assignment value into (quote, inner value, trailing text)."""
    if raw[:1] in _QUOTES:
        quote = raw[0]
        end = raw.find(quote, 1)
        if end != -1:
            return quote, raw[1:end], raw[end + 1 :]
    # An unquoted shell value ends at the first whitespace.
    value = _UNQUOTED_VALUE.match(raw).group(0)
    return "", value, raw[len(value) :]


def _join_value(quote: str, value: str, rest: str) -> str:
    if not quote and any(ch.isspace() for ch in value):
        quote = '"'
    return f"{quote}{value}{quote}{rest}"


def edit_config_line(
    path: Path, config_line: ConfigLine, now: datetime | None = None
) -> ConfigEditResult:
    """Rewrite the value of ``config_line.key`` in ``path``.

    Args:
        path: File to edit
        config_line: Key to look up and the transform to apply to its value
        now: Timestamp for the backup name, defaults to the current time

    Returns:
        Result describing what happened; a missing file or key is reported as
        skipped rather than raised

    Raises:
        OSError: If the file exists but cannot be read, backed up or written
    """
    key = config_line.key

    if not path.is_file():
        logger.warning("Config file not found, skipping edit", path=str(path), key=key)
        return ConfigEditResult(
            path=path, key=key, outcome=Outcome.SKIPPED, detail="file not found"
        )

    pattern = re.compile(rf"^(?P<prefix>\s*(?:export\s+)?){re.escape(key)}=(?P<value>.*)$")

    original = path.read_bytes()
    lines = [line for line in _LINE_BREAK.split(original.decode("utf-8")) if line]

    found = False
    old_value: str | None = None
    new_value: str | None = None
    edited: list[str] = []

    for line in lines:
        body = line.rstrip("\r\n")
        eol = line[len(body) :]
        match = pattern.match(body)
        if match is None:
            edited.append(line)
            continue

        found = True
        quote, value, rest = _split_value(match.group("value"))
        transformed = config_line.transform(value)
        old_value, new_value = value, transformed
        edited.append(f"{match.group('prefix')}{key}={_join_value(quote, transformed, rest)}{eol}")

    if not found:
        logger.warning("Key not found, leaving file untouched", path=str(path), key=key)
        return ConfigEditResult(
            path=path, key=key, outcome=Outcome.SKIPPED, detail="key not found"
        )

    updated = "".join(edited).encode("utf-8")
    if updated == original:
        logger.info("Config value already up to date", path=str(path), key=key)
        return ConfigEditResult(
            path=path,
            key=key,
            outcome=Outcome.UNCHANGED,
            old_value=old_value,
            new_value=new_value,
        )

    backup = backup_path_for(path, now or datetime.now())
    shutil.copy2(path, backup)
    logger.info("Backed up config file", path=str(path), backup=str(backup))

    path.write_bytes(updated)
    logger.info("Updated config value", path=str(path), key=key, value=new_value)

    return ConfigEditResult(
        path=path,
        key=key,
        outcome=Outcome.APPLIED,
        backup=backup,
        old_value=old_value,
        new_value=new_value,
    )
