from __future__ import annotations

from datetime import datetime
from pathlib import Path

from javaswitch.core.errors import LogWriteFailed
from javaswitch.core.types import HOME_VARIABLE, now

LOG_FILE_NAME = "java-switcher.log"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_switch_record(home: str | Path, when: datetime) -> str:
    return f"{when.strftime(TIMESTAMP_FORMAT)} | {HOME_VARIABLE} set to {home}"


def append_switch_record(log_dir: str | Path, home: str | Path, when: datetime | None = None) -> Path:
    """Append one line recording the switch to ``<log_dir>/java-switcher.log``.

    Raises:
        LogWriteFailed: If the directory or the file can't be written.
    """
    directory = Path(log_dir).expanduser()
    log_file = directory / LOG_FILE_NAME
    line = format_switch_record(home, when or now())

    try:
        directory.mkdir(parents=True, exist_ok=True)
        with log_file.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
    except OSError as e:
        raise LogWriteFailed(f"Could not write log file {log_file}: {e}") from e

    return log_file
