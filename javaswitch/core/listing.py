from __future__ import annotations

import os
import sys
from typing import List, Optional, Sequence, TextIO

from javaswitch.core.types import Installation


def _same_path(a: str, b: str) -> bool:
    return os.path.normcase(os.path.normpath(a)) == os.path.normcase(os.path.normpath(b))


def format_listing(
    installations: Sequence[Installation],
    default_version: Optional[str] = None,
    current_home: Optional[str] = None,
) -> List[str]:
    """Render the numbered (1-based) menu of installations."""
    lines: List[str] = []
    for index, inst in enumerate(installations, start=1):
        line = f"  {index}. {inst.name}"
        if default_version is not None and inst.name == default_version:
            line += " (default)"
        if current_home and _same_path(str(inst.path), current_home):
            line += " (current)"
        lines.append(line)
    return lines


def print_listing(
    installations: Sequence[Installation],
    default_version: Optional[str] = None,
    current_home: Optional[str] = None,
    *,
    out: TextIO | None = None,
) -> None:
    stream = out or sys.stdout
    print("Installed Java versions:", file=stream)
    for line in format_listing(installations, default_version, current_home):
        print(line, file=stream)
