from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional


def _jdk_bin_pattern(base_root: str, sep: str) -> re.Pattern[str]:
    root = base_root.rstrip("\\/")
    not_sep = f"[^{re.escape(sep)}]"
    return re.compile(
        rf"{re.escape(root)}[\\/]{not_sep}+[\\/]bin[\\/]?",
        re.IGNORECASE,
    )


def strip_jdk_segments(current: Optional[str], base_root: str | Path, sep: str = ";") -> List[str]:
    """Drop every ``<base_root>\\<anything>\\bin`` entry from a search list.

    Other segments, empty ones included, are kept in order.
    """
    if not current:
        return []
    pattern = _jdk_bin_pattern(str(base_root), sep)
    return [seg for seg in current.split(sep) if not pattern.fullmatch(seg.strip())]


def rewrite_path_list(
    current: Optional[str],
    base_root: str | Path,
    bin_dir: str | Path,
    sep: str = ";",
) -> str:
    """Point a search list at a new JDK.

    Removes the bin directories of every JDK under ``base_root`` and puts
    ``bin_dir`` first. Running it again with the same ``bin_dir`` gives the
    same value, since ``bin_dir`` itself lives under ``base_root``.
    """
    remaining = sep.join(strip_jdk_segments(current, base_root, sep))
    return f"{bin_dir}{sep}{remaining}"
