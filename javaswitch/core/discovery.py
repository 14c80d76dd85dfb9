from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from javaswitch.core.errors import BaseDirectoryNotFound, NoInstallationsFound
from javaswitch.core.types import Installation

logger = logging.getLogger(__name__)


def discover_installations(base_dir: str | Path) -> List[Installation]:
    """List the Java installations under a base directory.

    Only immediate subdirectories count; each one is a candidate whose name
    is the version label. Ordering is plain string order, so "8" sorts
    after "21".

    Args:
        base_dir: Directory that holds one folder per installed JDK.

    Returns:
        List[Installation]: Candidates sorted by name.

    Raises:
        BaseDirectoryNotFound: If the directory is missing or unreadable.
        NoInstallationsFound: If it has no subdirectories.
    """

    base = Path(base_dir)

    if not base.exists():
        raise BaseDirectoryNotFound(f"Java base directory not found: {base}")

    if not base.is_dir():
        raise BaseDirectoryNotFound(f"Java base path is not a directory: {base}")

    try:
        entries = [p for p in base.iterdir() if p.is_dir()]
    except OSError as e:
        raise BaseDirectoryNotFound(f"Cannot read Java base directory: {base}. Error: {e}") from e

    if not entries:
        raise NoInstallationsFound(f"No Java installations found in: {base}")

    installations = sorted(
        (Installation(name=p.name, path=p) for p in entries),
        key=lambda inst: inst.name,
    )
    logger.debug("Discovered %d installations under %s", len(installations), base)
    return installations
