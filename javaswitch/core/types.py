from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional


# =====================================================
# ENUMS
# =====================================================

class EnvScope(str, Enum):
    MACHINE = "machine"
    USER = "user"
    PROCESS = "process"


class SwitchPhase(str, Enum):
    INITIALIZED = "initialized"
    LOADED = "loaded"
    LISTED = "listed"
    SELECTED = "selected"
    HOME_SET = "home_set"
    PATH_UPDATED = "path_updated"
    LOGGED = "logged"
    DONE = "done"


HOME_VARIABLE = "JAVA_HOME"
PATH_VARIABLE = "Path"


# =====================================================
# CORE DATA STRUCTURES
# =====================================================

@dataclass(frozen=True, slots=True)
class Installation:
    name: str
    path: Path

    @property
    def bin_dir(self) -> Path:
        return self.path / "bin"


# =====================================================
# RUN STATE
# =====================================================

@dataclass(slots=True)
class SwitchState:
    config_path: str
    scope: EnvScope = EnvScope.MACHINE

    phase: SwitchPhase = SwitchPhase.INITIALIZED
    installations: List[Installation] = field(default_factory=list)
    selection: Optional[Installation] = None

    previous_home: Optional[str] = None
    previous_path: Optional[str] = None
    new_path: Optional[str] = None
    log_file: Optional[str] = None

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    failed: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.failed and self.phase == SwitchPhase.DONE

    @property
    def inconsistent(self) -> bool:
        """Home variable was rewritten but the Path update never landed."""
        return self.failed and self.phase == SwitchPhase.HOME_SET


# =====================================================
# UTIL
# =====================================================

def now() -> datetime:
    # Local wall-clock time; the log file is read by people at the machine.
    return datetime.now()
