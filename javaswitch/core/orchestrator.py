# javaswitch/core/orchestrator.py

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO

from javaswitch.config import SwitcherConfig, load_config
from javaswitch.core.discovery import discover_installations
from javaswitch.core.errors import LogWriteFailed, SwitcherError
from javaswitch.core.listing import print_listing
from javaswitch.core.path_list import rewrite_path_list
from javaswitch.core.selector import prompt_selection
from javaswitch.core.types import (
    HOME_VARIABLE,
    PATH_VARIABLE,
    EnvScope,
    SwitchPhase,
    SwitchState,
)
from javaswitch.services.action_log import append_switch_record
from javaswitch.services.environment import EnvironmentStore

logger = logging.getLogger(__name__)

_WRITTEN_PHASES = frozenset(
    {
        SwitchPhase.HOME_SET,
        SwitchPhase.PATH_UPDATED,
        SwitchPhase.LOGGED,
        SwitchPhase.DONE,
    }
)


class SwitchOrchestrator:
    """
    Sequential controller for one switch.

    Phase-driven state machine; every phase only moves forward and the first
    failure stops the run where it is. Nothing already written is undone.
    """

    def __init__(
        self,
        config_path: str | Path,
        store: EnvironmentStore,
        *,
        scope: EnvScope = EnvScope.MACHINE,
        read_line: Optional[Callable[[], str]] = None,
        out: Optional[TextIO] = None,
        clock: Optional[Callable[[], datetime]] = None,
        path_sep: str = os.pathsep,
        write_log: bool = True,
    ):
        self.config_path = Path(config_path)
        self.store = store
        self.scope = scope
        self.read_line = read_line
        self.out = out or sys.stdout
        self.clock = clock
        self.path_sep = path_sep
        self.write_log = write_log

    def run(self) -> SwitchState:

        state = SwitchState(config_path=str(self.config_path), scope=self.scope)

        try:
            # -----------------------------
            # Phase 1: Configuration
            # -----------------------------
            config = load_config(self.config_path)
            state.phase = SwitchPhase.LOADED

            # -----------------------------
            # Phase 2: Discovery + listing
            # -----------------------------
            state.installations = discover_installations(config.java_base)
            state.previous_home = self.store.get_variable(self.scope, HOME_VARIABLE)
            print_listing(
                state.installations,
                config.default_version,
                state.previous_home,
                out=self.out,
            )
            state.phase = SwitchPhase.LISTED

            # -----------------------------
            # Phase 3: Selection
            # -----------------------------
            state.selection = prompt_selection(
                state.installations,
                config.default_version,
                read_line=self.read_line,
                out=self.out,
            )
            state.phase = SwitchPhase.SELECTED
            logger.info("Selected %s", state.selection.path)

            # -----------------------------
            # Phase 4: Home variable
            # -----------------------------
            self.store.set_variable(self.scope, HOME_VARIABLE, str(state.selection.path))
            state.phase = SwitchPhase.HOME_SET

            # -----------------------------
            # Phase 5: Search path
            # -----------------------------
            self._update_path(state, config)
            state.phase = SwitchPhase.PATH_UPDATED

            # -----------------------------
            # Phase 6: Action log
            # -----------------------------
            self._log_switch(state, config)
            state.phase = SwitchPhase.LOGGED

            state.phase = SwitchPhase.DONE

        except SwitcherError as e:
            state.failed = True
            state.errors.append(str(e))
            logger.debug("Run stopped at phase %s: %s", state.phase.value, e)

        finally:
            # JAVA_HOME may already be written even if Path failed.
            if state.phase in _WRITTEN_PHASES:
                self.store.notify_change()

        return state

    # -------------------------------------
    # Phase helpers
    # -------------------------------------

    def _update_path(self, state: SwitchState, config: SwitcherConfig) -> None:
        state.previous_path = self.store.get_variable(self.scope, PATH_VARIABLE)
        state.new_path = rewrite_path_list(
            state.previous_path,
            config.java_base,
            state.selection.bin_dir,
            sep=self.path_sep,
        )
        self.store.set_variable(self.scope, PATH_VARIABLE, state.new_path)

    def _log_switch(self, state: SwitchState, config: SwitcherConfig) -> None:
        if config.log_path is None or not self.write_log:
            return

        when = self.clock() if self.clock else None
        try:
            log_file = append_switch_record(config.log_path, state.selection.path, when)
        except LogWriteFailed as e:
            state.warnings.append(str(e))
            logger.debug("Action log not written: %s", e)
            return
        state.log_file = str(log_file)
