from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

# Ensure repo root is on sys.path when executing as a script:
#   python app/entrypoint.py ...
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from javaswitch.config import default_config_path
from javaswitch.logging_config import LoggingConfig, configure_logging
from javaswitch.core.errors import SwitcherError
from javaswitch.core.orchestrator import SwitchOrchestrator
from javaswitch.core.types import HOME_VARIABLE, PATH_VARIABLE, EnvScope, SwitchState
from javaswitch.services.environment import (
    EnvironmentStore,
    InMemoryEnvironmentStore,
    SystemEnvironmentStore,
)


def report(state: SwitchState, *, dry_run: bool = False, out: TextIO | None = None) -> int:
    stream = out or sys.stdout

    for warning in state.warnings:
        print(f"Warning: {warning}", file=stream)

    if state.failed:
        for error in state.errors:
            print(f"Error: {error}", file=stream)
        if state.inconsistent:
            print(
                f"Error: {HOME_VARIABLE} was changed to {state.selection.path} but {PATH_VARIABLE} "
                "was not updated; the environment is now inconsistent.",
                file=stream,
            )
        return 1

    print(f"{HOME_VARIABLE} set to {state.selection.path}", file=stream)
    print(f"{PATH_VARIABLE} now starts with {state.selection.bin_dir}", file=stream)
    if dry_run:
        print("Dry run: nothing was written.", file=stream)
    else:
        print("Open a new terminal for the change to take effect.", file=stream)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="java-switch")

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.json (default: ../config/config.json next to this program; "
        "required when running the installed java-switch command)",
    )
    parser.add_argument(
        "--scope",
        choices=[EnvScope.MACHINE.value, EnvScope.USER.value],
        default=EnvScope.MACHINE.value,
        help="Which persistent environment to update (machine needs administrator rights)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without writing anything",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    args = parser.parse_args(argv)

    configure_logging(LoggingConfig(level=args.log_level))

    config_path = args.config or default_config_path(Path(__file__).resolve().parent)
    scope = EnvScope(args.scope)

    store: EnvironmentStore = SystemEnvironmentStore()
    if args.dry_run:
        try:
            store = InMemoryEnvironmentStore.snapshot_of(store, scope, [HOME_VARIABLE, PATH_VARIABLE])
        except SwitcherError as e:
            print(f"Error: {e}")
            return 1

    orchestrator = SwitchOrchestrator(config_path, store, scope=scope, write_log=not args.dry_run)
    state = orchestrator.run()

    return report(state, dry_run=args.dry_run)


if __name__ == "__main__":
    raise SystemExit(main())
