from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, Sequence, TextIO

from javaswitch.core.errors import InvalidSelection, NoSelectionAndNoDefault
from javaswitch.core.types import Installation

logger = logging.getLogger(__name__)


def find_default(
    installations: Sequence[Installation],
    default_version: Optional[str],
) -> Optional[Installation]:
    if not default_version:
        return None
    for inst in installations:
        if inst.name == default_version:
            return inst
    return None


def resolve_selection(
    raw: str,
    installations: Sequence[Installation],
    default_version: Optional[str] = None,
) -> Installation:
    """Turn one line of user input into the chosen installation.

    Empty input picks the configured default if it was discovered; anything
    else has to be a 1-based index into ``installations``.
    """

    text = raw.strip()

    if not text:
        default = find_default(installations, default_version)
        if default is None:
            raise NoSelectionAndNoDefault("No version selected and no usable default version configured")
        logger.debug("Empty input, using default %s", default.name)
        return default

    # int() alone would accept "+1", " 1" or "1_0".
    if not (text.isascii() and text.isdigit()):
        raise InvalidSelection(f"Invalid selection: {text!r}")

    index = int(text)
    if not 1 <= index <= len(installations):
        raise InvalidSelection(f"Invalid selection: {index} (expected 1-{len(installations)})")

    return installations[index - 1]


def prompt_selection(
    installations: Sequence[Installation],
    default_version: Optional[str] = None,
    *,
    read_line: Callable[[], str] | None = None,
    out: TextIO | None = None,
) -> Installation:
    stream = out or sys.stdout
    default = find_default(installations, default_version)

    prompt = f"Select a version [1-{len(installations)}]"
    if default is not None:
        prompt += f" (Enter for {default.name})"
    print(prompt + ": ", end="", file=stream, flush=True)

    if read_line is None:
        read_line = input
    try:
        raw = read_line()
    except EOFError:
        raw = ""

    return resolve_selection(raw, installations, default_version)
