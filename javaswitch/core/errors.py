from __future__ import annotations


class SwitcherError(RuntimeError):
    """Base class for every failure the switcher reports to the user."""

    fatal = True


class ConfigNotFound(SwitcherError):
    pass


class ConfigParseError(SwitcherError):
    pass


class MissingRequiredField(SwitcherError):
    pass


class BaseDirectoryNotFound(SwitcherError):
    pass


class NoInstallationsFound(SwitcherError):
    pass


class InvalidSelection(SwitcherError):
    pass


class NoSelectionAndNoDefault(SwitcherError):
    pass


class EnvironmentWriteError(SwitcherError):
    pass


class EnvironmentWritePermissionDenied(EnvironmentWriteError):
    pass


class LogWriteFailed(SwitcherError):
    # Reported as a warning; the switch itself has already happened.
    fatal = False
