from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Set, Tuple

from javaswitch.core.errors import EnvironmentWriteError, EnvironmentWritePermissionDenied
from javaswitch.core.types import EnvScope

logger = logging.getLogger(__name__)

_MACHINE_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"
_USER_KEY = "Environment"

_HWND_BROADCAST = 0xFFFF
_WM_SETTINGCHANGE = 0x001A
_SMTO_ABORTIFHUNG = 0x0002


class EnvironmentStore(ABC):
    """Read/write access to environment variables at a given scope.

    Keeps the switching logic away from the real system so it can be
    exercised without touching the registry.
    """

    @abstractmethod
    def get_variable(self, scope: EnvScope, name: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_variable(self, scope: EnvScope, name: str, value: str) -> None:
        ...

    def notify_change(self) -> None:
        """Tell running programs the environment changed (no-op by default)."""


class InMemoryEnvironmentStore(EnvironmentStore):
    """Dict-backed store used by tests and dry runs.

    Names are case-insensitive, as on Windows. ``fail_on`` lists
    ``(scope, name)`` pairs whose writes raise a permission error.
    """

    def __init__(
        self,
        initial: Optional[Dict[Tuple[EnvScope, str], str]] = None,
        *,
        fail_on: Iterable[Tuple[EnvScope, str]] = (),
    ) -> None:
        self._values: Dict[Tuple[EnvScope, str], str] = {}
        for (scope, name), value in (initial or {}).items():
            self._values[(scope, name.upper())] = value
        self._fail_on: Set[Tuple[EnvScope, str]] = {(s, n.upper()) for s, n in fail_on}
        self.notifications = 0

    def get_variable(self, scope: EnvScope, name: str) -> Optional[str]:
        return self._values.get((scope, name.upper()))

    def set_variable(self, scope: EnvScope, name: str, value: str) -> None:
        key = (scope, name.upper())
        if key in self._fail_on:
            raise EnvironmentWritePermissionDenied(
                f"Access denied writing {scope.value} variable {name}"
            )
        self._values[key] = value

    def notify_change(self) -> None:
        self.notifications += 1

    @classmethod
    def snapshot_of(cls, source: EnvironmentStore, scope: EnvScope, names: Iterable[str]) -> "InMemoryEnvironmentStore":
        initial: Dict[Tuple[EnvScope, str], str] = {}
        for name in names:
            value = source.get_variable(scope, name)
            if value is not None:
                initial[(scope, name)] = value
        return cls(initial)


class SystemEnvironmentStore(EnvironmentStore):
    """The real environment.

    Machine and user scopes live in the Windows registry and persist; the
    process scope is ``os.environ``. Writing machine scope needs an elevated
    session.
    """

    def _open(self, scope: EnvScope, write: bool):
        try:
            import winreg
        except ImportError as e:
            raise EnvironmentWriteError(
                f"{scope.value} environment variables are only supported on Windows"
            ) from e

        if scope == EnvScope.MACHINE:
            hive, sub_key = winreg.HKEY_LOCAL_MACHINE, _MACHINE_KEY
        else:
            hive, sub_key = winreg.HKEY_CURRENT_USER, _USER_KEY
        access = winreg.KEY_READ | (winreg.KEY_SET_VALUE if write else 0)
        return winreg, winreg.OpenKey(hive, sub_key, 0, access)

    def get_variable(self, scope: EnvScope, name: str) -> Optional[str]:
        if scope == EnvScope.PROCESS:
            return os.environ.get(name)

        try:
            winreg, key = self._open(scope, write=False)
            with key:
                try:
                    value, _ = winreg.QueryValueEx(key, name)
                except FileNotFoundError:
                    return None
        except OSError as e:
            raise EnvironmentWriteError(f"Failed to read {scope.value} variable {name}. Error: {e}") from e
        return value

    def set_variable(self, scope: EnvScope, name: str, value: str) -> None:
        if scope == EnvScope.PROCESS:
            os.environ[name] = value
            return

        try:
            winreg, key = self._open(scope, write=True)
            with key:
                try:
                    _, value_type = winreg.QueryValueEx(key, name)
                except FileNotFoundError:
                    value_type = winreg.REG_EXPAND_SZ if "%" in value else winreg.REG_SZ
                winreg.SetValueEx(key, name, 0, value_type, value)
        except PermissionError as e:
            raise EnvironmentWritePermissionDenied(
                f"Access denied writing {scope.value} variable {name}; run as administrator"
            ) from e
        except OSError as e:
            raise EnvironmentWriteError(f"Failed to write {scope.value} variable {name}. Error: {e}") from e

        logger.info("Wrote %s variable %s", scope.value, name)

    def notify_change(self) -> None:
        if sys.platform != "win32":
            return

        import ctypes
        from ctypes import wintypes

        result = wintypes.DWORD()
        sent = ctypes.windll.user32.SendMessageTimeoutW(
            _HWND_BROADCAST,
            _WM_SETTINGCHANGE,
            0,
            "Environment",
            _SMTO_ABORTIFHUNG,
            5000,
            ctypes.byref(result),
        )
        if not sent:
            logger.warning("Environment change broadcast timed out")
