import os
import sys
from datetime import datetime

import pytest

from javaswitch.core.errors import EnvironmentWriteError, EnvironmentWritePermissionDenied, LogWriteFailed
from javaswitch.core.types import EnvScope
from javaswitch.services.action_log import LOG_FILE_NAME, append_switch_record, format_switch_record
from javaswitch.services.environment import InMemoryEnvironmentStore, SystemEnvironmentStore

WHEN = datetime(2024, 3, 5, 9, 7, 2)


def test_record_format():
    assert format_switch_record("/opt/java/21", WHEN) == "2024-03-05 09:07:02 | JAVA_HOME set to /opt/java/21"


def test_append_creates_directory_and_appends(tmp_path):
    log_dir = tmp_path / "logs" / "nested"
    path = append_switch_record(log_dir, "/opt/java/17", WHEN)
    append_switch_record(log_dir, "/opt/java/21", WHEN)
    assert path == log_dir / LOG_FILE_NAME
    assert path.read_text(encoding="utf-8").splitlines() == [
        "2024-03-05 09:07:02 | JAVA_HOME set to /opt/java/17",
        "2024-03-05 09:07:02 | JAVA_HOME set to /opt/java/21",
    ]


def test_append_failure_is_log_write_failed(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(LogWriteFailed) as info:
        append_switch_record(blocker, "/opt/java/21", WHEN)
    assert info.value.fatal is False


def test_memory_store_is_case_insensitive_and_scoped():
    store = InMemoryEnvironmentStore({(EnvScope.MACHINE, "Path"): "C:\\Windows"})
    assert store.get_variable(EnvScope.MACHINE, "PATH") == "C:\\Windows"
    assert store.get_variable(EnvScope.USER, "Path") is None
    store.set_variable(EnvScope.MACHINE, "JAVA_HOME", "C:\\Java\\21")
    assert store.get_variable(EnvScope.MACHINE, "java_home") == "C:\\Java\\21"


def test_memory_store_failing_write():
    store = InMemoryEnvironmentStore(fail_on=[(EnvScope.MACHINE, "Path")])
    with pytest.raises(EnvironmentWritePermissionDenied):
        store.set_variable(EnvScope.MACHINE, "PATH", "x")


def test_snapshot_copies_only_named_values():
    source = InMemoryEnvironmentStore({(EnvScope.USER, "JAVA_HOME"): "a", (EnvScope.USER, "OTHER"): "b"})
    snap = InMemoryEnvironmentStore.snapshot_of(source, EnvScope.USER, ["JAVA_HOME", "Path"])
    assert snap.get_variable(EnvScope.USER, "JAVA_HOME") == "a"
    assert snap.get_variable(EnvScope.USER, "OTHER") is None
    snap.set_variable(EnvScope.USER, "JAVA_HOME", "c")
    assert source.get_variable(EnvScope.USER, "JAVA_HOME") == "a"


def test_system_store_process_scope(monkeypatch):
    monkeypatch.delenv("JAVASWITCH_TEST_VAR", raising=False)
    store = SystemEnvironmentStore()
    assert store.get_variable(EnvScope.PROCESS, "JAVASWITCH_TEST_VAR") is None
    store.set_variable(EnvScope.PROCESS, "JAVASWITCH_TEST_VAR", "1")
    assert os.environ["JAVASWITCH_TEST_VAR"] == "1"
    monkeypatch.delenv("JAVASWITCH_TEST_VAR")


@pytest.mark.skipif(sys.platform == "win32", reason="registry is available on Windows")
def test_system_store_persistent_scope_needs_windows():
    with pytest.raises(EnvironmentWriteError):
        SystemEnvironmentStore().set_variable(EnvScope.MACHINE, "JAVA_HOME", "x")


class _FakeKey:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class _FakeWinreg:
    HKEY_LOCAL_MACHINE = "HKLM"
    HKEY_CURRENT_USER = "HKCU"
    KEY_READ = 1
    KEY_SET_VALUE = 2
    REG_SZ = 1
    REG_EXPAND_SZ = 2

    def __init__(self, values=None, open_error=None, set_error=None):
        self.values = dict(values or {})
        self.open_error = open_error
        self.set_error = set_error
        self.opened = []
        self.written = []

    def OpenKey(self, hive, sub_key, reserved, access):
        if self.open_error is not None:
            raise self.open_error
        self.opened.append((hive, sub_key, access))
        return _FakeKey()

    def QueryValueEx(self, key, name):
        if name not in self.values:
            raise FileNotFoundError(2, "not found")
        return self.values[name]

    def SetValueEx(self, key, name, reserved, value_type, value):
        if self.set_error is not None:
            raise self.set_error
        self.written.append((name, value_type, value))
        self.values[name] = (value, value_type)


@pytest.fixture
def fake_winreg(monkeypatch):
    def install(**kwargs):
        fake = _FakeWinreg(**kwargs)
        monkeypatch.setitem(sys.modules, "winreg", fake)
        return fake

    return install


def test_registry_read(fake_winreg):
    fake = fake_winreg(values={"JAVA_HOME": ("C:\\Java\\17", _FakeWinreg.REG_SZ)})
    store = SystemEnvironmentStore()
    assert store.get_variable(EnvScope.MACHINE, "JAVA_HOME") == "C:\\Java\\17"
    assert store.get_variable(EnvScope.MACHINE, "Missing") is None
    assert fake.opened[0][0] == "HKLM"


def test_registry_key_open_failure_is_a_switcher_error(fake_winreg):
    fake_winreg(open_error=FileNotFoundError(2, "The system cannot find the file specified"))
    with pytest.raises(EnvironmentWriteError):
        SystemEnvironmentStore().get_variable(EnvScope.USER, "JAVA_HOME")


def test_registry_write_keeps_expandable_type(fake_winreg):
    fake = fake_winreg(values={"Path": ("%SystemRoot%\\system32", _FakeWinreg.REG_EXPAND_SZ)})
    SystemEnvironmentStore().set_variable(EnvScope.MACHINE, "Path", "C:\\Java\\21\\bin;%SystemRoot%\\system32")
    assert fake.written == [("Path", _FakeWinreg.REG_EXPAND_SZ, "C:\\Java\\21\\bin;%SystemRoot%\\system32")]


def test_registry_write_new_value_type(fake_winreg):
    fake = fake_winreg()
    store = SystemEnvironmentStore()
    store.set_variable(EnvScope.USER, "JAVA_HOME", "C:\\Java\\21")
    store.set_variable(EnvScope.USER, "Path", "%USERPROFILE%\\bin")
    assert [w[1] for w in fake.written] == [_FakeWinreg.REG_SZ, _FakeWinreg.REG_EXPAND_SZ]
    assert fake.opened[0] == ("HKCU", "Environment", _FakeWinreg.KEY_READ | _FakeWinreg.KEY_SET_VALUE)


def test_registry_access_denied(fake_winreg):
    fake_winreg(set_error=PermissionError(5, "Access is denied"))
    with pytest.raises(EnvironmentWritePermissionDenied):
        SystemEnvironmentStore().set_variable(EnvScope.MACHINE, "JAVA_HOME", "C:\\Java\\21")


def test_registry_other_write_error(fake_winreg):
    fake_winreg(set_error=OSError(1450, "Insufficient system resources"))
    with pytest.raises(EnvironmentWriteError) as info:
        SystemEnvironmentStore().set_variable(EnvScope.MACHINE, "JAVA_HOME", "C:\\Java\\21")
    assert not isinstance(info.value, EnvironmentWritePermissionDenied)
