"""Unit tests for the native environment table."""

import os
import sys
import uuid
import pytest

from hostbridge.platform import proc
from hostbridge.platform.envtable import NativeEnvironment


@pytest.fixture
def env():
    return NativeEnvironment()


@pytest.fixture
def name():
    var = "HOSTBRIDGE_TEST_" + uuid.uuid4().hex[:8].upper()
    yield var
    os.environ.pop(var, None)
    os.unsetenv(var)


class TestNativeEnvironment:
    """Tests for reads and writes against the live table."""

    def test_missing_variable(self, env, name):
        assert env.get(name) is None

    def test_set_then_get(self, env, name):
        env.set(name, "1")
        assert env.get(name) == "1"
        assert os.environ[name] == "1"

    def test_overwrite(self, env, name):
        env.set(name, "first")
        env.set(name, "second")
        assert env.get(name) == "second"

    def test_unset(self, env, name):
        env.set(name, "1")
        env.unset(name)
        assert env.get(name) is None
        assert name not in os.environ

    def test_unset_absent_is_fine(self, env, name):
        env.unset(name)
        assert env.get(name) is None

    def test_reads_changes_made_outside_os_environ(self, env, name):
        # os.putenv changes the native table without updating os.environ
        os.putenv(name, "native")
        assert name not in os.environ
        assert env.get(name) == "native"

    def test_unset_removes_native_only_variable(self, env, name):
        os.putenv(name, "native")
        env.unset(name)
        assert env.get(name) is None

    def test_non_ascii_value(self, env, name):
        env.set(name, "Skizzenbuch-ü")
        assert env.get(name) == "Skizzenbuch-ü"

    def test_nul_in_value_rejected(self, env, name):
        with pytest.raises(ValueError):
            env.set(name, "a\0b")

    def test_child_process_inherits(self, env, name):
        env.set(name, "inherited")
        result = proc.run([sys.executable, "-c", f"import os; print(os.environ.get({name!r}))"])
        assert result.stdout.strip() == "inherited"
