"""Unit tests for default key file path resolution."""

import os
import sys

import pytest

from locksmith.core.exceptions import PathResolutionError
from locksmith.core.paths import default_key_path, executable_path


def test_default_key_path_strips_extension():
    assert default_key_path("/opt/app/server.bin") == os.path.join("/opt/app", "server.key")


def test_default_key_path_strips_at_first_dot():
    assert default_key_path("/opt/app/server.tar.gz") == os.path.join("/opt/app", "server.key")


def test_default_key_path_without_extension():
    assert default_key_path("/usr/local/bin/server") == os.path.join("/usr/local/bin", "server.key")


def test_default_key_path_dotfile():
    # nothing before the first dot leaves just the extension
    assert default_key_path("/home/u/.tool") == os.path.join("/home/u", ".key")


def test_default_key_path_uses_executable(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "argv", [str(tmp_path / "run.py")])
    assert default_key_path() == str(tmp_path / "run.key")


def test_executable_path_from_argv(monkeypatch, tmp_path):
    script = tmp_path / "main.py"
    monkeypatch.setattr(sys, "argv", [str(script), "--flag"])
    assert executable_path() == str(script)


def test_executable_path_is_absolute(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["relative.py"])
    assert executable_path() == os.path.abspath("relative.py")


def test_executable_path_frozen(monkeypatch):
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "executable", "/opt/app/server.bin")
    assert executable_path() == os.path.abspath("/opt/app/server.bin")


@pytest.mark.parametrize("argv", [[], [""], ["-c"]])
def test_executable_path_not_found(monkeypatch, argv):
    monkeypatch.setattr(sys, "argv", argv)
    with pytest.raises(PathResolutionError, match="executable path not found"):
        executable_path()
