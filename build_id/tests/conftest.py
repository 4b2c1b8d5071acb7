"""
Shared pytest fixtures for build_id tests.

Provides a FakeProbeRunner with canned tool output, a baseline
ToolchainConfig, and helpers that write small stand-in executables
for exercising the real subprocess paths.

Tests that execute stand-in scripts are skipped on Windows.
"""
import os
import platform
import stat
import textwrap
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from build_id.config import Settings, ToolchainConfig


class FakeProbeRunner:
    """ProbeRunner with canned output; records every call in order."""

    def __init__(self, outputs: Optional[Dict[str, str]] = None):
        self.outputs = dict(outputs or {})
        self.calls: List[Tuple[str, Tuple[str, ...]]] = []

    def run(self, command: str, args: Sequence[str]) -> str:
        self.calls.append((command, tuple(args)))
        if command in self.outputs:
            return self.outputs[command]
        if not command:
            return f"{args[0]}: command not found\n"
        return f"{command}: command not found\n"


def echo_runner_output(command: str, args: Sequence[str]) -> str:
    return f"<{command} {' '.join(args)}>\n"


class EchoProbeRunner(FakeProbeRunner):
    """Echoes the invocation back, so the preimage shows every call."""

    def run(self, command: str, args: Sequence[str]) -> str:
        super().run(command, args)
        return echo_runner_output(command, args)


GCC_BANNER = textwrap.dedent("""\
    Using built-in specs.
    COLLECT_GCC=gcc
    Target: x86_64-linux-gnu
    gcc version 12.2.0 (Debian 12.2.0-14)
""")

CLANG_BANNER = textwrap.dedent("""\
    Debian clang version 14.0.6
    Target: x86_64-pc-linux-gnu
    Thread model: posix
""")

AR_VERSION = "GNU ar (GNU Binutils for Debian) 2.40\n"


@pytest.fixture
def toolchain_config() -> ToolchainConfig:
    return ToolchainConfig(
        CC="gcc",
        CXX="g++",
        C_STANDARD="c11",
        CXX_STANDARD="c++17",
        CPPFLAGS="-DNDEBUG",
        CFLAGS="-O2",
        CXXFLAGS="-O2",
        LDFLAGS="-Wl,--as-needed",
        AR="ar",
        NM="nm",
        RANLIB="ranlib",
        STRIP="strip",
        LTO="thin",
        AR_VARS={"AR_FLAGS": "rcs"},
    )


@pytest.fixture
def canned_outputs() -> Dict[str, str]:
    return {
        "gcc": GCC_BANNER,
        "g++": GCC_BANNER,
        "clang": CLANG_BANNER,
        "ar": AR_VERSION,
    }


@pytest.fixture
def fake_runner(canned_outputs) -> FakeProbeRunner:
    return FakeProbeRunner(canned_outputs)


@pytest.fixture
def runner_factory():
    """Build a FakeProbeRunner from an output mapping."""
    return FakeProbeRunner


@pytest.fixture
def echo_runner() -> EchoProbeRunner:
    return EchoProbeRunner()


@pytest.fixture
def quiet_settings() -> Settings:
    return Settings(DEBUG="", SHA256SUM="")


@pytest.fixture
def posix_only():
    if platform.system() == "Windows":
        pytest.skip("stand-in executables need a POSIX shell")


def write_script(directory: Path, name: str, body: str, executable: bool = True) -> Path:
    """Write a ``/bin/sh`` script into *directory* and return its path."""
    path = directory / name
    path.write_text("#!/bin/sh\n" + textwrap.dedent(body))
    if executable:
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    else:
        path.chmod(stat.S_IRUSR | stat.S_IWUSR)
    return path


@pytest.fixture
def make_script(tmp_path):
    """Factory: ``make_script(name, body, executable=True) -> Path``."""
    def _make(name: str, body: str, executable: bool = True) -> Path:
        return write_script(tmp_path, name, body, executable)
    return _make


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable that feeds the fingerprint from os.environ."""
    names = [
        "CC", "CXX", "C_STANDARD", "CXX_STANDARD", "CPPFLAGS", "CFLAGS",
        "CXXFLAGS", "LDFLAGS", "AR", "NM", "RANLIB", "STRIP", "LTO",
        "DEBUG", "SHA256SUM", "BUILD_ID_LOG_LEVEL",
    ]
    for name in names:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith(("AR_", "NM_", "RANLIB_", "STRIP_")):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch
