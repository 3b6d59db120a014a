from __future__ import annotations

import os
import sys
import textwrap
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "subcall-home"
os.environ.setdefault("SUBCALL_HOME", str(SANDBOX_HOME))
SANDBOX_HOME.mkdir(parents=True, exist_ok=True)
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from subcall.settings import RuntimeSettings  # noqa: E402

PACKAGE_DIR = SRC / "subcall"


@pytest.fixture
def settings(tmp_path: Path) -> RuntimeSettings:
    dirs = {name: tmp_path / "runtime" / name for name in ("home", "logs")}
    for path in dirs.values():
        path.mkdir(parents=True, exist_ok=True)
    return RuntimeSettings(
        home_dir=dirs["home"],
        log_dir=dirs["logs"],
        cli_version="0.3.0",
    )


@pytest.fixture
def cli_settings(settings: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> RuntimeSettings:
    from subcall.cli import main as cli_main

    monkeypatch.setattr(cli_main, "SETTINGS", settings, raising=False)
    return settings


def _write_module(directory: Path, filename: str, body: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _command_source(name: str, *, result: str = "0", pattern: str | None = None, body: str | None = None) -> str:
    """Source of a command module exporting one SubCommand named ``name``."""

    command = f"        return {pattern!r}\n" if pattern else "        return None\n"
    run_body = body or f"        return {result}\n"
    return (
        "import argparse\n"
        "from subcall.plugins import SubCommand\n"
        "\n"
        "class Command(SubCommand):\n"
        "    def name(self):\n"
        f"        return {name!r}\n"
        "\n"
        "    def command(self):\n"
        f"{command}"
        "\n"
        "    def description(self):\n"
        f"        return 'The {name} command'\n"
        "\n"
        "    def create(self):\n"
        "        return lambda parser: parser\n"
        "\n"
        "    def run(self, args):\n"
        f"{run_body}"
        "\n"
        "default = Command()\n"
    )


@pytest.fixture
def write_module():
    return _write_module


@pytest.fixture
def command_source():
    return _command_source
