"""Runtime command discovery and the command registry."""

from __future__ import annotations

import importlib.util
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, ItemsView, Iterable

from subcall.plugins import OptionsBuilder, SubCommand, SubCommandRunner
from subcall.plugins.paths import DiscoveryError, iter_command_candidates, resolve_command_dir
from subcall.plugins.wrapper import resolve_real_module_path
from subcall.settings import SETTINGS, RuntimeSettings
from subcall.utils.fs import file_exists
from subcall.utils.telemetry import record_event, record_structured_event

EXPORT_ATTRIBUTE = "default"
COMMAND_NAMESPACE = "subcall._commands"


class WrapperReadError(DiscoveryError):
    """Raised when a launcher stub cannot be read."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(f"Failed to import sub-command source via Windows wrapper: {path}: {cause}")
        self.path = path


class ModuleImportError(DiscoveryError):
    """Raised when a command module fails to import."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(f"Failed to import sub-command source: {path}: {cause}")
        self.path = path


class DuplicateCommandError(DiscoveryError):
    """Raised when two command modules export the same command name."""


class UnknownCommandError(RuntimeError):
    """Raised when no runner is registered under a requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name}: Unsupported sub-command")
        self.name = name


@dataclass
class RegisteredCommand:
    name: str
    pattern: str
    help: str
    builder: OptionsBuilder
    runner: SubCommandRunner


class Registry:
    """Command name to runner mapping, write-once per process."""

    def __init__(self, settings: RuntimeSettings = SETTINGS) -> None:
        self._settings = settings
        self._commands: Dict[str, RegisteredCommand] = {}
        self._frozen = False

    def register(self, descriptor: SubCommand) -> None:
        if self._frozen:
            raise RuntimeError("Command registry is frozen once dispatch has started")
        name = descriptor.name()
        if not isinstance(name, str) or not name:
            raise DiscoveryError(f"Sub-command {type(descriptor).__name__} has an empty name")
        if name in self._commands:
            raise DuplicateCommandError(f"Sub-command {name} already registered")
        self._commands[name] = RegisteredCommand(
            name=name,
            pattern=descriptor.command() or name,
            help=descriptor.description(),
            builder=descriptor.create(),
            runner=descriptor.run,
        )

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def settings(self) -> RuntimeSettings:
        return self._settings

    def get(self, name: str) -> RegisteredCommand:
        if name not in self._commands:
            raise UnknownCommandError(name)
        return self._commands[name]

    def runner(self, name: str) -> SubCommandRunner:
        return self.get(name).runner

    def names(self) -> list[str]:
        return list(self._commands)

    def items(self) -> ItemsView[str, RegisteredCommand]:
        return self._commands.items()

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)


def load_module_from_path(path: Path) -> ModuleType:
    """Import a Python source file that is not on ``sys.path``."""

    module_name = f"{COMMAND_NAMESPACE}.{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"No loader available for {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def exported_commands(exported: Any, source: Path, *, settings: RuntimeSettings = SETTINGS) -> list[SubCommand]:
    """Return the sub-commands in a module export, dropping anything else."""

    if exported is None:
        return []
    items = list(exported) if isinstance(exported, (list, tuple)) else [exported]
    accepted: list[SubCommand] = []
    for item in items:
        if isinstance(item, SubCommand):
            accepted.append(item)
            continue
        record_structured_event(
            settings,
            "discovery.rejected",
            payload={"module": str(source), "type": type(item).__name__},
            level="warn",
            component="loader",
        )
    return accepted


def import_command_module(
    candidate: Path,
    descriptors: list[SubCommand],
    *,
    cwd: Path | None = None,
    settings: RuntimeSettings = SETTINGS,
) -> None:
    """Load the commands defined by ``candidate`` into ``descriptors``.

    Windows installs put a non-importable stub at the candidate path and a
    ``<candidate>.cmd`` launcher beside it; the launcher names the real module.
    """

    wrapper = candidate.with_name(candidate.name + settings.wrapper_suffix)
    if file_exists(wrapper):
        _import_via_wrapper(wrapper, descriptors, cwd=cwd, settings=settings)
    else:
        _import_source_file(candidate, descriptors, settings=settings)


def _import_via_wrapper(
    wrapper: Path,
    descriptors: list[SubCommand],
    *,
    cwd: Path | None,
    settings: RuntimeSettings,
) -> None:
    try:
        contents = wrapper.read_text(encoding="utf-8")
    except OSError as exc:
        raise WrapperReadError(wrapper, exc) from exc
    module_path = resolve_real_module_path(contents, cwd=cwd, settings=settings)
    if module_path is None:
        record_structured_event(
            settings,
            "discovery.wrapper_unmatched",
            payload={"wrapper": str(wrapper)},
            level="warn",
            component="loader",
        )
        return
    _import_source_file(module_path, descriptors, settings=settings)


def _import_source_file(path: Path, descriptors: list[SubCommand], *, settings: RuntimeSettings) -> None:
    try:
        module = load_module_from_path(path)
    except Exception as exc:
        raise ModuleImportError(path, exc) from exc
    descriptors.extend(exported_commands(getattr(module, EXPORT_ATTRIBUTE, None), path, settings=settings))


def discover_commands(
    script_path: Path,
    *,
    cwd: Path | None = None,
    settings: RuntimeSettings = SETTINGS,
) -> list[SubCommand]:
    """Load every command module found next to ``script_path``, in name order."""

    command_dir = resolve_command_dir(script_path, cwd=cwd, settings=settings)
    descriptors: list[SubCommand] = []
    for candidate in iter_command_candidates(command_dir, settings=settings):
        import_command_module(candidate, descriptors, cwd=cwd, settings=settings)
    return descriptors


def build_registry(descriptors: Iterable[SubCommand], *, settings: RuntimeSettings = SETTINGS) -> Registry:
    registry = Registry(settings)
    for descriptor in descriptors:
        registry.register(descriptor)
    return registry


def load_plugins(
    script_path: Path,
    *,
    cwd: Path | None = None,
    settings: RuntimeSettings = SETTINGS,
) -> Registry:
    registry = build_registry(discover_commands(script_path, cwd=cwd, settings=settings), settings=settings)
    record_event(settings, "discovery.completed", {"commands": registry.names()})
    return registry


__all__ = [
    "DiscoveryError",
    "DuplicateCommandError",
    "ModuleImportError",
    "RegisteredCommand",
    "Registry",
    "UnknownCommandError",
    "WrapperReadError",
    "build_registry",
    "discover_commands",
    "exported_commands",
    "import_command_module",
    "load_module_from_path",
    "load_plugins",
]
