"""Filesystem checks and helpers shared by the host and its commands."""

from __future__ import annotations

import os
import shutil
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator


@dataclass(frozen=True)
class FileRecord:
    """A path found while walking a tree, with the stats of what it points to."""

    path: Path
    stats: os.stat_result

    def is_file(self) -> bool:
        return stat.S_ISREG(self.stats.st_mode)

    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.stats.st_mode)


def _stat(first: str | Path, *others: str | Path) -> os.stat_result | None:
    pathname = Path(first, *others)
    try:
        return pathname.stat()
    except FileNotFoundError:
        return None
    except NotADirectoryError:
        return None


def path_exists(first: str | Path, *others: str | Path) -> bool:
    return _stat(first, *others) is not None


def file_exists(first: str | Path, *others: str | Path) -> bool:
    stats = _stat(first, *others)
    return stats is not None and stat.S_ISREG(stats.st_mode)


def dir_exists(first: str | Path, *others: str | Path) -> bool:
    stats = _stat(first, *others)
    return stats is not None and stat.S_ISDIR(stats.st_mode)


def find_files(root: str | Path, predicate: Callable[[FileRecord], bool]) -> Iterator[FileRecord]:
    """Walk ``root`` depth-first and yield every record accepted by ``predicate``.

    Paths are absolute but keep any symbolic links they pass through, and
    siblings are visited in name order, so two walks of an unchanged tree
    yield the same sequence. A link is reported with the stats of its target;
    links to directories are not descended into.
    """

    base = Path(os.path.abspath(root))

    def _walk(directory: Path) -> Iterator[FileRecord]:
        for entry in sorted(directory.iterdir(), key=lambda item: item.name):
            is_link = entry.is_symlink()
            try:
                stats = entry.stat()
            except FileNotFoundError:
                # dangling link
                stats = entry.lstat()
            record = FileRecord(path=entry, stats=stats)
            if predicate(record):
                yield record
            if record.is_dir() and not is_link:
                yield from _walk(entry)

    yield from _walk(base)


def filter_file(src: str | Path, dst: str | Path, transform: Callable[[str], str]) -> None:
    """Write ``transform(contents of src)`` to ``dst``."""

    contents = Path(src).read_text(encoding="utf-8")
    Path(dst).write_text(transform(contents), encoding="utf-8")


def copy_path(src: str | Path, dst: str | Path) -> None:
    """Copy a file or a directory tree, overwriting and keeping timestamps."""

    source = Path(src)
    target = Path(dst)
    if source.is_dir():
        shutil.copytree(source, target, dirs_exist_ok=True)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)
