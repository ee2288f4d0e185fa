"""Xcode project discovery: pbxproj, project directories and AppDelegate."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

from sdkinject.errors import DiscoveryError

T = TypeVar("T")

APP_DELEGATE_NAMES = frozenset({"appdelegate.swift", "appdelegate.m"})

_SKIP_DIRS = frozenset({".git", "Pods"})


@dataclass(frozen=True, slots=True)
class XcodeProject:
    """Locations found in an iOS application tree."""

    project_file: Path
    name: str
    root_dir: Path
    files_dir: Path
    app_delegate: Path

    @property
    def podfile(self) -> Path:
        return self.root_dir / "Podfile"


def walk_tree(root: Path, predicate: Callable[[Path], T | None]) -> T | None:
    """Breadth-first walk; return the first non-None predicate result.

    All entries of a directory are offered before any of its subdirectories
    are entered, so shallower matches win.
    """
    pending: deque[Path] = deque([root])
    while pending:
        directory = pending.popleft()
        try:
            entries = sorted(directory.iterdir())
        except OSError:
            continue
        for entry in entries:
            result = predicate(entry)
            if result is not None:
                return result
        pending.extend(e for e in entries if e.is_dir() and e.name not in _SKIP_DIRS)
    return None


def find_project(root: Path) -> XcodeProject:
    """Locate the Xcode project and its AppDelegate under `root`."""
    project_file = walk_tree(
        root, lambda p: p if p.suffix == ".pbxproj" and p.is_file() else None
    )
    if project_file is None:
        raise DiscoveryError(f"there is no *.pbxproj file in {root}")

    xcodeproj = project_file.parent
    if xcodeproj.suffix != ".xcodeproj":
        raise DiscoveryError(f"{project_file} is not inside a *.xcodeproj folder")

    name = xcodeproj.stem
    root_dir = xcodeproj.parent
    files_dir = root_dir / name
    if not files_dir.is_dir():
        raise DiscoveryError(f"there is no project files directory '{name}' in {root_dir}")

    app_delegate = walk_tree(
        files_dir,
        lambda p: p if p.name.lower() in APP_DELEGATE_NAMES and p.is_file() else None,
    )
    if app_delegate is None:
        raise DiscoveryError(f"there is no AppDelegate file in {files_dir}")

    return XcodeProject(project_file, name, root_dir, files_dir, app_delegate)
