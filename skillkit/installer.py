from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from .config import CATEGORIES, COMMAND_SUFFIX, Category, InstallTargets


class InstallError(RuntimeError):
    pass


class SourceOverlapError(InstallError):
    pass


@dataclass(frozen=True)
class CategoryReport:
    name: str
    label: str
    noun: str
    missing_message: str
    kind: str
    source: Path
    destination: Path
    found: bool
    installed: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.installed)


@dataclass(frozen=True)
class InstallReport:
    source_root: Path
    categories: tuple[CategoryReport, ...]

    @property
    def total(self) -> int:
        return sum(category.count for category in self.categories)

    def category(self, name: str) -> CategoryReport:
        for item in self.categories:
            if item.name == name:
                return item
        raise KeyError(f"Unknown category: {name}")


def iter_skill_dirs(root: Path) -> Iterable[Path]:
    if not root.is_dir():
        return []
    return sorted(path for path in root.iterdir() if path.is_dir() and not path.name.startswith("."))


def iter_command_files(root: Path) -> Iterable[Path]:
    if not root.is_dir():
        return []
    return sorted(
        path for path in root.iterdir() if path.is_file() and path.suffix == COMMAND_SUFFIX and not path.name.startswith(".")
    )


def _remove(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def mirror_directory(source: Path, destination: Path) -> Path:
    """Replace ``destination`` wholesale with a recursive copy of ``source``."""
    if destination.exists() or destination.is_symlink():
        _remove(destination)
    shutil.copytree(source, destination)
    return destination


def _ensure_dirs(targets: InstallTargets) -> None:
    for root in targets.roots():
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise InstallError(f"Could not create destination directory {root}: {error}") from error


def _install_category(category: Category, source: Path, destination: Path) -> tuple[str, ...]:
    installed: list[str] = []
    if category.kind == "directory":
        for skill_dir in iter_skill_dirs(source):
            target = destination / skill_dir.name
            try:
                mirror_directory(skill_dir, target)
            except OSError as error:
                raise InstallError(f"Failed to install {skill_dir} to {target}: {error}") from error
            installed.append(skill_dir.name)
    else:
        for command_file in iter_command_files(source):
            target = destination / command_file.name
            try:
                if target.is_dir() and not target.is_symlink():
                    shutil.rmtree(target)
                shutil.copy2(command_file, target)
            except OSError as error:
                raise InstallError(f"Failed to install {command_file} to {target}: {error}") from error
            installed.append(command_file.name)
    return tuple(installed)


def _overlaps(first: Path, second: Path) -> bool:
    return first == second or first.is_relative_to(second) or second.is_relative_to(first)


def _check_overlap(root: Path, targets: InstallTargets) -> None:
    for category in CATEGORIES:
        source = (root / category.source_dir).resolve()
        destination = targets.destination_for(category.name).resolve()
        if source.is_dir() and _overlaps(source, destination):
            raise SourceOverlapError(
                f"Source {source} overlaps destination {destination}; run the installer from the repository checkout."
            )


def install_assets(
    source_root: Path,
    targets: InstallTargets,
    on_category: Callable[[CategoryReport], None] | None = None,
) -> InstallReport:
    root = source_root.resolve()
    if not root.exists() or not root.is_dir():
        raise InstallError(f"Source path does not exist: {root}")

    # Nothing may be deleted while a source lives inside its own destination.
    _check_overlap(root, targets)
    _ensure_dirs(targets)

    reports: list[CategoryReport] = []
    for category in CATEGORIES:
        source = root / category.source_dir
        destination = targets.destination_for(category.name)
        found = source.is_dir()
        installed = _install_category(category, source, destination) if found else ()
        report = CategoryReport(
            name=category.name,
            label=category.label,
            noun=category.noun,
            missing_message=category.missing_message,
            kind=category.kind,
            source=source,
            destination=destination,
            found=found,
            installed=installed,
        )
        if on_category is not None:
            on_category(report)
        reports.append(report)

    return InstallReport(source_root=root, categories=tuple(reports))
