from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from .config import CATEGORIES, SKILL_FILENAME, InstallTargets, get_category
from .installer import iter_command_files, iter_skill_dirs

FRONT_MATTER_DELIMITER = "---"


class InventoryError(RuntimeError):
    pass


@dataclass(frozen=True)
class InstalledItem:
    category: str
    name: str
    path: Path
    title: str
    description: str


def read_front_matter(path: Path) -> dict:
    """Return the YAML front matter of a Markdown file, or an empty dict.

    Front matter is only read for display, so unreadable or malformed
    headers yield ``{}`` instead of raising.
    """
    try:
        content = path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return {}

    lines = content.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}

    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            header = "\n".join(lines[1:idx])
            break
    else:
        return {}

    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError:
        return {}
    return data if isinstance(data, dict) else {}


def _describe(front_matter: dict) -> str:
    metadata = front_matter.get("metadata")
    if isinstance(metadata, dict) and metadata.get("short-description"):
        return str(metadata["short-description"]).strip()
    return str(front_matter.get("description", "") or "").strip()


def _skill_items(category: str, root: Path) -> list[InstalledItem]:
    items = []
    for skill_dir in iter_skill_dirs(root):
        front_matter = read_front_matter(skill_dir / SKILL_FILENAME)
        items.append(
            InstalledItem(
                category=category,
                name=skill_dir.name,
                path=skill_dir,
                title=str(front_matter.get("name", "") or skill_dir.name),
                description=_describe(front_matter),
            )
        )
    return items


def _command_items(category: str, root: Path) -> list[InstalledItem]:
    items = []
    for command_file in iter_command_files(root):
        front_matter = read_front_matter(command_file)
        items.append(
            InstalledItem(
                category=category,
                name=command_file.stem,
                path=command_file,
                title=f"/{command_file.stem}",
                description=str(front_matter.get("description", "") or "").strip(),
            )
        )
    return items


def inventory_installed(targets: InstallTargets, category: str | None = None) -> tuple[InstalledItem, ...]:
    if category is None:
        selected = CATEGORIES
    else:
        try:
            selected = (get_category(category),)
        except KeyError as error:
            raise InventoryError(f"Unsupported category: {category}") from error

    rows: list[InstalledItem] = []
    for item in selected:
        root = targets.destination_for(item.name)
        if item.kind == "directory":
            rows.extend(_skill_items(item.name, root))
        else:
            rows.extend(_command_items(item.name, root))
    return tuple(rows)
