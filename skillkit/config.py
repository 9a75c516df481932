from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

XDG_CONFIG_ENV = "XDG_CONFIG_HOME"
OPENCODE_DIR = "opencode"
CODEX_DIR = ".codex"

SKILL_FILENAME = "SKILL.md"
COMMAND_SUFFIX = ".md"


@dataclass(frozen=True)
class Category:
    name: str
    source_dir: str
    kind: str
    label: str
    noun: str
    missing_message: str


# Install order matters for output; keep it stable.
CATEGORIES = (
    Category(
        name="skills",
        source_dir="skill",
        kind="directory",
        label="skills",
        noun="skills",
        missing_message="No skills directory found",
    ),
    Category(
        name="commands",
        source_dir="command",
        kind="file",
        label="slash commands",
        noun="commands",
        missing_message="No command directory found",
    ),
    Category(
        name="codex-skills",
        source_dir="codex-skill",
        kind="directory",
        label="Codex skills",
        noun="Codex skills",
        missing_message="No codex-skill directory found",
    ),
)
CATEGORY_NAMES = tuple(category.name for category in CATEGORIES)


@dataclass(frozen=True)
class InstallTargets:
    opencode_skills: Path
    opencode_commands: Path
    codex_skills: Path

    def destination_for(self, category: str) -> Path:
        mapping = {
            "skills": self.opencode_skills,
            "commands": self.opencode_commands,
            "codex-skills": self.codex_skills,
        }
        if category not in mapping:
            raise KeyError(f"Unknown category: {category}")
        return mapping[category]

    def roots(self) -> tuple[Path, ...]:
        return (self.opencode_skills, self.opencode_commands, self.codex_skills)


def get_category(name: str) -> Category:
    for category in CATEGORIES:
        if category.name == name:
            return category
    raise KeyError(f"Unknown category: {name}")


def config_root(env: Mapping[str, str], home: Path, platform: str | None = None) -> Path:
    platform = platform or sys.platform
    override = env.get(XDG_CONFIG_ENV, "").strip()
    if override and not platform.startswith("win"):
        return Path(override).expanduser()
    return home / ".config"


def resolve_targets(env: Mapping[str, str] | None = None, home: Path | None = None) -> InstallTargets:
    environ = os.environ if env is None else env
    home_dir = home or Path.home()
    opencode_root = config_root(environ, home_dir) / OPENCODE_DIR
    return InstallTargets(
        opencode_skills=opencode_root / "skill",
        opencode_commands=opencode_root / "command",
        codex_skills=home_dir / CODEX_DIR / "skills",
    )
