from pathlib import Path

import pytest


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    return home_dir


@pytest.fixture
def source_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    (repo / "skill" / "foo").mkdir(parents=True)
    (repo / "skill" / "foo" / "SKILL.md").write_text(
        "---\nname: foo\ndescription: Foo patterns\n---\n\n# Foo\n", encoding="utf-8"
    )
    (repo / "skill" / "bar" / "references").mkdir(parents=True)
    (repo / "skill" / "bar" / "SKILL.md").write_text("# Bar\n", encoding="utf-8")
    (repo / "skill" / "bar" / "references" / "notes.md").write_text("notes\n", encoding="utf-8")
    (repo / "command").mkdir()
    (repo / "command" / "baz.md").write_text("---\ndescription: Run baz\n---\nDo baz.\n", encoding="utf-8")
    return repo
