"""Tests for the project metadata in pyproject.toml."""

import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


class TestProjectMetadata:
    def test_readme_is_the_project_readme(self) -> None:
        project = tomllib.loads((ROOT / "pyproject.toml").read_text())["project"]
        assert project["readme"] == "README.md"
        assert (ROOT / project["readme"]).is_file()
