from pathlib import Path

import pytest

from src.rules import loader
from src.rules.loader import DEFAULT_RULES_PATH, load_rules

VALID_YAML = """
project:
  slug: test
  rules_version: "1"
content:
  title:
    min: 1
    max: 50
"""


def test_load_project_rules(rules):
    assert rules.project.slug == "journal-moderation"
    assert rules.content.title.max == 200
    assert rules.authors.unknown_label == "Unknown Author"
    assert rules.ops.bootstrap_admin.enabled_if_no_admins is True


def test_default_rules_ship_inside_the_package():
    assert DEFAULT_RULES_PATH.parent == Path(loader.__file__).resolve().parent
    assert load_rules().project.slug == "journal-moderation"


def test_defaults_fill_optional_sections(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text(VALID_YAML)

    rules = load_rules(path)

    assert rules.content.title.max == 50
    assert rules.authors.unknown_label == "Unknown Author"
    assert rules.auth.password_min_length == 8
    assert rules.ops.required_env == []


def test_rules_inside_markdown_fence(tmp_path: Path):
    path = tmp_path / "rules.md"
    path.write_text(f"# Rules\n\nSome prose.\n\n```yaml{VALID_YAML}```\n\nMore prose.\n")

    assert load_rules(path).project.slug == "test"


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text("project: [unclosed")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(path)


def test_schema_violation(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text("project:\n  slug: x\n")
    with pytest.raises(ValueError, match="validation failed"):
        load_rules(path)


def test_blank_unknown_label_rejected(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text(VALID_YAML + "authors:\n  unknown_label: '  '\n")
    with pytest.raises(ValueError):
        load_rules(path)


def test_non_mapping_rejected(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_rules(path)
