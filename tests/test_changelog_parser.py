from __future__ import annotations

import json

import pytest

from vetify_changelog.services.changelog_content import ChangelogNotFoundError
from vetify_changelog.services.changelog_parser import (
    ChangelogEntry,
    ChangelogParser,
    export_changelog,
    parse_changelog,
)


def test_two_versions_keep_source_order():
    content = (
        "## [2.0.0] - 2024-02-01\n"
        "### Added\n"
        "- Version 2 feature\n"
        "## [1.0.0] - 2024-01-15\n"
        "### Added\n"
        "- Version 1 feature\n"
    )

    entries = parse_changelog(content)

    assert [e.version for e in entries] == ["2.0.0", "1.0.0"]
    assert entries[0].categories["added"] == ["Version 2 feature"]
    assert entries[1].categories["added"] == ["Version 1 feature"]
    assert entries[0].date == "2024-02-01"
    assert entries[1].date == "2024-01-15"


def test_versions_are_not_sorted():
    content = (
        "## [1.0.0] - 2024-01-15\n### Fixed\n- old\n"
        "## [3.0.0] - 2024-03-01\n### Fixed\n- newest\n"
        "## [2.0.0] - 2024-02-01\n### Fixed\n- middle\n"
    )

    assert [e.version for e in parse_changelog(content)] == ["1.0.0", "3.0.0", "2.0.0"]


def test_sample_changelog(sample_changelog):
    entries = parse_changelog(sample_changelog)

    assert [e.version for e in entries] == ["Sin Publicar", "1.1.0", "1.0.0"]
    assert entries[1].categories == {
        "added": [
            "Sistema de Invitaciones",
            "Invitaciones por correo",
            "Página de Actualizaciones | Historial de versiones | Fechas en español",
        ],
        "fixed": ["Filtros de inventario"],
    }
    assert entries[2].categories == {"security": ["Validación de pertenencia a la clínica"]}


@pytest.mark.parametrize("sentinel", ["Unreleased", "Sin Publicar"])
def test_unreleased_sentinel_is_kept_verbatim(sentinel):
    entries = parse_changelog(f"## [{sentinel}]\n### Added\n- Pending change\n")

    assert len(entries) == 1
    assert entries[0].version == sentinel
    assert entries[0].is_unreleased


def test_missing_date_is_empty_string():
    entries = parse_changelog("## [1.0.0]\n### Changed\n- Something\n")

    assert entries[0].date == ""


@pytest.mark.parametrize(
    "heading,key",
    [
        ("Added", "added"),
        ("Agregado", "added"),
        ("Changed", "changed"),
        ("Modificado", "changed"),
        ("Fixed", "fixed"),
        ("Corregido", "fixed"),
        ("Security", "security"),
        ("Seguridad", "security"),
        ("ADDED", "added"),
        ("corregido", "fixed"),
    ],
)
def test_bilingual_category_headings(heading, key):
    entries = parse_changelog(f"## [1.0.0] - 2024-01-15\n### {heading}\n- Item\n")

    assert entries[0].categories == {key: ["Item"]}


def test_unrecognized_heading_items_are_dropped():
    content = (
        "## [1.0.0] - 2024-01-15\n"
        "### Deprecated\n"
        "- Old API\n"
        "### Added\n"
        "- New API\n"
        "### Notes\n"
        "- Internal note\n"
    )

    entries = parse_changelog(content)

    assert entries[0].categories == {"added": ["New API"]}


def test_version_without_categories_is_skipped():
    content = (
        "## [2.0.0] - 2024-02-01\n"
        "Prose only, no headings.\n"
        "- a loose bullet\n"
        "## [1.0.0] - 2024-01-15\n"
        "### Fixed\n"
        "- Bug\n"
    )

    entries = parse_changelog(content)

    assert [e.version for e in entries] == ["1.0.0"]


def test_category_with_zero_items_is_absent():
    content = (
        "## [1.0.0] - 2024-01-15\n"
        "### Added\n"
        "\n"
        "### Fixed\n"
        "- One fix\n"
    )

    entries = parse_changelog(content)

    assert entries[0].categories == {"fixed": ["One fix"]}
    assert "added" not in entries[0].categories


def test_version_with_only_empty_categories_is_skipped():
    entries = parse_changelog("## [1.0.0] - 2024-01-15\n### Added\n### Fixed\n")

    assert entries == []


def test_nested_items_are_flattened_at_every_depth():
    content = (
        "## [1.0.0] - 2024-01-15\n"
        "### Added\n"
        "- Parent\n"
        "  - Child\n"
        "    - Grandchild\n"
        "* Sibling\n"
    )

    entries = parse_changelog(content)

    assert entries[0].categories["added"] == ["Parent", "Child", "Grandchild", "Sibling"]


def test_category_span_ends_at_next_heading():
    content = (
        "## [1.0.0] - 2024-01-15\n"
        "### Added\n"
        "- Listed\n"
        "#### Details\n"
        "- Not part of added\n"
    )

    entries = parse_changelog(content)

    assert entries[0].categories == {"added": ["Listed"]}


def test_repeated_category_heading_appends():
    content = "## [1.0.0]\n### Added\n- One\n### Fixed\n- Fix\n### Agregado\n- Two\n"

    entries = parse_changelog(content)

    assert entries[0].categories["added"] == ["One", "Two"]


def test_items_are_trimmed_and_blank_bullets_ignored():
    content = "## [1.0.0]\n### Added\n-    Padded item   \n- \n-\n"

    entries = parse_changelog(content)

    assert entries[0].categories["added"] == ["Padded item"]


def test_windows_line_endings():
    content = "## [1.0.0] - 2024-01-15\r\n### Added\r\n- Item\r\n"

    entries = parse_changelog(content)

    assert entries[0].date == "2024-01-15"
    assert entries[0].categories["added"] == ["Item"]


@pytest.mark.parametrize(
    "content",
    [
        "",
        "# Changelog\n\nJust text.\n",
        None,
        "### Added\n- item before any version\n",
        "## Not a version\n### Added\n- item\n",
        "## [\n### Added\n- broken heading\n",
        "\n\n\n",
    ],
)
def test_malformed_input_never_raises(content):
    assert parse_changelog(content) == []


def test_parse_calls_do_not_share_state():
    first = parse_changelog("## [1.0.0]\n### Added\n- One\n")
    second = parse_changelog("## [2.0.0]\n### Added\n- Two\n")

    assert [e.version for e in first] == ["1.0.0"]
    assert [e.version for e in second] == ["2.0.0"]


def test_to_dict():
    entry = ChangelogEntry(version="1.0.0", date="2024-01-15", categories={"added": ["x"]})

    assert entry.to_dict() == {"version": "1.0.0", "date": "2024-01-15", "categories": {"added": ["x"]}}


def test_to_index_metadata(sample_changelog):
    parser = ChangelogParser()
    parser.parse(sample_changelog)

    index = parser.to_index("CHANGELOG.md")

    assert index["metadata"]["source"] == "CHANGELOG.md"
    assert index["metadata"]["total_entries"] == 3
    assert index["metadata"]["latest_version"] == "Sin Publicar"
    assert index["metadata"]["parsed_at"].endswith("Z")
    assert index["entries"][1]["version"] == "1.1.0"


def test_export_changelog_writes_index(changelog_file, tmp_path):
    output = tmp_path / "out" / "changelog_index.json"

    metadata = export_changelog(str(changelog_file), str(output))

    assert metadata["total_entries"] == 3
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["entries"][0]["version"] == "Sin Publicar"
    assert data["entries"][1]["categories"]["fixed"] == ["Filtros de inventario"]


def test_export_changelog_missing_source(tmp_path):
    with pytest.raises(ChangelogNotFoundError):
        export_changelog(str(tmp_path / "missing.md"), str(tmp_path / "out.json"))
