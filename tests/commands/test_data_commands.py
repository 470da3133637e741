"""CLI tests for the export, import and reset commands."""

import json
from pathlib import Path

from click.testing import CliRunner

from sitestore.cli.cli import cli
from sitestore.core.context import SiteStoreContext
from sitestore.core.storage.types import SectionInstance, StoredProject
from sitestore.integrations.kv_store.fake import FakeKeyValueStore


def _context_with_project() -> SiteStoreContext:
    ctx = SiteStoreContext.for_test()
    ctx.storage.save_project(
        StoredProject(
            id="p1",
            name="Bakery",
            website_url="bakery",
            theme_id="modern-blue",
            sections=[SectionInstance(id="s1", section_id="hero-modern")],
        )
    )
    return ctx


def test_export_to_stdout() -> None:
    ctx = _context_with_project()

    result = CliRunner().invoke(cli, ["export"], obj=ctx, catch_exceptions=False)

    assert result.exit_code == 0
    document = json.loads(result.stdout)
    assert [project["id"] for project in document["projects"]] == ["p1"]
    assert document["version"] == "2.0.0"


def test_export_to_file(tmp_path: Path) -> None:
    ctx = _context_with_project()
    target = tmp_path / "backup.json"

    result = CliRunner().invoke(cli, ["export", "-o", str(target)], obj=ctx)

    assert result.exit_code == 0
    assert f"Exported data to {target}" in result.output
    assert json.loads(target.read_text(encoding="utf-8"))["projects"][0]["name"] == "Bakery"


def test_import_round_trip(tmp_path: Path) -> None:
    source = _context_with_project()
    backup = tmp_path / "backup.json"
    backup.write_text(source.storage.export_data(), encoding="utf-8")
    target = SiteStoreContext.for_test()

    result = CliRunner().invoke(cli, ["import", str(backup)], obj=target)

    assert result.exit_code == 0
    assert "Imported" in result.output
    assert target.storage.get_all_projects() == source.storage.get_all_projects()


def test_import_missing_file(tmp_path: Path) -> None:
    ctx = SiteStoreContext.for_test()

    result = CliRunner().invoke(cli, ["import", str(tmp_path / "nope.json")], obj=ctx)

    assert result.exit_code == 1
    assert "Error: File not found" in result.output


def test_import_rejected_document_leaves_data(tmp_path: Path) -> None:
    store = FakeKeyValueStore()
    ctx = SiteStoreContext.for_test(kv_store=store)
    ctx.storage.set_selected_theme("dark-elegant")
    before = store.values
    broken = tmp_path / "broken.json"
    broken.write_text('{"projects": "not a list"}', encoding="utf-8")

    result = CliRunner().invoke(cli, ["import", str(broken)], obj=ctx)

    assert result.exit_code == 1
    assert "stored data was left unchanged" in result.output
    assert store.values == before


def test_reset_with_force() -> None:
    store = FakeKeyValueStore()
    ctx = SiteStoreContext.for_test(kv_store=store)
    ctx.storage.save_project(StoredProject(id="p1", name="Bakery"))

    result = CliRunner().invoke(cli, ["reset", "--force"], obj=ctx)

    assert result.exit_code == 0
    assert "All stored data cleared" in result.output
    assert store.keys() == []


def test_reset_declined_keeps_data() -> None:
    ctx = _context_with_project()

    result = CliRunner().invoke(cli, ["reset"], obj=ctx, input="n\n")

    assert result.exit_code == 1
    assert ctx.storage.get_project("p1") is not None


def test_reset_confirmed() -> None:
    ctx = _context_with_project()

    result = CliRunner().invoke(cli, ["reset"], obj=ctx, input="y\n")

    assert result.exit_code == 0
    assert ctx.storage.get_all_projects() == []
