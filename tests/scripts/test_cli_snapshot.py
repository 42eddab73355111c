"""Tests for the snapshot CLI."""

import pytest

from relnet.scripts import cli_snapshot
from relnet.store import SnapshotStore


@pytest.fixture
def snapshot_file(tmp_path, snapshot_bytes):
    path = tmp_path / "data" / "network.sqlite"
    path.parent.mkdir()
    path.write_bytes(snapshot_bytes)
    return path


class TestInit:
    """Creating an empty snapshot."""

    def test_init_writes_loadable_snapshot(self, tmp_path):
        path = tmp_path / "data" / "network.sqlite"
        assert cli_snapshot.main(["init", str(path)]) == 0

        store = SnapshotStore.from_file(path)
        assert store.stats() == {"characters": 0, "active_characters": 0, "relationships": 0}

    def test_init_refuses_to_overwrite(self, snapshot_file, capsys):
        assert cli_snapshot.main(["init", str(snapshot_file)]) == 1
        assert "already exists" in capsys.readouterr().out


class TestInspect:
    """stats and report."""

    def test_stats(self, snapshot_file, capsys):
        assert cli_snapshot.main(["--snapshot", str(snapshot_file), "stats"]) == 0

        out = capsys.readouterr().out
        assert "Alice" in out
        assert "likes" in out
        assert "Relationships: 2" in out

    def test_snapshot_option_after_subcommand(self, snapshot_file, capsys):
        assert cli_snapshot.main(["stats", "--snapshot", str(snapshot_file)]) == 0
        assert "Relationships: 2" in capsys.readouterr().out

    def test_report(self, snapshot_file, tmp_path):
        output = tmp_path / "report.md"
        code = cli_snapshot.main(
            ["--snapshot", str(snapshot_file), "report", "--output", str(output)]
        )

        assert code == 0
        report = output.read_text(encoding="utf-8")
        assert report.startswith("# Relationship Network Report")
        assert "old friends" in report

    def test_missing_snapshot(self, tmp_path, capsys):
        code = cli_snapshot.main(["--snapshot", str(tmp_path / "none.sqlite"), "stats"])
        assert code == 1
        assert "not found" in capsys.readouterr().out

    def test_corrupt_snapshot(self, tmp_path, capsys):
        path = tmp_path / "bad.sqlite"
        path.write_bytes(b"garbage" * 1000)

        assert cli_snapshot.main(["--snapshot", str(path), "stats"]) == 1
        assert "ERROR" in capsys.readouterr().out


class TestActivation:
    """Administrative soft delete writes a new export, not the canonical file."""

    def test_deactivate_writes_export(self, snapshot_file, tmp_path, monkeypatch):
        monkeypatch.setattr(cli_snapshot.settings, "EXPORT_DIR", tmp_path / "exports")
        original = snapshot_file.read_bytes()

        code = cli_snapshot.main(["--snapshot", str(snapshot_file), "deactivate", "alice"])

        assert code == 0
        assert snapshot_file.read_bytes() == original
        exports = list((tmp_path / "exports").iterdir())
        assert len(exports) == 1
        exported = SnapshotStore.from_file(exports[0])
        assert exported.get_character("alice").active is False
        assert len(exported.list_relationships()) == 2

    def test_activate_with_snapshot_after_id(self, snapshot_file, tmp_path, monkeypatch):
        monkeypatch.setattr(cli_snapshot.settings, "EXPORT_DIR", tmp_path / "exports")

        code = cli_snapshot.main(["activate", "alice", "--snapshot", str(snapshot_file)])

        assert code == 0
        assert len(list((tmp_path / "exports").glob("network-*.sqlite"))) == 1

    def test_unknown_character(self, snapshot_file, capsys):
        code = cli_snapshot.main(["--snapshot", str(snapshot_file), "activate", "nobody"])
        assert code == 1
        assert "Unknown character" in capsys.readouterr().out
