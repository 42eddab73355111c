"""
Inspect and administer relationship network snapshots.

Usage:
    python -m relnet.scripts.cli_snapshot init [PATH]
    python -m relnet.scripts.cli_snapshot stats [--snapshot PATH]
    python -m relnet.scripts.cli_snapshot report [--snapshot PATH] [--output PATH]
    python -m relnet.scripts.cli_snapshot deactivate ID [--snapshot PATH]
    python -m relnet.scripts.cli_snapshot activate ID [--snapshot PATH]

Examples:
    python -m relnet.scripts.cli_snapshot init data/network.sqlite
    python -m relnet.scripts.cli_snapshot stats
    python -m relnet.scripts.cli_snapshot --snapshot exports/network-1700000000000.sqlite stats
    python -m relnet.scripts.cli_snapshot deactivate mary_jane

deactivate/activate never touch the canonical snapshot: they write a new
timestamped export to EXPORT_DIR, to be published like any other export.
"""

import argparse
import logging
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from tabulate import tabulate

from ..config.settings import settings
from ..errors import CorruptSnapshot
from ..models.relationships import RelationType
from ..publish.workflow import publish, save_artifact
from ..store.connection import SnapshotStore

load_dotenv()


def character_rows(store: SnapshotStore) -> List[list]:
    return [
        [c.id, c.name, c.color or "-", c.group or "-", "yes" if c.active else "no"]
        for c in store.list_characters()
    ]


def relationship_rows(store: SnapshotStore) -> List[list]:
    names = {c.id: c.name for c in store.list_characters()}
    return [
        [
            names.get(rel.source_id, rel.source_id),
            rel.rel_type.value,
            f"{rel.strength:+d}" if rel.strength else "0",
            names.get(rel.target_id, rel.target_id),
            rel.notes or "-",
        ]
        for rel in store.list_relationships()
    ]


def type_count_rows(store: SnapshotStore) -> List[list]:
    counts = Counter(rel.rel_type for rel in store.list_relationships())
    return [[t.value, t.strength, counts.get(t, 0)] for t in RelationType]


def init_snapshot(path: Path) -> Path:
    """Write an empty snapshot with the schema."""
    if path.exists():
        raise FileExistsError(f"Snapshot already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    with SnapshotStore.create() as store:
        path.write_bytes(store.export())
    print(f"Empty snapshot written to {path}")
    return path


def show_stats(store: SnapshotStore) -> None:
    """Print characters, relationships and type counts."""
    stats = store.stats()
    print("\n--- Snapshot Statistics ---")
    for name, count in stats.items():
        print(f"  {name.replace('_', ' ').capitalize()}: {count}")

    print("\n--- Characters ---")
    print(tabulate(character_rows(store), headers=["Id", "Name", "Color", "Group", "Active"]))

    print("\n--- Relationships ---")
    print(tabulate(relationship_rows(store), headers=["From", "Type", "Strength", "To", "Notes"]))

    print("\n--- Relationship Types ---")
    print(tabulate(type_count_rows(store), headers=["Type", "Strength", "Count"]))


def generate_report(store: SnapshotStore) -> str:
    """Generate a markdown report of the snapshot."""
    lines = [
        "# Relationship Network Report",
        "",
        f"- **Generated**: {datetime.now().strftime('%Y-%m-%d %H:%M')}",
        "",
        "---",
        "",
        "## Relationship Type Summary",
        "",
        tabulate(type_count_rows(store), headers=["Type", "Strength", "Count"], tablefmt="github"),
        "",
        f"**Total Relationships**: {store.stats()['relationships']}",
        "",
        "---",
        "",
        "## Characters",
        "",
        tabulate(character_rows(store), headers=["Id", "Name", "Color", "Group", "Active"], tablefmt="github"),
        "",
        "---",
        "",
        "## Relationships",
        "",
    ]

    rows = relationship_rows(store)
    for row in rows:
        # Escape pipes for markdown table
        row[4] = row[4].replace("|", "\\|").replace("\n", " ")
    lines.append(tabulate(rows, headers=["From", "Type", "Strength", "To", "Notes"], tablefmt="github"))

    return "\n".join(lines)


def set_active(store: SnapshotStore, character_id: str, active: bool) -> Path:
    """Soft delete or restore a character and save the result as a new export."""
    store.set_character_active(character_id, active)
    verb = "Restored" if active else "Deactivated"
    result = publish(store, message=f"{verb} {character_id}.")
    path = save_artifact(result.artifact)
    print(result.render())
    print(f"\nExport saved to: {path}")
    return path


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    # --snapshot may also follow the subcommand
    snapshot_parent = argparse.ArgumentParser(add_help=False)
    snapshot_parent.add_argument(
        "--snapshot",
        type=Path,
        default=argparse.SUPPRESS,
        help=f"Snapshot file (default: {settings.SNAPSHOT_PATH})",
    )

    parser = argparse.ArgumentParser(
        description="Inspect and administer relationship network snapshots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help=f"Snapshot file (default: {settings.SNAPSHOT_PATH})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Write an empty snapshot")
    init_parser.add_argument("path", nargs="?", type=Path, default=None)

    subparsers.add_parser("stats", help="Show snapshot contents", parents=[snapshot_parent])

    report_parser = subparsers.add_parser(
        "report", help="Write a markdown report", parents=[snapshot_parent]
    )
    report_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help=f"Report path (default: {settings.REPORT_PATH})",
    )

    for command in ("deactivate", "activate"):
        sub = subparsers.add_parser(
            command, help=f"{command.capitalize()} a character", parents=[snapshot_parent]
        )
        sub.add_argument("character_id")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    snapshot_path = args.snapshot or settings.SNAPSHOT_PATH

    if args.command == "init":
        try:
            init_snapshot(args.path or snapshot_path)
        except FileExistsError as e:
            print(f"ERROR: {e}")
            return 1
        return 0

    try:
        store = SnapshotStore.from_file(snapshot_path)
    except FileNotFoundError:
        print(f"ERROR: Snapshot not found: {snapshot_path}")
        return 1
    except CorruptSnapshot as e:
        print(f"ERROR: {e}")
        return 1

    with store:
        if args.command == "stats":
            show_stats(store)
        elif args.command == "report":
            output_path = args.output or settings.REPORT_PATH
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(generate_report(store), encoding="utf-8")
            print(f"Report saved to: {output_path}")
        else:
            try:
                set_active(store, args.character_id, args.command == "activate")
            except KeyError:
                print(f"ERROR: Unknown character: {args.character_id}")
                return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
