#!/usr/bin/env python3
"""
Example script demonstrating an end-to-end run against synthetic data.

A generated directory is scanned for empty groups, the found groups are
deleted (one of them fails on purpose) and the report is exported.
"""

import sys
import shutil
from pathlib import Path

# Add parent directory to path to import the empty_groups package
sys.path.insert(0, str(Path(__file__).parent.parent))

from empty_groups.commands import (
    DELETE_EMPTY_GROUPS, LIST_EMPTY_GROUPS, CommandSurface
)
from empty_groups.deletion import EmptyGroupDeleter
from empty_groups.dummy_data import DummyDataGenerator, InMemoryReportSheet, LoggingNotifier
from empty_groups.reporting import ReportExporter
from empty_groups.scanner import EmptyGroupScanner
from empty_groups.state import JsonPropertyStore, TriggerRegistry


def example_generate_directory():
    """Example 1: Generate a synthetic directory."""
    print("\n" + "="*70)
    print("Example 1: Synthetic Directory")
    print("="*70)

    generator = DummyDataGenerator(seed=42, domain="example.com")
    groups = generator.generate_groups(count=60, empty_ratio=0.1)

    print(f"✓ Generated {len(groups)} groups in {generator.domain}")

    sample = groups[0]
    print(f"\nSample Group:")
    print(f"  - Name: {sample.name}")
    print(f"  - Email: {sample.email}")
    print(f"  - Members: {len(generator.members[sample.id])}")
    print(f"  - Owners: {len(generator.owners[sample.id])}")


def example_scan_and_delete(output_dir: Path):
    """Example 2: Scan, delete and export."""
    print("\n" + "="*70)
    print("Example 2: Scan, Delete and Export")
    print("="*70)

    generator = DummyDataGenerator(seed=123, domain="example.com")
    generator.generate_groups(count=120, empty_ratio=0.05)
    directory = generator.build_directory(page_size=50)
    sheet = InMemoryReportSheet()
    notifier = LoggingNotifier("it@example.com")

    store = JsonPropertyStore(output_dir / "properties.json")
    scanner = EmptyGroupScanner(directory, sheet, notifier, store=store)
    deleter = EmptyGroupDeleter(directory, sheet)
    surface = CommandSurface(scanner, deleter, store, TriggerRegistry(store), confirm=lambda prompt: True)

    scan = surface.dispatch(LIST_EMPTY_GROUPS)
    print(f"✓ Evaluated {scan.groups_evaluated} groups over {directory.pages_served} pages")
    print(f"✓ Found {scan.empty_groups} empty groups, {len(notifier.sent)} email(s) sent")

    if scan.rows:
        directory.failing_deletes = {scan.rows[0].email}

    deletion = surface.dispatch(DELETE_EMPTY_GROUPS)
    print(f"✓ Deleted {deletion.deleted} groups, {deletion.failed} failed")

    files = ReportExporter(output_dir, include_timestamp=False).export(
        sheet.read_all_rows(), ["csv", "json", "excel"]
    )
    print(f"\nGenerated Files:")
    for format_type, file_path in files.items():
        print(f"  {format_type.upper()}: {file_path.name}")


def main():
    output_dir = Path("./example_reports")
    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir()

    example_generate_directory()
    example_scan_and_delete(output_dir)

    print(f"\n✓ All reports saved to: {output_dir.absolute()}")


if __name__ == "__main__":
    main()
