"""
Print the hierarchy rebuilt from a JSON file of keyed items.

Input format:
{
  "items": [
    {"key": "00100", "title": "Index"},
    {"key": "00100/00100", "title": "First child"},
    ...
  ]
}
"""
import json
import sys
from pathlib import Path

from keytree.core.item import Item
from keytree.hierarchy.analyzer import HierarchyAnalyzer
from keytree.hierarchy.builder import HierarchyBuilder


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/visualize_key_hierarchy.py items.json")
        return

    items_file = Path(sys.argv[1])
    if not items_file.exists():
        print(f"ERROR: {items_file} not found!")
        return

    with open(items_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    items = [Item.from_dict(raw) for raw in data["items"]]
    print("=" * 70)
    print(f"KEY HIERARCHY: {items_file.name} ({len(items)} items)")
    print("=" * 70)

    for tree in HierarchyBuilder.build_forest(items):
        print(tree.format_outline())
        print()

    analysis = HierarchyAnalyzer().analyze(items)
    print("ISSUES:")
    if not analysis.issues:
        print("  none")
    for issue in analysis.issues:
        print(f"  [{issue.severity}] {issue.issue_type}: {issue.message}")

    print()
    print("STATISTICS:")
    for name, value in analysis.statistics.items():
        print(f"  {name}: {value}")


if __name__ == "__main__":
    main()
