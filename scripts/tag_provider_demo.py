"""
Tag provider walkthrough: basic tags, groups, model binding, alarms,
history, export/import and a trend chart.

Usage:
  python scripts/tag_provider_demo.py --output temp/demo
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tagcad import TagGroup, TagRegistry  # noqa: E402
from tagcad.models import MountingBracket  # noqa: E402
from tagcad.visualizer import plot_tag_history  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Walk through the tag registry features",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--output", type=Path, default=REPO_ROOT / "temp" / "demo",
        help="Directory for the snapshot JSON and trend chart"
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    tags = TagRegistry()

    print("=== Basic tag operations ===")
    tags.register_tag('machine.temperature', {
        'default_value': 20, 'unit': 'degC', 'min': -10, 'max': 100,
        'description': 'Machine operating temperature',
    })
    tags.subscribe('machine.temperature', lambda value, old, tag: print(
        f"  temperature changed: {old}{tag.unit} -> {value}{tag.unit}"))
    tags.set_value('machine.temperature', 25)
    tags.set_value('machine.temperature', 30)

    print("\n=== Tag groups ===")
    printer = TagGroup('printer', tags)
    printer.add_tag('temperature', {'default_value': 200, 'unit': 'degC'})
    printer.add_tag('speed', {'default_value': 50, 'unit': 'mm/s'})
    printer.add_tag('layer_height', {'default_value': 0.2, 'unit': 'mm'})
    print(f"  printer settings: {printer.get_all_values()}")

    print("\n=== Model integration ===")
    bracket = MountingBracket(registry=tags)
    tags.register_tag('mounting-bracket.width', {'default_value': 50, 'min': 20, 'max': 120, 'unit': 'mm'})
    bracket.tag_group.subscribe('width', lambda value, old, tag: bracket.regenerate())
    bracket.set_param('width', 75)
    bracket.set_param('width', 500)
    print(f"  bracket params: {bracket.params}")
    print(f"  bracket volume: {bracket.geometry.volume:.1f} mm^3")

    print("\n=== Range validation ===")
    tags.register_tag('motor.rpm', {'default_value': 1000, 'min': 0, 'max': 5000, 'unit': 'RPM'})
    tags.set_value('motor.rpm', 6000)
    print(f"  motor rpm (clamped): {tags.get_value('motor.rpm')}")
    for alarm in tags.get_alarms('motor.rpm'):
        print(f"  alarm {alarm.severity.value}: {alarm.message}")

    print("\n=== History ===")
    for i in range(5):
        tags.set_value('motor.rpm', 1000 + i * 500)
    for entry in tags.get_history('motor.rpm', 5):
        print(f"  {entry.value} RPM ({entry.quality.value})")

    print("\n=== Export / import ===")
    args.output.mkdir(parents=True, exist_ok=True)
    snapshot = tags.export_values(['machine.temperature', 'motor.rpm'])
    snapshot_path = args.output / 'snapshot.json'
    with open(snapshot_path, 'w', encoding='utf-8') as f:
        json.dump(snapshot, f, indent=2)
    tags.import_values(snapshot)
    print(f"  snapshot saved to {snapshot_path} and restored")

    chart = plot_tag_history(tags, ['motor.rpm', 'machine.temperature'], args.output / 'trend.png')
    print(f"  trend chart: {chart}")

    bracket.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
