"""
TagCAD - parametric model generator

CLI entry point:
  (none)       : Generate every catalog model with catalog values
  --model ID   : Generate only the given model(s)
  --set T=V    : Write tag T (e.g. mounting-bracket.width=75) before generating
  --list       : List catalog models and exit
"""

from pathlib import Path
from typing import List, Tuple
import argparse
import json
import logging
import sys

import yaml

from .config import DEFAULT_CATALOG_PATH, Catalog
from .exporter import ExportFormat, GenerationStatus, batch_generate, save_manifest
from .tag_provider import TagRegistry


logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


def parse_assignment(text: str) -> Tuple[str, object]:
    """Parse 'tag.name=value'; the value is read as YAML (75 -> int, true -> bool)."""
    if '=' not in text:
        raise argparse.ArgumentTypeError(f"Expected TAG=VALUE, got {text!r}")
    name, raw = text.split('=', 1)
    name = name.strip()
    if not name:
        raise argparse.ArgumentTypeError(f"Missing tag name in {text!r}")
    return name, yaml.safe_load(raw)


def list_models(catalog: Catalog) -> int:
    for category, info in catalog.categories.items():
        title = info.get('name', category) if isinstance(info, dict) else category
        print(f"\n[{title}]")
        for entry in catalog.by_category(category):
            print(f"  {entry.id:<20} {entry.description}")
    return 0


def run_generate(
    catalog: Catalog,
    model_ids: List[str],
    assignments: List[Tuple[str, object]],
    output_dir: Path,
    fmt: ExportFormat,
    load_tags: Path = None,
) -> int:
    """Create models on a shared registry, apply tag writes, export files."""
    logger.info("=== Generate ===")

    registry = TagRegistry()
    catalog.register_tags(registry)

    try:
        entries = [catalog.get(m) for m in model_ids] if model_ids else list(catalog.models)
    except KeyError as e:
        logger.error(str(e))
        return 1

    models = [entry.create(registry) for entry in entries]
    logger.info(f"Created {len(models)} model(s), {len(registry)} tag(s)")

    if load_tags is not None:
        with open(load_tags, 'r', encoding='utf-8') as f:
            registry.import_values(json.load(f))
        logger.info(f"Imported tag values from: {load_tags}")

    for name, value in assignments:
        tag = registry.set_value(name, value)
        if tag.value != value:
            logger.warning(f"  {name}: requested {value}, clamped to {tag.value}")

    results = batch_generate(models, output_dir, fmt)

    save_manifest(results, output_dir / 'manifest.json')
    with open(output_dir / 'tags.json', 'w', encoding='utf-8') as f:
        json.dump(registry.export_values(), f, indent=2, ensure_ascii=False)

    success_count = sum(1 for r in results if r.status == GenerationStatus.SUCCESS)
    for result in results:
        if result.status == GenerationStatus.FAILED:
            logger.error(f"  -> {result.model_name} FAILED: {result.error_message}")

    print(f"\n[Generation Complete]")
    print(f"  Success: {success_count}/{len(results)}")
    print(f"  Output: {output_dir}")

    return 0 if success_count == len(results) else 1


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Parametric model generator with tag-driven parameters',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tagcad.main                                   # All models as STL
  python -m tagcad.main --model enclosure --format step   # One model as STEP
  python -m tagcad.main --set mounting-bracket.width=75   # Override through tags
"""
    )

    parser.add_argument(
        '--list',
        action='store_true',
        help='List catalog models and exit'
    )
    parser.add_argument(
        '--model',
        action='append',
        default=[],
        help='Model id to generate (repeatable, default: all)'
    )
    parser.add_argument(
        '--set',
        dest='assignments',
        action='append',
        default=[],
        type=parse_assignment,
        metavar='TAG=VALUE',
        help='Write a tag value before generating (repeatable)'
    )
    parser.add_argument(
        '--load-tags',
        type=Path,
        default=None,
        help='JSON tag snapshot (as written to tags.json) to import before generating'
    )
    parser.add_argument(
        '--format',
        choices=[f.value for f in ExportFormat],
        default=None,
        help='Output format (default: catalog setting or stl)'
    )
    parser.add_argument(
        '--output-dir',
        type=Path,
        default=None,
        help='Output directory (default: catalog setting or dist/)'
    )
    parser.add_argument(
        '--config',
        type=Path,
        default=DEFAULT_CATALOG_PATH,
        help='Catalog file path (default: bundled index.yaml)'
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if not args.config.exists():
        logger.error(f"Config file not found: {args.config}")
        return 1

    catalog = Catalog.load(args.config)
    logger.info(f"Loaded catalog from: {args.config}")

    if args.list:
        return list_models(catalog)

    fmt = ExportFormat(args.format or catalog.settings.get('format', 'stl'))
    output_dir = args.output_dir or Path(catalog.settings.get('output_dir', 'dist'))

    return run_generate(catalog, args.model, args.assignments, output_dir, fmt, args.load_tags)


if __name__ == '__main__':
    sys.exit(main())
