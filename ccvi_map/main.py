"""
CCVI Map - Main Entry Point
Climate Vulnerability Index choropleth maps

Fetches region data for a boundary level and indicator from the CCVI data
service (falling back to built-in regions when it is unavailable), renders
the choropleth map and saves it as a standalone HTML file.

Usage:
    ccvi-map
    ccvi-map --boundary tehsil --indicator adaptive_capacity
    ccvi-map --list-options
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from ccvi_map.analysis.summary import summarize_collection
from ccvi_map.data.provider import DataProvider
from ccvi_map.models import RegionCollection
from ccvi_map.utils.browser import open_html_in_browser
from ccvi_map.utils.config_loader import PROJECT_ROOT, load_config
from ccvi_map.utils.logging import setup_logging
from ccvi_map.visualization.renderer import ChoroplethRenderer


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def _print_summary(summary: Dict[str, Any]) -> None:
    source = "built-in fallback data" if summary['is_fallback'] else "CCVI data service"
    print(f"""
Boundary: {summary['boundary_id']}
Indicator: {summary['indicator_id']}
Source: {source}
Regions: {summary['regions']}""")
    if summary['regions']:
        print(f"Indicator value: mean {summary['mean']:.2f}, "
              f"min {summary['min']:.2f}, max {summary['max']:.2f}")
    for label, count in summary['classes'].items():
        print(f"  {label}: {count}")
    if summary['placeholder_scores']:
        print(f"Warning: {summary['placeholder_scores']} regions have placeholder (random) scores")


async def list_options(provider: DataProvider) -> None:
    boundaries, indicators = await asyncio.gather(
        provider.list_boundaries(), provider.list_indicators()
    )
    print("\nBoundary levels:")
    for option in boundaries:
        print(f"  {option.id:<16} {option.name}")
    print("\nIndicators:")
    for option in indicators:
        unit = f" [{option.unit}]" if option.unit else ""
        print(f"  {option.id:<24} {option.name}{unit}")


async def render_map(
    config: Dict[str, Any],
    boundary_id: str,
    indicator_id: str,
    output_path: Path
) -> Optional[Path]:
    """
    Render one map and save it.

    Returns
    -------
    Path or None
        Saved file, None if rendering failed
    """
    loaded: Dict[str, RegionCollection] = {}
    renderer = ChoroplethRenderer.from_config(
        config,
        on_data_load=lambda collection: loaded.update(collection=collection),
        boundary_id=boundary_id,
        indicator_id=indicator_id
    )
    await renderer.initialize()
    try:
        if renderer.error:
            print(f"Error: {renderer.error}")
            return None

        _print_summary(summarize_collection(loaded['collection'], indicator_id))
        return renderer.save(output_path)
    finally:
        renderer.teardown()


def main(argv=None) -> int:
    """Main entry point for map generation."""
    parser = argparse.ArgumentParser(
        description="Render a Climate Vulnerability Index choropleth map to HTML"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: configs/config.yaml)"
    )
    parser.add_argument("--boundary", type=str, default=None, help="Boundary level id")
    parser.add_argument("--indicator", type=str, default=None, help="Indicator id")
    parser.add_argument("--output", type=str, default=None, help="Output HTML path")
    parser.add_argument(
        "--list-options",
        action="store_true",
        help="List available boundary levels and indicators and exit"
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1

    log_config = config.get("logging", {})
    log_file = log_config.get("file")
    setup_logging(
        log_file=PROJECT_ROOT / log_file if log_file else None,
        log_level=log_config.get("level", "INFO"),
        console=_as_bool(log_config.get("console", True))
    )

    print("""============================================================
CCVI Map - Climate Vulnerability Index
============================================================""")

    if args.list_options:
        asyncio.run(list_options(DataProvider.from_config(config)))
        return 0

    defaults = config.get("defaults", {})
    boundary_id = args.boundary or defaults.get("boundary", "district")
    indicator_id = args.indicator or defaults.get("indicator", "climate_vulnerability")

    output_config = config.get("output", {})
    if args.output:
        output_path = Path(args.output)
    else:
        output_path = PROJECT_ROOT / output_config.get("html", "output/ccvi_map.html")

    saved = asyncio.run(render_map(config, boundary_id, indicator_id, output_path))
    if saved is None:
        return 1

    print(f"\nMap saved to: {saved}")
    if _as_bool(output_config.get("auto_open_html", False)):
        open_html_in_browser(saved)
    return 0


if __name__ == "__main__":
    sys.exit(main())
