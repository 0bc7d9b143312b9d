"""Command-line interface for map generation."""

import argparse
import json
import logging
import sys
import time
import tomllib

import structlog

# Flags that map one-to-one onto MapConfig fields
OVERRIDE_FIELDS = (
    "width",
    "height",
    "seed",
    "sea_level",
    "elevation_amplitude",
    "warp_strength",
    "erosion_iterations",
    "moisture_scale",
)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Generate a procedural terrain map"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Preset name or TOML path (default: built-in defaults)",
    )
    parser.add_argument("--width", type=int, default=None, help="Grid width in cells")
    parser.add_argument("--height", type=int, default=None, help="Grid height in cells")
    parser.add_argument("--seed", type=int, default=None, help="Map seed")
    parser.add_argument("--sea-level", type=float, default=None, help="Sea level")
    parser.add_argument(
        "--elevation-amplitude", type=float, default=None, help="Noise elevation weight"
    )
    parser.add_argument(
        "--warp-strength", type=float, default=None, help="Domain warp strength"
    )
    parser.add_argument(
        "--erosion-iterations", type=int, default=None, help="Thermal erosion passes"
    )
    parser.add_argument(
        "--moisture-scale", type=float, default=None, help="Moisture scale"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Write the map payload as JSON to stdout instead of a summary",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def configure_logging(verbose: bool) -> None:
    """Configure structlog to render to stderr."""
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for map generation."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    # Import here to avoid slow startup for --help
    from pydantic import ValidationError

    from ..conversion import map_to_payload
    from .config import MapConfig, find_config, load_config
    from .generator import compute_biome_histogram, generate_terrain

    try:
        config = load_config(find_config(args.config)) if args.config else MapConfig()
        overrides = {
            name: getattr(args, name)
            for name in OVERRIDE_FIELDS
            if getattr(args, name) is not None
        }
        config = MapConfig.model_validate({**config.model_dump(), **overrides})
    except (FileNotFoundError, tomllib.TOMLDecodeError, ValidationError) as e:
        parser.error(str(e))

    start_time = time.time()
    result = generate_terrain(config)
    gen_time = time.time() - start_time

    if args.json:
        json.dump(map_to_payload(result), sys.stdout)
        sys.stdout.write("\n")
        return 0

    print(f"Generated {config.width}x{config.height} map with seed {config.seed}")
    print(f"Generation complete in {gen_time:.1f}s")
    print()

    total = result.cell_count
    print("Biomes:")
    for label, count in compute_biome_histogram(result).items():
        if count:
            print(f"  {label}: {count:,} ({count / total * 100:.1f}%)")

    print()
    print(f"Settlements: {len(result.settlements)}")
    for s in result.settlements:
        print(f"  #{s.id}: ({s.x:.1f}, {s.y:.1f}) size {s.size:.2f}")
    print(f"Roads: {len(result.roads)}")
    for a, b in result.roads:
        print(f"  {a} -> {b}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
