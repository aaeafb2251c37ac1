"""Command-line interface for eezsuit."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path

from eezsuit import __version__
from eezsuit.config import RunConfig, load_run_config
from eezsuit.errors import EezsuitError
from eezsuit.layers import inspect_raster, load_zones, read_raster, resample_to, write_raster
from eezsuit.layers.align import RESAMPLING_CHOICES
from eezsuit.logging_utils import LogOptions, configure_logging
from eezsuit.reporting import format_table, species_slug, write_result_artifacts
from eezsuit.species import format_species, get_species, list_species, species_as_dict
from eezsuit.suitability import SuitabilityEvaluator, SuitabilityResult

LOGGER = logging.getLogger("eezsuit.cli")


def _add_layer_arguments(parser: argparse.ArgumentParser) -> None:
    """Register input layer and output arguments shared by evaluation commands."""
    parser.add_argument("--config", help="Path to a JSON run config.")
    parser.add_argument("--sst", help="Mean sea-surface temperature raster (°C).")
    parser.add_argument("--depth", help="Depth raster (elevation, negative below sea level).")
    parser.add_argument("--zones", help="EEZ zone polygons (GeoJSON, shapefile, GeoPackage).")
    parser.add_argument("--zone-id-field", help="Zone identifier field (default: rgn).")
    parser.add_argument("--zone-name-field", help="Zone display name field.")
    parser.add_argument("--zone-area-field", help="Zone total area field in km² (default: area_km2).")
    parser.add_argument(
        "--resample-depth",
        action="store_true",
        default=None,
        help="Resample the depth raster onto the SST grid before evaluating.",
    )
    parser.add_argument(
        "--resampling",
        choices=RESAMPLING_CHOICES,
        help="Resampling method for --resample-depth (default: nearest).",
    )
    parser.add_argument("--output-dir", help="Directory for the zone table and report.")
    parser.add_argument(
        "--map",
        dest="write_map",
        action="store_true",
        default=None,
        help="Render a choropleth map into the output directory.",
    )
    parser.add_argument(
        "--raster-out",
        dest="write_raster",
        action="store_true",
        default=None,
        help="Write the suitability raster as GeoTIFF into the output directory.",
    )


def _add_evaluate_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the evaluate subcommand."""
    evaluate = subparsers.add_parser("evaluate", help="Compute suitable area per zone for a species.")
    evaluate.add_argument("species_name", help="Species name used in titles and file names.")
    evaluate.add_argument("min_temp", type=float, help="Minimum preferred SST (°C).")
    evaluate.add_argument("max_temp", type=float, help="Maximum preferred SST (°C).")
    evaluate.add_argument("min_depth", type=float, help="Minimum preferred depth (m, positive).")
    evaluate.add_argument("max_depth", type=float, help="Maximum preferred depth (m, positive).")
    _add_layer_arguments(evaluate)


def _add_batch_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the batch subcommand."""
    batch = subparsers.add_parser("batch", help="Evaluate several species presets on the same layers.")
    batch.add_argument(
        "--species",
        action="append",
        required=True,
        help="Species preset name (repeatable).",
    )
    _add_layer_arguments(batch)


def _add_species_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the species list/show subcommands."""
    species = subparsers.add_parser("species", help="List or inspect species presets.")
    species_sub = species.add_subparsers(dest="species_command", required=True)
    species_list = species_sub.add_parser("list", help="List available species.")
    species_list.add_argument("--format", choices=("text", "json"), default="text")
    species_show = species_sub.add_parser("show", help="Show species bounds.")
    species_show.add_argument("name", help="Species preset name.")
    species_show.add_argument("--format", choices=("text", "json"), default="text")


def _add_inspect_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the inspect subcommand."""
    inspect = subparsers.add_parser("inspect", help="Print raster metadata as JSON.")
    inspect.add_argument("path", help="Raster path.")
    inspect.add_argument("--sample", action="store_true", help="Include sampled value range.")


def _resolve_config(args: argparse.Namespace) -> RunConfig:
    """Merge an optional config file with CLI overrides."""
    config = load_run_config(Path(args.config)) if args.config else RunConfig()
    config = config.with_overrides(
        sst=args.sst,
        depth=args.depth,
        zones=args.zones,
        zone_id_field=args.zone_id_field,
        zone_name_field=args.zone_name_field,
        zone_area_field=args.zone_area_field,
        resample_depth=args.resample_depth,
        resampling=args.resampling,
        write_map=args.write_map,
        write_raster=args.write_raster,
        output_dir=args.output_dir,
    )
    config.require_inputs()
    return config


def build_evaluator(config: RunConfig) -> SuitabilityEvaluator:
    """Load the layers named by a run config into an evaluator."""
    config.require_inputs()
    sst = read_raster(config.sst)
    depth = read_raster(config.depth)
    if config.resample_depth:
        LOGGER.info("Resampling depth raster onto the SST grid (%s).", config.resampling)
        depth = resample_to(depth, sst, resampling=config.resampling)
    zones = load_zones(
        config.zones,
        id_field=config.zone_id_field,
        name_field=config.zone_name_field,
        area_field=config.zone_area_field,
    )
    return SuitabilityEvaluator(sst, depth, zones)


def _emit_result(
    evaluator: SuitabilityEvaluator,
    result: SuitabilityResult,
    config: RunConfig,
) -> None:
    """Print a result table and write any requested artifacts."""
    print(f"{result.species_name}")
    print(format_table(result))
    if config.output_dir is None:
        if config.write_map or config.write_raster:
            LOGGER.warning("--map and --raster-out require --output-dir; skipping.")
        return
    extra: dict[str, Path] = {}
    slug = species_slug(result.species_name)
    if config.write_map:
        extra["map"] = evaluator.render_map(result, config.output_dir / f"{slug}_map.png")
    if config.write_raster:
        extra["raster"] = write_raster(config.output_dir / f"{slug}_suitability.tif", result.raster)
    write_result_artifacts(result, config.output_dir, extra_artifacts=extra)


def _run_command(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Dispatch a parsed command and return its exit code."""
    if args.command == "version":
        print(__version__)
        return 0
    if args.command == "inspect":
        info = inspect_raster(Path(args.path), sample=args.sample)
        print(json.dumps(asdict(info), indent=2))
        return 0
    if args.command == "species":
        if args.species_command == "list":
            species_list = list_species()
            if args.format == "json":
                print(json.dumps([species_as_dict(item) for item in species_list], indent=2))
            else:
                for item in species_list:
                    print(f"{item.name}: {item.common_name}")
            return 0
        if args.species_command == "show":
            species = get_species(args.name)
            if not species:
                LOGGER.error("Unknown species: %s", args.name)
                return 1
            if args.format == "json":
                print(json.dumps(species_as_dict(species), indent=2))
            else:
                print(format_species(species))
            return 0
    if args.command == "evaluate":
        config = _resolve_config(args)
        evaluator = build_evaluator(config)
        result = evaluator.evaluate(
            args.species_name,
            args.min_temp,
            args.max_temp,
            args.min_depth,
            args.max_depth,
        )
        _emit_result(evaluator, result, config)
        return 0
    if args.command == "batch":
        presets = []
        for name in args.species:
            species = get_species(name)
            if not species:
                LOGGER.error("Unknown species: %s", name)
                return 1
            presets.append(species)
        config = _resolve_config(args)
        evaluator = build_evaluator(config)
        for species in presets:
            _emit_result(evaluator, evaluator.evaluate_species(species), config)
        return 0

    parser.error("Unknown command")
    return 2


def main(argv: list[str] | None = None) -> int:
    """Run the CLI entrypoint and return an exit code."""
    parser = argparse.ArgumentParser(
        prog="eezsuit",
        description="EEZ habitat suitability for marine species",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce log output to warnings and errors.",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON on stderr.",
    )
    parser.add_argument(
        "--log-file",
        help="Optional path for JSON log output.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_evaluate_parser(subparsers)
    _add_batch_parser(subparsers)
    _add_species_parser(subparsers)
    _add_inspect_parser(subparsers)
    subparsers.add_parser("version", help="Print the current version.")

    args = parser.parse_args(argv)
    configure_logging(
        LogOptions(
            verbose=args.verbose or 0,
            quiet=bool(args.quiet),
            log_file=Path(args.log_file) if args.log_file else None,
            json_console=bool(args.log_json),
        )
    )

    try:
        return _run_command(args, parser)
    except EezsuitError as exc:
        LOGGER.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
