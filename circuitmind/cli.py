#!/usr/bin/env python3
"""
CircuitMind CLI

Command-line interface for the physical design engine. Every command reads
a schematic canvas document (JSON) and writes JSON to stdout or a file;
status messages go to stderr.

Usage:
    circuitmind place <schematic.json> [options]
    circuitmind route <schematic.json> [options]
    circuitmind score <schematic.json> [options]
    circuitmind run <schematic.json> [options]
    circuitmind bom <schematic.json> [--grouped] [--csv]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from . import __version__


def status(message: str):
    """Print a status line to stderr so stdout stays machine-readable."""
    print(message, file=sys.stderr)


def setup_logging(verbose: bool = False):
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def write_output(payload: Any, output: Optional[str]):
    """Write JSON (or plain text) to the output file, or stdout."""
    text = payload if isinstance(payload, str) else json.dumps(payload, indent=2)
    if output:
        output_path = Path(output)
        output_path.write_text(text if text.endswith("\n") else text + "\n")
        status(f"Saved to: {output_path}")
    else:
        print(text)


def load_document(args):
    """Load the schematic and apply board size overrides from the command line."""
    from .board.schematic import load_schematic

    document = load_schematic(args.schematic)
    if getattr(args, 'width', None) is not None:
        document.board_size.width = args.width
    if getattr(args, 'height', None) is not None:
        document.board_size.height = args.height

    status(f"Loaded schematic: {args.schematic}")
    status(f"  Components: {len(document.components)}")
    status(f"  Nets: {len(document.nets)}")
    return document


def build_engine(args):
    """Create a DesignEngine from --config/--patterns/--iterations."""
    from .engine import DesignEngine, EngineConfig, load_engine_config

    config = load_engine_config(args.config) if getattr(args, 'config', None) else EngineConfig()
    if getattr(args, 'patterns', None):
        config.patterns_path = args.patterns
    if getattr(args, 'iterations', None) is not None:
        if args.iterations < 0:
            raise ValueError(f"--iterations must be >= 0, got {args.iterations}")
        config.placement.iterations = args.iterations
    if getattr(args, 'clamp', None):
        config.placement.clamp_mode = args.clamp
    return DesignEngine(config)


def print_zones(components):
    from .placement.zones import ZoneClassifier

    status("\nZones:")
    for zone, refs in ZoneClassifier.summarize(components).items():
        if refs:
            status(f"  {zone.value}: {len(refs)} components")


def cmd_place(args):
    """Classify and place components."""
    document = load_document(args)
    engine = build_engine(args)

    components = engine.classify(document.components)
    print_zones(components)

    status("\nRunning force-directed placement...")

    def progress_callback(state):
        if state.iteration % 10 == 0:
            status(f"  Iteration {state.iteration}: temperature={state.temperature:.2f} "
                   f"max_move={state.max_movement:.2f}")

    placed = engine.place(components, document.nets, document.board_size,
                          callback=progress_callback if args.verbose else None)

    write_output({"components": [c.to_dict() for c in placed]}, args.output)
    return 0


def cmd_route(args):
    """Generate tracks for the components as currently positioned."""
    document = load_document(args)
    engine = build_engine(args)

    components = engine.classify(document.components)
    tracks = engine.route(components, document.nets)
    status(f"  Tracks: {len(tracks)}")

    write_output({"tracks": [t.to_dict() for t in tracks]}, args.output)
    return 0


def cmd_score(args):
    """Score the design as currently positioned."""
    document = load_document(args)
    engine = build_engine(args)

    components = engine.classify(document.components)
    tracks = engine.route(components, document.nets)
    design_score = engine.score(components, document.nets, tracks)

    if args.format == 'markdown':
        write_output(design_score.to_markdown(), args.output)
    elif args.format == 'text':
        write_output(design_score.summary(), args.output)
    else:
        write_output(design_score.to_dict(), args.output)
    return 0


def cmd_run(args):
    """Run the whole pipeline: classify, place, route, score."""
    document = load_document(args)
    engine = build_engine(args)

    result = engine.run(document.components, document.nets, document.board_size)
    print_zones(result.components)
    status("")
    status(result.score.summary())

    write_output(result.to_dict(), args.output)
    return 0


def cmd_bom(args):
    """Generate a bill of materials."""
    from .bom import bom_to_csv, generate_bom

    document = load_document(args)
    lines = generate_bom(document.components, grouped=args.grouped)

    if args.csv:
        write_output(bom_to_csv(lines), args.output)
    else:
        write_output([line.to_dict() for line in lines], args.output)
    return 0


def add_common_arguments(parser: argparse.ArgumentParser, engine: bool = True):
    parser.add_argument('schematic', help='Path to schematic canvas JSON')
    parser.add_argument('-o', '--output', help='Output file path (default: stdout)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    if engine:
        parser.add_argument('--width', type=float, help='Board width override')
        parser.add_argument('--height', type=float, help='Board height override')
        parser.add_argument('--config', help='Engine config YAML file')
        parser.add_argument('--patterns', help='Custom zone patterns YAML file')


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="CircuitMind - PCB placement, routing preview and scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  circuitmind run schematic.json -o design.json
  circuitmind place schematic.json --iterations 100 --width 800 --height 600
  circuitmind score placed.json --format markdown
  circuitmind bom schematic.json --grouped --csv
        """,
    )

    parser.add_argument('--version', action='version', version=f'circuitmind {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Place command
    place_parser = subparsers.add_parser('place', help='Classify and place components')
    add_common_arguments(place_parser)
    place_parser.add_argument('--iterations', type=int, help='Iteration budget (default: 50)')
    place_parser.add_argument('--clamp', choices=['axis', 'vector'],
                              help='Displacement limit mode (default: axis)')

    # Route command
    route_parser = subparsers.add_parser('route', help='Generate straight-line tracks')
    add_common_arguments(route_parser)

    # Score command
    score_parser = subparsers.add_parser('score', help='Score the current design')
    add_common_arguments(score_parser)
    score_parser.add_argument('--format', choices=['json', 'text', 'markdown'],
                              default='json', help='Report format (default: json)')

    # Run command
    run_parser = subparsers.add_parser('run', help='Classify, place, route and score')
    add_common_arguments(run_parser)
    run_parser.add_argument('--iterations', type=int, help='Iteration budget (default: 50)')
    run_parser.add_argument('--clamp', choices=['axis', 'vector'],
                            help='Displacement limit mode (default: axis)')

    # BOM command
    bom_parser = subparsers.add_parser('bom', help='Generate a bill of materials')
    add_common_arguments(bom_parser, engine=False)
    bom_parser.add_argument('--grouped', action='store_true',
                            help='Merge parts with the same type and value')
    bom_parser.add_argument('--csv', action='store_true', help='Write CSV instead of JSON')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    # Dispatch command
    commands = {
        'place': cmd_place,
        'route': cmd_route,
        'score': cmd_score,
        'run': cmd_run,
        'bom': cmd_bom,
    }

    try:
        return commands[args.command](args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
