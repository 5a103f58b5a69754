"""Cephalopod Solver - Main Entry Point

This module provides the command-line interface for the solver. It reads the
depth bound and the initial board, runs the exhaustive search and prints the
aggregated result on a single line.

Example usage:
    # Read the input from stdin
    python main.py < board.txt

    # Read the input from a file and show cache statistics
    python main.py board.txt --stats

    # Split the search across 4 processes
    python main.py board.txt --workers 4
"""

import argparse
import logging
import sys
from typing import List, Optional
from colorama import Fore, Style, just_fix_windows_console

from cephalopod.config import ConfigError, GameConfig, load_config
from cephalopod.game import GameState
from cephalopod.search import ResultCache, SearchEngine, parallel_compute

logger = logging.getLogger(__name__)

EXIT_INPUT_ERROR = 2


def setup_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description='Cephalopod Solver - Sum every board reachable within a depth bound',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('input', nargs='?', default=None,
                        help='Input file (default: read from stdin)')

    # Search arguments
    search_group = parser.add_argument_group('Search Options')
    search_group.add_argument('--no-cache', action='store_true',
                              help='Disable memoization and recompute every state')
    search_group.add_argument('--workers', type=int, default=1,
                              help='Number of worker processes (default: 1)')

    # Output arguments
    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument('--stats', action='store_true',
                              help='Print search statistics to stderr')
    output_group.add_argument('-v', '--verbose', action='store_true',
                              help='Enable debug logging')

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s [%(processName)s] %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )


def print_stats(engine: SearchEngine) -> None:
    """Print cache statistics of a sequential search to stderr."""
    stats = engine.cache.stats()
    print(Fore.CYAN + "Search statistics:" + Style.RESET_ALL, file=sys.stderr)
    print(f"  nodes visited : {engine.nodes}", file=sys.stderr)
    print(f"  cache entries : {stats['size']}", file=sys.stderr)
    print(f"  cache hits    : {stats['hits']} ({stats['hit_rate']:.1f}%)", file=sys.stderr)
    print(f"  cache misses  : {stats['misses']}", file=sys.stderr)


def run(config: GameConfig, args: argparse.Namespace) -> int:
    """Run the search described by `config` and return the aggregate."""
    state = GameState.init(config.grid)
    use_cache = not args.no_cache

    if args.workers > 1:
        parallel = parallel_compute(state, config.depth, args.workers, use_cache=use_cache)
        if args.stats:
            print(Fore.CYAN + "Search statistics:" + Style.RESET_ALL, file=sys.stderr)
            print(f"  root branches : {parallel.branches}", file=sys.stderr)
            print(f"  workers       : {parallel.workers}", file=sys.stderr)
            print(f"  duration      : {parallel.duration_seconds:.2f}s", file=sys.stderr)
        return parallel.result

    engine = SearchEngine(config.depth, ResultCache(enabled=use_cache))
    result = engine.compute(state)
    if args.stats:
        print_stats(engine)
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the Cephalopod Solver."""
    # Parse command-line arguments
    parser = setup_argument_parser()
    args = parser.parse_args(argv)
    if args.workers < 1:
        parser.error("--workers must be at least 1")

    just_fix_windows_console()
    configure_logging(args.verbose)

    # Read the input before any search work
    try:
        config = load_config(args.input)
    except ConfigError as e:
        print(Fore.RED + f"Invalid input: {e}" + Style.RESET_ALL, file=sys.stderr)
        return EXIT_INPUT_ERROR
    except OSError as e:
        print(Fore.RED + f"Cannot read input: {e}" + Style.RESET_ALL, file=sys.stderr)
        return EXIT_INPUT_ERROR

    logger.info("Searching to depth %d", config.depth)
    print(run(config, args))
    return 0


if __name__ == "__main__":
    sys.exit(main())
