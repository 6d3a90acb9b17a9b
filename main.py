"""
Main entry point for the administrative area tree builder.

This script provides the command-line interface for building the area tree
from a division code listing and writing it to an output directory.
"""

import argparse
import sys
import time
from pathlib import Path

from cn_admin_tree.config import TreeBuildConfig, VALID_LOG_LEVELS
from cn_admin_tree.logging_config import setup_logging
from cn_admin_tree.area_engine import AreaTreeEngine
from cn_admin_tree.output.output_generator import OutputGenerator
from cn_admin_tree.matching.area_matcher import AreaMatcher
from cn_admin_tree.hierarchy.hierarchy_config import classify_code
from cn_admin_tree.hierarchy.tree_annotator import DEFAULT_MAX_DEPTH
from cn_admin_tree.exceptions import (
    ConfigurationError,
    DataLoadError,
    DataQualityError,
    FileAccessError,
    MalformedCodeError,
    OutputGenerationError
)


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="CN Admin Tree - build the province/prefecture/county tree from division codes"
    )

    parser.add_argument(
        "--input",
        required=True,
        help="Path to the division code listing (one 'name code' record per line)"
    )

    parser.add_argument(
        "--output",
        required=True,
        help="Output directory for results"
    )

    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Encoding of the input file (default: utf-8)"
    )

    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Deepest tree level to annotate (default: {DEFAULT_MAX_DEPTH})"
    )

    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation, 0 for single-line output (default: 2)"
    )

    parser.add_argument(
        "--no-compact",
        action="store_true",
        help="Do not write data.json (forest without parentIds/parentNames/fullName)"
    )

    parser.add_argument(
        "--no-index-csv",
        action="store_true",
        help="Do not write the flat index CSV"
    )

    parser.add_argument(
        "--no-diagnostics-csv",
        action="store_true",
        help="Do not write the diagnostics CSV"
    )

    parser.add_argument(
        "--fail-on-diagnostics",
        action="store_true",
        help="Exit with an error if any line was skipped or any id is duplicated"
    )

    parser.add_argument(
        "--lookup",
        action="append",
        default=[],
        metavar="QUERY",
        help="Look up an area by id or (partial) name after building; may be repeated"
    )

    parser.add_argument(
        "--lookup-threshold",
        type=int,
        default=80,
        help="Minimum similarity score for name lookups (0-100, default: 80)"
    )

    parser.add_argument(
        "--log-level",
        choices=VALID_LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-file",
        help="Log file path (default: timestamped file in the output directory)"
    )

    return parser.parse_args(argv)


def print_lookup_results(matcher: AreaMatcher, query: str):
    """Print id or fuzzy name lookup results for one query."""
    print(f"\nLookup '{query}':")

    area = matcher.get(query.strip())
    if area is not None:
        print(f"  {area.id}  {area.full_name}  ({classify_code(area.id)})")
        return

    matches = matcher.search(query)
    if not matches:
        print("  No matches")
        return

    for match in matches:
        print(f"  {match.area.id}  {match.area.full_name}  ({classify_code(match.area.id)}, score {match.score:.1f})")


def print_build_summary(result, build_stats):
    """Print a summary of the build to the console."""
    print("\n" + "=" * 60)
    print("AREA TREE BUILD COMPLETED")
    print("=" * 60)

    print(f"\nTotal provinces: {len(result.forest):,}")
    print(f"Total areas: {len(result.index):,}")
    for level, count in build_stats.level_counts.items():
        print(f"  {level}: {count:,}")
    print(f"Processing time: {build_stats.processing_time:.2f} seconds")

    if result.diagnostics:
        print(f"\nDiagnostics: {len(result.diagnostics):,}")
        for kind, count in result.get_diagnostic_counts().items():
            print(f"  {kind}: {count:,}")


def main(argv=None):
    """Main application entry point."""
    start_time = time.time()
    args = parse_arguments(argv)

    try:
        print("CN Admin Tree Starting...")
        print(f"Input file: {args.input}")
        print(f"Output directory: {args.output}")

        config = TreeBuildConfig(
            input_file=args.input,
            output_directory=args.output,
            encoding=args.encoding,
            max_depth=args.max_depth,
            write_compact_output=not args.no_compact,
            write_index_csv=not args.no_index_csv,
            write_diagnostics_csv=not args.no_diagnostics_csv,
            json_indent=args.indent,
            fail_on_diagnostics=args.fail_on_diagnostics,
            lookup_threshold=args.lookup_threshold,
            log_level=args.log_level,
            log_file=args.log_file
        )

        logger = setup_logging(config)
        logger.info("CN Admin Tree initialized")
        logger.info(f"Configuration: {config.to_dict()}")

        engine = AreaTreeEngine(config, logger)
        output_generator = OutputGenerator(config, logger)

        if not output_generator.validate_output_directory():
            raise FileAccessError(
                "Output directory is not writable",
                file_path=config.output_directory,
                operation="write"
            )

        result, build_stats = engine.run_complete_build()

        print("Generating output files...")
        generated_files = output_generator.generate_all_outputs(result, build_stats)

        print_build_summary(result, build_stats)

        print(f"\nGenerated Output Files:")
        for file_type, file_path in generated_files.items():
            print(f"  {file_type}: {Path(file_path).name}")

        if args.lookup:
            matcher = AreaMatcher(result.index, threshold=config.lookup_threshold,
                                  logger=logger.logger)
            for query in args.lookup:
                print_lookup_results(matcher, query)

        print(f"\nCompleted in {time.time() - start_time:.2f} seconds")
        logger.info("Application completed successfully")
        return 0

    except DataQualityError as e:
        print(f"\nData Quality Error: {e}", file=sys.stderr)
        if e.recommendations:
            print("Recommendations:", file=sys.stderr)
            for rec in e.recommendations:
                print(f"  - {rec}", file=sys.stderr)
        return 2

    except MalformedCodeError as e:
        print(f"\nMalformed Code: {e}", file=sys.stderr)
        if e.line:
            print(f"Offending line: {e.line}", file=sys.stderr)
        return 3

    except (FileNotFoundError, FileAccessError, DataLoadError) as e:
        print(f"\nFile Error: {e}", file=sys.stderr)
        print("Please check that the input file exists and is readable.", file=sys.stderr)
        return 4

    except (ConfigurationError, OutputGenerationError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nProcess interrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"\nError: Unexpected error: {e}", file=sys.stderr)
        print("Please check the log files for more details.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
