import argparse
import logging
import sys
from typing import List, Optional

from sqla_auto_generator.config_validation import load_config
from sqla_auto_generator.ast_codegen_main import generate_code_from_database
from sqla_auto_generator.exceptions import MappingGeneratorError

# Import colored logging
from sqla_auto_generator.colored_logging import (
    setup_colored_logging,
    get_colored_logger,
    log_success,
    log_progress,
    log_highlight,
    log_section
)

# Note: Colored logging will be configured after parsing args
logger = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqla-auto-generator",
        description="Generate typed SQLAlchemy Core table mappings from an existing PostgreSQL schema.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        help="Source root to generate the package under. Overrides config file setting.",
    )
    parser.add_argument(
        "-p",
        "--package-name",
        help="Dotted package name of the generated modules. Overrides config file setting.",
    )
    parser.add_argument(
        "-s",
        "--schema",
        dest="schemas",
        action="append",
        help="Database schema to introspect; repeat for several. Overrides config file setting.",
    )
    parser.add_argument(
        "--database-url",
        help="Connection URL. Takes precedence over DATABASE_URL and the discrete database settings.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose DEBUG logging for the generator tool.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (useful for CI/CD environments).",
    )
    return parser


def main(argv: Optional[List[str]] = None):
    # --- Argument Parsing ---
    args = build_parser().parse_args(argv)

    # --- Logging Setup ---
    # Configure colored logging based on command line arguments
    use_colors = not args.no_color
    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_colored_logging(level=log_level, use_colors=use_colors)

    # Get logger for this module
    global logger
    logger = get_colored_logger(__name__)

    if args.verbose:
        logger.debug("Verbose mode enabled. DEBUG level logging activated.")
    if args.no_color:
        logger.debug("Color output disabled.")

    # --- Main Execution Pipeline ---
    try:
        # 1. Load Configuration
        log_progress(logger, "Loading configuration...")
        config = load_config(args.config, args)
        log_success(logger, "Configuration loaded and validated successfully.")
        logger.debug(f"Effective configuration loaded: {config.model_dump(exclude={'database'})}")

        # 2. Read the catalog and generate the package
        written = generate_code_from_database(config)

        # --- Success ---
        log_section(logger, "COMPLETION")
        log_highlight(logger, f"Package '{config.package_name}': {len(written)} files written")

    # --- Error Handling ---
    except MappingGeneratorError as e:
        logger.error(f"{type(e).__name__}: {e}", exc_info=args.verbose)
        sys.exit(1)
    except Exception as e:
        # Catch any other unexpected exceptions
        logger.error(
            f"An unexpected error occurred during generation: {e}", exc_info=True
        )  # Always show traceback for unexpected
        sys.exit(1)


# --- Script Entry Point ---
if __name__ == "__main__":
    main()
