from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the snapshot4ai CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="snapshot4ai",
        description="Snapshot a directory tree, index its contents and search it.",
    )

    # --- Input ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help="Directory to scan (defaults to the configured or current directory).",
    )

    # --- Queries ---
    p.add_argument(
        "-s", "--search",
        dest="query",
        default=None,
        help="Print the paths whose name or content contains QUERY (case-insensitive).",
    )
    p.add_argument(
        "--show",
        dest="show_path",
        default=None,
        help="Print the indexed content of a file, e.g. '/src/main.py'.",
    )
    p.add_argument(
        "--tokens",
        action="store_true",
        help="With --show, also print the estimated token count.",
    )
    p.add_argument(
        "--model",
        dest="target_model",
        default=None,
        help="Target model for token estimates.",
    )

    # --- Rendering ---
    p.add_argument(
        "--sizes",
        action="store_true",
        help="Show file sizes in the tree.",
    )
    p.add_argument(
        "--no-tree",
        action="store_true",
        help="Do not print the directory tree.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit the snapshot (tree, stats, search results) as JSON.",
    )

    # --- Runtime ---
    p.add_argument(
        "-j", "--concurrency",
        dest="max_concurrency",
        type=int,
        default=None,
        help="Number of files read concurrently while scanning.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this rotating file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Overrides; keys left at None are not applied.
    """
    overrides: Dict[str, Any] = {
        "input_path": args.input_path,
        "max_concurrency": args.max_concurrency,
        "target_model": args.target_model,
        "log_file": args.log_file,
    }
    if args.sizes:
        overrides["show_sizes"] = True
    if args.debug:
        overrides["log_level"] = "DEBUG"
    return overrides
