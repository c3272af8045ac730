from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merging
(defaults, persisted file, command-line overrides), the directory scan, and
rendering of the tree, search results or file content.

Exit codes: 0 success, 1 scan or query failure, 2 missing input directory,
130 interrupted.
"""

import asyncio
import json
import os
import sys
from typing import Any, Dict, List, Optional

from snapshot4ai.core.services.lifecycle import SnapshotLifecycle
from snapshot4ai.core.services.tokenizer import count_tokens
from snapshot4ai.core.services.validator import validate_config
from snapshot4ai.core.snapshot.builder import SnapshotBuilder
from snapshot4ai.core.snapshot.render import render_tree
from snapshot4ai.domain.config import get_default_config, load_config
from snapshot4ai.domain.errors import FileTooLargeError, SnapshotBuildError
from snapshot4ai.domain.snapshot_models import Snapshot
from snapshot4ai.infra.fs import normalize_path, open_local_directory
from snapshot4ai.infra.logging import LoggingConfig, configure_logging, get_logger
from snapshot4ai.interface.cli import args as cli_args

logger = get_logger(__name__)

_MERGE_KEYS = ("input_path", "max_concurrency", "target_model", "log_file", "show_sizes", "log_level")

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 1. Logging bootstrap (stderr, optional file)
    bootstrap_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=bootstrap_level, console=True, log_file=args.log_file))

    # 2. Configuration hierarchy
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if conf["log_level"] != bootstrap_level or (conf["log_file"] or None) != args.log_file:
        configure_logging(
            LoggingConfig(level=conf["log_level"], console=True, log_file=conf["log_file"] or None),
            force=True,
        )

    if args.dump_config:
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return 0

    # 3. Pre-flight input verification
    input_path = normalize_path(conf["input_path"], os.getcwd())
    if not os.path.isdir(input_path):
        logger.error(f"Input directory does not exist: {input_path}")
        print(f"ERROR: Input directory does not exist: {input_path}", file=sys.stderr)
        return 2

    # 4. Scan
    lifecycle = SnapshotLifecycle(SnapshotBuilder(max_concurrency=conf["max_concurrency"]))
    try:
        snapshot = asyncio.run(lifecycle.rebuild(open_local_directory(input_path)))
    except KeyboardInterrupt:
        logger.warning("Scan interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return 130
    except SnapshotBuildError as e:
        logger.critical(f"Scan failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if snapshot is None:
        logger.error("Scan result was superseded before it could be published.")
        return 1

    # 5. Queries and rendering
    results = lifecycle.search(args.query) if args.query is not None else None

    if args.json_output:
        print(json.dumps(_snapshot_payload(snapshot, results), ensure_ascii=False, indent=2))
        return 0

    if not args.no_tree and args.show_path is None:
        for line in render_tree(snapshot.root, snapshot.index, show_sizes=conf["show_sizes"]):
            print(line)

    if results is not None:
        print(f"\n{len(results)} match(es) for '{args.query}':")
        for path in results:
            print(f"  {path}")

    if args.show_path is not None:
        return _show_file(lifecycle, args.show_path, conf["target_model"] if args.tokens else None)

    _print_stats(snapshot)
    return 0

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge known, non-None override values into ``base``."""
    out = dict(base)
    for k in _MERGE_KEYS:
        if overrides.get(k) is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# OUTPUT
# -----------------------------------------------------------------------------

def _show_file(lifecycle: SnapshotLifecycle, path: str, token_model: Optional[str]) -> int:
    try:
        record = lifecycle.select_file(path)
    except KeyError:
        print(f"ERROR: No such file in snapshot: {path}", file=sys.stderr)
        return 1
    except FileTooLargeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(record.content)
    if token_model is not None and record.is_readable:
        print(f"\n[~{count_tokens(record.content, token_model)} tokens for '{token_model}']", file=sys.stderr)
    return 0


def _print_stats(snapshot: Snapshot) -> None:
    s = snapshot.stats
    print("-" * 50)
    print(f"Files:        {s.files}")
    print(f"Directories:  {s.directories}")
    if s.truncated:
        print(f"Truncated:    {s.truncated}")
    if s.too_large:
        print(f"Too large:    {s.too_large}")
    if s.read_errors or s.unreadable_directories:
        print(f"Unreadable:   {s.read_errors} file(s), {s.unreadable_directories} folder(s)")
    print(f"Scanned in {s.elapsed_seconds:.2f}s")


def _snapshot_payload(snapshot: Snapshot, results: Optional[List[str]]) -> Dict[str, Any]:
    s = snapshot.stats
    payload: Dict[str, Any] = {
        "generation": snapshot.generation,
        "root": snapshot.root.to_dict(),
        "stats": {
            "files": s.files,
            "directories": s.directories,
            "truncated": s.truncated,
            "too_large": s.too_large,
            "read_errors": s.read_errors,
            "unreadable_directories": s.unreadable_directories,
        },
    }
    if results is not None:
        payload["search_results"] = results
    return payload
