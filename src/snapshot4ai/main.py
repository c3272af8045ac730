from __future__ import annotations

"""
Main Entry Point.

Routes ``python -m snapshot4ai`` and the console script to the CLI and logs
any unhandled exception before the process exits.
"""

import logging
import sys
import traceback
from typing import Any


def global_exception_handler(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """
    Log unhandled exceptions with their stack trace and exit with status 1.

    Args:
        exctype: Exception class.
        value: Exception instance.
        tb: Traceback object.
    """
    if issubclass(exctype, KeyboardInterrupt):
        sys.__excepthook__(exctype, value, tb)
        return

    stack_trace = "".join(traceback.format_exception(exctype, value, tb))
    logging.getLogger("snapshot4ai.supervisor").critical(f"FATAL EXCEPTION DETECTED: {value}\n{stack_trace}")
    print(stack_trace, file=sys.stderr)
    sys.exit(1)


def main() -> None:
    from snapshot4ai.interface.cli.app import main as cli_main

    sys.excepthook = global_exception_handler
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
