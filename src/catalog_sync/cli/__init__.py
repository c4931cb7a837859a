"""
Command-line interface for catalog reconciliation.

Available commands:
- run: reconcile a collection against a snapshot file
- generate: create a synthetic catalog and snapshot
"""

import logging
import sys

from .commands import cmd_generate, cmd_run
from .config import get_store_config, open_store, setup_logging
from .parser import create_parser

logger = logging.getLogger(__name__)

COMMANDS = {
    'run': cmd_run,
    'generate': cmd_generate,
}


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the catalog-sync CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        sys.exit(1)

    setup_logging(args)

    try:
        COMMANDS[args.command](args)
    except Exception as e:
        print("FAIL")
        logger.error(f"{args.command} failed: {type(e).__name__}: {e}", exc_info=True)
        sys.exit(1)

    print("SUCCESS")
    sys.exit(0)


__all__ = [
    'main',
    'setup_logging',
    'get_store_config',
    'open_store',
    'cmd_run',
    'cmd_generate',
    'create_parser',
]


if __name__ == '__main__':
    main()
