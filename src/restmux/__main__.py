"""restmux command line.

    python -m restmux htaccess [DIR] [--entry-script NAME] [--rewrite-base BASE]
"""

import argparse
import logging
import sys

from restmux.errors import ConfigurationError
from restmux.htaccess import write_htaccess


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="restmux",
        description="restmux deployment utilities.",
    )
    subparsers = parser.add_subparsers(dest="command")

    htaccess_parser = subparsers.add_parser(
        "htaccess", help="Write Apache rewrite rules for a single entry script"
    )
    htaccess_parser.add_argument(
        "directory", nargs="?", default=".", help="Directory to write .htaccess into"
    )
    htaccess_parser.add_argument(
        "--entry-script", default="index.py", help="Entry script filename"
    )
    htaccess_parser.add_argument(
        "--rewrite-base", default="/", help="RewriteBase for the generated rules"
    )

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        write_htaccess(
            args.directory,
            entry_script=args.entry_script,
            rewrite_base=args.rewrite_base,
        )
    except (ConfigurationError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
