"""
python -m taptalk: the demonstration command set in an interactive shell.
"""
import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler

from . import __title__
from .demo import build
from .shell import Shell


def _parser():
    parser = argparse.ArgumentParser(
        prog=__title__,
        description="Type commands of the demonstration command set, one per line.",
    )
    parser.add_argument("--plain", action="store_true", help="disable colors")
    parser.add_argument("--fancy", action="store_true", help="render faults as panels")
    parser.add_argument("--debug", action="store_true", help="log registration and dispatch details")
    return parser


def main(argv=None):
    args = _parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    return Shell(build(), colorful=not args.plain, fancy=args.fancy).run()


if __name__ == "__main__":
    raise SystemExit(main())
