"""Command line entry point for procinspect."""

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import NoReturn

from procinspect.config import DEFAULT_PROC_ROOT, DEFAULT_TASK_DELAY, InspectorConfig, ViewOptions
from procinspect.inspector import Inspector, InvalidRootError, check_proc_root
from procinspect.report import render_report

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(filename)s:%(lineno)d:%(funcName)s(): %(message)s"

USAGE = "Usage: %(prog)s [-ahlrst] [-p procfs_dir]"

OPTIONS_HELP = """\
Options:
    * -a              Display all (equivalent to -lrst, default)
    * -h              Help/usage information
    * -l              Task List
    * -p procfs_dir   Change the expected procfs mount point (default: /proc)
    * -r              Hardware Information
    * -s              System Information
    * -t              Task Information
      --debug         Log diagnostics to stderr
      --tui           Show the report in an interactive viewer
      --task-delay S  Pause between task directories (default: 0.001)
"""

EXIT_FAILURE = 1


class UsageParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 and the usage text on errors."""

    def format_usage(self) -> str:
        return USAGE % {"prog": self.prog} + "\n"

    def format_help(self) -> str:
        return self.format_usage() + "\n" + OPTIONS_HELP + "\n"

    def error(self, message: str) -> NoReturn:
        self.exit(EXIT_FAILURE, f"{self.prog}: {message}\n{self.format_help()}")


def build_parser(prog: str | None = None) -> UsageParser:
    """Create the command line parser."""
    parser = UsageParser(prog=prog, add_help=False, allow_abbrev=False)
    parser.add_argument("-a", dest="all", action="store_true")
    parser.add_argument("-h", dest="help", action="store_true")
    parser.add_argument("-l", dest="task_list", action="store_true")
    parser.add_argument("-p", dest="proc_root", metavar="procfs_dir")
    parser.add_argument("-r", dest="hardware", action="store_true")
    parser.add_argument("-s", dest="system", action="store_true")
    parser.add_argument("-t", dest="task_summary", action="store_true")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--tui", action="store_true")
    parser.add_argument("--task-delay", type=float, default=DEFAULT_TASK_DELAY)
    return parser


def views_from_args(args: argparse.Namespace) -> ViewOptions:
    """Select the report sections; none selected means all of them."""
    views = ViewOptions(
        hardware=args.hardware,
        system=args.system,
        task_list=args.task_list,
        task_summary=args.task_summary,
    )
    if args.all or not views.any:
        return ViewOptions.all()
    return views


def configure_logging(debug: bool) -> None:
    """Send diagnostics to stderr, verbose only in debug mode."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run procinspect.

    Returns:
        0 on success or help, 1 on a bad option or an unusable procfs root.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.help:
        sys.stdout.write(parser.format_help())
        return 0

    configure_logging(args.debug)

    if args.proc_root == "":
        # Path("") would silently mean the current directory
        sys.stderr.write("opendir: No such file or directory\n")
        return EXIT_FAILURE

    config = InspectorConfig(
        proc_root=args.proc_root if args.proc_root is not None else DEFAULT_PROC_ROOT,
        views=views_from_args(args),
        task_delay=args.task_delay,
    )

    if args.proc_root is not None:
        logger.debug("using alternative proc directory: %s", config.proc_root)
        try:
            check_proc_root(config)
        except InvalidRootError as exc:
            sys.stderr.write(f"opendir: {exc.reason}\n")
            return EXIT_FAILURE

    report = Inspector(config).collect()

    if args.tui:
        from procinspect.app import InspectorApp

        InspectorApp(report).run()
    else:
        sys.stdout.write(render_report(report))
    return 0


def run() -> NoReturn:
    """Console script wrapper around main()."""
    sys.exit(main())
