"""Logging setup for spdxgen programs.

Library modules get their logger with :func:`getLogger` and never configure
handlers themselves. Programs call :func:`activate` (or
:func:`activate_with_args` together with :func:`add_logging_argument_group`)
once at startup.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
import re
import sys
import time
from typing import TYPE_CHECKING, ClassVar

from colorama import Fore, Style
from tqdm import tqdm

from spdxgen.config import ConfigSection

if TYPE_CHECKING:
    from typing import (
        Any,
        IO,
        Iterable,
        Iterator,
        List,
        Mapping,
        Optional,
        TextIO,
        TypeVar,
    )
    from argparse import ArgumentParser, _ArgumentGroup, Namespace

    T = TypeVar("T")


@dataclass
class LogConfig(ConfigSection):
    title: ClassVar[str] = "log"

    pretty: bool = True
    stream_fmt: str = "%(levelname)-8s %(message)s"
    file_fmt: str = "%(asctime)s: %(name)-24s: %(levelname)-8s %(message)s"


log_config = LogConfig.load()

# Stream where programs write their regular output (sys.stdout unless
# activate() redirected the logs to a file).
default_output_stream: TextIO | IO[str] = sys.stdout

# Colors and progress bars only when a user is watching
if sys.stdout.isatty():  # all: no cover
    pretty_cli = log_config.pretty
else:
    pretty_cli = False

console_logs: Optional[str] = None


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Only the attributes listed in STD_ATTR, plus the optional context, are
    kept. Empty values are dropped.
    """

    STD_ATTR: ClassVar[List[str]] = [
        "asctime",
        "levelname",
        "name",
        "message",
        "module",
        "exc_text",
    ]

    def __init__(
        self,
        date_fmt: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ):
        """Initialize formatter with context.

        :param date_fmt: see logging module
        :param context: dict to add context information to log records
        """
        # fmt must reference asctime for the attribute to be computed
        super().__init__(fmt="%(asctime)s", datefmt=date_fmt)
        self.context = context if context is not None else {}

    def format(self, record: logging.LogRecord) -> str:
        super().format(record)

        json_record = {attr: getattr(record, attr, None) for attr in self.STD_ATTR}
        json_record.update(self.context)
        return json.dumps({attr: val for attr, val in json_record.items() if val})


def progress_bar(it: Iterable[T], **kwargs: Any) -> Iterator[T]:
    """Wrap an iterable into a tqdm progress bar.

    The bar is only displayed when pretty output is enabled. A disabled bar
    is returned otherwise, so callers can use the tqdm API unconditionally.

    :param it: an iterable
    :param kwargs: see tqdm documentation
    """
    return tqdm(it, disable=not pretty_cli, file=sys.stderr, **kwargs)


__null_handler_set = set()


class TqdmHandler(logging.StreamHandler):  # all: no cover
    """Logging handler used when progress bars are enabled."""

    # Color the log level at the beginning of the lines
    color_subst = (
        (re.compile(r"^(DEBUG)"), Fore.CYAN),
        (re.compile(r"^(INFO)"), Style.DIM),
        (re.compile(r"^(WARNING)"), Fore.YELLOW),
        (re.compile(r"^(ERROR)"), Fore.RED),
        (re.compile(r"^(CRITICAL)"), Fore.RED + Style.BRIGHT),
    )

    def emit(self, record: logging.LogRecord) -> None:
        msg = self.format(record)

        # Align continuation lines with the message of the first one
        msg_first_line = msg.split("\n")[0]
        msg = msg.replace(
            "\n", "\n_" + " " * (len(msg_first_line) - len(record.message) - 1)
        )

        for reg, color in self.color_subst:
            msg = re.sub(reg, color + r"\1" + Fore.RESET + Style.RESET_ALL, msg)

        tqdm.write(msg, file=sys.stderr)


def getLogger(
    name: Optional[str] = None, prefix: str = "spdxgen"
) -> logging.LoggerAdapter:
    """Get a logger with a default handler doing nothing.

    Calling this function instead of logging.getLogger avoids the
    "No handler could be found for logger..." warning in programs that never
    activate logging.

    :param name: logger name, if not specified return the prefix logger
    :param prefix: application prefix, will be prepended to the name
    """
    logger = logging.getLogger(prefix if name is None else f"{prefix}.{name}")

    if prefix not in __null_handler_set:
        logging.getLogger(prefix).addHandler(logging.NullHandler())
        __null_handler_set.add(prefix)
    return logging.LoggerAdapter(logger, {})


def add_log_handlers(
    level: int,
    log_format: str,
    datefmt: Optional[str] = None,
    filename: Optional[str] = None,
    set_default_output: bool = True,
    json_format: bool = False,
) -> None:
    """Add a log handler using GMT timestamps to the root logger.

    :param level: level of the new handler
    :param log_format: format string for the log handler
    :param datefmt: date/time format for the log handler
    :param filename: use a FileHandler on this file instead of a
        StreamHandler
    :param set_default_output: when filename is set, also redirect
        default_output_stream to that file
    :param json_format: use :class:`JSONFormatter`
    """
    global default_output_stream
    handler: logging.Handler
    fmt: logging.Formatter

    if filename is None:
        if pretty_cli:  # all: no cover
            handler = TqdmHandler()
        else:
            handler = logging.StreamHandler()
    else:
        handler = logging.FileHandler(filename)
        if set_default_output:
            default_output_stream = handler.stream

    if json_format:
        fmt = JSONFormatter(datefmt, {"context": console_logs})
    else:
        fmt = logging.Formatter(log_format, datefmt)

    fmt.converter = time.gmtime  # type: ignore
    handler.setFormatter(fmt)

    handler.setLevel(level)
    logging.getLogger("").addHandler(handler)


def add_logging_argument_group(
    argument_parser: ArgumentParser,
    default_level: int = logging.WARNING,
) -> _ArgumentGroup:
    """Add an argument group with logging options to the argument parser.

    To be used with :func:`activate_with_args`.

    :param argument_parser: the parser in which the group will be created
    :param default_level: the logging level that will be used by default
    """
    log_group = argument_parser.add_argument_group(title="logging arguments")
    log_group.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="make the log output to the console more verbose",
    )
    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        default=None,
        help="store all the logs into the specified file",
    )
    log_group.add_argument(
        "--loglevel",
        default=default_level,
        type=lambda name: logging.getLevelName(name.upper()),
        help="set the console log level (DEBUG, INFO, WARNING, ERROR,"
        " CRITICAL)",
    )
    log_group.add_argument(
        "--nocolor",
        default=False,
        action="store_true",
        help="disable color and progress bars",
    )
    log_group.add_argument(
        "--json-logs",
        default="json-logs"
        in os.environ.get("SPDXGEN_ENABLE_FEATURE", "").split(","),
        action="store_true",
        help="enable JSON formatted logs. They can be activated as well by"
        " setting the env var SPDXGEN_ENABLE_FEATURE=json-logs.",
    )
    log_group.add_argument(
        "--console-logs",
        metavar="LINE_PREFIX",
        help="disable color, progress bars, and redirect as much as"
        " possible to stdout, starting lines with the given prefix.",
    )

    return log_group


def activate_with_args(args: Namespace, default_level: int = logging.WARNING) -> None:
    """Activate logging using the parsed command line.

    To be used with :func:`add_logging_argument_group`.

    :param args: the result of parsing arguments
    :param default_level: the logging level assumed by default
    """
    global console_logs
    global pretty_cli

    if args.verbose > 0:
        level = default_level - 10 * args.verbose
    else:
        level = args.loglevel

    if args.console_logs:
        console_logs = args.console_logs

    if args.nocolor or args.console_logs:
        pretty_cli = False

    activate(
        level=level,
        filename=args.log_file,
        json_format=args.json_logs,
        spdxgen_debug=level <= logging.DEBUG,
    )


def activate(
    stream_format: str = log_config.stream_fmt,
    file_format: str = log_config.file_fmt,
    datefmt: Optional[str] = None,
    level: int = logging.INFO,
    filename: Optional[str] = None,
    spdxgen_debug: bool = False,
    json_format: bool = False,
) -> None:
    """Activate the default spdxgen logging.

    :param stream_format: format string for the stream handler
    :param file_format: format string for the file handler
    :param datefmt: date/time format for the log handler
    :param level: level of the stream handler
    :param filename: redirect logs to a file in addition to the StreamHandler
    :param spdxgen_debug: activate the spdxgen debug logger
    :param json_format: log JSON records instead of text lines
    """
    # Filtering is done by the handlers
    logging.getLogger("").setLevel(logging.DEBUG)
    if console_logs:
        stream_format = f"{console_logs}: {file_format}"

    add_log_handlers(
        level=level, log_format=stream_format, datefmt=datefmt, json_format=json_format
    )

    if filename is not None:
        add_log_handlers(
            level=min(level, logging.DEBUG),
            log_format=file_format,
            datefmt=datefmt,
            filename=filename,
            json_format=json_format,
        )

    if spdxgen_debug:
        spdxgen_debug_logger.setLevel(logging.DEBUG)


# Internal traces (identifier collisions, lookups...), only emitted when a
# program runs with -v -v.
spdxgen_debug_logger = getLogger("debug")
spdxgen_debug_logger.setLevel(logging.CRITICAL + 1)

debug = spdxgen_debug_logger.debug
