"""Main program initialization.

This module provides a class called Main used to initialize a python script
invoked from command line, so that all spdxgen programs share the same
logging switches::

    -v|--verbose to enable verbose mode (a console logger is added)
    -h|--help    display command line help
    --log-file FILE
                 to redirect logs to a given file (this is independent of
                 verbose option)
    --loglevel LEVEL
                 set the console log level
    --nocolor    disable color and progress bars
    --json-logs  log JSON records
    --console-logs LINE_PREFIX
                 disable color, progress bars, and redirect as much as
                 possible to stdout, starting lines with the given prefix
"""

from __future__ import annotations

from argparse import ArgumentParser
import logging
import os
import signal
import sys
import threading

from typing import TYPE_CHECKING

import spdxgen.log

if TYPE_CHECKING:
    from types import FrameType
    from typing import NoReturn
    from argparse import Namespace


class Main:
    """Class that implement argument parsing.

    :ivar args: the parsed arguments, None until parse_args is called
    """

    def __init__(
        self,
        name: str | None = None,
        argument_parser: ArgumentParser | None = None,
    ):
        """Initialize Main object.

        :param name: name of the program (if not specified the filename without
            extension is taken)
        :param argument_parser: the ArgumentParser to use for parsing
            command-line arguments (if not specified, an ArgumentParser will be
            created by Main)
        """
        main = sys.modules["__main__"]

        if name is not None:
            self.name = name
        elif getattr(main, "__file__", None):
            self.name = os.path.splitext(os.path.basename(main.__file__))[0]
        else:
            self.name = "unknown"

        if argument_parser is None:
            argument_parser = ArgumentParser(prog=self.name)

        spdxgen.log.add_logging_argument_group(
            argument_parser, default_level=logging.INFO
        )

        self.args: Namespace | None = None
        self.argument_parser = argument_parser
        self.__log_handlers_set = False

        def sigterm_handler(sig: int, frame: FrameType | None) -> NoReturn:  # unix-only
            """Convert SIGTERM to SystemExit so that cleanups are run.

            :param sig: signal action
            :param frame: the interrupted stack frame
            """
            del sig, frame
            logging.critical("SIGTERM received")
            raise SystemExit("SIGTERM received")

        if sys.platform != "win32":  # unix-only
            if threading.current_thread() is threading.main_thread():
                # Signal can only be used in the main thread
                signal.signal(signal.SIGTERM, sigterm_handler)

    def parse_args(
        self, args: list[str] | None = None, known_args_only: bool = False
    ) -> None:
        """Parse options and set console logger.

        :param args: the list of positional parameters. If None then
            ``sys.argv[1:]`` is used
        :param known_args_only: does not produce an error when extra
            arguments are present
        """
        if known_args_only:
            self.args, _ = self.argument_parser.parse_known_args(args)
        else:
            self.args = self.argument_parser.parse_args(args)

        if not self.__log_handlers_set:
            spdxgen.log.activate_with_args(self.args, logging.INFO)
            self.__log_handlers_set = True
