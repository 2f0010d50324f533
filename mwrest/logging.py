"""
Terminal logging for the command line scripts.

Library modules only create their loggers with ``logging.getLogger(__name__)``
and never configure handlers; scripts call :py:func:`init` indirectly through
:py:func:`mwrest.config.parse_args`.
"""

import collections
import logging

import colorlog

__all__ = ["setTerminalLogging", "set_argparser", "init"]

LOG_LEVELS = collections.OrderedDict((
    ("debug", logging.DEBUG),
    ("info", logging.INFO),
    ("warning", logging.WARNING),
    ("error", logging.ERROR),
    ("critical", logging.CRITICAL),
))

def setTerminalLogging():
    handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(
        "{log_color}{levelname:8}{reset} {message_log_color}{message}",
        datefmt=None,
        reset=True,
        log_colors={
            "DEBUG":    "cyan",
            "INFO":     "green",
            "WARNING":  "yellow",
            "ERROR":    "bold_red",
            "CRITICAL": "bold_red",
        },
        secondary_log_colors={
            "message": {
                "ERROR":    "bold_white",
                "CRITICAL": "bold_white",
            },
        },
        style="{"
    )
    handler.setFormatter(formatter)

    # add the handler to the root logger
    logger = logging.getLogger()
    logger.addHandler(handler)

    return logger

def set_argparser(argparser):
    """
    Add arguments for configuring global logging values to an instance of
    :py:class:`argparse.ArgumentParser`.

    This function is called internally from the :py:mod:`mwrest.config` module.

    :param argparser: an instance of :py:class:`argparse.ArgumentParser`
    """
    argparser.add_argument("--log-level", action="store", choices=LOG_LEVELS.keys(), default="info",
            help="the verbosity level for terminal logging (default: %(default)s)")
    argparser.add_argument("-d", "--debug", action="store_const", const="debug", dest="log_level",
            help="shortcut for '--log-level debug'")
    argparser.add_argument("-q", "--quiet", action="store_const", const="warning", dest="log_level",
            help="shortcut for '--log-level warning'")

def init(args):
    """
    Initialize the :py:mod:`logging` module with the arguments parsed by
    :py:class:`argparse.ArgumentParser`.

    :param args:
        an instance of :py:class:`argparse.Namespace`. It is expected that
        :py:func:`set_argparser()` was called prior to parsing the arguments.
    """
    level = LOG_LEVELS[args.log_level]
    logger = logging.getLogger()
    logger.setLevel(level)

    # httpx logs every request at the INFO level
    httpx_logger = logging.getLogger("httpx")
    httpx_logger.setLevel(logging.DEBUG if level == logging.DEBUG else logging.WARNING)

    setTerminalLogging()
