"""
Command line and config file handling for the scripts.

Options are read from the command line and from an INI file looked up as
``$XDG_CONFIG_HOME/mediawiki-rest/<name>.conf`` (``default.conf`` unless
``-c``/``--config`` is given). Each script reads the section named after the
script, falling back to ``[DEFAULT]``. Command line values override config
file values which override defaults. Example::

    [DEFAULT]
    wiki = wikipedia:en
    log-level = info

    [edit-page]
    edit-token-ttl = 600
"""

import argparse
import configparser
import json
import logging
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Self, TypeVar

import mwrest.logging

logger = logging.getLogger(__name__)

__all__ = [
    "ConfigurableObject",
    "ConfigParser",
    "argtype_bool",
    "argtype_config",
    "argtype_dirname_must_exist",
    "getArgParser",
    "parse_args",
    "object_from_argparser",
]

PROJECT_NAME = "mediawiki-rest"
CONFIG_DIR = Path(os.getenv("XDG_CONFIG_HOME", os.path.expanduser("~/.config/"))) / PROJECT_NAME
DEFAULT_CONF = "default"


class ConfigurableObject(ABC):
    """
    Interface of classes which can be instantiated by
    :py:func:`object_from_argparser`.
    """

    @classmethod
    @abstractmethod
    def set_argparser(cls: type[Self], argparser: argparse.ArgumentParser) -> None:
        ...

    @classmethod
    @abstractmethod
    def from_argparser(cls: type[Self], args: argparse.Namespace) -> Self:
        ...


class ConfigParser(configparser.ConfigParser):
    """
    :py:class:`configparser.ConfigParser` with extended interpolation which
    converts a config file section into command line arguments.
    """

    def __init__(self, configfile: str | Path, **kwargs: Any):
        kwargs.setdefault("interpolation", configparser.ExtendedInterpolation())
        super().__init__(**kwargs)
        self.configfile = Path(configfile)

    def fetch_section(self, section: str | None = None) -> list[str]:
        """
        Reads the config file and returns the options of ``section`` as a list
        of command line arguments, e.g. ``["--wiki", "wikipedia:en"]``.

        :param str section:
            section name, by default the base name of the running script
            without the extension. ``[DEFAULT]`` is used if the section does
            not exist.
        """
        with open(self.configfile) as f:
            self.read_file(f)

        if section is None:
            section = Path(sys.argv[0]).stem
        if not self.has_section(section):
            section = configparser.DEFAULTSECT

        args = []
        for key, value in self.items(section):
            if len(key) == 1:
                raise argparse.ArgumentTypeError(
                    f"short options are not allowed in a config file: '{key}'"
                )
            args.append("--" + key)
            value = value.strip()
            # JSON lists are expanded into multiple values
            if value.startswith("["):
                args.extend(str(item) for item in json.loads(value))
            elif value:
                args.append(value)
        return args

    @staticmethod
    def set_argparser(argparser: argparse.ArgumentParser) -> None:
        group = argparser.add_mutually_exclusive_group()
        group.add_argument(
            "-c",
            "--config",
            type=argtype_config,
            metavar="PATH_OR_NAME",
            default=DEFAULT_CONF,
            help=f"path to the config file, or a base file name for config files looked up as {CONFIG_DIR}/<name>.conf (default: %(default)s)",
        )
        group.add_argument(
            "--no-config",
            dest="config",
            const=None,
            action="store_const",
            help="do not read any config file",
        )


def argtype_bool(string: str) -> bool:
    """Strict conversion of yes/no, true/false, on/off and 1/0 to :py:obj:`bool`."""
    value = string.strip().lower()
    if value in {"yes", "true", "on", "1"}:
        return True
    if value in {"no", "false", "off", "0"}:
        return False
    raise argparse.ArgumentTypeError(f"value '{string}' cannot be converted to boolean")


def argtype_config(string: str | Path) -> Path | None:
    """
    Resolves the value of ``--config``: a bare name is looked up in
    :py:data:`CONFIG_DIR`, anything else must be a path to a ``.conf`` file.
    A missing default config is not an error.
    """
    path = Path(string)
    if path.parent == Path(".") and path.suffix != ".conf":
        path = CONFIG_DIR / f"{path.name}.conf"
    elif path.suffix != ".conf":
        raise argparse.ArgumentTypeError(
            f"config filename must end with '.conf' suffix: '{string}'"
        )
    else:
        path = path.expanduser().absolute()

    if path.exists():
        return path
    if path.is_symlink():
        raise argparse.ArgumentTypeError(f"symbolic link is broken: '{path}'")
    if str(string) == DEFAULT_CONF:
        return None
    raise argparse.ArgumentTypeError(f"file does not exist: '{path}'")


# any path, the parent directory must exist (e.g. an output file)
def argtype_dirname_must_exist(string: str | Path) -> Path:
    path = Path(string).expanduser().absolute()
    if not path.parent.is_dir():
        raise argparse.ArgumentTypeError(f"directory '{path.parent}' does not exist")
    return path


def getArgParser(**kwargs: Any) -> argparse.ArgumentParser:
    """
    Create an instance of :py:class:`argparse.ArgumentParser` with the global
    arguments (config file and logging).

    :param kwargs: passed to :py:class:`argparse.ArgumentParser()` constructor.
    """
    kwargs.setdefault("formatter_class", argparse.RawDescriptionHelpFormatter)
    kwargs.setdefault("allow_abbrev", False)
    kwargs["description"] = kwargs.get("description", "") + (
        "\n\nArgs that start with '--' (e.g., --log-level) can also be set in a config file (specified via -c)."
        " If an arg is specified in more than one place, then commandline values override config file values"
        " which override defaults."
    )

    ap = argparse.ArgumentParser(**kwargs)
    ConfigParser.set_argparser(ap)
    mwrest.logging.set_argparser(ap)
    return ap


def parse_args(
    argparser: argparse.ArgumentParser,
    section: str | None = None,
    argv: list[str] | None = None,
) -> argparse.Namespace:
    """
    Parses arguments given on the command line as well as in the config file
    and sets up logging with :py:func:`mwrest.logging.init`.

    :param argparser: a parser created by :py:func:`getArgParser`
    :param str section: config file section, see :py:meth:`ConfigParser.fetch_section`
    :param argv: command line arguments, ``sys.argv[1:]`` by default
    """
    cli_args = sys.argv[1:] if argv is None else list(argv)

    # the config file has to be known before the real parsing
    conf_ap = argparse.ArgumentParser(add_help=False)
    ConfigParser.set_argparser(conf_ap)
    args = argparse.Namespace()
    conf_ap.parse_known_args(cli_args, namespace=args)

    config_args: list[str] = []
    if args.config is not None:
        config_args = ConfigParser(args.config).fetch_section(section)

    # options from the config file which the script does not know are
    # ignored, unknown options on the command line are an error
    _, remainder = argparser.parse_known_args(config_args + cli_args, namespace=args)
    unknown = [item for item in remainder if item.startswith("-") and item in cli_args]
    if unknown:
        argparser.error(f"unrecognized arguments: {' '.join(unknown)}")

    mwrest.logging.init(args)
    logger.debug(f"Parsed arguments:\n{args}")
    return args


T = TypeVar("T", bound=ConfigurableObject)


def object_from_argparser(cls: type[T], section: str | None = None, argv: list[str] | None = None, **kwargs: Any) -> T:
    """
    Create an instance of ``cls`` using its :py:meth:`cls.from_argparser()`
    factory and an instance of :py:class:`argparse.ArgumentParser`.

    :param cls: the class to instantiate
    :param str section: passed to :py:func:`parse_args`
    :param argv: passed to :py:func:`parse_args`
    :param kwargs: passed to :py:func:`getArgParser`
    """
    ap = getArgParser(**kwargs)
    cls.set_argparser(ap)
    args = parse_args(ap, section, argv)
    return cls.from_argparser(args)
