"""
CLI Interface Module.

Command-line parsing and usage text for the export tool. Usage problems print
an explanation followed by the usage text and exit with status 0.
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from .core.config import ConfigManager, ExportSettings
from .core.constants import ConfigConstants, ErrorMessages
from .core.exceptions import ConfigurationError
from .core.utils import parse_positive_int, validate_tenant_url


logger = logging.getLogger(__name__)

PROG = "export-pdf"

USAGE_TEXT = f"""\
Usage:   {PROG} -url <url> -apiKey <apiKey> -appId <appId> -objId <objId> [-t <seconds>] [-h]
         {PROG} [-h]
Example: {PROG} -url https://mytenant.eu.qlikcloud.com -appId e90a34b7-810a-4012-b394-20fd9ce5cd4f -objId pjGmPf -apiKey eyJhb... -t 60
         {PROG} -h
Arguments:
  url     : Url to the Qlik Cloud tenant.
  apiKey  : Api key generated for the Qlik Cloud tenant.
  appId   : The identifier of the app to connect to.
  objId   : The identifier of the object for which to export a pdf.
  t       : Time interval in seconds between renderings. (Default: {ConfigConstants.DEFAULT_INTERVAL})
  h       : Print this message.
Additional options:
  config  : YAML configuration file providing any of the values above.
  outDir  : Directory to write reports to. (Default: current directory)
  timeout : HTTP request timeout in seconds. (Default: 30)
  skipTls : Skip TLS certificate verification.
  debug   : Enable debug logging.
Environment:
  {ConfigConstants.ENV_URL}, {ConfigConstants.ENV_API_KEY}, {ConfigConstants.ENV_APP_ID}, {ConfigConstants.ENV_OBJECT_ID}, {ConfigConstants.ENV_INTERVAL} and {ConfigConstants.ENV_OUTPUT_DIR}
  are used for values not given on the command line or in the configuration file."""


def _url_argument(value: str) -> str:
    try:
        return validate_tenant_url(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e))


def _interval_argument(value: str) -> int:
    try:
        int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(ErrorMessages.UsageError.INVALID_INTERVAL.format(value=value))
    try:
        return parse_positive_int(value, ErrorMessages.UsageError.NON_POSITIVE_INTERVAL)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e))


def _timeout_argument(value: str) -> int:
    try:
        return parse_positive_int(value, ErrorMessages.UsageError.INVALID_TIMEOUT)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e))


class ExportArgumentParser(argparse.ArgumentParser):
    """ArgumentParser with the tool's own usage text and exit-0 usage errors."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('prog', PROG)
        kwargs.setdefault('add_help', False)
        kwargs.setdefault('allow_abbrev', False)
        super().__init__(*args, **kwargs)
        self.ignored_arguments: List[str] = []

    def parse_args(self, args=None, namespace=None):
        """Override parse_args to handle help requests and unknown flags."""
        if args is None:
            args = sys.argv[1:]
        args = list(args)

        if self._should_show_help(args):
            self.print_help()
            self.exit(0)

        paired, ignored = self._pair_arguments(args)
        parsed, extras = self.parse_known_args(paired, namespace)
        self.ignored_arguments = ignored + extras
        return parsed

    def _pair_arguments(self, args: List[str]):
        """
        Pair every known flag with the token that follows it.

        Values are passed on as ``flag=value`` so a value starting with a dash
        is never mistaken for an option. Unknown tokens are set aside one at a
        time and a known flag is only ever matched by its full name.

        Returns:
            Tuple of (tokens for argparse, ignored tokens)
        """
        paired: List[str] = []
        ignored: List[str] = []
        index = 0
        while index < len(args):
            token = args[index]
            action = self._option_string_actions.get(token)
            if action is None:
                ignored.append(token)
            elif action.nargs == 0:
                paired.append(token)
            elif index + 1 < len(args):
                paired.append(f"{token}={args[index + 1]}")
                index += 1
            else:
                self.error(f"argument {token}: expected one argument")
            index += 1
        return paired, ignored

    def _should_show_help(self, args: List[str]) -> bool:
        """Help is shown for an empty command line or -h anywhere."""
        return not args or '-h' in args or '--help' in args

    def format_help(self) -> str:
        return USAGE_TEXT + "\n"

    def format_usage(self) -> str:
        return USAGE_TEXT + "\n"

    def error(self, message: str):
        """Print the error and usage text, then exit with status 0."""
        self.usage_error(message)

    def usage_error(self, message: str):
        print(f"Error: {message}")
        self.print_help()
        self.exit(0)

    def print_help(self, file=None) -> None:
        # Usage always goes to stdout alongside the error that triggered it
        self._print_message(self.format_help(), file or sys.stdout)


class CLIInterface:
    """Builds ExportSettings from the command line."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize CLI interface.

        Args:
            config_manager: Configuration manager (auto-created if None)
        """
        self.config_manager = config_manager or ConfigManager()
        self.parser = self._create_parser()

    def _create_parser(self) -> ExportArgumentParser:
        """Create the argument parser."""
        parser = ExportArgumentParser(description="Scheduled PDF export of a Qlik Cloud visualization")

        parser.add_argument('-url', dest='url', type=_url_argument, default=None)
        parser.add_argument('-apiKey', dest='api_key', default=None)
        parser.add_argument('-appId', dest='app_id', default=None)
        parser.add_argument('-objId', dest='object_id', default=None)
        parser.add_argument('-t', dest='interval', type=_interval_argument, default=None)

        parser.add_argument('-config', dest='config', default=None)
        parser.add_argument('-outDir', dest='output_dir', default=None)
        parser.add_argument('-timeout', dest='request_timeout', type=_timeout_argument, default=None)
        parser.add_argument('-skipTls', dest='skip_tls', action='store_true', default=None)
        parser.add_argument('-debug', dest='debug', action='store_true', default=None)

        return parser

    def parse_arguments(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse raw command-line arguments.

        Args:
            argv: Argument list without the program name (defaults to sys.argv[1:])

        Returns:
            Parsed namespace
        """
        return self.parser.parse_args(argv)

    @property
    def ignored_arguments(self) -> List[str]:
        """Tokens that were not recognised during the last parse."""
        return self.parser.ignored_arguments

    def build_settings(self, argv: Optional[List[str]] = None) -> ExportSettings:
        """
        Parse the command line and merge it with the other configuration sources.

        Usage errors, including missing required values, print the error and
        usage text and exit with status 0.

        Args:
            argv: Argument list without the program name (defaults to sys.argv[1:])

        Returns:
            ExportSettings: Validated settings
        """
        args = self.parse_arguments(argv)
        cli_values: Dict[str, Any] = {
            'url': args.url,
            'api_key': args.api_key,
            'app_id': args.app_id,
            'object_id': args.object_id,
            'interval': args.interval,
            'output_dir': args.output_dir,
            'request_timeout': args.request_timeout,
            'skip_tls': args.skip_tls,
            'debug': args.debug,
        }

        try:
            return self.config_manager.build_settings(cli_values, config_path=args.config)
        except ConfigurationError as e:
            self.parser.usage_error(str(e))
